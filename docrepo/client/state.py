"""Filter state owned by the listing controller."""

from dataclasses import dataclass

from docrepo.models.document import SortOrder

PAGE_SIZE = 10


@dataclass(frozen=True)
class DocumentQuery:
    """Immutable snapshot of the state a request was issued for."""

    page: int
    page_size: int
    category: str | None
    sort: SortOrder

    def params(self) -> dict[str, str | int]:
        params: dict[str, str | int] = {
            "page": self.page,
            "size": self.page_size,
            "sort": self.sort.value,
        }
        if self.category is not None:
            params["category"] = self.category
        return params


@dataclass
class FilterState:
    """Current page (1-based), category filter (None = all) and sort order."""

    page: int = 1
    category: str | None = None
    sort: SortOrder = SortOrder.LATEST
    page_size: int = PAGE_SIZE

    def snapshot(self) -> DocumentQuery:
        return DocumentQuery(
            page=self.page,
            page_size=self.page_size,
            category=self.category,
            sort=self.sort,
        )
