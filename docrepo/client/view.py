"""Render-ready structures for the catalog page."""

from __future__ import annotations

from dataclasses import dataclass, field

from docrepo.client.pagination import PaginationControls
from docrepo.models.document import CategoryCount, DocumentSummary

ALL_CATEGORIES = "All"


def files_label(count: int) -> str:
    return f"{count} {'file' if count == 1 else 'files'}"


@dataclass(frozen=True)
class DocumentRow:
    document_id: str
    title: str
    category: str
    authors: str
    year: str
    cover_image_path: str | None

    @classmethod
    def from_summary(cls, doc: DocumentSummary) -> DocumentRow:
        return cls(
            document_id=str(doc.id),
            title=doc.title,
            category=str(doc.category),
            authors=", ".join(doc.authors),
            year=str(doc.year) if doc.year else "",
            cover_image_path=doc.cover_image_path,
        )


@dataclass(frozen=True)
class EmptyStateRow:
    message: str


@dataclass(frozen=True)
class FilterBanner:
    """'Filtered by X' notice; its clear action resets the filter to all."""

    category: str

    @property
    def text(self) -> str:
        return f"Filtered by {self.category}"

    @property
    def clear_label(self) -> str:
        return "Clear filter"


@dataclass(frozen=True)
class ListingView:
    rows: tuple[DocumentRow | EmptyStateRow, ...]
    pagination: PaginationControls = field(default_factory=PaginationControls)
    banner: FilterBanner | None = None

    @property
    def is_empty(self) -> bool:
        return len(self.rows) == 1 and isinstance(self.rows[0], EmptyStateRow)

    @property
    def entries_info(self) -> str:
        shown = 0 if self.is_empty else len(self.rows)
        return f"Showing {shown} document(s)"


@dataclass(frozen=True)
class CategoryCard:
    name: str
    count: int | None  # None: counts unavailable
    active: bool = False

    @property
    def count_label(self) -> str:
        return "" if self.count is None else files_label(self.count)


@dataclass(frozen=True)
class CategoryPanel:
    cards: tuple[CategoryCard, ...] = ()

    @classmethod
    def build(cls, categories: list[CategoryCount], active: str | None) -> CategoryPanel:
        """An 'All' card summing every count, then one card per category.

        An empty ``categories`` list means the counts could not be loaded,
        so the 'All' card carries no count rather than zero.
        """
        all_count = sum(c.count for c in categories) if categories else None
        cards = [CategoryCard(name=ALL_CATEGORIES, count=all_count)]
        cards.extend(CategoryCard(name=c.name, count=c.count) for c in categories)
        return cls(cards=tuple(cards)).with_active(active)

    @property
    def all_count(self) -> int | None:
        return self.cards[0].count if self.cards else None

    @property
    def active_name(self) -> str | None:
        return next((c.name for c in self.cards if c.active), None)

    def with_active(self, active: str | None) -> CategoryPanel:
        return CategoryPanel(
            cards=tuple(
                CategoryCard(
                    name=c.name,
                    count=c.count,
                    active=_is_active(c.name, active),
                )
                for c in self.cards
            )
        )


def _is_active(card_name: str, active: str | None) -> bool:
    if card_name == ALL_CATEGORIES:
        return active is None
    return active is not None and card_name.lower() == active.lower()
