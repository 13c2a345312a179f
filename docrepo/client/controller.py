"""Catalog listing controller: filter, sort and paginate the document list.

The controller owns a :class:`FilterState` and re-queries an injected
:class:`DocumentLister` whenever the user changes category, sort order or
page. Every query is tagged with an increasing sequence number; a response
that arrives after a newer query was issued is discarded, so a slow early
request can never overwrite the result of a later one.

Fetch failures are logged and degrade to an empty listing. Nothing here
retries.
"""

from __future__ import annotations

import logging

from docrepo.client.api import CategorySource, DocumentLister, FetchError
from docrepo.client.pagination import build_pagination, total_pages
from docrepo.client.state import PAGE_SIZE, FilterState
from docrepo.client.view import (
    ALL_CATEGORIES,
    CategoryPanel,
    DocumentRow,
    EmptyStateRow,
    FilterBanner,
    ListingView,
)
from docrepo.models.document import DocumentPage, DocumentType, SortOrder

logger = logging.getLogger(__name__)


def _canonical_category(name: str | None) -> str | None:
    if name is None or not name.strip() or name.strip() == ALL_CATEGORIES:
        return None
    try:
        return DocumentType.parse(name).value
    except ValueError:
        return name.strip()


class ListingController:
    def __init__(
        self,
        lister: DocumentLister,
        categories: CategorySource | None = None,
        page_size: int = PAGE_SIZE,
    ) -> None:
        self.state = FilterState(page_size=page_size)
        self._lister = lister
        self._categories = categories
        self._issued = 0
        self._total = 0
        self.view = ListingView(rows=(EmptyStateRow(self._empty_message()),))
        self.category_panel = CategoryPanel.build([], active=None)

    # ── Derived state ─────────────────────────────────────────

    @property
    def total(self) -> int:
        """Match count from the last applied response."""
        return self._total

    @property
    def total_pages(self) -> int:
        return total_pages(self._total, self.state.page_size)

    @property
    def latest_sequence(self) -> int:
        return self._issued

    # ── User actions ──────────────────────────────────────────

    async def set_category_filter(self, name: str | None) -> ListingView:
        """Filter by ``name`` ("All" or None shows every category)."""
        self.state.category = _canonical_category(name)
        self.state.page = 1
        self.category_panel = self.category_panel.with_active(self.state.category)
        return await self.refresh()

    async def clear_category_filter(self) -> ListingView:
        return await self.set_category_filter(None)

    async def set_sort_order(self, value: str | SortOrder | None) -> ListingView:
        self.state.sort = SortOrder.parse(value)
        self.state.page = 1
        return await self.refresh()

    async def go_to_page(self, page: int) -> ListingView:
        """Jump to ``page``; out-of-range pages leave everything untouched."""
        if not 1 <= page <= self.total_pages:
            logger.debug("Ignoring page %d outside 1..%d", page, self.total_pages)
            return self.view
        self.state.page = page
        return await self.refresh()

    async def refresh(self) -> ListingView:
        """Query the current state and render the result if still current."""
        self._issued += 1
        sequence = self._issued
        query = self.state.snapshot()

        try:
            result = await self._lister.load_documents(query)
        except FetchError:
            logger.warning("Document listing fetch failed for %s", query, exc_info=True)
            result = None

        if sequence != self._issued:
            logger.debug("Discarding stale listing response %d (latest %d)", sequence, self._issued)
            return self.view

        if result is None:
            return self.render(DocumentPage(documents=[], total=0))

        pages = total_pages(result.total, query.page_size)
        if pages and query.page > pages:
            # The set shrank under us; land on the new last page.
            self.state.page = pages
            return await self.refresh()

        return self.render(result)

    async def load_categories(self) -> CategoryPanel:
        """Fetch category counts; a failure leaves the counts unavailable."""
        categories = []
        if self._categories is not None:
            try:
                categories = await self._categories.list_categories()
            except FetchError:
                logger.warning("Category count fetch failed", exc_info=True)
        self.category_panel = CategoryPanel.build(categories, active=self.state.category)
        return self.category_panel

    # ── Rendering ─────────────────────────────────────────────

    def render(self, result: DocumentPage) -> ListingView:
        self._total = result.total
        if result.documents:
            rows = tuple(DocumentRow.from_summary(d) for d in result.documents)
        else:
            rows = (EmptyStateRow(self._empty_message()),)

        banner = FilterBanner(self.state.category) if self.state.category else None
        self.view = ListingView(
            rows=rows,
            pagination=build_pagination(self.state.page, result.total, self.state.page_size),
            banner=banner,
        )
        return self.view

    def _empty_message(self) -> str:
        if self.state.category:
            return f'No documents found in category "{self.state.category}"'
        return "No documents found"
