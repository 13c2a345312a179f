"""Client-side catalog listing: filter state, pagination and rendering."""

from docrepo.client.api import ApiClient, CategorySource, DocumentLister, FetchError
from docrepo.client.controller import ListingController
from docrepo.client.pagination import PaginationControls, build_pagination, total_pages
from docrepo.client.state import PAGE_SIZE, DocumentQuery, FilterState
from docrepo.client.view import CategoryPanel, EmptyStateRow, ListingView

__all__ = [
    "PAGE_SIZE",
    "ApiClient",
    "CategoryPanel",
    "CategorySource",
    "DocumentLister",
    "DocumentQuery",
    "EmptyStateRow",
    "FetchError",
    "FilterState",
    "ListingController",
    "ListingView",
    "PaginationControls",
    "build_pagination",
    "total_pages",
]
