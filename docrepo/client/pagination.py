"""Pagination arithmetic and control layout.

Layout: a previous button, up to ``WINDOW`` page buttons centred on the
current page and clamped to ``[1, total_pages]``, then a next button. With
no matching documents there are no controls at all.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

WINDOW = 5


class ButtonKind(StrEnum):
    PREV = "prev"
    PAGE = "page"
    NEXT = "next"


@dataclass(frozen=True)
class PageButton:
    kind: ButtonKind
    page: int  # target page when clicked
    label: str
    disabled: bool = False
    active: bool = False


@dataclass(frozen=True)
class PaginationControls:
    buttons: tuple[PageButton, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.buttons

    @property
    def prev_button(self) -> PageButton | None:
        return next((b for b in self.buttons if b.kind is ButtonKind.PREV), None)

    @property
    def next_button(self) -> PageButton | None:
        return next((b for b in self.buttons if b.kind is ButtonKind.NEXT), None)

    @property
    def pages(self) -> list[int]:
        return [b.page for b in self.buttons if b.kind is ButtonKind.PAGE]

    @property
    def active_page(self) -> int | None:
        return next((b.page for b in self.buttons if b.active), None)


def total_pages(total: int, page_size: int) -> int:
    """``ceil(total / page_size)``; zero when nothing matches."""
    if total <= 0:
        return 0
    return -(-total // page_size)


def page_window(current: int, pages: int, width: int = WINDOW) -> range:
    if pages <= 0:
        return range(0)
    current = min(max(current, 1), pages)
    start = max(1, current - width // 2)
    end = min(pages, start + width - 1)
    # Near the end the window slides left so it stays full
    start = max(1, end - width + 1)
    return range(start, end + 1)


def build_pagination(current: int, total: int, page_size: int) -> PaginationControls:
    pages = total_pages(total, page_size)
    if pages == 0:
        return PaginationControls()

    buttons = [
        PageButton(
            kind=ButtonKind.PREV,
            page=max(1, current - 1),
            label="Previous page",
            disabled=current <= 1,
        )
    ]
    buttons.extend(
        PageButton(kind=ButtonKind.PAGE, page=n, label=str(n), active=n == current)
        for n in page_window(current, pages)
    )
    buttons.append(
        PageButton(
            kind=ButtonKind.NEXT,
            page=min(pages, current + 1),
            label="Next page",
            disabled=current >= pages,
        )
    )
    return PaginationControls(buttons=tuple(buttons))
