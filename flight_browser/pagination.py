"""Fixed-size pagination over an ordered sequence.

Functions:
    total_pages_for(count, page_size): Number of pages, never less than one.
    clamp_page(requested, total_pages): Nearest valid 1-based page.
    paginate(items, page_size, requested_page): Slice for the effective page.
    next_page / previous_page: Bounded navigation; out-of-range moves are no-ops.
"""

import math
from dataclasses import dataclass
from typing import Any, Sequence, Tuple


@dataclass(frozen=True)
class Page:
    items: Tuple[Any, ...]
    total_pages: int
    effective_page: int

    @property
    def has_previous(self) -> bool:
        return self.effective_page > 1

    @property
    def has_next(self) -> bool:
        return self.effective_page < self.total_pages

    @property
    def label(self) -> str:
        return f"Page {self.effective_page} of {self.total_pages}"


def total_pages_for(count: int, page_size: int) -> int:
    """Return ``max(1, ceil(count / page_size))``.

    Raises:
        ValueError: If ``count`` is negative or ``page_size`` is not positive.
    """
    if count < 0:
        raise ValueError("count must be non-negative")
    if page_size <= 0:
        raise ValueError("page_size must be positive")
    return max(1, math.ceil(count / page_size))


def clamp_page(requested_page: int, total_pages: int) -> int:
    return min(max(requested_page, 1), max(total_pages, 1))


def paginate(items: Sequence[Any], page_size: int, requested_page: int) -> Page:
    """Return the items of ``requested_page`` after clamping it into range.

    An empty sequence is still page 1 of 1 with no items.
    """
    total_pages = total_pages_for(len(items), page_size)
    effective_page = clamp_page(requested_page, total_pages)
    start = (effective_page - 1) * page_size
    return Page(
        items=tuple(items[start:start + page_size]),
        total_pages=total_pages,
        effective_page=effective_page,
    )


def next_page(current_page: int, total_pages: int) -> int:
    if current_page < total_pages:
        return current_page + 1
    return current_page


def previous_page(current_page: int) -> int:
    if current_page > 1:
        return current_page - 1
    return current_page


__all__ = [
    "Page",
    "clamp_page",
    "next_page",
    "paginate",
    "previous_page",
    "total_pages_for",
]
