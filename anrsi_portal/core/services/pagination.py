"""Client-side pagination of ordered lists."""

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TypeVar

from ..domain.exceptions import InvalidPaginationError

T = TypeVar("T")

# Up to this many pages, every page number is shown
MAX_FULL_RANGE = 7


@dataclass(frozen=True)
class PageWindow:
    """The visible part of a list and the page links to render.

    Attributes:
        page: Current page (1-based), clamped to the valid range.
        page_size: Items per page.
        total_items: Length of the whole list.
        total_pages: Number of pages (0 for an empty list).
        start: Index of the first visible item.
        end: Index one past the last visible item.
        page_numbers: Page links in order; None marks an ellipsis.
    """

    page: int
    page_size: int
    total_items: int
    total_pages: int
    start: int
    end: int
    page_numbers: tuple[int | None, ...]

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    def slice(self, items: Sequence[T]) -> list[T]:
        return list(items[self.start : self.end])


def page_numbers(current: int, total_pages: int, window: int = 1) -> tuple[int | None, ...]:
    """Collapse long page ranges to ``first ... around current ... last``."""
    if total_pages <= MAX_FULL_RANGE:
        return tuple(range(1, total_pages + 1))

    low = max(2, current - window)
    high = min(total_pages - 1, current + window)
    numbers: list[int | None] = [1]
    if low > 2:
        numbers.append(None)
    numbers.extend(range(low, high + 1))
    if high < total_pages - 1:
        numbers.append(None)
    numbers.append(total_pages)
    return tuple(numbers)


def paginate(total: int, page: int = 1, page_size: int = 10, window: int = 1) -> PageWindow:
    """Compute the page window for a list of ``total`` items.

    A page past the end (for example after the list shrank) is moved back
    to the last valid page; an empty list is on page 1.

    Raises:
        InvalidPaginationError: If ``page_size`` is not positive or
            ``total`` is negative.
    """
    if page_size <= 0:
        raise InvalidPaginationError(
            f"Page size must be positive, got {page_size}", context={"page_size": page_size}
        )
    if total < 0:
        raise InvalidPaginationError(f"List length cannot be negative, got {total}")

    total_pages = math.ceil(total / page_size)
    current = min(max(page, 1), max(total_pages, 1))
    start = (current - 1) * page_size
    end = min(start + page_size, total)
    return PageWindow(
        page=current,
        page_size=page_size,
        total_items=total,
        total_pages=total_pages,
        start=start,
        end=end,
        page_numbers=page_numbers(current, total_pages, window),
    )


def paginate_items(
    items: Sequence[T], page: int = 1, page_size: int = 10, window: int = 1
) -> tuple[PageWindow, list[T]]:
    """Paginate a list and return the window with its visible items."""
    result = paginate(len(items), page, page_size, window)
    return result, result.slice(items)
