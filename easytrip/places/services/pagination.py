"""Load-more pagination: every page is a prefix of the ordered results."""

from dataclasses import dataclass
from typing import List, Sequence

# (max viewport width in px, page size); wider screens get DEFAULT_PAGE_SIZE
VIEWPORT_PAGE_SIZES = ((640, 6), (1024, 8))
DEFAULT_PAGE_SIZE = 12


@dataclass(frozen=True)
class PageWindow:
    items: List
    has_more: bool


def window(ordered: Sequence, page_size: int, page_count: int) -> PageWindow:
    """
    First page_size * page_count items of an already ordered list.

    The window always starts at 0, so increasing page_count never hides
    items that were visible before. page_size may change between calls.
    """
    if page_size < 1:
        raise ValueError(f"page_size must be >= 1, got {page_size}")
    if page_count < 1:
        raise ValueError(f"page_count must be >= 1, got {page_count}")
    items = list(ordered[: page_size * page_count])
    return PageWindow(items=items, has_more=len(items) < len(ordered))


def page_size_for_viewport(width_px: int) -> int:
    for max_width, size in VIEWPORT_PAGE_SIZES:
        if width_px < max_width:
            return size
    return DEFAULT_PAGE_SIZE
