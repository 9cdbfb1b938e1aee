#!/usr/bin/env python3
"""Place search pipeline: filter -> sort -> paginate"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Sequence, Union

from easytrip.places.services.filters import FilterCriteria, filter_places
from easytrip.places.services.pagination import window
from easytrip.places.services.sorting import SortKey, sort_places

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchResult:
    visible: List
    total: int
    has_more: bool


def order_places(
    places: Sequence,
    criteria: FilterCriteria,
    sort: Union[str, SortKey, None] = SortKey.NEWEST,
) -> List:
    """Filter then sort; the part a server search must reproduce exactly."""
    return sort_places(filter_places(places, criteria), sort)


def search(
    all_places: Sequence,
    criteria: FilterCriteria,
    sort: Union[str, SortKey, None],
    page_size: int,
    page_count: int,
) -> SearchResult:
    """Run the whole pipeline over an in-memory place list."""
    ordered = order_places(all_places, criteria, sort)
    page = window(ordered, page_size, page_count)
    return SearchResult(visible=page.items, total=len(ordered), has_more=page.has_more)


def search_with_fallback(
    remote: Callable[[FilterCriteria, SortKey], List],
    cached_places: Sequence,
    criteria: FilterCriteria,
    sort: Union[str, SortKey, None],
    recoverable: tuple,
) -> List:
    """
    Ordered matches from the remote search, or from the cached full list
    when the remote call raises one of `recoverable`.

    Both paths use the same predicate and comparator, so the result does
    not depend on which one answered.
    """
    criteria = criteria.normalized()
    sort = SortKey.parse(sort)
    if not criteria.is_active():
        return sort_places(cached_places, sort)
    try:
        return remote(criteria, sort)
    except recoverable as exc:
        logger.warning(f"Server search failed, falling back to local filtering: {exc}")
        return order_places(cached_places, criteria, sort)
