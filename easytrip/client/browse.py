"""Browse session: cached place list, current criteria and load-more paging.

The full list is fetched once. Searches go to the server first and fall
back to filtering the cached list when the server cannot answer.
"""

import logging
from typing import List, Union

import requests

from easytrip.client.places_client import PlacesApiError, ServerError
from easytrip.places.services.filters import FilterCriteria
from easytrip.places.services.pagination import DEFAULT_PAGE_SIZE, window
from easytrip.places.services.search import SearchResult, search_with_fallback
from easytrip.places.services.sorting import SortKey, sort_places

logger = logging.getLogger(__name__)

# failures that send a search to the local fallback instead of the caller
RECOVERABLE_SEARCH_ERRORS = (requests.RequestException, ServerError)


class PlacesUnavailableError(Exception):
    """Initial place list could not be loaded; call load() again to retry"""
    pass


class BrowseSession:
    def __init__(self, client, page_size: int = DEFAULT_PAGE_SIZE):
        if page_size < 1:
            raise ValueError(f"page_size must be >= 1, got {page_size}")
        self.client = client
        self.page_size = page_size
        self.page_count = 1
        self.criteria = FilterCriteria()
        self.sort = SortKey.NEWEST
        self.all_places: List = []
        self.results: List = []
        self.loaded = False

    def load(self) -> None:
        """
        Fetch every place and show them newest first.

        Raises:
            PlacesUnavailableError: the list could not be fetched
        """
        try:
            places = self.client.get_all_places()
        except (requests.RequestException, PlacesApiError) as e:
            logger.error(f"Failed to load places: {e}")
            raise PlacesUnavailableError("Failed to load places. Please try again later.") from e
        self.all_places = list(places)
        self.loaded = True
        self.criteria = FilterCriteria()
        self.sort = SortKey.NEWEST
        self.page_count = 1
        self.results = sort_places(self.all_places, self.sort)

    def apply(self, criteria: FilterCriteria, sort: Union[str, SortKey, None] = None) -> None:
        """
        Replace the current criteria/sort and recompute results.

        Raises:
            ValueError: invalid criteria or sort key
        """
        criteria = criteria.normalized()
        sort = SortKey.parse(sort)
        if criteria != self.criteria or sort != self.sort:
            self.page_count = 1
        self.criteria = criteria
        self.sort = sort
        self.results = search_with_fallback(
            self.client.search_places,
            self.all_places,
            criteria,
            sort,
            recoverable=RECOVERABLE_SEARCH_ERRORS,
        )

    def load_more(self) -> bool:
        """Show one more page; False when everything is already visible"""
        if not self.view().has_more:
            return False
        self.page_count += 1
        return True

    def set_page_size(self, page_size: int) -> None:
        if page_size < 1:
            raise ValueError(f"page_size must be >= 1, got {page_size}")
        self.page_size = page_size

    def view(self) -> SearchResult:
        page = window(self.results, self.page_size, self.page_count)
        return SearchResult(visible=page.items, total=len(self.results), has_more=page.has_more)

