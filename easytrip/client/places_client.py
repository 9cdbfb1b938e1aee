#!/usr/bin/env python3
"""HTTP client for the EasyTrip places API"""

import logging
from typing import Any, Dict, List, Optional, Union

import requests

from easytrip.api.schemas.place import PlaceRead
from easytrip.api.schemas.review import ReviewRead
from easytrip.places.services.filters import FilterCriteria
from easytrip.places.services.sorting import SortKey

logger = logging.getLogger(__name__)


class PlacesApiError(Exception):
    """The API answered with an error status"""

    def __init__(self, status_code: int, message: str):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


class ServerError(PlacesApiError):
    """5xx from the API; the request may succeed later"""
    pass


class PlacesClient:
    """Thin client returning the same schemas the API emits"""

    def __init__(self, base_url: str, timeout: int = 8, session=None,
                 headers: Optional[Dict[str, str]] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.headers = dict(headers or {})

    def _request(self, method: str, path: str, params: Optional[Dict[str, Any]] = None,
                 json: Optional[Dict[str, Any]] = None) -> Any:
        response = self.session.request(
            method,
            f"{self.base_url}{path}",
            params=params,
            json=json,
            headers=self.headers,
            timeout=self.timeout,
        )
        if response.status_code >= 400:
            try:
                message = response.json().get("detail", response.text)
            except ValueError:
                message = response.text
            error_cls = ServerError if response.status_code >= 500 else PlacesApiError
            logger.warning(f"{method} {path} failed with {response.status_code}: {message}")
            raise error_cls(response.status_code, str(message))
        return response.json()

    def get_all_places(self) -> List[PlaceRead]:
        return [PlaceRead.model_validate(item) for item in self._request("GET", "/api/places")]

    def search_places(self, criteria: FilterCriteria,
                      sort: Union[str, SortKey, None] = SortKey.NEWEST) -> List[PlaceRead]:
        params = criteria.to_query_params()
        params["sort"] = SortKey.parse(sort).value
        data = self._request("GET", "/api/places/search", params=params)
        return [PlaceRead.model_validate(item) for item in data]

    def get_place(self, place_id: int) -> PlaceRead:
        return PlaceRead.model_validate(self._request("GET", f"/api/places/{place_id}"))

    def get_reviews(self, place_id: int) -> List[ReviewRead]:
        data = self._request("GET", f"/api/places/{place_id}/reviews")
        return [ReviewRead.model_validate(item) for item in data]

    def create_review(self, place_id: int, rating: int, comment: Optional[str] = None) -> ReviewRead:
        data = self._request(
            "POST",
            f"/api/places/{place_id}/reviews",
            json={"rating": rating, "comment": comment},
        )
        return ReviewRead.model_validate(data)
