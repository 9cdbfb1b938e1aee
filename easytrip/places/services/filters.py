"""
Filter predicate shared by the server search route and the browse session.

Rules per field (all fields optional, combined with AND):
- search_term: case-insensitive substring of name OR description
- location / district / state: case-insensitive exact match
- themes / tags: any requested value present on the place
- min_rating: derived average >= min_rating (unrated places count as 0)
- season: "Best Time to Visit" mentions a month of the season; places
  without that key pass every season
"""

import json
import math
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, List, Optional

from easytrip.places.services.ratings import rating_or_zero
from easytrip.places.services.vocabulary import ANY_SEASON, BEST_TIME_KEY, get_season_months

MAX_RATING = 5


@dataclass(frozen=True)
class FilterCriteria:
    search_term: Optional[str] = None
    location: Optional[str] = None
    district: Optional[str] = None
    state: Optional[str] = None
    themes: List[str] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)
    min_rating: float = 0
    season: Optional[str] = None

    def normalized(self) -> "FilterCriteria":
        """Trim text fields, drop blanks and validate rating/season.

        Raises:
            ValueError: min_rating outside 0..5 or an unknown season
        """
        min_rating = float(self.min_rating or 0)
        if not math.isfinite(min_rating) or min_rating < 0 or min_rating > MAX_RATING:
            raise ValueError(f"minRating must be between 0 and {MAX_RATING}")

        season = _clean(self.season)
        if season is not None:
            season = season.lower()
            if season == ANY_SEASON:
                season = None
            elif season not in get_season_months():
                raise ValueError(f"Unknown season '{self.season}'")

        return replace(
            self,
            search_term=_clean(self.search_term),
            location=_clean(self.location),
            district=_clean(self.district),
            state=_clean(self.state),
            themes=_clean_list(self.themes),
            tags=_clean_list(self.tags),
            min_rating=min_rating,
            season=season,
        )

    def is_active(self) -> bool:
        return any([
            _clean(self.search_term),
            _clean(self.location),
            _clean(self.district),
            _clean(self.state),
            _clean_list(self.themes),
            _clean_list(self.tags),
            (self.min_rating or 0) > 0,
            _clean(self.season) and _clean(self.season).lower() != ANY_SEASON,
        ])

    def to_query_params(self) -> Dict[str, Any]:
        """Query parameters understood by GET /api/places/search."""
        params: Dict[str, Any] = {}
        if self.search_term:
            params["searchTerm"] = self.search_term
        for name in ("location", "district", "state", "season"):
            value = getattr(self, name)
            if value:
                params[name] = value
        if self.themes:
            params["themes"] = list(self.themes)
        if self.tags:
            params["tags"] = list(self.tags)
        if self.min_rating:
            params["minRating"] = self.min_rating
        return params


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _clean_list(values: Optional[Iterable[str]]) -> List[str]:
    cleaned = []
    for value in values or []:
        value = _clean(value)
        if value and value not in cleaned:
            cleaned.append(value)
    return cleaned


def parse_list_param(values: Optional[List[str]]) -> List[str]:
    """
    Accept repeated query values (?tags=a&tags=b) or a JSON-encoded array
    (?tags=["a","b"]) as sent by the original frontend.
    """
    result: List[str] = []
    for raw in values or []:
        raw = (raw or "").strip()
        if raw.startswith("["):
            try:
                decoded = json.loads(raw)
            except json.JSONDecodeError:
                raise ValueError(f"Invalid JSON array: {raw}")
            if not isinstance(decoded, list):
                raise ValueError(f"Invalid JSON array: {raw}")
            result.extend(str(item) for item in decoded)
        elif raw:
            result.append(raw)
    return result


def _equals_ci(actual: Optional[str], expected: str) -> bool:
    return actual is not None and actual.strip().lower() == expected.lower()


def _intersects(actual: Optional[Iterable[str]], requested: List[str]) -> bool:
    if not actual:
        return False
    have = set(actual)
    return any(value in have for value in requested)


def _in_season(custom_keys: Optional[Dict[str, Any]], months: List[str]) -> bool:
    best_time = (custom_keys or {}).get(BEST_TIME_KEY)
    if not best_time or not str(best_time).strip():
        # unknown best time passes every season
        return True
    best_time = str(best_time).lower()
    return any(month in best_time for month in months)


def _matches(place, criteria: FilterCriteria, season_months: List[str]) -> bool:
    if criteria.search_term:
        term = criteria.search_term.lower()
        name = (place.name or "").lower()
        description = (place.description or "").lower()
        if term not in name and term not in description:
            return False

    if criteria.location and not _equals_ci(place.location, criteria.location):
        return False
    if criteria.district and not _equals_ci(place.district, criteria.district):
        return False
    if criteria.state and not _equals_ci(place.state, criteria.state):
        return False

    if criteria.themes and not _intersects(place.themes, criteria.themes):
        return False
    if criteria.tags and not _intersects(place.tags, criteria.tags):
        return False

    if criteria.min_rating and rating_or_zero(place) < criteria.min_rating:
        return False

    if criteria.season and not _in_season(place.custom_keys, season_months):
        return False

    return True


def _months_for(criteria: FilterCriteria) -> List[str]:
    if not criteria.season:
        return []
    return get_season_months().get(criteria.season, [])


def matches(place, criteria: FilterCriteria) -> bool:
    """Decide whether one place passes every active criteria field."""
    criteria = criteria.normalized()
    return _matches(place, criteria, _months_for(criteria))


def filter_places(places: Iterable, criteria: FilterCriteria) -> list:
    """Return a new list with the places that match; the input is not modified."""
    criteria = criteria.normalized()
    if not criteria.is_active():
        return list(places)
    months = _months_for(criteria)
    return [place for place in places if _matches(place, criteria, months)]
