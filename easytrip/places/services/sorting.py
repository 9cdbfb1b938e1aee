"""Total orderings for place lists, one per sort key."""

from enum import Enum
from functools import cmp_to_key
from typing import Iterable, List, Union

from easytrip.places.services.ratings import rating_or_zero


class SortKey(str, Enum):
    NEWEST = "newest"
    RATING = "rating"
    NAME = "name"
    POPULAR = "popular"

    @classmethod
    def parse(cls, value: Union[str, "SortKey", None]) -> "SortKey":
        """Parse a sort key; None/blank means newest.

        Raises:
            ValueError: unknown sort key
        """
        if isinstance(value, cls):
            return value
        if value is None or not str(value).strip():
            return cls.NEWEST
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            allowed = ", ".join(k.value for k in cls)
            raise ValueError(f"Invalid sort '{value}'. Must be one of: {allowed}")


def _cmp(x, y) -> int:
    return (x > y) - (x < y)


def _by_id(a, b) -> int:
    return _cmp(a.id or 0, b.id or 0)


def _newest(a, b) -> int:
    # missing timestamps sort last
    if a.created_at is None or b.created_at is None:
        result = _cmp(a.created_at is None, b.created_at is None)
    else:
        result = _cmp(b.created_at, a.created_at)
    return result or _by_id(a, b)


def _rating(a, b) -> int:
    return (
        _cmp(rating_or_zero(b), rating_or_zero(a))
        or _cmp(b.rating_count or 0, a.rating_count or 0)
        or _by_id(a, b)
    )


def _name(a, b) -> int:
    return _cmp((a.name or "").casefold(), (b.name or "").casefold()) or _by_id(a, b)


def _popular(a, b) -> int:
    # no place carries a views counter yet, so this orders by id
    return _cmp(getattr(b, "views", 0) or 0, getattr(a, "views", 0) or 0) or _by_id(a, b)


_COMPARATORS = {
    SortKey.NEWEST: _newest,
    SortKey.RATING: _rating,
    SortKey.NAME: _name,
    SortKey.POPULAR: _popular,
}


def compare(a, b, key: Union[str, SortKey]) -> int:
    """Return -1 if a sorts before b, 1 if after, 0 if equal under key."""
    return _COMPARATORS[SortKey.parse(key)](a, b)


def sort_places(places: Iterable, key: Union[str, SortKey, None] = SortKey.NEWEST) -> List:
    """Return a new list ordered by key; the input is not modified."""
    comparator = _COMPARATORS[SortKey.parse(key)]
    return sorted(places, key=cmp_to_key(comparator))
