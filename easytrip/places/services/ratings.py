"""Average rating derived from the cumulative rating counters of a place."""

from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

_ONE_DECIMAL = Decimal("0.1")


def average_rating(rating_sum: int, rating_count: int) -> Optional[float]:
    """
    Average of a place's reviews, rounded half-up to one decimal.

    Returns None when there are no reviews ("no rating available", not zero).
    Rounding matches PostgreSQL ROUND(numeric, 1).
    """
    if not rating_count:
        return None
    if rating_count < 0:
        raise ValueError(f"rating_count must be >= 0, got {rating_count}")
    value = (Decimal(rating_sum) / Decimal(rating_count)).quantize(_ONE_DECIMAL, rounding=ROUND_HALF_UP)
    return float(value)


def rating_or_zero(place) -> float:
    """Average rating of a place for ordering/filtering; unrated places count as 0."""
    value = average_rating(place.rating_sum or 0, place.rating_count or 0)
    return value if value is not None else 0.0
