import pytest
from types import SimpleNamespace

from easytrip.places.services.ratings import average_rating, rating_or_zero


def test_no_reviews_means_no_rating():
    assert average_rating(0, 0) is None


def test_average_is_rounded_to_one_decimal():
    assert average_rating(15, 3) == 5.0
    assert average_rating(9, 2) == 4.5
    assert average_rating(10, 3) == 3.3
    assert average_rating(11, 3) == 3.7


def test_rounding_is_half_up():
    # 0.25 -> 0.3 and 0.35 -> 0.4, not banker's rounding
    assert average_rating(1, 4) == 0.3
    assert average_rating(7, 20) == 0.4


def test_average_is_none_iff_count_is_zero():
    for rating_sum, rating_count in [(0, 0), (5, 1), (7, 2), (100, 25)]:
        assert (average_rating(rating_sum, rating_count) is None) == (rating_count == 0)


def test_negative_count_is_rejected():
    with pytest.raises(ValueError):
        average_rating(3, -1)


def test_rating_or_zero_treats_unrated_as_zero():
    assert rating_or_zero(SimpleNamespace(rating_sum=0, rating_count=0)) == 0.0
    assert rating_or_zero(SimpleNamespace(rating_sum=None, rating_count=None)) == 0.0
    assert rating_or_zero(SimpleNamespace(rating_sum=9, rating_count=2)) == 4.5
