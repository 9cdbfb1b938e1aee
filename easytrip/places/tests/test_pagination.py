import pytest

from easytrip.places.services.pagination import page_size_for_viewport, window


def test_window_is_a_prefix():
    items = list(range(20))
    page = window(items, 6, 1)
    assert page.items == list(range(6))
    assert page.has_more is True


def test_growing_page_count_extends_the_prefix():
    items = list(range(20))
    for k in range(1, 5):
        smaller, larger = window(items, 6, k).items, window(items, 6, k + 1).items
        assert larger[: len(smaller)] == smaller


def test_last_page_has_no_more():
    page = window(list(range(10)), 6, 2)
    assert page.items == list(range(10))
    assert page.has_more is False


def test_rewindowing_with_same_size_is_noop():
    items = list(range(30))
    first = window(items, 8, 2).items
    assert window(first, 8, 2).items == first


def test_page_size_change_keeps_page_count():
    items = list(range(30))
    assert len(window(items, 12, 2).items) == 24
    assert len(window(items, 6, 2).items) == 12


@pytest.mark.parametrize("size,count", [(0, 1), (6, 0)])
def test_invalid_window_arguments(size, count):
    with pytest.raises(ValueError):
        window([1, 2, 3], size, count)


@pytest.mark.parametrize("width,expected", [(375, 6), (639, 6), (640, 8), (1023, 8), (1024, 12), (1920, 12)])
def test_page_size_for_viewport(width, expected):
    assert page_size_for_viewport(width) == expected
