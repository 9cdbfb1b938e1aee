import os

import pytest

from easytrip.core.config import settings
from easytrip.core.config_cache import clear_yaml_cache
from easytrip.places.services.filters import FilterCriteria
from easytrip.places.services.vocabulary import DEFAULT_SEASONS, get_season_months, get_themes


@pytest.fixture
def catalog(tmp_path, monkeypatch):
    path = tmp_path / "catalog.yaml"
    monkeypatch.setattr(settings, "catalog_path", str(path))
    clear_yaml_cache()
    yield path
    clear_yaml_cache()


def test_seasons_come_from_catalog(catalog):
    catalog.write_text("seasons:\n  Spring:\n    - March\n    - April\nthemes: [Beach, nature]\n")
    assert get_season_months() == {"spring": ["march", "april"]}
    assert get_themes() == ["beach", "nature"]
    assert FilterCriteria(season="spring").normalized().season == "spring"


def test_missing_catalog_uses_defaults(catalog):
    assert get_season_months() == DEFAULT_SEASONS
    assert "beach" in get_themes()


def test_broken_catalog_uses_defaults(catalog):
    catalog.write_text("seasons: [unclosed\n")
    assert get_season_months() == DEFAULT_SEASONS


def test_catalog_without_seasons_uses_defaults(catalog):
    catalog.write_text("themes: [beach]\n")
    assert get_season_months() == DEFAULT_SEASONS
    assert get_themes() == ["beach"]


def test_edited_catalog_is_reloaded(catalog):
    catalog.write_text("themes: [beach]\n")
    assert get_themes() == ["beach"]

    catalog.write_text("themes: [desert]\n")
    stat = catalog.stat()
    os.utime(catalog, (stat.st_atime, stat.st_mtime + 5))
    assert get_themes() == ["desert"]
