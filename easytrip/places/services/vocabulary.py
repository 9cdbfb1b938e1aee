"""Theme vocabulary and season -> months table."""

import logging
from typing import Dict, List

from easytrip.core.config import settings
from easytrip.core.config_cache import load_yaml_cached

logger = logging.getLogger(__name__)

BEST_TIME_KEY = "Best Time to Visit"
ANY_SEASON = "any"

DEFAULT_THEMES: List[str] = [
    "hot", "cold", "rainy", "romantic", "religious", "historical", "science",
    "tech", "adventure", "nature", "beach", "mountain", "family",
]

DEFAULT_SEASONS: Dict[str, List[str]] = {
    "summer": ["april", "may", "june"],
    "monsoon": ["july", "august", "september"],
    "winter": ["october", "november", "december", "january", "february", "march"],
}


def _catalog() -> dict:
    return load_yaml_cached(
        settings.catalog_path,
        default={"themes": DEFAULT_THEMES, "seasons": DEFAULT_SEASONS},
    )


def get_themes() -> List[str]:
    themes = _catalog().get("themes") or DEFAULT_THEMES
    return [str(t).strip().lower() for t in themes if str(t).strip()]


def get_season_months() -> Dict[str, List[str]]:
    seasons = _catalog().get("seasons")
    if not isinstance(seasons, dict) or not seasons:
        logger.warning("Catalog has no usable 'seasons' table; using defaults")
        return {k: list(v) for k, v in DEFAULT_SEASONS.items()}
    return {
        str(name).strip().lower(): [str(m).strip().lower() for m in (months or [])]
        for name, months in seasons.items()
    }
