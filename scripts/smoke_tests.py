#!/usr/bin/env python3
"""Minimal smoke tests against a running API (BASE, default localhost:8000)."""

from __future__ import annotations

import json
import os
import sys
import urllib.error
import urllib.parse
import urllib.request


def _get(base: str, path: str, params: dict | None = None):
    url = f"{base.rstrip('/')}{path}"
    if params:
        url = f"{url}?{urllib.parse.urlencode(params, doseq=True)}"
    try:
        with urllib.request.urlopen(url) as response:
            return json.load(response)
    except urllib.error.URLError as exc:  # pragma: no cover - network failure
        print(f"Request to {url} failed: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc


def _rating(place: dict) -> float:
    return place.get("average_rating") or 0.0


def main() -> None:
    base = os.environ.get("BASE", "http://localhost:8000")

    health = _get(base, "/api/health")
    if health.get("database") != "connected":
        raise AssertionError(f"Database not connected: {health}")

    places = _get(base, "/api/places")
    if not isinstance(places, list):
        raise AssertionError("GET /api/places did not return a list")

    by_rating = _get(base, "/api/places/search", {"sort": "rating", "minRating": 0.1})
    ratings = [_rating(p) for p in by_rating]
    if ratings != sorted(ratings, reverse=True):
        raise AssertionError("Rating sort is not descending")
    if any(r < 0.1 for r in ratings):
        raise AssertionError("minRating filter let unrated places through")

    if places:
        location = places[0]["location"]
        same_location = _get(base, "/api/places/search", {"location": location.upper()})
        if not same_location or any(p["location"].lower() != location.lower() for p in same_location):
            raise AssertionError(f"Location filter failed for {location!r}")

    print(f"✅ Smoke tests passed ({len(places)} places)")


if __name__ == "__main__":
    main()
