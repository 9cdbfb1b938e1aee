"""Cached reads of small YAML data files (catalog and similar).

A file is re-read when its TTL expires or its mtime changes. Missing,
malformed or non-mapping files yield the caller's default, so a bad edit
never takes the API down.
"""

from __future__ import annotations

import copy
import logging
import os
import threading
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)


@dataclass
class _Entry:
    payload: Dict[str, Any]
    mtime: Optional[float]
    loaded_at: float


class YamlCache:
    def __init__(self) -> None:
        self._entries: Dict[str, _Entry] = {}
        self._lock = threading.Lock()

    def load(
        self,
        path: str,
        default: Optional[Dict[str, Any]] = None,
        ttl_seconds: Optional[int] = None,
    ) -> Dict[str, Any]:
        abs_path = os.path.abspath(path)
        mtime = _mtime(abs_path)
        now = time.time()

        with self._lock:
            entry = self._entries.get(abs_path)
            if entry is not None and entry.mtime == mtime:
                if ttl_seconds is None or now - entry.loaded_at <= ttl_seconds:
                    return copy.deepcopy(entry.payload)

            payload = _read_mapping(abs_path, mtime)
            if payload is None:
                payload = dict(default or {})
            self._entries[abs_path] = _Entry(payload=payload, mtime=mtime, loaded_at=now)
            return copy.deepcopy(payload)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


def _mtime(path: str) -> Optional[float]:
    try:
        return os.path.getmtime(path)
    except FileNotFoundError:
        return None


def _read_mapping(path: str, mtime: Optional[float]) -> Optional[Dict[str, Any]]:
    if mtime is None:
        logger.debug("YAML file %s not found; using default", path)
        return None
    try:
        with open(path, "r", encoding="utf-8") as fh:
            payload = yaml.safe_load(fh) or {}
    except yaml.YAMLError as exc:
        logger.warning("Failed to parse YAML %s: %s", path, exc)
        return None
    if not isinstance(payload, dict):
        logger.warning("YAML file %s is not a mapping; using default", path)
        return None
    return payload


_yaml_cache = YamlCache()


def load_yaml_cached(
    path: str,
    *,
    default: Optional[Dict[str, Any]] = None,
    ttl_seconds: Optional[int] = None,
) -> Dict[str, Any]:
    """Read YAML through the process-wide cache; TTL defaults to CONFIG_CACHE_TTL_S."""
    from easytrip.core.config import settings

    ttl = ttl_seconds if ttl_seconds is not None else settings.config_cache_ttl_s
    return _yaml_cache.load(path, default=default, ttl_seconds=ttl)


def clear_yaml_cache() -> None:
    _yaml_cache.clear()
