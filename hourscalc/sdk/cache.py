"""Breakdown caches for instant display before recomputation.

Keys are "{scope}:{period start YYYY-MM-DD}". Storing a breakdown for a
new period start evicts every other entry in the same scope, so a cache
never serves totals from a previous pay period.
"""

import json
import logging
from pathlib import Path
from typing import Dict, Optional, Protocol, Union

from .overtime import OvertimeBreakdown
from .pay_period import PayPeriod

logger = logging.getLogger(__name__)

CACHE_FILENAME = "breakdowns.json"


class BreakdownCache(Protocol):
    """Cache interface used by the hours summary."""

    def get(self, key: str) -> Optional[OvertimeBreakdown]:
        ...

    def set(self, key: str, breakdown: OvertimeBreakdown) -> None:
        ...


def cache_key(period: PayPeriod, scope: str = "default") -> str:
    """Cache key for a pay period, e.g. 'user_42:2024-02-25'."""
    return f"{scope}:{period.start_date}"


def _scope_of(key: str) -> str:
    return key.rsplit(":", 1)[0]


def _evict_stale(entries: Dict, key: str) -> None:
    scope = _scope_of(key)
    stale = [k for k in entries if k != key and _scope_of(k) == scope]
    for k in stale:
        logger.debug(f"evicting cached breakdown {k}")
        del entries[k]


class InMemoryBreakdownCache:
    """Process-local cache (one instance per caller, never global)."""

    def __init__(self):
        self._entries: Dict[str, OvertimeBreakdown] = {}

    def get(self, key: str) -> Optional[OvertimeBreakdown]:
        return self._entries.get(key)

    def set(self, key: str, breakdown: OvertimeBreakdown) -> None:
        _evict_stale(self._entries, key)
        self._entries[key] = breakdown

    def __len__(self) -> int:
        return len(self._entries)


class JsonFileBreakdownCache:
    """Cache persisted as JSON (by default in the XDG cache directory)."""

    def __init__(self, path: Union[str, Path, None] = None):
        if path is None:
            from .config import get_cache_path
            path = get_cache_path() / CACHE_FILENAME
        self.path = Path(path)

    def _read(self) -> Dict[str, dict]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable breakdown cache {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def get(self, key: str) -> Optional[OvertimeBreakdown]:
        data = self._read().get(key)
        if data is None:
            return None
        return OvertimeBreakdown.from_dict(data)

    def set(self, key: str, breakdown: OvertimeBreakdown) -> None:
        entries = self._read()
        _evict_stale(entries, key)
        entries[key] = breakdown.to_dict()

        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w") as f:
            json.dump(entries, f, indent=2)
