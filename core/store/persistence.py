"""
POS Entity Store — Key-Value Persistence Boundary
===================================================
The store writes each touched collection, whole and serialized, under
its collection key after every commit, and reads every key once at
start-up. Any durable key-value mechanism satisfies the protocol.

Values are JSON-compatible (lists of dicts, or a dict for settings).
"""

from __future__ import annotations

import copy
from typing import Any, Dict, Optional, Protocol


class KeyValueStore(Protocol):
    def load(self, key: str) -> Optional[Any]:
        """Return the stored value, or None if the key was never saved."""
        ...  # pragma: no cover

    def save(self, key: str, value: Any) -> None:
        ...  # pragma: no cover


class InMemoryKeyValueStore:
    """
    Process-local store for tests and throwaway sessions.

    Values are deep-copied on the way in and out so callers cannot
    alias the persisted snapshot.
    """

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = copy.deepcopy(initial or {})
        self.save_count = 0

    def load(self, key: str) -> Optional[Any]:
        if key not in self._data:
            return None
        return copy.deepcopy(self._data[key])

    def save(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)
        self.save_count += 1

    def keys(self):
        return sorted(self._data)

