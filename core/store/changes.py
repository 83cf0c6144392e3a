"""
POS Entity Store — Change Set
===============================
Everything one accepted command writes, gathered before the store is
touched. The store applies a ChangeSet whole: an engine computes the
complete next state first, then commits once.
"""

from __future__ import annotations

from typing import Dict, List, Tuple

from core.store.registry import SETTINGS, get_spec


class ChangeSet:
    """
    Ordered upserts and deletes per collection, plus an optional
    settings replacement.

    Usage:
        changes = ChangeSet()
        changes.put(INVOICES, invoice)
        changes.put(USERS, updated_customer)
        store.commit(changes, event)
    """

    def __init__(self):
        self._upserts: Dict[str, Dict[str, object]] = {}
        self._deletes: Dict[str, List[str]] = {}
        self._settings = None

    def put(self, collection: str, record) -> "ChangeSet":
        spec = get_spec(collection)
        if not isinstance(record, spec.record_type):
            raise TypeError(
                f"Collection '{collection}' holds {spec.record_type.__name__}, "
                f"got {type(record).__name__}."
            )
        # Later puts of the same id win; order of first appearance is kept.
        self._upserts.setdefault(collection, {})[spec.record_id(record)] = record
        return self

    def delete(self, collection: str, record_id: str) -> "ChangeSet":
        get_spec(collection)
        self._deletes.setdefault(collection, []).append(record_id)
        return self

    def replace_settings(self, settings) -> "ChangeSet":
        self._settings = settings
        return self

    def pending(self, collection: str, record_id: str):
        """A record already staged in this change set, if any."""
        return self._upserts.get(collection, {}).get(record_id)

    def upserts(self) -> List[Tuple[str, object]]:
        return [
            (collection, record)
            for collection, records in self._upserts.items()
            for record in records.values()
        ]

    def deletes(self) -> List[Tuple[str, str]]:
        return [
            (collection, record_id)
            for collection, ids in self._deletes.items()
            for record_id in ids
        ]

    @property
    def settings(self):
        return self._settings

    @property
    def touched(self) -> Tuple[str, ...]:
        names = list(self._upserts)
        names.extend(c for c in self._deletes if c not in names)
        if self._settings is not None:
            names.append(SETTINGS)
        return tuple(names)

    def is_empty(self) -> bool:
        return not self.touched

    def __len__(self) -> int:
        return (
            sum(len(r) for r in self._upserts.values())
            + sum(len(d) for d in self._deletes.values())
            + (1 if self._settings is not None else 0)
        )

    def __repr__(self) -> str:
        return f"ChangeSet(touched={self.touched!r}, size={len(self)})"


def staged_or_current(changes: ChangeSet, store, collection: str, record_id: str):
    """Read-your-staged-writes lookup used while building a change set."""
    staged = changes.pending(collection, record_id)
    if staged is not None:
        return staged
    return store.get(collection, record_id)
