"""
POS Entity Store — Single Source of Truth
===========================================
In-memory collections of every entity, keyed by id, owned by one
injectable object (no module-level singleton).

Write path (commit):
    1. Apply every upsert/delete of the ChangeSet to memory
    2. Mirror each touched collection to the key-value layer
    3. Publish the ChangeEvent to subscribers

Reads are always served from memory, so a caller sees its own write
immediately even if mirroring is slow or failing. Mirror failures are
logged and never surface to the command.

Single-writer model: commands run to completion one at a time. The
store holds no locks.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional

from core.admin.settings import AppSettings
from core.events import ChangeEvent, SubscriberRegistry, dispatch
from core.store.changes import ChangeSet
from core.store.persistence import KeyValueStore
from core.store.registry import (
    COLLECTIONS,
    INVENTORY,
    INVOICES,
    PURCHASE_ORDERS,
    SETTINGS,
    SETTINGS_KEY,
    USERS,
    WHOLESALERS,
    get_spec,
)

logger = logging.getLogger("pos.store")


class EntityStore:
    """
    Owner of all entity collections.

    Usage:
        store = EntityStore(kv_store=InMemoryKeyValueStore())
        store.load()
        store.get(USERS, "u-1")
        store.find(INVOICES, lambda inv: inv.customer_id == "u-1")
    """

    def __init__(
        self,
        *,
        kv_store: Optional[KeyValueStore] = None,
        subscribers: Optional[SubscriberRegistry] = None,
    ):
        self._kv_store = kv_store
        self._subscribers = subscribers or SubscriberRegistry()
        self._collections: Dict[str, Dict[str, Any]] = {
            name: {} for name in COLLECTIONS
        }
        self._settings = AppSettings()
        self._commit_count = 0
        self._mirror_failures = 0

    # ══════════════════════════════════════════════════════════
    # LOAD (once, at start-up)
    # ══════════════════════════════════════════════════════════

    def load(self) -> bool:
        """
        Seed memory from the key-value layer.

        Returns True if at least one key held data, False for a
        first run (caller then seeds defaults).
        """
        if self._kv_store is None:
            return False

        found = False
        for name, spec in COLLECTIONS.items():
            raw = self._kv_store.load(spec.storage_key)
            if raw is None:
                continue
            found = True
            records = [spec.record_type.from_dict(item) for item in raw]
            self._collections[name] = {spec.record_id(r): r for r in records}
            logger.info(f"Loaded {len(records)} record(s) into '{name}'")

        raw_settings = self._kv_store.load(SETTINGS_KEY)
        if raw_settings is not None:
            found = True
            self._settings = AppSettings.from_dict(raw_settings)

        return found

    # ══════════════════════════════════════════════════════════
    # QUERIES
    # ══════════════════════════════════════════════════════════

    def get(self, collection: str, record_id: str):
        get_spec(collection)
        return self._collections[collection].get(record_id)

    def exists(self, collection: str, record_id: str) -> bool:
        return self.get(collection, record_id) is not None

    def all(self, collection: str) -> list:
        get_spec(collection)
        return list(self._collections[collection].values())

    def find(self, collection: str, predicate: Callable[[Any], bool]) -> list:
        return [r for r in self.all(collection) if predicate(r)]

    def find_one(self, collection: str, predicate: Callable[[Any], bool]):
        for record in self.all(collection):
            if predicate(record):
                return record
        return None

    def count(self, collection: str) -> int:
        get_spec(collection)
        return len(self._collections[collection])

    @property
    def settings(self) -> AppSettings:
        return self._settings

    # ── typed conveniences ────────────────────────────────────

    def get_user(self, user_id: str):
        return self.get(USERS, user_id)

    def get_item(self, item_id: str):
        return self.get(INVENTORY, item_id)

    def get_invoice(self, invoice_id: str):
        return self.get(INVOICES, invoice_id)

    def get_order(self, po_id: str):
        return self.get(PURCHASE_ORDERS, po_id)

    def get_wholesaler(self, wholesaler_id: str):
        return self.get(WHOLESALERS, wholesaler_id)

    def find_user_by_username(self, username: str, *, exclude_id: Optional[str] = None):
        """Usernames match case-insensitively, ignoring surrounding spaces."""
        wanted = username.strip().lower()
        return self.find_one(
            USERS,
            lambda u: u.username.strip().lower() == wanted and u.user_id != exclude_id,
        )

    # ══════════════════════════════════════════════════════════
    # COMMIT (the only write path)
    # ══════════════════════════════════════════════════════════

    def commit(self, changes: ChangeSet, event: Optional[ChangeEvent] = None) -> dict:
        """
        Apply a change set, mirror it, publish the event.

        Returns the dispatch report (empty dict when no event).
        """
        for collection, record in changes.upserts():
            spec = get_spec(collection)
            self._collections[collection][spec.record_id(record)] = record

        for collection, record_id in changes.deletes():
            self._collections[collection].pop(record_id, None)

        if changes.settings is not None:
            self._settings = changes.settings

        self._commit_count += 1
        self._mirror(changes.touched)

        if event is None:
            return {}
        return dispatch(event, self._subscribers)

    def _mirror(self, touched) -> None:
        if self._kv_store is None:
            return

        for name in touched:
            if name == SETTINGS:
                key, value = SETTINGS_KEY, self._settings.to_dict()
            else:
                spec = get_spec(name)
                key = spec.storage_key
                value = [r.to_dict() for r in self._collections[name].values()]

            try:
                self._kv_store.save(key, value)
            except Exception as exc:
                self._mirror_failures += 1
                logger.error(
                    f"Mirror of '{name}' to key '{key}' failed: {exc}",
                    exc_info=True,
                )

    # ══════════════════════════════════════════════════════════
    # INTROSPECTION
    # ══════════════════════════════════════════════════════════

    @property
    def subscribers(self) -> SubscriberRegistry:
        return self._subscribers

    @property
    def commit_count(self) -> int:
        return self._commit_count

    @property
    def mirror_failures(self) -> int:
        return self._mirror_failures

    def snapshot(self) -> Dict[str, List[dict]]:
        """Serialized copy of every collection (plus settings)."""
        data: Dict[str, Any] = {
            name: [r.to_dict() for r in records.values()]
            for name, records in self._collections.items()
        }
        data[SETTINGS] = self._settings.to_dict()
        return data
