"""
POS Entity Store — Public API
===============================
In-memory entity collections, the ChangeSet write unit, and the
key-value persistence boundary they are mirrored to.
"""

from core.store.changes import ChangeSet, staged_or_current
from core.store.entity_store import EntityStore
from core.store.persistence import (
    InMemoryKeyValueStore,
    KeyValueStore,
)
from core.store.registry import (
    COLLECTIONS,
    DELIVERY_REQUESTS,
    INVENTORY,
    INVOICES,
    NOTIFICATIONS,
    PURCHASE_ORDERS,
    SETTINGS,
    SETTINGS_KEY,
    USERS,
    VERIFICATION_TOKENS,
    WHOLESALERS,
    CollectionSpec,
)

__all__ = [
    "ChangeSet",
    "staged_or_current",
    "EntityStore",
    "KeyValueStore",
    "InMemoryKeyValueStore",
    "COLLECTIONS",
    "CollectionSpec",
    "USERS",
    "INVENTORY",
    "WHOLESALERS",
    "INVOICES",
    "PURCHASE_ORDERS",
    "DELIVERY_REQUESTS",
    "NOTIFICATIONS",
    "VERIFICATION_TOKENS",
    "SETTINGS",
    "SETTINGS_KEY",
]
