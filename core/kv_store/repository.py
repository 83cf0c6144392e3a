"""
POS Key-Value Store - Django Repository
=======================================
KeyValueStore implementation over CollectionSnapshot rows.
"""

from __future__ import annotations

from typing import Any, Optional

from core.kv_store.models import CollectionSnapshot


class DjangoKeyValueStore:
    """
    Usage:
        store = EntityStore(kv_store=DjangoKeyValueStore())
    """

    def load(self, key: str) -> Optional[Any]:
        row = CollectionSnapshot.objects.filter(key=key).first()
        if row is None:
            return None
        return row.payload

    def save(self, key: str, value: Any) -> None:
        CollectionSnapshot.objects.update_or_create(
            key=key,
            defaults={"payload": value},
        )

    def keys(self) -> list:
        return list(CollectionSnapshot.objects.values_list("key", flat=True))

    def clear(self) -> int:
        deleted, _ = CollectionSnapshot.objects.all().delete()
        return deleted
