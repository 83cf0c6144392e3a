"""
POS Inventory Engine — Request Commands
==========================================
Catalog maintenance: register, bulk import, edit. Sales and receipts
change qty through the invoicing and procurement engines; the qty field
here is the manual stock-take adjustment.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from core.commands.base import Command
from core.primitives.item import DEFAULT_MIN_STOCK

INVENTORY_ITEM_REGISTER_REQUEST = "inventory.item.register.request"
INVENTORY_ITEM_IMPORT_REQUEST = "inventory.item.import.request"
INVENTORY_ITEM_UPDATE_REQUEST = "inventory.item.update.request"

INVENTORY_COMMAND_TYPES = frozenset({
    INVENTORY_ITEM_REGISTER_REQUEST,
    INVENTORY_ITEM_IMPORT_REQUEST,
    INVENTORY_ITEM_UPDATE_REQUEST,
})

INT_FIELDS = frozenset({"qty", "price", "min_stock"})
UPDATABLE_ITEM_FIELDS = INT_FIELDS | {"name", "sku", "category", "details"}


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class ItemRegisterRequest:
    item_id: str
    name: str
    price: int
    qty: int = 0
    sku: str = ""
    min_stock: int = DEFAULT_MIN_STOCK
    category: str = ""
    details: str = ""

    def __post_init__(self):
        if not self.item_id:
            raise ValueError("item_id must be non-empty.")
        if not self.name:
            raise ValueError("name must be non-empty.")
        if not _is_int(self.price) or self.price < 0:
            raise ValueError("price must be non-negative integer.")
        if not _is_int(self.qty):
            raise ValueError("qty must be integer.")
        if not _is_int(self.min_stock) or self.min_stock < 0:
            raise ValueError("min_stock must be non-negative integer.")

    def to_payload(self) -> dict:
        return {
            "item_id": self.item_id,
            "name": self.name,
            "price": self.price,
            "qty": self.qty,
            "sku": self.sku,
            "min_stock": self.min_stock,
            "category": self.category,
            "details": self.details,
        }

    def to_command(
        self,
        *,
        actor_type: str,
        actor_id: str,
        command_id: uuid.UUID,
        correlation_id: uuid.UUID,
        issued_at: datetime,
        actor_name: Optional[str] = None,
    ) -> Command:
        return Command(
            command_id=command_id,
            command_type=INVENTORY_ITEM_REGISTER_REQUEST,
            actor_type=actor_type,
            actor_id=actor_id,
            actor_name=actor_name,
            payload=self.to_payload(),
            issued_at=issued_at,
            correlation_id=correlation_id,
            source_engine="inventory",
        )


@dataclass(frozen=True)
class ItemImportRequest:
    """Bulk import. All rows are added or none are."""
    items: tuple

    def __post_init__(self):
        if not isinstance(self.items, tuple) or len(self.items) == 0:
            raise ValueError("items must be non-empty tuple.")
        for item in self.items:
            if not isinstance(item, ItemRegisterRequest):
                raise ValueError("items must contain ItemRegisterRequest items.")
        ids = [i.item_id for i in self.items]
        if len(ids) != len(set(ids)):
            raise ValueError("items must not repeat an item_id.")

    def to_command(
        self,
        *,
        actor_type: str,
        actor_id: str,
        command_id: uuid.UUID,
        correlation_id: uuid.UUID,
        issued_at: datetime,
        actor_name: Optional[str] = None,
    ) -> Command:
        return Command(
            command_id=command_id,
            command_type=INVENTORY_ITEM_IMPORT_REQUEST,
            actor_type=actor_type,
            actor_id=actor_id,
            actor_name=actor_name,
            payload={"items": [i.to_payload() for i in self.items]},
            issued_at=issued_at,
            correlation_id=correlation_id,
            source_engine="inventory",
        )


@dataclass(frozen=True)
class ItemUpdateRequest:
    item_id: str
    changes: dict

    def __post_init__(self):
        if not self.item_id:
            raise ValueError("item_id must be non-empty.")
        if not isinstance(self.changes, dict) or not self.changes:
            raise ValueError("changes must be a non-empty dict.")
        unknown = set(self.changes) - UPDATABLE_ITEM_FIELDS
        if unknown:
            raise ValueError(f"Fields not updatable: {sorted(unknown)}")
        for key in INT_FIELDS & set(self.changes):
            if not _is_int(self.changes[key]):
                raise ValueError(f"{key} must be integer.")
        if self.changes.get("price", 0) < 0 or self.changes.get("min_stock", 0) < 0:
            raise ValueError("price and min_stock must be non-negative.")
        if "name" in self.changes and not self.changes["name"]:
            raise ValueError("name must be non-empty.")

    def to_command(
        self,
        *,
        actor_type: str,
        actor_id: str,
        command_id: uuid.UUID,
        correlation_id: uuid.UUID,
        issued_at: datetime,
        actor_name: Optional[str] = None,
    ) -> Command:
        return Command(
            command_id=command_id,
            command_type=INVENTORY_ITEM_UPDATE_REQUEST,
            actor_type=actor_type,
            actor_id=actor_id,
            actor_name=actor_name,
            payload={"item_id": self.item_id, "changes": dict(self.changes)},
            issued_at=issued_at,
            correlation_id=correlation_id,
            source_engine="inventory",
        )
