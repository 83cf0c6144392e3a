"""
POS Item Primitive — Inventory Item
=====================================
A stock-keeping unit with on-hand quantity, selling price and the
cost-basis metadata written by purchase-order receipts.

qty is NOT clamped: an invoice for more units than are on hand drives
it negative. Stock status is derived, never stored.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from core.primitives.values import dt_from_str, dt_to_str, require_minor_units

DEFAULT_MIN_STOCK = 5


class StockStatus(Enum):
    OUT_OF_STOCK = "OUT_OF_STOCK"
    LOW_STOCK = "LOW_STOCK"
    IN_STOCK = "IN_STOCK"


@dataclass(frozen=True)
class InventoryItem:
    """
    Fields:
        item_id:             Unique identifier.
        name:                Display name.
        qty:                 On-hand units (may be negative).
        price:               Selling price (minor units).
        sku:                 Optional stock-keeping code.
        min_stock:           Low-stock threshold.
        category, details:   Catalog metadata.
        last_purchase_price: Unit cost of the latest receipt.
        last_supplier_id:    Wholesaler of the latest receipt.
        last_supplier_name:  Name snapshot of that wholesaler.
        last_purchase_date:  When the latest receipt was recorded.
    """
    item_id: str
    name: str
    qty: int
    price: int
    sku: str = ""
    min_stock: int = DEFAULT_MIN_STOCK
    category: str = ""
    details: str = ""
    last_purchase_price: Optional[int] = None
    last_supplier_id: Optional[str] = None
    last_supplier_name: Optional[str] = None
    last_purchase_date: Optional[datetime] = None

    def __post_init__(self):
        if not self.item_id or not isinstance(self.item_id, str):
            raise ValueError("item_id must be non-empty string.")
        if not self.name or not isinstance(self.name, str):
            raise ValueError("name must be non-empty string.")
        if isinstance(self.qty, bool) or not isinstance(self.qty, int):
            raise ValueError("qty must be int.")
        require_minor_units(self.price, "price")
        if not isinstance(self.min_stock, int) or self.min_stock < 0:
            raise ValueError("min_stock must be non-negative int.")
        if self.last_purchase_price is not None:
            require_minor_units(self.last_purchase_price, "last_purchase_price")

    @property
    def stock_status(self) -> StockStatus:
        return derive_stock_status(self.qty, self.min_stock)

    @property
    def stock_value(self) -> int:
        """Retail value of on-hand units (zero when qty is negative)."""
        return max(self.qty, 0) * self.price

    def to_dict(self) -> dict:
        return {
            "item_id": self.item_id,
            "name": self.name,
            "qty": self.qty,
            "price": self.price,
            "sku": self.sku,
            "min_stock": self.min_stock,
            "category": self.category,
            "details": self.details,
            "last_purchase_price": self.last_purchase_price,
            "last_supplier_id": self.last_supplier_id,
            "last_supplier_name": self.last_supplier_name,
            "last_purchase_date": dt_to_str(self.last_purchase_date),
        }

    @classmethod
    def from_dict(cls, data: dict) -> InventoryItem:
        return cls(
            item_id=data["item_id"],
            name=data["name"],
            qty=data["qty"],
            price=data["price"],
            sku=data.get("sku", ""),
            min_stock=data.get("min_stock", DEFAULT_MIN_STOCK),
            category=data.get("category", ""),
            details=data.get("details", ""),
            last_purchase_price=data.get("last_purchase_price"),
            last_supplier_id=data.get("last_supplier_id"),
            last_supplier_name=data.get("last_supplier_name"),
            last_purchase_date=dt_from_str(data.get("last_purchase_date")),
        )


def derive_stock_status(qty: int, min_stock: int = DEFAULT_MIN_STOCK) -> StockStatus:
    """OUT_OF_STOCK if qty <= 0, LOW_STOCK if 0 < qty <= min_stock, else IN_STOCK."""
    if qty <= 0:
        return StockStatus.OUT_OF_STOCK
    if qty <= min_stock:
        return StockStatus.LOW_STOCK
    return StockStatus.IN_STOCK
