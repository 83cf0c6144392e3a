"""
POS Procurement Engine — Request Commands
============================================
Typed purchase-order requests that convert into canonical Command
objects.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from core.commands.base import Command
from core.primitives.document import PurchaseOrderStatus, compute_po_totals


# ══════════════════════════════════════════════════════════════
# COMMAND TYPE CONSTANTS
# ══════════════════════════════════════════════════════════════

PROCUREMENT_ORDER_CREATE_REQUEST = "procurement.order.create.request"
PROCUREMENT_ORDER_SET_STATUS_REQUEST = "procurement.order.set_status.request"

PROCUREMENT_COMMAND_TYPES = frozenset({
    PROCUREMENT_ORDER_CREATE_REQUEST,
    PROCUREMENT_ORDER_SET_STATUS_REQUEST,
})

INITIAL_ORDER_STATUSES = frozenset({
    PurchaseOrderStatus.DRAFT.value,
    PurchaseOrderStatus.SENT.value,
})
VALID_ORDER_STATUSES = frozenset(s.value for s in PurchaseOrderStatus)


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _normalize_order_item(item: dict) -> dict:
    if not isinstance(item, dict):
        raise ValueError("each order item must be a dict.")
    item_id = item.get("inventory_item_id")
    qty = item.get("qty")
    unit_cost = item.get("unit_cost")
    if not item_id:
        raise ValueError("inventory_item_id must be non-empty.")
    if not _is_int(qty) or qty <= 0:
        raise ValueError(f"qty for '{item_id}' must be positive integer.")
    if not _is_int(unit_cost) or unit_cost < 0:
        raise ValueError(f"unit_cost for '{item_id}' must be non-negative integer.")
    return {
        "inventory_item_id": item_id,
        "item_name": item.get("item_name", ""),
        "qty": qty,
        "unit_cost": unit_cost,
    }


def _normalize_received_item(item: dict) -> dict:
    if not isinstance(item, dict):
        raise ValueError("each received item must be a dict.")
    item_id = item.get("item_id")
    qty = item.get("qty")
    if not item_id:
        raise ValueError("received item_id must be non-empty.")
    if not _is_int(qty) or qty <= 0:
        raise ValueError(f"received qty for '{item_id}' must be positive integer.")
    return {"item_id": item_id, "qty": qty}


def _require_distinct(ids, label: str) -> None:
    if len(ids) != len(set(ids)):
        raise ValueError(f"{label} must not repeat an item.")


# ══════════════════════════════════════════════════════════════
# REQUEST COMMANDS
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class OrderCreateRequest:
    """Create a purchase order in DRAFT or SENT."""
    po_id: str
    wholesaler_id: str
    items: tuple
    status: str = "DRAFT"
    po_number: Optional[str] = None
    shipping: int = 0
    discount: int = 0
    expected_delivery_date: Optional[str] = None
    notes: str = ""

    def __post_init__(self):
        if not self.po_id:
            raise ValueError("po_id must be non-empty.")
        if not self.wholesaler_id:
            raise ValueError("wholesaler_id must be non-empty.")
        if not isinstance(self.items, tuple) or len(self.items) == 0:
            raise ValueError("items must be non-empty tuple.")
        normalized = tuple(_normalize_order_item(item) for item in self.items)
        _require_distinct([i["inventory_item_id"] for i in normalized], "items")
        if self.status not in INITIAL_ORDER_STATUSES:
            raise ValueError(
                f"status '{self.status}' not valid at creation. "
                f"Must be one of: {sorted(INITIAL_ORDER_STATUSES)}"
            )
        if not _is_int(self.shipping) or self.shipping < 0:
            raise ValueError("shipping must be non-negative integer.")
        if not _is_int(self.discount) or self.discount < 0:
            raise ValueError("discount must be non-negative integer.")
        totals = compute_po_totals(
            [(i["qty"], i["unit_cost"]) for i in normalized],
            self.shipping,
            self.discount,
        )
        if totals["total_cost"] < 0:
            raise ValueError("discount cannot exceed subtotal + tax + shipping.")
        if self.expected_delivery_date is not None:
            datetime.fromisoformat(self.expected_delivery_date)
        object.__setattr__(self, "items", normalized)

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
            command_type=PROCUREMENT_ORDER_CREATE_REQUEST,
            actor_type=actor_type,
            actor_id=actor_id,
            actor_name=actor_name,
            payload={
                "po_id": self.po_id,
                "wholesaler_id": self.wholesaler_id,
                "items": [dict(item) for item in self.items],
                "status": self.status,
                "po_number": self.po_number,
                "shipping": self.shipping,
                "discount": self.discount,
                "expected_delivery_date": self.expected_delivery_date,
                "notes": self.notes,
            },
            issued_at=issued_at,
            correlation_id=correlation_id,
            source_engine="procurement",
        )


@dataclass(frozen=True)
class OrderStatusUpdateRequest:
    """
    Move a purchase order along its lifecycle.

    With received_items ({item_id, qty} dicts) this records a partial
    receipt and the order becomes PARTIALLY_RECEIVED whatever status
    was requested. Without it, RECEIVED force-completes every line.
    Unknown statuses reach the dispatcher and are rejected there.
    """
    po_id: str
    status: str
    received_items: Optional[tuple] = None

    def __post_init__(self):
        if not self.po_id:
            raise ValueError("po_id must be non-empty.")
        if self.received_items is not None:
            if not isinstance(self.received_items, tuple) or len(self.received_items) == 0:
                raise ValueError("received_items must be non-empty tuple when given.")
            normalized = tuple(_normalize_received_item(i) for i in self.received_items)
            _require_distinct([i["item_id"] for i in normalized], "received_items")
            object.__setattr__(self, "received_items", normalized)

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
        received = (
            [dict(item) for item in self.received_items]
            if self.received_items is not None else None
        )
        return Command(
            command_id=command_id,
            command_type=PROCUREMENT_ORDER_SET_STATUS_REQUEST,
            actor_type=actor_type,
            actor_id=actor_id,
            actor_name=actor_name,
            payload={
                "po_id": self.po_id,
                "status": self.status,
                "received_items": received,
            },
            issued_at=issued_at,
            correlation_id=correlation_id,
            source_engine="procurement",
        )
