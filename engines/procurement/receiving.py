"""
POS Procurement Engine — Receiving State Machine
===================================================
Pure functions for the purchase-order lifecycle. No store access, no
clock: records and timestamps in, records out.

    DRAFT ──► SENT ──► PARTIALLY_RECEIVED ⟲ ──► RECEIVED
      │         │               │
      └─────────┴───────────────┴──────────► CANCELLED

- PARTIALLY_RECEIVED is reached only through a receipt (received
  items supplied) from SENT or PARTIALLY_RECEIVED.
- RECEIVED force-delivers every outstanding unit.
- RECEIVED and CANCELLED are closed: nothing moves out of them.
- DRAFT and CANCELLED never touch inventory.

Stock conservation: across all receipts plus the final completion an
order adds exactly Σ item.qty units to inventory, because every unit
moves from "outstanding" to "received" exactly once.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Dict, List, Mapping, Optional, Tuple

from core.primitives.document import (
    POItem,
    POTimelineEvent,
    PurchaseOrder,
    PurchaseOrderStatus,
)
from core.primitives.item import InventoryItem

DRAFT = PurchaseOrderStatus.DRAFT
SENT = PurchaseOrderStatus.SENT
PARTIALLY_RECEIVED = PurchaseOrderStatus.PARTIALLY_RECEIVED
RECEIVED = PurchaseOrderStatus.RECEIVED
CANCELLED = PurchaseOrderStatus.CANCELLED

# Transitions reachable without a receipt.
ALLOWED_TRANSITIONS: Dict[PurchaseOrderStatus, frozenset] = {
    DRAFT: frozenset({SENT, CANCELLED}),
    SENT: frozenset({RECEIVED, CANCELLED}),
    PARTIALLY_RECEIVED: frozenset({RECEIVED, CANCELLED}),
    RECEIVED: frozenset(),
    CANCELLED: frozenset(),
}

RECEIVABLE_STATUSES = frozenset({SENT, PARTIALLY_RECEIVED})

CREATED_NOTE = "PO Created"


# ══════════════════════════════════════════════════════════════
# CLASSIFICATION
# ══════════════════════════════════════════════════════════════

def is_noop(
    order: PurchaseOrder,
    target: PurchaseOrderStatus,
    received_items: Optional[list],
) -> bool:
    """Same status with no receipt: nothing happens, not even a timeline entry."""
    return order.status == target and not received_items


def can_transition(current: PurchaseOrderStatus, target: PurchaseOrderStatus) -> bool:
    return target in ALLOWED_TRANSITIONS[current]


def can_receive(current: PurchaseOrderStatus) -> bool:
    return current in RECEIVABLE_STATUSES


def over_receipts(
    order: PurchaseOrder, received: Mapping[str, int]
) -> List[Tuple[str, int, int]]:
    """(item_id, requested, remaining) for every line a receipt would overfill."""
    problems = []
    for item_id, qty in received.items():
        line = order.get_item(item_id)
        if line is not None and qty > line.remaining_qty:
            problems.append((item_id, qty, line.remaining_qty))
    return problems


# ══════════════════════════════════════════════════════════════
# TRANSITIONS
# ══════════════════════════════════════════════════════════════

def apply_receipt(
    order: PurchaseOrder, received: Mapping[str, int]
) -> Tuple[Tuple[POItem, ...], Dict[str, int]]:
    """
    Add received units to each named line.

    Returns the new item tuple and the per-item stock delta (the
    just-received quantities, not the cumulative ones).
    """
    deltas: Dict[str, int] = {}
    items = []
    for line in order.items:
        qty = received.get(line.inventory_item_id, 0)
        if qty:
            deltas[line.inventory_item_id] = qty
            line = replace(line, received_qty=line.received_qty + qty)
        items.append(line)
    return tuple(items), deltas


def complete_order(
    order: PurchaseOrder,
) -> Tuple[Tuple[POItem, ...], Dict[str, int]]:
    """
    Force-deliver every outstanding unit.

    Returns the fully received item tuple and the per-item shortfall
    added to stock (zero for lines already complete).
    """
    shortfalls = {line.inventory_item_id: line.remaining_qty for line in order.items}
    items = tuple(replace(line, received_qty=line.qty) for line in order.items)
    return items, shortfalls


def apply_stock_receipt(
    item: InventoryItem,
    line: POItem,
    order: PurchaseOrder,
    qty_added: int,
    received_at: datetime,
) -> InventoryItem:
    """Increase stock and overwrite the cost basis from this order line."""
    return replace(
        item,
        qty=item.qty + qty_added,
        last_purchase_price=line.unit_cost,
        last_supplier_id=order.wholesaler_id,
        last_supplier_name=order.wholesaler_name,
        last_purchase_date=received_at,
    )


# ══════════════════════════════════════════════════════════════
# TIMELINE
# ══════════════════════════════════════════════════════════════

def transition_note(
    previous: PurchaseOrderStatus,
    current: PurchaseOrderStatus,
    received: Optional[Mapping[str, int]] = None,
) -> str:
    note = f"Status changed from {previous.value} to {current.value}"
    if received:
        units = sum(received.values())
        note += f" ({units} unit(s) received)"
    return note


def append_timeline(
    order: PurchaseOrder,
    *,
    status: PurchaseOrderStatus,
    note: str,
    user: str,
    at: datetime,
) -> Tuple[POTimelineEvent, ...]:
    return order.timeline + (
        POTimelineEvent(date=at, status=status, note=note, user=user),
    )
