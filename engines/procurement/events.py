"""
POS Procurement Engine — Event Types and Payload Builders
===========================================================
Engine: Procurement (Purchase-Order Receiving)

Procurement owns: PO creation → sending → partial receipts →
completion or cancellation. Receipts and completion carry the stock
deltas they applied, so subscribers can follow inventory without
re-reading the store.
"""

from __future__ import annotations

from core.commands.base import Command


# ══════════════════════════════════════════════════════════════
# EVENT TYPE CONSTANTS
# ══════════════════════════════════════════════════════════════

PROCUREMENT_ORDER_CREATED_V1 = "procurement.order.created.v1"
PROCUREMENT_ORDER_STATUS_CHANGED_V1 = "procurement.order.status_changed.v1"
PROCUREMENT_ORDER_PARTIALLY_RECEIVED_V1 = "procurement.order.partially_received.v1"
PROCUREMENT_ORDER_RECEIVED_V1 = "procurement.order.received.v1"
PROCUREMENT_ORDER_CANCELLED_V1 = "procurement.order.cancelled.v1"

PROCUREMENT_EVENT_TYPES = (
    PROCUREMENT_ORDER_CREATED_V1,
    PROCUREMENT_ORDER_STATUS_CHANGED_V1,
    PROCUREMENT_ORDER_PARTIALLY_RECEIVED_V1,
    PROCUREMENT_ORDER_RECEIVED_V1,
    PROCUREMENT_ORDER_CANCELLED_V1,
)


# ══════════════════════════════════════════════════════════════
# COMMAND / OUTCOME → EVENT MAPPING
# ══════════════════════════════════════════════════════════════

STATUS_TO_EVENT_TYPE = {
    "PARTIALLY_RECEIVED": PROCUREMENT_ORDER_PARTIALLY_RECEIVED_V1,
    "RECEIVED": PROCUREMENT_ORDER_RECEIVED_V1,
    "CANCELLED": PROCUREMENT_ORDER_CANCELLED_V1,
}


def resolve_procurement_event_type(command_type: str, new_status: str | None = None) -> str | None:
    if command_type == "procurement.order.create.request":
        return PROCUREMENT_ORDER_CREATED_V1
    if command_type == "procurement.order.set_status.request":
        return STATUS_TO_EVENT_TYPE.get(new_status, PROCUREMENT_ORDER_STATUS_CHANGED_V1)
    return None


# ══════════════════════════════════════════════════════════════
# PAYLOAD BUILDERS
# ══════════════════════════════════════════════════════════════

def _base_payload(command: Command) -> dict:
    return {
        "actor_id": command.actor_id,
        "actor_type": command.actor_type,
        "correlation_id": str(command.correlation_id),
        "command_id": str(command.command_id),
    }


def build_order_created_payload(command: Command, order) -> dict:
    payload = _base_payload(command)
    payload.update({
        "po_id": order.po_id,
        "po_number": order.po_number,
        "wholesaler_id": order.wholesaler_id,
        "status": order.status.value,
        "subtotal": order.subtotal,
        "tax": order.tax,
        "total_cost": order.total_cost,
        "created_at": command.issued_at.isoformat(),
    })
    return payload


def build_order_status_changed_payload(
    command: Command,
    *,
    previous_status: str,
    new_status: str,
    stock_changes: dict,
) -> dict:
    payload = _base_payload(command)
    payload.update({
        "po_id": command.payload["po_id"],
        "previous_status": previous_status,
        "status": new_status,
        "requested_status": command.payload["status"],
        "stock_changes": stock_changes,
        "changed_at": command.issued_at.isoformat(),
    })
    return payload
