"""
POS Procurement Engine — Policies
====================================
Purchase-order checks, evaluated in order before any write. A
same-status request without received items passes every policy and
is applied as a no-op.
"""

from __future__ import annotations

from typing import Optional

from core.commands.base import Command
from core.commands.rejection import ReasonCode, RejectionReason
from core.primitives.document import PurchaseOrderStatus
from engines.procurement.commands import (
    PROCUREMENT_ORDER_CREATE_REQUEST,
    PROCUREMENT_ORDER_SET_STATUS_REQUEST,
    VALID_ORDER_STATUSES,
)
from engines.procurement.receiving import (
    PARTIALLY_RECEIVED,
    RECEIVED,
    can_receive,
    can_transition,
    is_noop,
    over_receipts,
)


def _received_map(command: Command) -> dict:
    received = command.payload.get("received_items") or []
    return {item["item_id"]: item["qty"] for item in received}


def _order_for(command: Command, store):
    if command.command_type != PROCUREMENT_ORDER_SET_STATUS_REQUEST:
        return None
    return store.get_order(command.payload["po_id"])


# ══════════════════════════════════════════════════════════════
# CREATE
# ══════════════════════════════════════════════════════════════

def order_id_must_be_unique_policy(
    command: Command, store,
) -> Optional[RejectionReason]:
    if command.command_type != PROCUREMENT_ORDER_CREATE_REQUEST:
        return None

    po_id = command.payload["po_id"]
    if store.get_order(po_id) is not None:
        return RejectionReason(
            code=ReasonCode.DUPLICATE_ID,
            message=f"Purchase order '{po_id}' already exists.",
            policy_name="order_id_must_be_unique_policy",
        )
    return None


def order_wholesaler_must_exist_policy(
    command: Command, store,
) -> Optional[RejectionReason]:
    if command.command_type != PROCUREMENT_ORDER_CREATE_REQUEST:
        return None

    wholesaler_id = command.payload["wholesaler_id"]
    if store.get_wholesaler(wholesaler_id) is None:
        return RejectionReason(
            code=ReasonCode.WHOLESALER_NOT_FOUND,
            message=f"Wholesaler '{wholesaler_id}' not found.",
            policy_name="order_wholesaler_must_exist_policy",
        )
    return None


def order_items_must_exist_policy(
    command: Command, store,
) -> Optional[RejectionReason]:
    if command.command_type != PROCUREMENT_ORDER_CREATE_REQUEST:
        return None

    missing = [
        item["inventory_item_id"]
        for item in command.payload["items"]
        if store.get_item(item["inventory_item_id"]) is None
    ]
    if missing:
        return RejectionReason(
            code=ReasonCode.INVENTORY_ITEM_NOT_FOUND,
            message=f"Inventory item(s) not found: {', '.join(missing)}.",
            policy_name="order_items_must_exist_policy",
        )
    return None


# ══════════════════════════════════════════════════════════════
# STATUS / RECEIPT
# ══════════════════════════════════════════════════════════════

def order_must_exist_policy(
    command: Command, store,
) -> Optional[RejectionReason]:
    if command.command_type != PROCUREMENT_ORDER_SET_STATUS_REQUEST:
        return None

    po_id = command.payload["po_id"]
    if store.get_order(po_id) is None:
        return RejectionReason(
            code=ReasonCode.ORDER_NOT_FOUND,
            message=f"Purchase order '{po_id}' not found.",
            policy_name="order_must_exist_policy",
        )
    return None


def order_status_must_be_known_policy(
    command: Command, store,
) -> Optional[RejectionReason]:
    if command.command_type != PROCUREMENT_ORDER_SET_STATUS_REQUEST:
        return None

    status = command.payload["status"]
    if not isinstance(status, str) or status not in VALID_ORDER_STATUSES:
        return RejectionReason(
            code=ReasonCode.INVALID_TRANSITION,
            message=(
                f"'{status}' is not a purchase order status. "
                f"Use one of: {', '.join(sorted(VALID_ORDER_STATUSES))}."
            ),
            policy_name="order_status_must_be_known_policy",
        )
    return None


def order_must_be_open_policy(
    command: Command, store,
) -> Optional[RejectionReason]:
    order = _order_for(command, store)
    if order is None:
        return None

    target = PurchaseOrderStatus(command.payload["status"])
    if is_noop(order, target, command.payload.get("received_items")):
        return None

    if order.is_closed:
        return RejectionReason(
            code=ReasonCode.ORDER_CLOSED,
            message=(
                f"Purchase order '{order.po_id}' is {order.status.value} "
                f"and can no longer change."
            ),
            policy_name="order_must_be_open_policy",
        )
    return None


def order_transition_must_be_allowed_policy(
    command: Command, store,
) -> Optional[RejectionReason]:
    order = _order_for(command, store)
    if order is None:
        return None

    target = PurchaseOrderStatus(command.payload["status"])
    received = command.payload.get("received_items")
    if is_noop(order, target, received):
        return None

    if received:
        if can_receive(order.status):
            return None
        message = (
            f"Purchase order '{order.po_id}' is {order.status.value}; "
            f"goods can only be received once it is SENT."
        )
    elif target == PARTIALLY_RECEIVED:
        message = (
            f"Purchase order '{order.po_id}' can only become "
            f"PARTIALLY_RECEIVED through a receipt of items."
        )
    elif can_transition(order.status, target):
        return None
    else:
        message = (
            f"Purchase order '{order.po_id}' cannot move from "
            f"{order.status.value} to {target.value}."
        )

    return RejectionReason(
        code=ReasonCode.INVALID_TRANSITION,
        message=message,
        policy_name="order_transition_must_be_allowed_policy",
    )


def order_receipt_lines_must_exist_policy(
    command: Command, store,
) -> Optional[RejectionReason]:
    """
    Every received item must be a line of the order, and every
    inventory item that will gain stock must still exist.
    """
    order = _order_for(command, store)
    if order is None:
        return None

    received = _received_map(command)
    target = PurchaseOrderStatus(command.payload["status"])

    if received:
        unknown = [item_id for item_id in received if order.get_item(item_id) is None]
        if unknown:
            return RejectionReason(
                code=ReasonCode.ORDER_LINE_NOT_FOUND,
                message=(
                    f"Purchase order '{order.po_id}' has no line for: "
                    f"{', '.join(unknown)}."
                ),
                policy_name="order_receipt_lines_must_exist_policy",
            )
        affected = list(received)
    elif target == RECEIVED and order.status != RECEIVED:
        affected = [line.inventory_item_id for line in order.items]
    else:
        return None

    missing = [item_id for item_id in affected if store.get_item(item_id) is None]
    if missing:
        return RejectionReason(
            code=ReasonCode.INVENTORY_ITEM_NOT_FOUND,
            message=f"Inventory item(s) not found: {', '.join(missing)}.",
            policy_name="order_receipt_lines_must_exist_policy",
        )
    return None


def order_receipt_must_not_exceed_ordered_policy(
    command: Command, store,
) -> Optional[RejectionReason]:
    order = _order_for(command, store)
    if order is None:
        return None

    problems = over_receipts(order, _received_map(command))
    if problems:
        detail = ", ".join(
            f"{item_id} ({qty} > {remaining} remaining)"
            for item_id, qty, remaining in problems
        )
        return RejectionReason(
            code=ReasonCode.OVER_RECEIPT,
            message=f"Receipt exceeds ordered quantity: {detail}.",
            policy_name="order_receipt_must_not_exceed_ordered_policy",
        )
    return None


PROCUREMENT_POLICIES = (
    order_id_must_be_unique_policy,
    order_wholesaler_must_exist_policy,
    order_items_must_exist_policy,
    order_must_exist_policy,
    order_status_must_be_known_policy,
    order_must_be_open_policy,
    order_transition_must_be_allowed_policy,
    order_receipt_lines_must_exist_policy,
    order_receipt_must_not_exceed_ordered_policy,
)
