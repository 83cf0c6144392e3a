"""
POS Procurement Engine — Application Service
===============================================
Purchase-order lifecycle: create → send → receive (partially, then
fully) or cancel. Every accepted change appends one timeline entry and
commits the order, the affected inventory items and the event together.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Dict, Optional

from core.commands.base import Command
from core.events import ChangeEvent
from core.primitives.document import (
    POItem,
    PurchaseOrder,
    PurchaseOrderStatus,
    compute_po_totals,
)
from core.primitives.values import dt_from_str
from core.store import INVENTORY, PURCHASE_ORDERS, ChangeSet, EntityStore
from engines.procurement.commands import (
    PROCUREMENT_COMMAND_TYPES,
    PROCUREMENT_ORDER_CREATE_REQUEST,
    PROCUREMENT_ORDER_SET_STATUS_REQUEST,
)
from engines.procurement.events import (
    build_order_created_payload,
    build_order_status_changed_payload,
    resolve_procurement_event_type,
)
from engines.procurement.policies import PROCUREMENT_POLICIES
from engines.procurement.receiving import (
    CREATED_NOTE,
    PARTIALLY_RECEIVED,
    RECEIVED,
    append_timeline,
    apply_receipt,
    apply_stock_receipt,
    complete_order,
    is_noop,
    transition_note,
)

logger = logging.getLogger("pos.procurement")

PO_NUMBER_PREFIX = "PO-"


# ══════════════════════════════════════════════════════════════
# EXECUTION RESULT
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ProcurementExecutionResult:
    event_type: Optional[str]
    payload: dict
    order: PurchaseOrder
    stock_changes: Dict[str, int]
    noop: bool = False


# ══════════════════════════════════════════════════════════════
# COMMAND HANDLER
# ══════════════════════════════════════════════════════════════

class _ProcurementCommandHandler:
    def __init__(self, service: "ProcurementService"):
        self._service = service

    def execute(self, command: Command) -> ProcurementExecutionResult:
        return self._service._execute_command(command)


# ══════════════════════════════════════════════════════════════
# APPLICATION SERVICE
# ══════════════════════════════════════════════════════════════

class ProcurementService:
    """Procurement Engine application service — purchase-order receiving."""

    def __init__(self, *, store: EntityStore, command_bus):
        self._store = store
        self._command_bus = command_bus
        self._register_policies()
        self._register_handlers()

    def _register_policies(self) -> None:
        for policy in PROCUREMENT_POLICIES:
            self._command_bus.dispatcher.register_policy(policy)

    def _register_handlers(self) -> None:
        handler = _ProcurementCommandHandler(self)
        for command_type in sorted(PROCUREMENT_COMMAND_TYPES):
            self._command_bus.register_handler(command_type, handler)

    def _execute_command(self, command: Command) -> ProcurementExecutionResult:
        if command.command_type == PROCUREMENT_ORDER_CREATE_REQUEST:
            return self._create_order(command)
        if command.command_type == PROCUREMENT_ORDER_SET_STATUS_REQUEST:
            return self._set_status(command)
        raise ValueError(
            f"Unsupported procurement command type: {command.command_type}"
        )

    # ── create ────────────────────────────────────────────────

    def next_po_number(self) -> str:
        taken = {o.po_number for o in self._store.all(PURCHASE_ORDERS)}
        n = len(taken) + 1
        while f"{PO_NUMBER_PREFIX}{n:06d}" in taken:
            n += 1
        return f"{PO_NUMBER_PREFIX}{n:06d}"

    def _create_order(self, command: Command) -> ProcurementExecutionResult:
        data = command.payload
        wholesaler = self._store.get_wholesaler(data["wholesaler_id"])
        items = tuple(
            POItem(
                inventory_item_id=item["inventory_item_id"],
                item_name=item["item_name"]
                or self._store.get_item(item["inventory_item_id"]).name,
                qty=item["qty"],
                unit_cost=item["unit_cost"],
            )
            for item in data["items"]
        )
        totals = compute_po_totals(
            [(i.qty, i.unit_cost) for i in items],
            data["shipping"],
            data["discount"],
        )
        status = PurchaseOrderStatus(data["status"])

        draft = PurchaseOrder(
            po_id=data["po_id"],
            po_number=data.get("po_number") or self.next_po_number(),
            wholesaler_id=wholesaler.wholesaler_id,
            wholesaler_name=wholesaler.name,
            order_date=command.issued_at,
            status=status,
            items=items,
            expected_delivery_date=dt_from_str(data.get("expected_delivery_date")),
            notes=data.get("notes", ""),
            **totals,
        )
        order = replace(
            draft,
            timeline=append_timeline(
                draft,
                status=status,
                note=CREATED_NOTE,
                user=command.actor_label,
                at=command.issued_at,
            ),
        )

        event_type = resolve_procurement_event_type(command.command_type)
        payload = build_order_created_payload(command, order)
        changes = ChangeSet().put(PURCHASE_ORDERS, order)
        self._commit(command, changes, event_type, payload)

        logger.info(
            f"Purchase order {order.po_number} ({order.po_id}) created "
            f"for {order.wholesaler_name}: total_cost={order.total_cost}"
        )
        return ProcurementExecutionResult(
            event_type=event_type,
            payload=payload,
            order=order,
            stock_changes={},
        )

    # ── status / receipt ──────────────────────────────────────

    def _set_status(self, command: Command) -> ProcurementExecutionResult:
        data = command.payload
        order = self._store.get_order(data["po_id"])
        target = PurchaseOrderStatus(data["status"])
        received_items = data.get("received_items")

        if is_noop(order, target, received_items):
            logger.info(f"Purchase order {order.po_id} already {target.value}; no change")
            return ProcurementExecutionResult(
                event_type=None,
                payload={},
                order=order,
                stock_changes={},
                noop=True,
            )

        at = command.issued_at
        received = None
        stock_changes: Dict[str, int] = {}
        items = order.items
        new_status = target
        changes = ChangeSet()

        if received_items:
            received = {item["item_id"]: item["qty"] for item in received_items}
            items, stock_changes = apply_receipt(order, received)
            new_status = PARTIALLY_RECEIVED
        elif target == RECEIVED:
            items, stock_changes = complete_order(order)

        updated = replace(order, status=new_status, items=items)

        # Cost basis follows every line that received goods; completion
        # refreshes it on all lines, even those with no shortfall.
        for line in updated.items:
            if line.inventory_item_id not in stock_changes:
                continue
            item = self._store.get_item(line.inventory_item_id)
            changes.put(
                INVENTORY,
                apply_stock_receipt(
                    item, line, updated, stock_changes[line.inventory_item_id], at,
                ),
            )

        updated = replace(
            updated,
            timeline=append_timeline(
                updated,
                status=new_status,
                note=transition_note(order.status, new_status, received),
                user=command.actor_label,
                at=at,
            ),
        )
        changes.put(PURCHASE_ORDERS, updated)

        event_type = resolve_procurement_event_type(
            command.command_type, new_status.value,
        )
        payload = build_order_status_changed_payload(
            command,
            previous_status=order.status.value,
            new_status=new_status.value,
            stock_changes=stock_changes,
        )
        self._commit(command, changes, event_type, payload)

        logger.info(
            f"Purchase order {order.po_id} {order.status.value} → "
            f"{new_status.value} (stock +{sum(stock_changes.values())})"
        )
        return ProcurementExecutionResult(
            event_type=event_type,
            payload=payload,
            order=updated,
            stock_changes=stock_changes,
        )

    def _commit(self, command, changes, event_type, payload) -> None:
        event = ChangeEvent.from_command(
            command,
            event_type=event_type,
            payload=payload,
            collections=changes.touched,
        )
        self._store.commit(changes, event)

    # ══════════════════════════════════════════════════════════
    # QUERIES
    # ══════════════════════════════════════════════════════════

    def orders_for_wholesaler(self, wholesaler_id: str) -> list:
        return self._store.find(
            PURCHASE_ORDERS, lambda o: o.wholesaler_id == wholesaler_id,
        )

    def open_orders(self) -> list:
        return self._store.find(PURCHASE_ORDERS, lambda o: not o.is_closed)
