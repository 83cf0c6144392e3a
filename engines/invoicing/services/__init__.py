"""
POS Invoicing Engine — Application Service
=============================================
Applies accepted invoice commands to the entity store.

Policies have already run when _execute_command is reached, so every
referenced record exists and the transition is legal. The service
builds the complete next state (invoice, customer, items) into one
ChangeSet and commits it once.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Optional

from core.commands.base import Command
from core.events import ChangeEvent
from core.primitives.document import (
    Invoice,
    InvoiceLine,
    InvoiceStatus,
    InvoiceType,
)
from core.store import INVENTORY, INVOICES, USERS, ChangeSet, EntityStore
from engines.invoicing.commands import (
    INVOICING_COMMAND_TYPES,
    INVOICING_INVOICE_CREATE_REQUEST,
    INVOICING_INVOICE_SET_STATUS_REQUEST,
)
from engines.invoicing.events import (
    build_invoice_created_payload,
    build_invoice_status_changed_payload,
    resolve_invoicing_event_type,
)
from engines.invoicing.ledger import (
    apply_balance,
    apply_stock_decrements,
    balance_delta_on_create,
    balance_delta_on_status_change,
    change_status,
)
from engines.invoicing.policies import INVOICING_POLICIES

logger = logging.getLogger("pos.invoicing")


# ══════════════════════════════════════════════════════════════
# EXECUTION RESULT
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class InvoicingExecutionResult:
    event_type: str
    payload: dict
    invoice: Invoice
    balance_delta: int
    noop: bool = False


# ══════════════════════════════════════════════════════════════
# COMMAND HANDLER
# ══════════════════════════════════════════════════════════════

class _InvoicingCommandHandler:
    def __init__(self, service: "InvoicingService"):
        self._service = service

    def execute(self, command: Command) -> InvoicingExecutionResult:
        return self._service._execute_command(command)


# ══════════════════════════════════════════════════════════════
# APPLICATION SERVICE
# ══════════════════════════════════════════════════════════════

class InvoicingService:
    """Invoice ledger: sale recording and payment status lifecycle."""

    def __init__(self, *, store: EntityStore, command_bus):
        self._store = store
        self._command_bus = command_bus
        self._register_policies()
        self._register_handlers()

    def _register_policies(self) -> None:
        for policy in INVOICING_POLICIES:
            self._command_bus.dispatcher.register_policy(policy)

    def _register_handlers(self) -> None:
        handler = _InvoicingCommandHandler(self)
        for command_type in sorted(INVOICING_COMMAND_TYPES):
            self._command_bus.register_handler(command_type, handler)

    def _execute_command(self, command: Command) -> InvoicingExecutionResult:
        event_type = resolve_invoicing_event_type(command.command_type)
        if event_type is None:
            raise ValueError(
                f"Unsupported invoicing command type: {command.command_type}"
            )

        if command.command_type == INVOICING_INVOICE_CREATE_REQUEST:
            return self._create_invoice(command, event_type)
        if command.command_type == INVOICING_INVOICE_SET_STATUS_REQUEST:
            return self._set_status(command, event_type)
        raise ValueError(f"No executor for: {command.command_type}")

    # ── create ────────────────────────────────────────────────

    def _create_invoice(
        self, command: Command, event_type: str
    ) -> InvoicingExecutionResult:
        data = command.payload
        invoice = Invoice(
            invoice_id=data["invoice_id"],
            customer_id=data["customer_id"],
            customer_name=data["customer_name"],
            date=command.issued_at,
            lines=tuple(InvoiceLine.from_dict(line) for line in data["lines"]),
            total_amount=data["total_amount"],
            status=InvoiceStatus(data["status"]),
            invoice_type=InvoiceType(data["invoice_type"]),
            notes=data.get("notes", ""),
            proof_of_payment=data.get("proof_of_payment"),
        )

        changes = ChangeSet().put(INVOICES, invoice)

        delta = balance_delta_on_create(invoice)
        if delta:
            customer = self._store.get_user(invoice.customer_id)
            changes.put(USERS, apply_balance(customer, delta))

        items = {
            line.item_id: self._store.get_item(line.item_id)
            for line in invoice.lines
        }
        stock_changes: Dict[str, int] = {}
        for item in apply_stock_decrements(items, invoice.lines):
            changes.put(INVENTORY, item)
            stock_changes[item.item_id] = item.qty - items[item.item_id].qty
            if item.qty < 0:
                logger.warning(
                    f"Item {item.item_id} stock is negative ({item.qty}) "
                    f"after invoice {invoice.invoice_id}"
                )

        payload = build_invoice_created_payload(
            command, balance_delta=delta, stock_changes=stock_changes,
        )
        self._commit(command, changes, event_type, payload)

        logger.info(
            f"Invoice {invoice.invoice_id} created for {invoice.customer_id} "
            f"({invoice.status.value}, total={invoice.total_amount}, "
            f"balance_delta={delta})"
        )
        return InvoicingExecutionResult(
            event_type=event_type,
            payload=payload,
            invoice=invoice,
            balance_delta=delta,
        )

    # ── status ────────────────────────────────────────────────

    def _set_status(
        self, command: Command, event_type: str
    ) -> InvoicingExecutionResult:
        data = command.payload
        invoice = self._store.get_invoice(data["invoice_id"])
        target = InvoiceStatus(data["status"])
        proof: Optional[str] = data.get("proof_of_payment")

        if invoice.status == target and (
            proof is None or proof == invoice.proof_of_payment
        ):
            logger.info(
                f"Invoice {invoice.invoice_id} already {target.value}; no change"
            )
            return InvoicingExecutionResult(
                event_type=event_type,
                payload={},
                invoice=invoice,
                balance_delta=0,
                noop=True,
            )

        delta = balance_delta_on_status_change(invoice, target)
        updated = change_status(invoice, target, proof)
        changes = ChangeSet().put(INVOICES, updated)
        if delta:
            customer = self._store.get_user(invoice.customer_id)
            changes.put(USERS, apply_balance(customer, delta))

        payload = build_invoice_status_changed_payload(
            command,
            customer_id=invoice.customer_id,
            previous_status=invoice.status.value,
            balance_delta=delta,
        )
        self._commit(command, changes, event_type, payload)

        logger.info(
            f"Invoice {invoice.invoice_id} {invoice.status.value} → "
            f"{target.value} (balance_delta={delta})"
        )
        return InvoicingExecutionResult(
            event_type=event_type,
            payload=payload,
            invoice=updated,
            balance_delta=delta,
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

    def invoices_for_customer(self, customer_id: str) -> list:
        return self._store.find(
            INVOICES, lambda inv: inv.customer_id == customer_id,
        )

    def outstanding_for_customer(self, customer_id: str) -> list:
        return [
            inv for inv in self.invoices_for_customer(customer_id)
            if inv.status != InvoiceStatus.PAID
        ]
