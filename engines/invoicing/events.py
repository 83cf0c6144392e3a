"""
POS Invoicing Engine — Event Types and Payload Builders
==========================================================
Engine: Invoicing (Credit Ledger)

Invoicing owns: sale recording → payment proof → approval / rejection
→ reversal. Every accepted command publishes one change event carrying
the balance and stock effects it applied.
"""

from __future__ import annotations

from core.commands.base import Command


# ══════════════════════════════════════════════════════════════
# EVENT TYPE CONSTANTS
# ══════════════════════════════════════════════════════════════

INVOICING_INVOICE_CREATED_V1 = "invoicing.invoice.created.v1"
INVOICING_INVOICE_STATUS_CHANGED_V1 = "invoicing.invoice.status_changed.v1"

INVOICING_EVENT_TYPES = (
    INVOICING_INVOICE_CREATED_V1,
    INVOICING_INVOICE_STATUS_CHANGED_V1,
)


# ══════════════════════════════════════════════════════════════
# COMMAND → EVENT MAPPING
# ══════════════════════════════════════════════════════════════

COMMAND_TO_EVENT_TYPE = {
    "invoicing.invoice.create.request": INVOICING_INVOICE_CREATED_V1,
    "invoicing.invoice.set_status.request": INVOICING_INVOICE_STATUS_CHANGED_V1,
}


def resolve_invoicing_event_type(command_type: str) -> str | None:
    return COMMAND_TO_EVENT_TYPE.get(command_type)


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


def build_invoice_created_payload(
    command: Command,
    *,
    balance_delta: int,
    stock_changes: dict,
) -> dict:
    payload = _base_payload(command)
    payload.update({
        "invoice_id": command.payload["invoice_id"],
        "customer_id": command.payload["customer_id"],
        "total_amount": command.payload["total_amount"],
        "status": command.payload["status"],
        "balance_delta": balance_delta,
        "stock_changes": stock_changes,
        "created_at": command.issued_at.isoformat(),
    })
    return payload


def build_invoice_status_changed_payload(
    command: Command,
    *,
    customer_id: str,
    previous_status: str,
    balance_delta: int,
) -> dict:
    payload = _base_payload(command)
    payload.update({
        "invoice_id": command.payload["invoice_id"],
        "customer_id": customer_id,
        "previous_status": previous_status,
        "status": command.payload["status"],
        "proof_attached": command.payload.get("proof_of_payment") is not None,
        "balance_delta": balance_delta,
        "changed_at": command.issued_at.isoformat(),
    })
    return payload
