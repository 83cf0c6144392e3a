"""
POS Invoicing Engine — Policies
==================================
Store-dependent checks, all evaluated before anything is written.
Each policy ignores command types it does not govern.
"""

from __future__ import annotations

from typing import Optional

from core.commands.base import Command
from core.commands.rejection import ReasonCode, RejectionReason
from core.primitives.document import WALK_IN_CUSTOMER_ID, InvoiceStatus
from engines.invoicing.commands import (
    INVOICING_INVOICE_CREATE_REQUEST,
    INVOICING_INVOICE_SET_STATUS_REQUEST,
    VALID_INVOICE_STATUSES,
)
from engines.invoicing.ledger import is_transition_allowed


def invoice_id_must_be_unique_policy(
    command: Command, store,
) -> Optional[RejectionReason]:
    if command.command_type != INVOICING_INVOICE_CREATE_REQUEST:
        return None

    invoice_id = command.payload["invoice_id"]
    if store.get_invoice(invoice_id) is not None:
        return RejectionReason(
            code=ReasonCode.DUPLICATE_ID,
            message=f"Invoice '{invoice_id}' already exists.",
            policy_name="invoice_id_must_be_unique_policy",
        )
    return None


def invoice_customer_must_exist_policy(
    command: Command, store,
) -> Optional[RejectionReason]:
    """Walk-in sales need no account; every other customer must exist."""
    if command.command_type != INVOICING_INVOICE_CREATE_REQUEST:
        return None

    customer_id = command.payload["customer_id"]
    if customer_id == WALK_IN_CUSTOMER_ID:
        return None

    if store.get_user(customer_id) is None:
        return RejectionReason(
            code=ReasonCode.CUSTOMER_NOT_FOUND,
            message=f"Customer '{customer_id}' not found.",
            policy_name="invoice_customer_must_exist_policy",
        )
    return None


def invoice_items_must_exist_policy(
    command: Command, store,
) -> Optional[RejectionReason]:
    if command.command_type != INVOICING_INVOICE_CREATE_REQUEST:
        return None

    missing = [
        line["item_id"]
        for line in command.payload["lines"]
        if store.get_item(line["item_id"]) is None
    ]
    if missing:
        return RejectionReason(
            code=ReasonCode.INVENTORY_ITEM_NOT_FOUND,
            message=f"Inventory item(s) not found: {', '.join(sorted(set(missing)))}.",
            policy_name="invoice_items_must_exist_policy",
        )
    return None


def invoice_must_exist_policy(
    command: Command, store,
) -> Optional[RejectionReason]:
    if command.command_type != INVOICING_INVOICE_SET_STATUS_REQUEST:
        return None

    invoice_id = command.payload["invoice_id"]
    invoice = store.get_invoice(invoice_id)
    if invoice is None:
        return RejectionReason(
            code=ReasonCode.INVOICE_NOT_FOUND,
            message=f"Invoice '{invoice_id}' not found.",
            policy_name="invoice_must_exist_policy",
        )

    if not invoice.is_walk_in and store.get_user(invoice.customer_id) is None:
        return RejectionReason(
            code=ReasonCode.CUSTOMER_NOT_FOUND,
            message=(
                f"Customer '{invoice.customer_id}' of invoice "
                f"'{invoice_id}' not found."
            ),
            policy_name="invoice_must_exist_policy",
        )
    return None


def invoice_status_must_be_known_policy(
    command: Command, store,
) -> Optional[RejectionReason]:
    if command.command_type != INVOICING_INVOICE_SET_STATUS_REQUEST:
        return None

    status = command.payload["status"]
    if not isinstance(status, str) or status not in VALID_INVOICE_STATUSES:
        return RejectionReason(
            code=ReasonCode.INVALID_TRANSITION,
            message=(
                f"'{status}' is not an invoice status. "
                f"Use one of: {', '.join(sorted(VALID_INVOICE_STATUSES))}."
            ),
            policy_name="invoice_status_must_be_known_policy",
        )
    return None


def invoice_transition_must_be_allowed_policy(
    command: Command, store,
) -> Optional[RejectionReason]:
    if command.command_type != INVOICING_INVOICE_SET_STATUS_REQUEST:
        return None

    invoice = store.get_invoice(command.payload["invoice_id"])
    if invoice is None:
        return None

    target = InvoiceStatus(command.payload["status"])
    if not is_transition_allowed(invoice.status, target):
        return RejectionReason(
            code=ReasonCode.INVALID_TRANSITION,
            message=(
                f"Invoice '{invoice.invoice_id}' cannot move from "
                f"{invoice.status.value} to {target.value}."
            ),
            policy_name="invoice_transition_must_be_allowed_policy",
        )
    return None


INVOICING_POLICIES = (
    invoice_id_must_be_unique_policy,
    invoice_customer_must_exist_policy,
    invoice_items_must_exist_policy,
    invoice_must_exist_policy,
    invoice_status_must_be_known_policy,
    invoice_transition_must_be_allowed_policy,
)
