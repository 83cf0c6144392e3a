"""
POS Invoicing Engine — Ledger Rules
======================================
Pure state-transition functions for the credit ledger. No store access,
no clock, no logging: records in, records out.

Balance rules (reversal-enabled edition):
- Creation increases the customer's balance by total_amount, whatever
  the initial status. A cash sale created PAID still adds to the
  balance; the shop settles it with a follow-up status change if it
  wants the account flat.
- Entering PAID from a non-PAID status subtracts total_amount once.
- Leaving PAID for a non-PAID status adds total_amount back.
- Walk-in sales never touch a balance.

Stock rule: creation subtracts each line's qty from its item with no
floor. Status changes never touch stock.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Dict, Iterable, List, Mapping

from core.primitives.document import Invoice, InvoiceLine, InvoiceStatus
from core.primitives.item import InventoryItem
from core.primitives.party import User

PAID = InvoiceStatus.PAID
UNPAID = InvoiceStatus.UNPAID
PENDING_APPROVAL = InvoiceStatus.PENDING_APPROVAL

# UNPAID ⇄ PENDING_APPROVAL → PAID, UNPAID → PAID, PAID → UNPAID (reversal)
ALLOWED_TRANSITIONS: Dict[InvoiceStatus, frozenset] = {
    UNPAID: frozenset({PENDING_APPROVAL, PAID}),
    PENDING_APPROVAL: frozenset({PAID, UNPAID}),
    PAID: frozenset({UNPAID}),
}


def is_transition_allowed(current: InvoiceStatus, target: InvoiceStatus) -> bool:
    """Same-status requests are always allowed (they are no-ops)."""
    if current == target:
        return True
    return target in ALLOWED_TRANSITIONS[current]


def balance_delta_on_create(invoice: Invoice) -> int:
    if invoice.is_walk_in:
        return 0
    return invoice.total_amount


def balance_delta_on_status_change(
    invoice: Invoice, target: InvoiceStatus
) -> int:
    if invoice.is_walk_in or invoice.status == target:
        return 0
    if target == PAID:
        return -invoice.total_amount
    if invoice.status == PAID:
        return invoice.total_amount
    return 0


def apply_balance(customer: User, delta: int) -> User:
    if delta == 0:
        return customer
    return replace(customer, current_balance=customer.current_balance + delta)


def stock_decrements(lines: Iterable[InvoiceLine]) -> Dict[str, int]:
    """Units to remove per item id (repeated items are summed)."""
    totals: Dict[str, int] = {}
    for line in lines:
        totals[line.item_id] = totals.get(line.item_id, 0) + line.qty
    return totals


def apply_stock_decrements(
    items: Mapping[str, InventoryItem], lines: Iterable[InvoiceLine]
) -> List[InventoryItem]:
    """
    Updated records for every item named by the lines.

    Items missing from `items` are skipped; callers reject such
    invoices before reaching here.
    """
    updated = []
    for item_id, qty in stock_decrements(lines).items():
        item = items.get(item_id)
        if item is None:
            continue
        updated.append(replace(item, qty=item.qty - qty))
    return updated


def change_status(invoice: Invoice, target: InvoiceStatus, proof=None) -> Invoice:
    """New invoice record; proof is replaced only when supplied."""
    return replace(
        invoice,
        status=target,
        proof_of_payment=proof if proof is not None else invoice.proof_of_payment,
    )


def expected_customer_balance(invoices: Iterable[Invoice]) -> int:
    """
    Balance a customer must carry given their invoices, when no
    administrative override has been applied.

    Every non-PAID invoice counts once. Every invoice created PAID
    counts once more, since its creation increment was never matched
    by a transition into PAID.
    """
    total = 0
    for invoice in invoices:
        if invoice.is_walk_in:
            continue
        if invoice.status != PAID:
            total += invoice.total_amount
        if invoice.initial_status == PAID:
            total += invoice.total_amount
    return total
