"""
POS Bootstrap — Ledger Invariant Checks
=========================================
Each function verifies one ledger law against the current store and
returns the violations it found.

These checks do NOT:
- Repair balances or quantities
- Mutate the store

Administrative balance overrides legitimately break the balance law;
callers that allow overrides pass `skip_customers`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List

from core.bootstrap.errors import LedgerInvariantError
from core.primitives.document import WALK_IN_CUSTOMER_ID
from core.store import INVOICES, PURCHASE_ORDERS, USERS, EntityStore
from engines.invoicing.ledger import expected_customer_balance

logger = logging.getLogger("pos.bootstrap")


@dataclass(frozen=True)
class InvariantViolation:
    invariant: str
    record_id: str
    detail: str


# ══════════════════════════════════════════════════════════════
# CHECK 1: Customer balance matches open invoices
# ══════════════════════════════════════════════════════════════

def check_customer_balances(
    store: EntityStore, skip_customers: Iterable[str] = (),
) -> List[InvariantViolation]:
    skipped = set(skip_customers)
    by_customer = {}
    for invoice in store.all(INVOICES):
        if invoice.customer_id != WALK_IN_CUSTOMER_ID:
            by_customer.setdefault(invoice.customer_id, []).append(invoice)

    violations = []
    for user in store.all(USERS):
        if user.user_id in skipped:
            continue
        expected = expected_customer_balance(by_customer.get(user.user_id, ()))
        if user.current_balance != expected:
            violations.append(InvariantViolation(
                invariant="CUSTOMER_BALANCE",
                record_id=user.user_id,
                detail=(
                    f"user {user.user_id} balance {user.current_balance} "
                    f"!= expected {expected}"
                ),
            ))
    return violations


# ══════════════════════════════════════════════════════════════
# CHECK 2: Receipt progress stays within ordered quantity
# ══════════════════════════════════════════════════════════════

def check_receipt_bounds(store: EntityStore) -> List[InvariantViolation]:
    violations = []
    for order in store.all(PURCHASE_ORDERS):
        for item in order.items:
            if not 0 <= item.received_qty <= item.qty:
                violations.append(InvariantViolation(
                    invariant="RECEIPT_BOUNDS",
                    record_id=order.po_id,
                    detail=(
                        f"order {order.po_id} line {item.inventory_item_id} "
                        f"received {item.received_qty} of {item.qty}"
                    ),
                ))
    return violations


def run_ledger_checks(
    store: EntityStore, skip_customers: Iterable[str] = (),
) -> None:
    """Run every check; raise LedgerInvariantError if any fails."""
    violations = check_customer_balances(store, skip_customers)
    violations.extend(check_receipt_bounds(store))
    if violations:
        for violation in violations:
            logger.error(f"✗ {violation.invariant}: {violation.detail}")
        raise LedgerInvariantError(violations)
    logger.info("✓ Ledger invariants hold.")
