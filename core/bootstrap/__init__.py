"""
POS Bootstrap
===============
Wiring of store, command bus and engines, first-run seeding and the
ledger invariant checks.
"""

from core.bootstrap.errors import LedgerInvariantError
from core.bootstrap.invariants import (
    InvariantViolation,
    check_customer_balances,
    check_receipt_bounds,
    run_ledger_checks,
)
from core.bootstrap.ledger import PosLedger, build_pos_ledger
from core.bootstrap.seed import DEFAULT_SETTINGS, seed_defaults

__all__ = [
    "LedgerInvariantError",
    "InvariantViolation",
    "check_customer_balances",
    "check_receipt_bounds",
    "run_ledger_checks",
    "PosLedger",
    "build_pos_ledger",
    "DEFAULT_SETTINGS",
    "seed_defaults",
]
