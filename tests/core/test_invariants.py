"""
POS Invariant Tests
=====================
Cross-cutting rules that must hold across the codebase, plus the
ledger checks run against store snapshots.
"""

import importlib
from datetime import datetime, timezone

import pytest

NOW = datetime(2026, 3, 1, 9, 0, 0, tzinfo=timezone.utc)


# ══════════════════════════════════════════════════════════════
# INVARIANT 1: Domain records are frozen (immutable)
# ══════════════════════════════════════════════════════════════

FROZEN_MODELS = [
    "core.primitives.party.User",
    "core.primitives.party.Wholesaler",
    "core.primitives.item.InventoryItem",
    "core.primitives.document.Invoice",
    "core.primitives.document.InvoiceLine",
    "core.primitives.document.PurchaseOrder",
    "core.primitives.document.POItem",
    "core.primitives.document.POTimelineEvent",
    "core.primitives.records.Notification",
    "core.primitives.records.DeliveryRequest",
    "core.primitives.records.VerificationToken",
    "core.admin.settings.AppSettings",
    "core.commands.rejection.RejectionReason",
    "core.time.temporal.DateRange",
]


@pytest.mark.parametrize("model_path", FROZEN_MODELS)
def test_domain_records_are_frozen(model_path):
    module_path, class_name = model_path.rsplit(".", 1)
    module = importlib.import_module(module_path)
    cls = getattr(module, class_name)

    assert hasattr(cls, "__dataclass_fields__"), f"{model_path} is not a dataclass"
    assert cls.__dataclass_params__.frozen, f"{model_path} is not frozen"


# ══════════════════════════════════════════════════════════════
# INVARIANT 2: Public packages declare __all__
# ══════════════════════════════════════════════════════════════

CORE_MODULES = [
    "core.time",
    "core.commands",
    "core.events",
    "core.store",
    "core.bootstrap",
]


@pytest.mark.parametrize("module_path", CORE_MODULES)
def test_core_modules_have_all_exports(module_path):
    module = importlib.import_module(module_path)
    assert hasattr(module, "__all__"), f"{module_path} missing __all__"
    assert len(module.__all__) > 0, f"{module_path} has empty __all__"


# ══════════════════════════════════════════════════════════════
# INVARIANT 3: RejectionReason always has required fields
# ══════════════════════════════════════════════════════════════

def test_rejection_reason_requires_code_message_policy():
    from core.commands.rejection import RejectionReason

    r = RejectionReason(code="TEST", message="test msg", policy_name="test_policy")
    assert r.code == "TEST"

    with pytest.raises(ValueError):
        RejectionReason(code="", message="test", policy_name="p")
    with pytest.raises(ValueError):
        RejectionReason(code="C", message="", policy_name="p")
    with pytest.raises(ValueError):
        RejectionReason(code="C", message="m", policy_name="")


# ══════════════════════════════════════════════════════════════
# INVARIANT 4: Every engine's commands are owned by that engine
# ══════════════════════════════════════════════════════════════

ENGINE_COMMAND_TYPES = [
    ("engines.invoicing.commands", "INVOICING_COMMAND_TYPES", "invoicing"),
    ("engines.procurement.commands", "PROCUREMENT_COMMAND_TYPES", "procurement"),
    ("engines.customer.commands", "CUSTOMER_COMMAND_TYPES", "customer"),
    ("engines.inventory.commands", "INVENTORY_COMMAND_TYPES", "inventory"),
    ("engines.wholesaler.commands", "WHOLESALER_COMMAND_TYPES", "wholesaler"),
    ("engines.notification.commands", "NOTIFICATION_COMMAND_TYPES", "notification"),
    ("engines.delivery.commands", "DELIVERY_COMMAND_TYPES", "delivery"),
    ("core.auth.commands", "AUTH_COMMAND_TYPES", "auth"),
]


@pytest.mark.parametrize("module_path,constant,engine", ENGINE_COMMAND_TYPES)
def test_command_types_follow_naming_law(module_path, constant, engine):
    module = importlib.import_module(module_path)
    for command_type in getattr(module, constant):
        parts = command_type.split(".")
        assert parts[0] == engine
        assert parts[-1] == "request"
        assert len(parts) >= 4


# ══════════════════════════════════════════════════════════════
# INVARIANT 5: FixedClock is deterministic
# ══════════════════════════════════════════════════════════════

def test_fixed_clock_determinism():
    from core.time.clock import FixedClock

    clock = FixedClock(NOW)
    assert all(clock.now_utc() == NOW for _ in range(100))


# ══════════════════════════════════════════════════════════════
# LEDGER CHECKS
# ══════════════════════════════════════════════════════════════

def _invoice(invoice_id, customer_id, status, initial_status=None, total=100):
    from core.primitives.document import Invoice, InvoiceLine, InvoiceStatus

    return Invoice(
        invoice_id=invoice_id,
        customer_id=customer_id,
        customer_name="Aisha",
        date=NOW,
        lines=(InvoiceLine("i-1", "Cola", qty=2, price=50),),
        total_amount=total,
        status=InvoiceStatus(status),
        initial_status=InvoiceStatus(initial_status or status),
    )


def _store(balance, *invoices):
    from core.primitives.party import User, UserRole
    from core.store import INVOICES, USERS, ChangeSet, EntityStore

    store = EntityStore()
    changes = ChangeSet().put(
        USERS, User("c-1", "Aisha", UserRole.CUSTOMER, current_balance=balance),
    )
    for invoice in invoices:
        changes.put(INVOICES, invoice)
    store.commit(changes)
    return store


class TestCustomerBalanceCheck:
    def test_open_invoices_sum(self):
        from core.bootstrap import check_customer_balances

        store = _store(
            180,
            _invoice("inv-1", "c-1", "UNPAID"),
            _invoice("inv-2", "c-1", "PENDING_APPROVAL", total=80),
            _invoice("inv-3", "c-1", "PAID", initial_status="UNPAID"),
        )
        assert check_customer_balances(store) == []

    def test_created_paid_still_counts(self):
        from core.bootstrap import check_customer_balances

        store = _store(100, _invoice("inv-1", "c-1", "PAID"))
        assert check_customer_balances(store) == []

    def test_walk_in_ignored(self):
        from core.bootstrap import check_customer_balances
        from core.primitives.document import WALK_IN_CUSTOMER_ID

        store = _store(0, _invoice("inv-1", WALK_IN_CUSTOMER_ID, "UNPAID"))
        assert check_customer_balances(store) == []

    def test_mismatch_reported_and_skippable(self):
        from core.bootstrap import check_customer_balances

        store = _store(999, _invoice("inv-1", "c-1", "UNPAID"))
        violations = check_customer_balances(store)
        assert [(v.invariant, v.record_id) for v in violations] == [("CUSTOMER_BALANCE", "c-1")]
        assert check_customer_balances(store, skip_customers=["c-1"]) == []


class TestRunLedgerChecks:
    def test_raises_with_every_violation(self):
        from core.bootstrap import LedgerInvariantError, run_ledger_checks

        store = _store(5, _invoice("inv-1", "c-1", "UNPAID"))
        with pytest.raises(LedgerInvariantError, match="balance 5") as exc:
            run_ledger_checks(store)
        assert len(exc.value.violations) == 1

    def test_clean_store_passes(self):
        from core.bootstrap import check_receipt_bounds, run_ledger_checks

        store = _store(100, _invoice("inv-1", "c-1", "UNPAID"))
        run_ledger_checks(store)
        assert check_receipt_bounds(store) == []
