"""POS Bootstrap tests (ledger facade, first-run seed, persistence)."""

from datetime import datetime, timedelta, timezone

import pytest

NOW = datetime(2026, 3, 1, 9, 0, 0, tzinfo=timezone.utc)


def _ledger(kv=None, codes=("246810",)):
    from core.bootstrap import build_pos_ledger
    from core.store import InMemoryKeyValueStore
    from core.time import FixedClock

    clock = FixedClock(NOW)
    issued = iter(codes)
    ledger = build_pos_ledger(
        kv_store=kv if kv is not None else InMemoryKeyValueStore(),
        clock=clock,
        code_generator=lambda: next(issued),
    )
    return ledger, clock


def _seed_catalogue(ledger, admin):
    from engines.customer.commands import UserRegisterRequest
    from engines.inventory.commands import ItemRegisterRequest
    from engines.wholesaler.commands import WholesalerRegisterRequest

    for request in (
        UserRegisterRequest(user_id="c-1", name="Aisha", address="Male'"),
        ItemRegisterRequest(item_id="i-1", name="Cola", price=15, qty=20),
        WholesalerRegisterRequest(wholesaler_id="w-1", name="Island Wholesale"),
    ):
        assert ledger.submit(request, actor=admin).is_accepted


class TestFirstRun:
    def test_seeds_default_accounts_and_settings(self):
        ledger, _ = _ledger()
        settings = ledger.settings.current
        assert settings.shop_name == "Fridge MV POS"
        assert settings.default_credit_limit == 50000
        assert settings.currency == "MVR"
        assert ledger.login("ADMIN", "admin", "admin").user_id == "1"
        assert ledger.login("CASHIER", "cashier", "123").name == "Main Cashier"
        assert ledger.login("ADMIN", "admin", "wrong") is None

    def test_second_start_loads_instead_of_seeding(self):
        from core.store import InMemoryKeyValueStore

        kv = InMemoryKeyValueStore()
        first, _ = _ledger(kv)
        first.update_settings({"shop_name": "Corner Shop"})

        second, _ = _ledger(kv)
        assert second.settings.current.shop_name == "Corner Shop"
        assert second.store.count("users") == 2


class TestFacade:
    def test_credit_sale_and_payment_flow(self):
        from core.bootstrap import run_ledger_checks
        from engines.invoicing.commands import InvoiceCreateRequest

        ledger, clock = _ledger()
        admin = ledger.login("ADMIN", "admin", "admin")
        _seed_catalogue(ledger, admin)

        cashier = ledger.login("CASHIER", "cashier", "123")
        result = ledger.create_invoice(InvoiceCreateRequest(
            invoice_id="inv-1",
            customer_id="c-1",
            customer_name="Aisha",
            lines=({"item_id": "i-1", "item_name": "Cola", "qty": 4, "price": 15},),
        ), actor=cashier)
        assert result.is_accepted
        assert ledger.store.get_user("c-1").current_balance == 60
        assert ledger.store.get_item("i-1").qty == 16

        clock.advance(3600)
        assert ledger.submit_payment_proof("inv-1", "receipt-001.jpg").is_accepted
        assert ledger.store.get_user("c-1").current_balance == 60
        assert ledger.reject_payment("inv-1", actor=admin).is_accepted
        assert ledger.store.get_invoice("inv-1").status.value == "UNPAID"
        assert ledger.approve_payment("inv-1", actor=admin).is_accepted
        assert ledger.store.get_user("c-1").current_balance == 0

        run_ledger_checks(ledger.store)
        summary = ledger.reporting.dashboard()
        assert summary.revenue == 60

    def test_purchase_order_flow(self):
        from engines.procurement.commands import OrderCreateRequest, OrderStatusUpdateRequest

        ledger, _ = _ledger()
        admin = ledger.login("ADMIN", "admin", "admin")
        _seed_catalogue(ledger, admin)

        created = ledger.create_purchase_order(OrderCreateRequest(
            po_id="po-1",
            wholesaler_id="w-1",
            status="SENT",
            items=({"inventory_item_id": "i-1", "qty": 10, "unit_cost": 5},),
        ), actor=admin)
        assert created.is_accepted
        order = ledger.store.get_order("po-1")
        assert order.timeline[0].user == "System Admin"

        ledger.update_purchase_order_status(OrderStatusUpdateRequest(
            po_id="po-1", status="PARTIALLY_RECEIVED",
            received_items=({"item_id": "i-1", "qty": 6},),
        ), actor=admin)
        assert ledger.reporting.receipt_progress("po-1").percent_received == 60
        ledger.update_purchase_order_status(
            OrderStatusUpdateRequest(po_id="po-1", status="RECEIVED"), actor=admin,
        )
        assert ledger.store.get_item("i-1").qty == 30

    def test_system_actor_when_none_given(self):
        ledger, _ = _ledger()
        seen = []
        ledger.subscribers.register_subscriber(
            "admin.settings.updated.v1", seen.append, "test",
        )
        ledger.update_settings({"island": "Addu"})
        assert [(e.source_engine, e.actor_id) for e in seen] == [("admin", "system")]

    def test_invalid_request_raises_before_bus(self):
        ledger, _ = _ledger()
        with pytest.raises(ValueError, match="Unknown settings"):
            ledger.update_settings({"theme": "dark"})

    def test_unknown_status_comes_back_rejected(self):
        from engines.invoicing.commands import InvoiceCreateRequest
        from engines.procurement.commands import OrderCreateRequest, OrderStatusUpdateRequest

        ledger, _ = _ledger()
        admin = ledger.login("ADMIN", "admin", "admin")
        _seed_catalogue(ledger, admin)
        ledger.create_invoice(InvoiceCreateRequest(
            invoice_id="inv-1", customer_id="c-1", customer_name="Aisha",
            lines=({"item_id": "i-1", "qty": 1, "price": 15},),
        ), actor=admin)
        ledger.create_purchase_order(OrderCreateRequest(
            po_id="po-1", wholesaler_id="w-1", status="SENT",
            items=({"inventory_item_id": "i-1", "qty": 2, "unit_cost": 5},),
        ), actor=admin)

        invoice_result = ledger.update_invoice_status("inv-1", "REFUNDED", actor=admin)
        order_result = ledger.update_purchase_order_status(
            OrderStatusUpdateRequest(po_id="po-1", status="LOST"), actor=admin,
        )

        assert invoice_result.reason.code == "INVALID_TRANSITION"
        assert order_result.reason.code == "INVALID_TRANSITION"
        assert ledger.store.get_invoice("inv-1").status.value == "UNPAID"
        assert ledger.store.get_order("po-1").status.value == "SENT"


class TestSignup:
    def test_verification_then_register_then_login(self):
        ledger, clock = _ledger()
        admin = ledger.login("ADMIN", "admin", "admin")
        _seed_catalogue(ledger, admin)

        issued = ledger.generate_verification_code("c-1", "aisha@example.mv", actor=admin)
        assert issued.execution_result.token.code == "246810"

        clock.advance(120)
        assert ledger.register_user("aisha@example.mv", "246810", "pass123").is_accepted
        assert ledger.login("CUSTOMER", "aisha@example.mv", "pass123").user_id == "c-1"

    def test_expired_code(self):
        ledger, clock = _ledger()
        admin = ledger.login("ADMIN", "admin", "admin")
        _seed_catalogue(ledger, admin)
        ledger.generate_verification_code("c-1", "aisha@example.mv")

        clock.advance(timedelta(minutes=11).total_seconds())
        result = ledger.register_user("aisha@example.mv", "246810", "pass123")
        assert result.reason.code == "TOKEN_EXPIRED"
