"""POS Reporting Engine tests (dashboard, statements, receipt progress)."""

from datetime import date, datetime, timedelta, timezone

import pytest

NOW = datetime(2026, 3, 10, 9, 0, 0, tzinfo=timezone.utc)


def _invoice(invoice_id, status="UNPAID", customer_id="c-1", days=0, lines=None, total=None):
    from core.primitives.document import Invoice, InvoiceLine, InvoiceStatus

    lines = lines or (InvoiceLine("i-1", "Cola", qty=2, price=50),)
    lines_total = sum(line.total for line in lines)
    return Invoice(
        invoice_id=invoice_id,
        customer_id=customer_id,
        customer_name="Aisha",
        date=NOW + timedelta(days=days),
        lines=lines,
        total_amount=lines_total if total is None else total,
        status=InvoiceStatus(status),
    )


def _order(po_id, status="SENT", received=0, days=0):
    from core.primitives.document import POItem, PurchaseOrder, PurchaseOrderStatus

    return PurchaseOrder(
        po_id=po_id,
        po_number=f"PO-{po_id}",
        wholesaler_id="w-1",
        wholesaler_name="Island Wholesale",
        order_date=NOW + timedelta(days=days),
        status=PurchaseOrderStatus(status),
        items=(POItem("i-1", "Cola", qty=8, unit_cost=5, received_qty=received),),
        subtotal=40,
        tax=3,
        shipping=0,
        discount=0,
        total_cost=43,
    )


def _store(*records):
    from core.primitives.item import InventoryItem
    from core.primitives.party import User, UserRole
    from core.store import INVENTORY, INVOICES, PURCHASE_ORDERS, USERS, ChangeSet, EntityStore
    from engines.reporting.services import ReportingService

    store = EntityStore()
    changes = (
        ChangeSet()
        .put(USERS, User("c-1", "Aisha", UserRole.CUSTOMER, credit_limit=50000, current_balance=230))
        .put(INVENTORY, InventoryItem("i-1", "Cola", qty=0, price=50))
        .put(INVENTORY, InventoryItem("i-2", "Tuna", qty=3, price=2000))
        .put(INVENTORY, InventoryItem("i-3", "Rice", qty=40, price=100))
    )
    for record in records:
        collection = {
            "Invoice": INVOICES,
            "PurchaseOrder": PURCHASE_ORDERS,
        }[type(record).__name__]
        changes.put(collection, record)
    store.commit(changes)
    return store, ReportingService(store=store)


def _march():
    from core.time import DateRange

    return DateRange(date(2026, 3, 1), date(2026, 3, 31))


class TestDashboard:
    def test_totals_by_status(self):
        _, svc = _store(
            _invoice("inv-1", "PAID"),
            _invoice("inv-2", "UNPAID"),
            _invoice("inv-3", "UNPAID", total=80),
            _invoice("inv-4", "PENDING_APPROVAL"),
        )
        summary = svc.dashboard()
        assert summary.revenue == 100
        assert summary.outstanding == 180
        assert summary.pending_approval == 100
        assert summary.invoice_count == 4

    def test_stock_figures(self):
        _, svc = _store(_order("po-1"), _order("po-2", status="RECEIVED", received=8))
        summary = svc.dashboard()
        assert summary.out_of_stock_count == 1
        assert summary.low_stock_count == 1
        assert summary.inventory_value == 3 * 2000 + 40 * 100
        assert summary.open_order_count == 1


class TestCustomerStatement:
    def test_summary_excludes_paid_and_out_of_range(self):
        from engines.reporting.services import STATEMENT_SUMMARY

        _, svc = _store(
            _invoice("inv-1", "UNPAID", days=-20),
            _invoice("inv-2", "UNPAID", days=2),
            _invoice("inv-3", "PAID", days=1),
            _invoice("inv-4", "PENDING_APPROVAL", days=0, total=70),
            _invoice("inv-5", "UNPAID", customer_id="c-9", days=1),
        )
        statement = svc.customer_statement("c-1", _march(), STATEMENT_SUMMARY)
        assert [r.invoice_id for r in statement.rows] == ["inv-4", "inv-2"]
        assert [r.description for r in statement.rows] == ["1 item(s)", "1 item(s)"]
        assert statement.total_due == 170
        assert statement.currency == "MVR"
        assert statement.current_balance == 230
        assert statement.customer_name == "Aisha"

    def test_detailed_lists_lines_and_discount(self):
        from core.primitives.document import InvoiceLine
        from engines.reporting.services import STATEMENT_DETAILED

        lines = (
            InvoiceLine("i-1", "Cola", qty=2, price=50),
            InvoiceLine("i-2", "Tuna", qty=1, price=2000),
        )
        _, svc = _store(_invoice("inv-1", lines=lines, total=2050))
        statement = svc.customer_statement("c-1", _march(), STATEMENT_DETAILED)
        assert [(r.description, r.qty, r.amount) for r in statement.rows] == [
            ("Cola", 2, 100),
            ("Tuna", 1, 2000),
            ("Discount", None, -50),
        ]
        assert sum(r.amount for r in statement.rows) == statement.total_due == 2050

    def test_unknown_customer(self):
        _, svc = _store()
        with pytest.raises(KeyError):
            svc.customer_statement("c-404", _march())

    def test_bad_mode(self):
        _, svc = _store()
        with pytest.raises(ValueError, match="mode"):
            svc.customer_statement("c-1", _march(), "FULL")


class TestReceiptProgress:
    def test_progress(self):
        _, svc = _store(_order("po-1", received=6))
        progress = svc.receipt_progress("po-1")
        assert (progress.ordered_units, progress.received_units) == (8, 6)
        assert progress.remaining_units == 2
        assert progress.percent_received == 75

    def test_unknown_order(self):
        _, svc = _store()
        assert svc.receipt_progress("po-404") is None

    def test_open_orders_sorted(self):
        _, svc = _store(
            _order("po-2", status="PARTIALLY_RECEIVED", received=1, days=2),
            _order("po-1", days=1),
            _order("po-3", status="CANCELLED"),
        )
        assert [p.po_id for p in svc.open_order_progress()] == ["po-1", "po-2"]
