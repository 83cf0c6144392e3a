"""
POS primitives — records, derived values and money helpers.
"""

from datetime import datetime, timezone

import pytest

from core.primitives.document import (
    Invoice,
    InvoiceLine,
    InvoiceStatus,
    POItem,
    PurchaseOrder,
    PurchaseOrderStatus,
    WALK_IN_CUSTOMER_ID,
    compute_po_totals,
)
from core.primitives.item import InventoryItem, StockStatus, derive_stock_status
from core.primitives.party import User, UserRole
from core.primitives.records import BROADCAST_TARGET, Notification
from core.primitives.values import format_minor, percent_of, require_minor_units

NOW = datetime(2026, 3, 1, 9, 0, 0, tzinfo=timezone.utc)


def invoice(**overrides):
    fields = dict(
        invoice_id="inv-1",
        customer_id="c-1",
        customer_name="Hassan",
        date=NOW,
        lines=(InvoiceLine("i-1", "Cola", 3, 500),),
        total_amount=1500,
    )
    fields.update(overrides)
    return Invoice(**fields)


class TestMoney:
    def test_percent_of_rounds_half_up(self):
        assert percent_of(50, 8) == 4
        assert percent_of(5000, 8) == 400
        assert percent_of(1, 50) == 1
        assert percent_of(6, 8) == 0

    def test_format_minor(self):
        assert format_minor(1050) == "10.50"
        assert format_minor(-5, "MVR") == "MVR -0.05"

    def test_require_minor_units(self):
        with pytest.raises(ValueError, match="price"):
            require_minor_units(1.5, "price")
        with pytest.raises(ValueError, match=">= 0"):
            require_minor_units(-1, "price")
        require_minor_units(-1, "balance", allow_negative=True)


class TestInvoice:
    def test_discount_is_derived(self):
        inv = invoice(total_amount=1200)
        assert inv.lines_total == 1500
        assert inv.discount == 300

    def test_total_cannot_exceed_lines(self):
        with pytest.raises(ValueError, match="cannot exceed"):
            invoice(total_amount=1501)

    def test_initial_status_defaults_to_status(self):
        assert invoice(status=InvoiceStatus.PAID).initial_status == InvoiceStatus.PAID

    def test_walk_in(self):
        assert invoice(customer_id=WALK_IN_CUSTOMER_ID).is_walk_in

    def test_line_qty_must_be_positive(self):
        with pytest.raises(ValueError, match="qty"):
            InvoiceLine("i-1", "Cola", 0, 500)

    def test_serialization_keeps_initial_status(self):
        inv = invoice(status=InvoiceStatus.UNPAID, initial_status=InvoiceStatus.PAID)
        again = Invoice.from_dict(inv.to_dict())
        assert again.initial_status == InvoiceStatus.PAID
        assert again.lines == inv.lines


class TestPurchaseOrder:
    def test_scenario_totals(self):
        totals = compute_po_totals([(10, 5)])
        assert totals == {
            "subtotal": 50, "tax": 4, "shipping": 0, "discount": 0, "total_cost": 54,
        }

    def test_totals_with_shipping_and_discount(self):
        totals = compute_po_totals([(10, 500), (2, 250)], shipping=300, discount=100)
        assert totals["subtotal"] == 5500
        assert totals["tax"] == 440
        assert totals["total_cost"] == 6140

    def test_received_qty_bounded(self):
        with pytest.raises(ValueError, match="received_qty"):
            POItem("i-1", "Cola", qty=10, unit_cost=5, received_qty=11)

    def test_items_must_be_distinct(self):
        line = POItem("i-1", "Cola", qty=10, unit_cost=5)
        with pytest.raises(ValueError, match="distinct"):
            PurchaseOrder(
                po_id="po-1", po_number="PO-000001", wholesaler_id="w-1",
                wholesaler_name="Island Wholesale", order_date=NOW,
                status=PurchaseOrderStatus.SENT, items=(line, line),
                subtotal=100, tax=8, shipping=0, discount=0, total_cost=108,
            )


class TestInventoryItem:
    @pytest.mark.parametrize("qty,expected", [
        (-1, StockStatus.OUT_OF_STOCK),
        (0, StockStatus.OUT_OF_STOCK),
        (5, StockStatus.LOW_STOCK),
        (6, StockStatus.IN_STOCK),
    ])
    def test_derived_stock_status(self, qty, expected):
        assert derive_stock_status(qty, 5) == expected

    def test_stock_value_ignores_negative_qty(self):
        assert InventoryItem("i-1", "Cola", qty=-2, price=500).stock_value == 0
        assert InventoryItem("i-1", "Cola", qty=4, price=500).stock_value == 2000


class TestParties:
    def test_available_credit(self):
        user = User("c-1", "Hassan", UserRole.CUSTOMER, credit_limit=50000, current_balance=15000)
        assert user.available_credit == 35000
        assert user.is_customer

    def test_staff_is_not_customer(self):
        assert not User("1", "Admin", UserRole.ADMIN).is_customer

    def test_broadcast_notification(self):
        note = Notification("n-1", BROADCAST_TARGET, "Closed Friday", NOW)
        assert note.is_for("anyone")
