"""
POS Reporting Engine — Read-Side Queries
==========================================
Derived views over the Entity Store. Nothing here writes: every figure
is recomputed from the current collections on each call.

- Dashboard: revenue (Σ PAID totals), outstanding (Σ UNPAID totals),
  pending-approval total, stock alerts, inventory retail value.
- Customer statement: a customer's non-PAID invoices dated within a
  range, one row per invoice (SUMMARY) or per line item (DETAILED).
- Receipt progress: ordered vs received units per purchase order.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Tuple

from core.primitives.document import InvoiceStatus, PurchaseOrder
from core.primitives.item import StockStatus
from core.store import INVENTORY, INVOICES, PURCHASE_ORDERS, EntityStore
from core.time import DateRange

STATEMENT_SUMMARY = "SUMMARY"
STATEMENT_DETAILED = "DETAILED"
VALID_STATEMENT_MODES = frozenset({STATEMENT_SUMMARY, STATEMENT_DETAILED})


# ══════════════════════════════════════════════════════════════
# REPORT RECORDS
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class DashboardSummary:
    revenue: int
    outstanding: int
    pending_approval: int
    invoice_count: int
    low_stock_count: int
    out_of_stock_count: int
    inventory_value: int
    open_order_count: int


@dataclass(frozen=True)
class StatementRow:
    invoice_id: str
    date: datetime
    status: str
    description: str
    qty: Optional[int]
    amount: int


@dataclass(frozen=True)
class CustomerStatement:
    customer_id: str
    customer_name: str
    period: DateRange
    mode: str
    rows: Tuple[StatementRow, ...]
    total_due: int
    currency: str
    current_balance: int


@dataclass(frozen=True)
class ReceiptProgress:
    po_id: str
    po_number: str
    status: str
    ordered_units: int
    received_units: int

    @property
    def remaining_units(self) -> int:
        return self.ordered_units - self.received_units

    @property
    def percent_received(self) -> int:
        if self.ordered_units == 0:
            return 0
        return self.received_units * 100 // self.ordered_units


# ══════════════════════════════════════════════════════════════
# SERVICE
# ══════════════════════════════════════════════════════════════

class ReportingService:
    def __init__(self, *, store: EntityStore):
        self._store = store

    def _sum_invoices(self, status: InvoiceStatus) -> int:
        return sum(
            inv.total_amount
            for inv in self._store.find(INVOICES, lambda i: i.status == status)
        )

    def dashboard(self) -> DashboardSummary:
        items = self._store.all(INVENTORY)
        return DashboardSummary(
            revenue=self._sum_invoices(InvoiceStatus.PAID),
            outstanding=self._sum_invoices(InvoiceStatus.UNPAID),
            pending_approval=self._sum_invoices(InvoiceStatus.PENDING_APPROVAL),
            invoice_count=self._store.count(INVOICES),
            low_stock_count=sum(
                1 for i in items if i.stock_status == StockStatus.LOW_STOCK
            ),
            out_of_stock_count=sum(
                1 for i in items if i.stock_status == StockStatus.OUT_OF_STOCK
            ),
            inventory_value=sum(i.stock_value for i in items),
            open_order_count=len(
                self._store.find(PURCHASE_ORDERS, lambda po: not po.is_closed)
            ),
        )

    def customer_statement(
        self,
        customer_id: str,
        period: DateRange,
        mode: str = STATEMENT_SUMMARY,
    ) -> CustomerStatement:
        """
        Statement of what a customer still owes for invoices dated in
        `period`. Raises KeyError for an unknown customer.
        """
        if mode not in VALID_STATEMENT_MODES:
            raise ValueError(
                f"mode '{mode}' not valid. Must be one of: {sorted(VALID_STATEMENT_MODES)}"
            )
        customer = self._store.get_user(customer_id)
        if customer is None:
            raise KeyError(f"Customer '{customer_id}' not found.")

        invoices = sorted(
            self._store.find(
                INVOICES,
                lambda inv: inv.customer_id == customer_id
                and inv.status != InvoiceStatus.PAID
                and period.contains(inv.date),
            ),
            key=lambda inv: inv.date,
        )

        rows: List[StatementRow] = []
        for inv in invoices:
            if mode == STATEMENT_SUMMARY:
                rows.append(StatementRow(
                    invoice_id=inv.invoice_id,
                    date=inv.date,
                    status=inv.status.value,
                    description=f"{len(inv.lines)} item(s)",
                    qty=None,
                    amount=inv.total_amount,
                ))
                continue
            for line in inv.lines:
                rows.append(StatementRow(
                    invoice_id=inv.invoice_id,
                    date=inv.date,
                    status=inv.status.value,
                    description=line.item_name,
                    qty=line.qty,
                    amount=line.total,
                ))
            if inv.discount:
                rows.append(StatementRow(
                    invoice_id=inv.invoice_id,
                    date=inv.date,
                    status=inv.status.value,
                    description="Discount",
                    qty=None,
                    amount=-inv.discount,
                ))

        return CustomerStatement(
            customer_id=customer.user_id,
            customer_name=customer.name,
            period=period,
            mode=mode,
            rows=tuple(rows),
            total_due=sum(inv.total_amount for inv in invoices),
            currency=self._store.settings.currency,
            current_balance=customer.current_balance,
        )

    def receipt_progress(self, po_id: str) -> Optional[ReceiptProgress]:
        order = self._store.get_order(po_id)
        return None if order is None else _progress(order)

    def open_order_progress(self) -> List[ReceiptProgress]:
        orders = self._store.find(PURCHASE_ORDERS, lambda po: not po.is_closed)
        return [_progress(po) for po in sorted(orders, key=lambda po: po.order_date)]


def _progress(order: PurchaseOrder) -> ReceiptProgress:
    return ReceiptProgress(
        po_id=order.po_id,
        po_number=order.po_number,
        status=order.status.value,
        ordered_units=order.ordered_units,
        received_units=order.received_units,
    )
