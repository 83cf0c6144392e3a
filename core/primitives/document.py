"""
POS Document Primitives — Invoices and Purchase Orders
========================================================
The two documents the ledger engine reasons about.

Invoice:        a sale. total_amount is fixed at creation and may be
                lower than the sum of its lines (discount); only the
                net amount survives.
PurchaseOrder:  a restock order. Each line tracks cumulative received
                units; tax is 8% of subtotal, computed once at creation.
                The timeline is append-only.

Status sets are closed enumerations. Transition rules live in the
engines, not here.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple

from core.primitives.values import (
    dt_from_str,
    dt_to_str,
    percent_of,
    require_minor_units,
)

# Reserved customer id for sales with no account; never affects a balance.
WALK_IN_CUSTOMER_ID = "WALK_IN"

PO_TAX_RATE_PERCENT = 8


# ══════════════════════════════════════════════════════════════
# ENUMS
# ══════════════════════════════════════════════════════════════

class InvoiceStatus(Enum):
    UNPAID = "UNPAID"
    PENDING_APPROVAL = "PENDING_APPROVAL"
    PAID = "PAID"


class InvoiceType(Enum):
    SINGLE_DAY = "SINGLE_DAY"
    MULTI_DAY = "MULTI_DAY"


class PurchaseOrderStatus(Enum):
    DRAFT = "DRAFT"
    SENT = "SENT"
    PARTIALLY_RECEIVED = "PARTIALLY_RECEIVED"
    RECEIVED = "RECEIVED"
    CANCELLED = "CANCELLED"


CLOSED_ORDER_STATUSES = frozenset({
    PurchaseOrderStatus.RECEIVED,
    PurchaseOrderStatus.CANCELLED,
})


def _require_positive_qty(value, field_name: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValueError(f"{field_name} must be positive integer.")


# ══════════════════════════════════════════════════════════════
# INVOICE
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class InvoiceLine:
    """One sold item: name is a snapshot taken at sale time."""
    item_id: str
    item_name: str
    qty: int
    price: int

    def __post_init__(self):
        if not self.item_id:
            raise ValueError("item_id must be non-empty.")
        _require_positive_qty(self.qty, "qty")
        require_minor_units(self.price, "price")

    @property
    def total(self) -> int:
        return self.qty * self.price

    def to_dict(self) -> dict:
        return {
            "item_id": self.item_id,
            "item_name": self.item_name,
            "qty": self.qty,
            "price": self.price,
            "total": self.total,
        }

    @classmethod
    def from_dict(cls, data: dict) -> InvoiceLine:
        return cls(
            item_id=data["item_id"],
            item_name=data.get("item_name", ""),
            qty=data["qty"],
            price=data["price"],
        )


@dataclass(frozen=True)
class Invoice:
    """
    Fields:
        invoice_id:       Unique identifier.
        customer_id:      User id, or WALK_IN_CUSTOMER_ID.
        customer_name:    Name snapshot.
        date:             Sale timestamp.
        lines:            Non-empty tuple of InvoiceLine.
        total_amount:     Net amount owed (<= lines_total).
        status:           Current InvoiceStatus.
        initial_status:   Status at creation (PAID for cash sales).
        invoice_type:     SINGLE_DAY | MULTI_DAY.
        notes:            Free text.
        proof_of_payment: Opaque reference or embedded image data.
    """
    invoice_id: str
    customer_id: str
    customer_name: str
    date: datetime
    lines: Tuple[InvoiceLine, ...]
    total_amount: int
    status: InvoiceStatus = InvoiceStatus.UNPAID
    initial_status: Optional[InvoiceStatus] = None
    invoice_type: InvoiceType = InvoiceType.SINGLE_DAY
    notes: str = ""
    proof_of_payment: Optional[str] = None

    def __post_init__(self):
        if not self.invoice_id:
            raise ValueError("invoice_id must be non-empty.")
        if not self.customer_id:
            raise ValueError("customer_id must be non-empty.")
        if not isinstance(self.lines, tuple) or len(self.lines) == 0:
            raise ValueError("lines must be non-empty tuple.")
        if not isinstance(self.status, InvoiceStatus):
            raise ValueError("status must be InvoiceStatus enum.")
        require_minor_units(self.total_amount, "total_amount")
        if self.total_amount > self.lines_total:
            raise ValueError(
                f"total_amount ({self.total_amount}) cannot exceed "
                f"the sum of line totals ({self.lines_total})."
            )
        if self.initial_status is None:
            object.__setattr__(self, "initial_status", self.status)

    @property
    def lines_total(self) -> int:
        return sum(line.total for line in self.lines)

    @property
    def discount(self) -> int:
        return self.lines_total - self.total_amount

    @property
    def is_walk_in(self) -> bool:
        return self.customer_id == WALK_IN_CUSTOMER_ID

    @property
    def is_paid(self) -> bool:
        return self.status == InvoiceStatus.PAID

    def to_dict(self) -> dict:
        return {
            "invoice_id": self.invoice_id,
            "customer_id": self.customer_id,
            "customer_name": self.customer_name,
            "date": dt_to_str(self.date),
            "lines": [line.to_dict() for line in self.lines],
            "total_amount": self.total_amount,
            "status": self.status.value,
            "initial_status": self.initial_status.value,
            "invoice_type": self.invoice_type.value,
            "notes": self.notes,
            "proof_of_payment": self.proof_of_payment,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Invoice:
        status = InvoiceStatus(data["status"])
        return cls(
            invoice_id=data["invoice_id"],
            customer_id=data["customer_id"],
            customer_name=data.get("customer_name", ""),
            date=dt_from_str(data["date"]),
            lines=tuple(InvoiceLine.from_dict(line) for line in data["lines"]),
            total_amount=data["total_amount"],
            status=status,
            initial_status=InvoiceStatus(data.get("initial_status", status.value)),
            invoice_type=InvoiceType(data.get("invoice_type", "SINGLE_DAY")),
            notes=data.get("notes", ""),
            proof_of_payment=data.get("proof_of_payment"),
        )


# ══════════════════════════════════════════════════════════════
# PURCHASE ORDER
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class POItem:
    """Ordered line. Invariant: 0 <= received_qty <= qty."""
    inventory_item_id: str
    item_name: str
    qty: int
    unit_cost: int
    received_qty: int = 0

    def __post_init__(self):
        if not self.inventory_item_id:
            raise ValueError("inventory_item_id must be non-empty.")
        _require_positive_qty(self.qty, "qty")
        require_minor_units(self.unit_cost, "unit_cost")
        if (
            isinstance(self.received_qty, bool)
            or not isinstance(self.received_qty, int)
            or not 0 <= self.received_qty <= self.qty
        ):
            raise ValueError(
                f"received_qty must be int in [0, {self.qty}], "
                f"got {self.received_qty!r}."
            )

    @property
    def total(self) -> int:
        return self.qty * self.unit_cost

    @property
    def remaining_qty(self) -> int:
        return self.qty - self.received_qty

    def to_dict(self) -> dict:
        return {
            "inventory_item_id": self.inventory_item_id,
            "item_name": self.item_name,
            "qty": self.qty,
            "unit_cost": self.unit_cost,
            "received_qty": self.received_qty,
            "total": self.total,
        }

    @classmethod
    def from_dict(cls, data: dict) -> POItem:
        return cls(
            inventory_item_id=data["inventory_item_id"],
            item_name=data.get("item_name", ""),
            qty=data["qty"],
            unit_cost=data["unit_cost"],
            received_qty=data.get("received_qty", 0),
        )


@dataclass(frozen=True)
class POTimelineEvent:
    date: datetime
    status: PurchaseOrderStatus
    note: str
    user: str

    def to_dict(self) -> dict:
        return {
            "date": dt_to_str(self.date),
            "status": self.status.value,
            "note": self.note,
            "user": self.user,
        }

    @classmethod
    def from_dict(cls, data: dict) -> POTimelineEvent:
        return cls(
            date=dt_from_str(data["date"]),
            status=PurchaseOrderStatus(data["status"]),
            note=data.get("note", ""),
            user=data.get("user", ""),
        )


@dataclass(frozen=True)
class PurchaseOrder:
    """
    Fields:
        po_id:                  Unique identifier.
        po_number:              Human-facing number (PO-000001).
        wholesaler_id/name:     Supplier reference + name snapshot.
        order_date:             Creation timestamp.
        status:                 PurchaseOrderStatus.
        items:                  Non-empty tuple of POItem.
        subtotal:               Σ item.qty × item.unit_cost.
        tax:                    8% of subtotal, fixed at creation.
        shipping, discount:     Header adjustments (>= 0).
        total_cost:             subtotal + tax + shipping − discount.
        expected_delivery_date: Optional.
        notes:                  Free text.
        timeline:               Append-only POTimelineEvent tuple.
    """
    po_id: str
    po_number: str
    wholesaler_id: str
    wholesaler_name: str
    order_date: datetime
    status: PurchaseOrderStatus
    items: Tuple[POItem, ...]
    subtotal: int
    tax: int
    shipping: int
    discount: int
    total_cost: int
    expected_delivery_date: Optional[datetime] = None
    notes: str = ""
    timeline: Tuple[POTimelineEvent, ...] = ()

    def __post_init__(self):
        if not self.po_id:
            raise ValueError("po_id must be non-empty.")
        if not self.wholesaler_id:
            raise ValueError("wholesaler_id must be non-empty.")
        if not isinstance(self.status, PurchaseOrderStatus):
            raise ValueError("status must be PurchaseOrderStatus enum.")
        if not isinstance(self.items, tuple) or len(self.items) == 0:
            raise ValueError("items must be non-empty tuple.")
        if not isinstance(self.timeline, tuple):
            raise TypeError("timeline must be a tuple.")
        ids = [item.inventory_item_id for item in self.items]
        if len(ids) != len(set(ids)):
            raise ValueError("items must reference distinct inventory items.")

    @property
    def is_closed(self) -> bool:
        return self.status in CLOSED_ORDER_STATUSES

    @property
    def ordered_units(self) -> int:
        return sum(item.qty for item in self.items)

    @property
    def received_units(self) -> int:
        return sum(item.received_qty for item in self.items)

    def get_item(self, inventory_item_id: str) -> Optional[POItem]:
        for item in self.items:
            if item.inventory_item_id == inventory_item_id:
                return item
        return None

    def to_dict(self) -> dict:
        return {
            "po_id": self.po_id,
            "po_number": self.po_number,
            "wholesaler_id": self.wholesaler_id,
            "wholesaler_name": self.wholesaler_name,
            "order_date": dt_to_str(self.order_date),
            "status": self.status.value,
            "items": [item.to_dict() for item in self.items],
            "subtotal": self.subtotal,
            "tax": self.tax,
            "shipping": self.shipping,
            "discount": self.discount,
            "total_cost": self.total_cost,
            "expected_delivery_date": dt_to_str(self.expected_delivery_date),
            "notes": self.notes,
            "timeline": [event.to_dict() for event in self.timeline],
        }

    @classmethod
    def from_dict(cls, data: dict) -> PurchaseOrder:
        return cls(
            po_id=data["po_id"],
            po_number=data.get("po_number", ""),
            wholesaler_id=data["wholesaler_id"],
            wholesaler_name=data.get("wholesaler_name", ""),
            order_date=dt_from_str(data["order_date"]),
            status=PurchaseOrderStatus(data["status"]),
            items=tuple(POItem.from_dict(item) for item in data["items"]),
            subtotal=data["subtotal"],
            tax=data["tax"],
            shipping=data.get("shipping", 0),
            discount=data.get("discount", 0),
            total_cost=data["total_cost"],
            expected_delivery_date=dt_from_str(data.get("expected_delivery_date")),
            notes=data.get("notes", ""),
            timeline=tuple(
                POTimelineEvent.from_dict(event) for event in data.get("timeline", ())
            ),
        )


def compute_po_totals(lines, shipping: int = 0, discount: int = 0) -> dict:
    """
    Header arithmetic for a new purchase order from (qty, unit_cost) pairs.

    One line 10 × 500 → subtotal 5000, tax 400, total_cost 5400.
    """
    subtotal = sum(qty * unit_cost for qty, unit_cost in lines)
    tax = percent_of(subtotal, PO_TAX_RATE_PERCENT)
    return {
        "subtotal": subtotal,
        "tax": tax,
        "shipping": shipping,
        "discount": discount,
        "total_cost": subtotal + tax + shipping - discount,
    }
