"""
POS Invoicing Engine — Request Commands
==========================================
Typed invoice requests that convert into canonical Command objects.

Structural problems (empty ids, non-positive quantities, a total above
the line sum) raise ValueError here, before a command exists. Problems
that depend on store state (unknown customer, unknown invoice, illegal
transition) are policy rejections.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from core.commands.base import Command
from core.primitives.document import InvoiceStatus, InvoiceType


# ══════════════════════════════════════════════════════════════
# COMMAND TYPE CONSTANTS
# ══════════════════════════════════════════════════════════════

INVOICING_INVOICE_CREATE_REQUEST = "invoicing.invoice.create.request"
INVOICING_INVOICE_SET_STATUS_REQUEST = "invoicing.invoice.set_status.request"

INVOICING_COMMAND_TYPES = frozenset({
    INVOICING_INVOICE_CREATE_REQUEST,
    INVOICING_INVOICE_SET_STATUS_REQUEST,
})

CREATABLE_STATUSES = frozenset({InvoiceStatus.UNPAID.value, InvoiceStatus.PAID.value})
VALID_INVOICE_STATUSES = frozenset(s.value for s in InvoiceStatus)
VALID_INVOICE_TYPES = frozenset(t.value for t in InvoiceType)


def _normalize_line(line: dict) -> dict:
    if not isinstance(line, dict):
        raise ValueError("each line must be a dict.")
    item_id = line.get("item_id")
    qty = line.get("qty")
    price = line.get("price")
    if not item_id:
        raise ValueError("line item_id must be non-empty.")
    if isinstance(qty, bool) or not isinstance(qty, int) or qty <= 0:
        raise ValueError(f"line qty for '{item_id}' must be positive integer.")
    if isinstance(price, bool) or not isinstance(price, int) or price < 0:
        raise ValueError(f"line price for '{item_id}' must be non-negative integer.")
    return {
        "item_id": item_id,
        "item_name": line.get("item_name", ""),
        "qty": qty,
        "price": price,
        "total": qty * price,
    }


# ══════════════════════════════════════════════════════════════
# REQUEST COMMANDS
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class InvoiceCreateRequest:
    """
    Record a sale.

    total_amount defaults to max(0, line sum − discount). Cash sales
    pass status="PAID".
    """
    invoice_id: str
    customer_id: str
    customer_name: str
    lines: tuple
    total_amount: Optional[int] = None
    discount: int = 0
    status: str = "UNPAID"
    invoice_type: str = "SINGLE_DAY"
    notes: str = ""
    proof_of_payment: Optional[str] = None

    def __post_init__(self):
        if not self.invoice_id:
            raise ValueError("invoice_id must be non-empty.")
        if not self.customer_id:
            raise ValueError("customer_id must be non-empty.")
        if not isinstance(self.lines, tuple) or len(self.lines) == 0:
            raise ValueError("lines must be non-empty tuple.")
        normalized = tuple(_normalize_line(line) for line in self.lines)
        if isinstance(self.discount, bool) or not isinstance(self.discount, int) or self.discount < 0:
            raise ValueError("discount must be non-negative integer.")
        if self.total_amount is not None:
            if (
                isinstance(self.total_amount, bool)
                or not isinstance(self.total_amount, int)
                or self.total_amount < 0
            ):
                raise ValueError("total_amount must be non-negative integer.")
            lines_total = sum(line["total"] for line in normalized)
            if self.total_amount > lines_total:
                raise ValueError(
                    f"total_amount ({self.total_amount}) cannot exceed "
                    f"line total ({lines_total})."
                )
        if self.status not in CREATABLE_STATUSES:
            raise ValueError(
                f"status '{self.status}' not valid at creation. "
                f"Must be one of: {sorted(CREATABLE_STATUSES)}"
            )
        if self.invoice_type not in VALID_INVOICE_TYPES:
            raise ValueError(
                f"invoice_type '{self.invoice_type}' not valid. "
                f"Must be one of: {sorted(VALID_INVOICE_TYPES)}"
            )
        object.__setattr__(self, "lines", normalized)

    @property
    def lines_total(self) -> int:
        return sum(line["total"] for line in self.lines)

    @property
    def resolved_total(self) -> int:
        if self.total_amount is not None:
            return self.total_amount
        return max(0, self.lines_total - self.discount)

    def to_command(
        self,
        *,
        actor_type: str,
        actor_id: str,
        command_id: uuid.UUID,
        correlation_id: uuid.UUID,
        issued_at: datetime,
        actor_name: Optional[str] = None,
    ) -> Command:
        return Command(
            command_id=command_id,
            command_type=INVOICING_INVOICE_CREATE_REQUEST,
            actor_type=actor_type,
            actor_id=actor_id,
            actor_name=actor_name,
            payload={
                "invoice_id": self.invoice_id,
                "customer_id": self.customer_id,
                "customer_name": self.customer_name,
                "lines": [dict(line) for line in self.lines],
                "total_amount": self.resolved_total,
                "status": self.status,
                "invoice_type": self.invoice_type,
                "notes": self.notes,
                "proof_of_payment": self.proof_of_payment,
            },
            issued_at=issued_at,
            correlation_id=correlation_id,
            source_engine="invoicing",
        )


@dataclass(frozen=True)
class InvoiceStatusUpdateRequest:
    """
    Move an invoice to a new status, optionally attaching proof of
    payment. Omitting proof keeps the existing one. A status outside
    InvoiceStatus is not checked here; the dispatcher rejects it.
    """
    invoice_id: str
    status: str
    proof_of_payment: Optional[str] = None

    def __post_init__(self):
        if not self.invoice_id:
            raise ValueError("invoice_id must be non-empty.")

    def to_command(
        self,
        *,
        actor_type: str,
        actor_id: str,
        command_id: uuid.UUID,
        correlation_id: uuid.UUID,
        issued_at: datetime,
        actor_name: Optional[str] = None,
    ) -> Command:
        return Command(
            command_id=command_id,
            command_type=INVOICING_INVOICE_SET_STATUS_REQUEST,
            actor_type=actor_type,
            actor_id=actor_id,
            actor_name=actor_name,
            payload={
                "invoice_id": self.invoice_id,
                "status": self.status,
                "proof_of_payment": self.proof_of_payment,
            },
            issued_at=issued_at,
            correlation_id=correlation_id,
            source_engine="invoicing",
        )
