"""
POS Command Layer — Rejection Model
======================================
Structured rejection reasons for denied commands.

A rejection is a recoverable, local condition. The presentation layer
displays the message and lets the user retry; nothing here is fatal.
"""

from __future__ import annotations

from dataclasses import dataclass


# ══════════════════════════════════════════════════════════════
# REJECTION REASON (frozen explanation structure)
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class RejectionReason:
    """
    Structured reason for command rejection.

    Fields:
        code:        Machine-readable code (see ReasonCode).
        message:     Human-readable explanation.
        policy_name: Name of the policy that caused rejection.
    """

    code: str
    message: str
    policy_name: str

    def __post_init__(self):
        if not self.code or not isinstance(self.code, str):
            raise ValueError("code must be a non-empty string.")

        if not self.message or not isinstance(self.message, str):
            raise ValueError("message must be a non-empty string.")

        if not self.policy_name or not isinstance(self.policy_name, str):
            raise ValueError("policy_name must be a non-empty string.")

    @property
    def is_not_found(self) -> bool:
        return self.code.endswith("_NOT_FOUND")

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "message": self.message,
            "policy_name": self.policy_name,
        }


# ══════════════════════════════════════════════════════════════
# STANDARD REJECTION CODES
# ══════════════════════════════════════════════════════════════

class ReasonCode:
    """
    Known rejection codes.

    Convention: SCREAMING_SNAKE_CASE. Every *_NOT_FOUND code belongs
    to the NotFound family.
    """

    # ── NotFound ──────────────────────────────────────────────
    USER_NOT_FOUND = "USER_NOT_FOUND"
    CUSTOMER_NOT_FOUND = "CUSTOMER_NOT_FOUND"
    INVENTORY_ITEM_NOT_FOUND = "INVENTORY_ITEM_NOT_FOUND"
    INVOICE_NOT_FOUND = "INVOICE_NOT_FOUND"
    ORDER_NOT_FOUND = "ORDER_NOT_FOUND"
    ORDER_LINE_NOT_FOUND = "ORDER_LINE_NOT_FOUND"
    WHOLESALER_NOT_FOUND = "WHOLESALER_NOT_FOUND"
    NOTIFICATION_NOT_FOUND = "NOTIFICATION_NOT_FOUND"
    DELIVERY_REQUEST_NOT_FOUND = "DELIVERY_REQUEST_NOT_FOUND"

    # ── State machine ─────────────────────────────────────────
    INVALID_TRANSITION = "INVALID_TRANSITION"
    ORDER_CLOSED = "ORDER_CLOSED"
    OVER_RECEIPT = "OVER_RECEIPT"

    # ── Records ───────────────────────────────────────────────
    DUPLICATE_ID = "DUPLICATE_ID"
    DUPLICATE_USERNAME = "DUPLICATE_USERNAME"

    # ── Verification ──────────────────────────────────────────
    TOKEN_INVALID = "TOKEN_INVALID"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"
