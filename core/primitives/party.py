"""
POS Party Primitives — Users and Wholesalers
==============================================
A User is both a login identity and a credit account. Its
current_balance is the amount the customer owes the shop; only the
invoice ledger moves it (plus the administrative override).

A Wholesaler is a supplier record, the foreign-key target of purchase
orders and inventory cost-basis metadata.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple

from core.primitives.values import dt_from_str, dt_to_str, require_minor_units


# ══════════════════════════════════════════════════════════════
# ENUMS
# ══════════════════════════════════════════════════════════════

class UserRole(Enum):
    ADMIN = "ADMIN"
    FINANCE = "FINANCE"
    CASHIER = "CASHIER"
    CUSTOMER = "CUSTOMER"
    DELIVERY_CUSTOMER = "DELIVERY_CUSTOMER"


STAFF_ROLES = frozenset({UserRole.ADMIN, UserRole.FINANCE, UserRole.CASHIER})
CUSTOMER_ROLES = frozenset({UserRole.CUSTOMER, UserRole.DELIVERY_CUSTOMER})


class AccountStatus(Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


# ══════════════════════════════════════════════════════════════
# USER
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class User:
    """
    Identity + credit account.

    Fields:
        user_id:         Unique identifier.
        name:            Display name.
        role:            UserRole.
        username:        Login identity key (case-insensitive match).
        mobile, email, address: Contact fields.
        credit_limit:    Maximum balance allowed (minor units, >= 0).
        current_balance: Amount owed (minor units).
        status:          ACTIVE | INACTIVE.
        notes:           Free text.
        joined_date:     When the account was created.
        password_hash:   SHA-256 hex digest, None until registered.
    """
    user_id: str
    name: str
    role: UserRole
    username: str = ""
    mobile: str = ""
    email: str = ""
    address: str = ""
    credit_limit: int = 0
    current_balance: int = 0
    status: AccountStatus = AccountStatus.ACTIVE
    notes: str = ""
    joined_date: Optional[datetime] = None
    password_hash: Optional[str] = None

    def __post_init__(self):
        if not self.user_id or not isinstance(self.user_id, str):
            raise ValueError("user_id must be non-empty string.")
        if not self.name or not isinstance(self.name, str):
            raise ValueError("name must be non-empty string.")
        if not isinstance(self.role, UserRole):
            raise ValueError("role must be UserRole enum.")
        if not isinstance(self.status, AccountStatus):
            raise ValueError("status must be AccountStatus enum.")
        require_minor_units(self.credit_limit, "credit_limit")
        require_minor_units(self.current_balance, "current_balance", allow_negative=True)

    @property
    def is_active(self) -> bool:
        return self.status == AccountStatus.ACTIVE

    @property
    def is_customer(self) -> bool:
        return self.role in CUSTOMER_ROLES

    @property
    def available_credit(self) -> int:
        return self.credit_limit - self.current_balance

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "name": self.name,
            "role": self.role.value,
            "username": self.username,
            "mobile": self.mobile,
            "email": self.email,
            "address": self.address,
            "credit_limit": self.credit_limit,
            "current_balance": self.current_balance,
            "status": self.status.value,
            "notes": self.notes,
            "joined_date": dt_to_str(self.joined_date),
            "password_hash": self.password_hash,
        }

    @classmethod
    def from_dict(cls, data: dict) -> User:
        return cls(
            user_id=data["user_id"],
            name=data["name"],
            role=UserRole(data["role"]),
            username=data.get("username", ""),
            mobile=data.get("mobile", ""),
            email=data.get("email", ""),
            address=data.get("address", ""),
            credit_limit=data.get("credit_limit", 0),
            current_balance=data.get("current_balance", 0),
            status=AccountStatus(data.get("status", "ACTIVE")),
            notes=data.get("notes", ""),
            joined_date=dt_from_str(data.get("joined_date")),
            password_hash=data.get("password_hash"),
        )


# ══════════════════════════════════════════════════════════════
# WHOLESALER
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Wholesaler:
    """Supplier record."""
    wholesaler_id: str
    name: str
    code: str = ""
    contact_person: str = ""
    phone: str = ""
    email: str = ""
    address: str = ""
    city: str = ""
    payment_terms: str = ""
    linked_inventory_ids: Tuple[str, ...] = ()
    tags: Tuple[str, ...] = ()
    status: AccountStatus = AccountStatus.ACTIVE
    notes: str = ""

    def __post_init__(self):
        if not self.wholesaler_id or not isinstance(self.wholesaler_id, str):
            raise ValueError("wholesaler_id must be non-empty string.")
        if not self.name or not isinstance(self.name, str):
            raise ValueError("name must be non-empty string.")
        if not isinstance(self.linked_inventory_ids, tuple):
            raise TypeError("linked_inventory_ids must be a tuple.")
        if not isinstance(self.tags, tuple):
            raise TypeError("tags must be a tuple.")

    def to_dict(self) -> dict:
        return {
            "wholesaler_id": self.wholesaler_id,
            "name": self.name,
            "code": self.code,
            "contact_person": self.contact_person,
            "phone": self.phone,
            "email": self.email,
            "address": self.address,
            "city": self.city,
            "payment_terms": self.payment_terms,
            "linked_inventory_ids": list(self.linked_inventory_ids),
            "tags": list(self.tags),
            "status": self.status.value,
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Wholesaler:
        return cls(
            wholesaler_id=data["wholesaler_id"],
            name=data["name"],
            code=data.get("code", ""),
            contact_person=data.get("contact_person", ""),
            phone=data.get("phone", ""),
            email=data.get("email", ""),
            address=data.get("address", ""),
            city=data.get("city", ""),
            payment_terms=data.get("payment_terms", ""),
            linked_inventory_ids=tuple(data.get("linked_inventory_ids", ())),
            tags=tuple(data.get("tags", ())),
            status=AccountStatus(data.get("status", "ACTIVE")),
            notes=data.get("notes", ""),
        )
