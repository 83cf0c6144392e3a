"""
POS Customer Engine — Request Commands
=========================================
User accounts: registration by an administrator, bulk import, and
administrative updates. Deletion is a presentation-level concern and
has no command here.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from core.auth.passwords import hash_password
from core.commands.base import Command
from core.primitives.party import AccountStatus, UserRole


# ══════════════════════════════════════════════════════════════
# COMMAND TYPE CONSTANTS
# ══════════════════════════════════════════════════════════════

CUSTOMER_USER_REGISTER_REQUEST = "customer.user.register.request"
CUSTOMER_USER_IMPORT_REQUEST = "customer.user.import.request"
CUSTOMER_USER_UPDATE_REQUEST = "customer.user.update.request"

CUSTOMER_COMMAND_TYPES = frozenset({
    CUSTOMER_USER_REGISTER_REQUEST,
    CUSTOMER_USER_IMPORT_REQUEST,
    CUSTOMER_USER_UPDATE_REQUEST,
})

VALID_ROLES = frozenset(r.value for r in UserRole)
VALID_STATUSES = frozenset(s.value for s in AccountStatus)

TEXT_FIELDS = frozenset({"name", "username", "mobile", "email", "address", "notes"})
AMOUNT_FIELDS = frozenset({"credit_limit", "current_balance"})
UPDATABLE_USER_FIELDS = TEXT_FIELDS | AMOUNT_FIELDS | {"status", "role"}


def _user_payload(request) -> dict:
    return {
        "user_id": request.user_id,
        "name": request.name,
        "role": request.role,
        "username": request.username,
        "mobile": request.mobile,
        "email": request.email,
        "address": request.address,
        "credit_limit": request.credit_limit,
        "notes": request.notes,
        "password_hash": hash_password(request.password) if request.password else None,
    }


# ══════════════════════════════════════════════════════════════
# REQUEST COMMANDS
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class UserRegisterRequest:
    """
    Create a user account. credit_limit=None applies the shop default
    for customer roles and 0 for staff. Balance always starts at 0.
    """
    user_id: str
    name: str
    role: str = "CUSTOMER"
    username: str = ""
    mobile: str = ""
    email: str = ""
    address: str = ""
    credit_limit: Optional[int] = None
    notes: str = ""
    password: Optional[str] = field(default=None, repr=False)

    def __post_init__(self):
        if not self.user_id:
            raise ValueError("user_id must be non-empty.")
        if not self.name:
            raise ValueError("name must be non-empty.")
        if self.role not in VALID_ROLES:
            raise ValueError(
                f"role '{self.role}' not valid. Must be one of: {sorted(VALID_ROLES)}"
            )
        if self.credit_limit is not None and (
            isinstance(self.credit_limit, bool)
            or not isinstance(self.credit_limit, int)
            or self.credit_limit < 0
        ):
            raise ValueError("credit_limit must be non-negative integer.")

    def to_payload(self) -> dict:
        return _user_payload(self)

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
            command_type=CUSTOMER_USER_REGISTER_REQUEST,
            actor_type=actor_type,
            actor_id=actor_id,
            actor_name=actor_name,
            payload=self.to_payload(),
            issued_at=issued_at,
            correlation_id=correlation_id,
            source_engine="customer",
        )


@dataclass(frozen=True)
class UserImportRequest:
    """Bulk import. All rows are added or none are."""
    users: tuple

    def __post_init__(self):
        if not isinstance(self.users, tuple) or len(self.users) == 0:
            raise ValueError("users must be non-empty tuple.")
        for user in self.users:
            if not isinstance(user, UserRegisterRequest):
                raise ValueError("users must contain UserRegisterRequest items.")
        ids = [u.user_id for u in self.users]
        if len(ids) != len(set(ids)):
            raise ValueError("users must not repeat a user_id.")

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
            command_type=CUSTOMER_USER_IMPORT_REQUEST,
            actor_type=actor_type,
            actor_id=actor_id,
            actor_name=actor_name,
            payload={"users": [u.to_payload() for u in self.users]},
            issued_at=issued_at,
            correlation_id=correlation_id,
            source_engine="customer",
        )


@dataclass(frozen=True)
class UserUpdateRequest:
    """
    Administrative edit of a user record. Setting current_balance here
    is the trusted override; the ledger never does it this way.
    """
    user_id: str
    changes: dict

    def __post_init__(self):
        if not self.user_id:
            raise ValueError("user_id must be non-empty.")
        if not isinstance(self.changes, dict) or not self.changes:
            raise ValueError("changes must be a non-empty dict.")
        unknown = set(self.changes) - UPDATABLE_USER_FIELDS
        if unknown:
            raise ValueError(f"Fields not updatable: {sorted(unknown)}")
        for key in AMOUNT_FIELDS & set(self.changes):
            value = self.changes[key]
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{key} must be integer (minor units).")
        if self.changes.get("credit_limit", 0) < 0:
            raise ValueError("credit_limit must be non-negative.")
        if "role" in self.changes and self.changes["role"] not in VALID_ROLES:
            raise ValueError(f"role '{self.changes['role']}' not valid.")
        if "status" in self.changes and self.changes["status"] not in VALID_STATUSES:
            raise ValueError(f"status '{self.changes['status']}' not valid.")
        if "name" in self.changes and not self.changes["name"]:
            raise ValueError("name must be non-empty.")

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
            command_type=CUSTOMER_USER_UPDATE_REQUEST,
            actor_type=actor_type,
            actor_id=actor_id,
            actor_name=actor_name,
            payload={"user_id": self.user_id, "changes": dict(self.changes)},
            issued_at=issued_at,
            correlation_id=correlation_id,
            source_engine="customer",
        )
