"""
POS Wholesaler Engine — Request Commands
===========================================
Supplier records referenced by purchase orders.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from core.commands.base import Command

WHOLESALER_REGISTER_REQUEST = "wholesaler.supplier.register.request"
WHOLESALER_UPDATE_REQUEST = "wholesaler.supplier.update.request"

WHOLESALER_COMMAND_TYPES = frozenset({
    WHOLESALER_REGISTER_REQUEST,
    WHOLESALER_UPDATE_REQUEST,
})

UPDATABLE_WHOLESALER_FIELDS = frozenset({
    "name", "code", "contact_person", "phone", "email", "address", "city",
    "payment_terms", "linked_inventory_ids", "tags", "status", "notes",
})

VALID_WHOLESALER_STATUSES = frozenset({"ACTIVE", "INACTIVE"})


@dataclass(frozen=True)
class WholesalerRegisterRequest:
    wholesaler_id: str
    name: str
    code: str = ""
    contact_person: str = ""
    phone: str = ""
    email: str = ""
    address: str = ""
    city: str = ""
    payment_terms: str = ""
    linked_inventory_ids: tuple = field(default_factory=tuple)
    tags: tuple = field(default_factory=tuple)
    notes: str = ""

    def __post_init__(self):
        if not self.wholesaler_id:
            raise ValueError("wholesaler_id must be non-empty.")
        if not self.name:
            raise ValueError("name must be non-empty.")
        if not isinstance(self.linked_inventory_ids, tuple):
            raise ValueError("linked_inventory_ids must be tuple.")
        if not isinstance(self.tags, tuple):
            raise ValueError("tags must be tuple.")

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
            command_type=WHOLESALER_REGISTER_REQUEST,
            actor_type=actor_type,
            actor_id=actor_id,
            actor_name=actor_name,
            payload={
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
                "notes": self.notes,
            },
            issued_at=issued_at,
            correlation_id=correlation_id,
            source_engine="wholesaler",
        )


@dataclass(frozen=True)
class WholesalerUpdateRequest:
    wholesaler_id: str
    changes: dict

    def __post_init__(self):
        if not self.wholesaler_id:
            raise ValueError("wholesaler_id must be non-empty.")
        if not isinstance(self.changes, dict) or not self.changes:
            raise ValueError("changes must be a non-empty dict.")
        unknown = set(self.changes) - UPDATABLE_WHOLESALER_FIELDS
        if unknown:
            raise ValueError(f"Fields not updatable: {sorted(unknown)}")
        if "name" in self.changes and not self.changes["name"]:
            raise ValueError("name must be non-empty.")
        if "status" in self.changes and self.changes["status"] not in VALID_WHOLESALER_STATUSES:
            raise ValueError(f"status must be one of {sorted(VALID_WHOLESALER_STATUSES)}.")

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
        changes = dict(self.changes)
        for key in ("linked_inventory_ids", "tags"):
            if key in changes:
                changes[key] = list(changes[key])
        return Command(
            command_id=command_id,
            command_type=WHOLESALER_UPDATE_REQUEST,
            actor_type=actor_type,
            actor_id=actor_id,
            actor_name=actor_name,
            payload={"wholesaler_id": self.wholesaler_id, "changes": changes},
            issued_at=issued_at,
            correlation_id=correlation_id,
            source_engine="wholesaler",
        )
