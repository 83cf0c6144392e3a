"""
POS Command Layer — Command Base Contract
============================================
Every state change in the ledger begins as a Command.

A Command is a frozen declaration of intent issued by the presentation
layer (a cashier screen, an admin screen, a customer portal). It carries
identity, time and payload. The engine decides; the command only asks.

Rules:
- Immutable once created (frozen dataclass)
- No business logic inside
- command_type follows engine.domain.action.request format
- issued_at is the only clock the engines read
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


# ══════════════════════════════════════════════════════════════
# ACTOR TYPES
# ══════════════════════════════════════════════════════════════

VALID_ACTOR_TYPES = frozenset({"HUMAN", "SYSTEM", "DEVICE"})


# ══════════════════════════════════════════════════════════════
# CANONICAL COMMAND
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Command:
    """
    Canonical POS Command — declaration of intent.

    Fields:
        command_id:     Unique identifier (UUID).
        command_type:   Namespaced type ending in '.request'
                        (e.g. 'invoicing.invoice.create.request').
        actor_type:     HUMAN | SYSTEM | DEVICE.
        actor_id:       User id of the session user issuing the command.
        payload:        Intent data (dict of plain values).
        issued_at:      When the command was issued (timezone-aware).
        correlation_id: Groups related commands in one user action.
        source_engine:  Engine that owns this command.
        actor_name:     Display name recorded in audit trails
                        (purchase-order timeline).
    """

    command_id: uuid.UUID
    command_type: str
    actor_type: str
    actor_id: str
    payload: dict
    issued_at: datetime
    correlation_id: uuid.UUID
    source_engine: str
    actor_name: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.command_id, uuid.UUID):
            raise ValueError(
                f"command_id must be UUID, got {type(self.command_id).__name__}"
            )

        if not self.command_type or not isinstance(self.command_type, str):
            raise ValueError("command_type must be a non-empty string.")

        if not self.command_type.endswith(".request"):
            raise ValueError(
                f"command_type '{self.command_type}' must end with "
                f"'.request' (e.g. 'invoicing.invoice.create.request')."
            )

        parts = self.command_type.split(".")
        if len(parts) < 4:
            raise ValueError(
                f"command_type '{self.command_type}' must follow "
                f"engine.domain.action.request format (minimum 4 segments)."
            )

        if parts[0] != self.source_engine:
            raise ValueError(
                f"command_type namespace '{parts[0]}' does not match "
                f"source_engine '{self.source_engine}'."
            )

        if self.actor_type not in VALID_ACTOR_TYPES:
            raise ValueError(
                f"actor_type '{self.actor_type}' not valid. "
                f"Must be one of: {sorted(VALID_ACTOR_TYPES)}"
            )

        if not self.actor_id or not isinstance(self.actor_id, str):
            raise ValueError("actor_id must be a non-empty string.")

        if not isinstance(self.payload, dict):
            raise TypeError("payload must be a dict.")

        if not isinstance(self.issued_at, datetime):
            raise ValueError("issued_at must be a datetime.")

        if self.issued_at.tzinfo is None:
            raise ValueError("issued_at must be timezone-aware.")

        if not isinstance(self.correlation_id, uuid.UUID):
            raise ValueError("correlation_id must be UUID.")

    @property
    def actor_label(self) -> str:
        """Name shown in timelines; falls back to the actor id."""
        return self.actor_name or self.actor_id


# ══════════════════════════════════════════════════════════════
# EVENT NAMING LAW (derivation helpers)
# ══════════════════════════════════════════════════════════════

def derive_rejection_event_type(command_type: str) -> str:
    """
    Derive rejected event type from command type.

    invoicing.invoice.create.request → invoicing.invoice.create.rejected
    """
    if not command_type.endswith(".request"):
        raise ValueError(
            f"Cannot derive rejection event type from "
            f"'{command_type}' — must end with '.request'."
        )

    base = command_type[: -len(".request")]
    return f"{base}.rejected"


def derive_source_engine(command_type: str) -> str:
    """
    Extract source engine from command type.

    procurement.order.create.request → procurement
    """
    return command_type.split(".")[0]
