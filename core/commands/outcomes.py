"""
POS Command Layer — Command Outcome Contract
===============================================
Every Command produces exactly one Outcome.

ACCEPTED → intent authorized, the engine applies it.
REJECTED → intent denied; the reason is mandatory and shown to the user.

Rules:
- Outcome is immutable (frozen dataclass)
- REJECTED must contain reason (RejectionReason)
- ACCEPTED must NOT contain reason
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional
import uuid

from core.commands.rejection import RejectionReason


class CommandStatus(Enum):
    """Binary command decision."""
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


@dataclass(frozen=True)
class CommandOutcome:
    """
    Deterministic result of command evaluation.

    Fields:
        command_id:  The command this outcome belongs to.
        status:      ACCEPTED or REJECTED.
        reason:      RejectionReason (mandatory if REJECTED, None if ACCEPTED).
        occurred_at: The command's issued_at.
    """

    command_id: uuid.UUID
    status: CommandStatus
    reason: Optional[RejectionReason]
    occurred_at: datetime

    def __post_init__(self):
        if not isinstance(self.command_id, uuid.UUID):
            raise ValueError("command_id must be UUID.")

        if not isinstance(self.status, CommandStatus):
            raise ValueError(
                f"status must be CommandStatus, got {type(self.status).__name__}."
            )

        if self.status == CommandStatus.REJECTED and self.reason is None:
            raise ValueError(
                "REJECTED outcome must include a RejectionReason."
            )

        if self.status == CommandStatus.ACCEPTED and self.reason is not None:
            raise ValueError(
                "ACCEPTED outcome must NOT include a RejectionReason."
            )

        if not isinstance(self.occurred_at, datetime):
            raise ValueError("occurred_at must be a datetime.")

    @classmethod
    def accepted(cls, command_id: uuid.UUID, occurred_at: datetime) -> "CommandOutcome":
        return cls(
            command_id=command_id,
            status=CommandStatus.ACCEPTED,
            reason=None,
            occurred_at=occurred_at,
        )

    @classmethod
    def rejected(
        cls,
        command_id: uuid.UUID,
        reason: RejectionReason,
        occurred_at: datetime,
    ) -> "CommandOutcome":
        return cls(
            command_id=command_id,
            status=CommandStatus.REJECTED,
            reason=reason,
            occurred_at=occurred_at,
        )

    @property
    def is_accepted(self) -> bool:
        return self.status == CommandStatus.ACCEPTED

    @property
    def is_rejected(self) -> bool:
        return self.status == CommandStatus.REJECTED
