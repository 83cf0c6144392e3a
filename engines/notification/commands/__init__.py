"""
POS Notification Engine — Request Commands
=============================================
Staff-to-customer messages. A target of "ALL" broadcasts to every user.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from core.commands.base import Command

NOTIFICATION_SEND_REQUEST = "notification.message.send.request"
NOTIFICATION_MARK_READ_REQUEST = "notification.message.mark_read.request"

NOTIFICATION_COMMAND_TYPES = frozenset({
    NOTIFICATION_SEND_REQUEST,
    NOTIFICATION_MARK_READ_REQUEST,
})


@dataclass(frozen=True)
class NotificationSendRequest:
    notification_id: str
    target_user_id: str
    message: str

    def __post_init__(self):
        if not self.notification_id:
            raise ValueError("notification_id must be non-empty.")
        if not self.target_user_id:
            raise ValueError("target_user_id must be non-empty.")
        if not self.message or not self.message.strip():
            raise ValueError("message must be non-empty.")

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
            command_type=NOTIFICATION_SEND_REQUEST,
            actor_type=actor_type,
            actor_id=actor_id,
            actor_name=actor_name,
            payload={
                "notification_id": self.notification_id,
                "target_user_id": self.target_user_id,
                "message": self.message,
            },
            issued_at=issued_at,
            correlation_id=correlation_id,
            source_engine="notification",
        )


@dataclass(frozen=True)
class NotificationMarkReadRequest:
    notification_id: str

    def __post_init__(self):
        if not self.notification_id:
            raise ValueError("notification_id must be non-empty.")

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
            command_type=NOTIFICATION_MARK_READ_REQUEST,
            actor_type=actor_type,
            actor_id=actor_id,
            actor_name=actor_name,
            payload={"notification_id": self.notification_id},
            issued_at=issued_at,
            correlation_id=correlation_id,
            source_engine="notification",
        )
