"""
POS Notification Engine — Application Service
================================================
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import List

from core.commands.base import Command
from core.events import ChangeEvent
from core.primitives.records import Notification
from core.store import NOTIFICATIONS, ChangeSet, EntityStore
from engines.notification.commands import (
    NOTIFICATION_COMMAND_TYPES,
    NOTIFICATION_MARK_READ_REQUEST,
    NOTIFICATION_SEND_REQUEST,
)
from engines.notification.events import resolve_notification_event_type
from engines.notification.policies import NOTIFICATION_POLICIES

logger = logging.getLogger("pos.notification")


@dataclass(frozen=True)
class NotificationExecutionResult:
    event_type: str
    notification: Notification
    noop: bool = False


class _NotificationCommandHandler:
    def __init__(self, service: "NotificationService"):
        self._service = service

    def execute(self, command: Command) -> NotificationExecutionResult:
        return self._service._execute_command(command)


class NotificationService:
    def __init__(self, *, store: EntityStore, command_bus):
        self._store = store
        self._command_bus = command_bus
        for policy in NOTIFICATION_POLICIES:
            self._command_bus.dispatcher.register_policy(policy)
        handler = _NotificationCommandHandler(self)
        for command_type in sorted(NOTIFICATION_COMMAND_TYPES):
            self._command_bus.register_handler(command_type, handler)

    def _execute_command(self, command: Command) -> NotificationExecutionResult:
        event_type = resolve_notification_event_type(command.command_type)
        if event_type is None:
            raise ValueError(
                f"Unsupported notification command type: {command.command_type}"
            )

        if command.command_type == NOTIFICATION_SEND_REQUEST:
            notification = Notification(
                notification_id=command.payload["notification_id"],
                target_user_id=command.payload["target_user_id"],
                message=command.payload["message"],
                date=command.issued_at,
            )
        elif command.command_type == NOTIFICATION_MARK_READ_REQUEST:
            current = self._store.get(NOTIFICATIONS, command.payload["notification_id"])
            if current.read:
                return NotificationExecutionResult(
                    event_type=event_type, notification=current, noop=True,
                )
            notification = replace(current, read=True)
        else:
            raise ValueError(f"No executor for: {command.command_type}")

        changes = ChangeSet().put(NOTIFICATIONS, notification)
        event = ChangeEvent.from_command(
            command,
            event_type=event_type,
            payload={
                "notification_id": notification.notification_id,
                "target_user_id": notification.target_user_id,
            },
            collections=changes.touched,
        )
        self._store.commit(changes, event)

        logger.info(f"{event_type}: {notification.notification_id}")
        return NotificationExecutionResult(event_type=event_type, notification=notification)

    # ══════════════════════════════════════════════════════════
    # QUERIES
    # ══════════════════════════════════════════════════════════

    def notifications_for(self, user_id: str, *, unread_only: bool = False) -> List[Notification]:
        """Direct and broadcast notifications for a user, newest first."""
        found = self._store.find(
            NOTIFICATIONS,
            lambda n: n.is_for(user_id) and not (unread_only and n.read),
        )
        return sorted(found, key=lambda n: n.date, reverse=True)
