"""
POS Notification Engine — Event Types
========================================
"""

from __future__ import annotations

NOTIFICATION_SENT_V1 = "notification.message.sent.v1"
NOTIFICATION_READ_V1 = "notification.message.read.v1"

COMMAND_TO_EVENT_TYPE = {
    "notification.message.send.request": NOTIFICATION_SENT_V1,
    "notification.message.mark_read.request": NOTIFICATION_READ_V1,
}


def resolve_notification_event_type(command_type: str) -> str | None:
    return COMMAND_TO_EVENT_TYPE.get(command_type)
