"""
POS Notification Engine — Policies
=====================================
"""

from __future__ import annotations

from typing import Optional

from core.commands.base import Command
from core.commands.rejection import ReasonCode, RejectionReason
from core.primitives.records import BROADCAST_TARGET
from core.store import NOTIFICATIONS
from engines.notification.commands import (
    NOTIFICATION_MARK_READ_REQUEST,
    NOTIFICATION_SEND_REQUEST,
)


def notification_id_must_be_unique_policy(
    command: Command, store,
) -> Optional[RejectionReason]:
    if command.command_type != NOTIFICATION_SEND_REQUEST:
        return None

    notification_id = command.payload["notification_id"]
    if store.exists(NOTIFICATIONS, notification_id):
        return RejectionReason(
            code=ReasonCode.DUPLICATE_ID,
            message=f"Notification '{notification_id}' already exists.",
            policy_name="notification_id_must_be_unique_policy",
        )
    return None


def notification_target_must_exist_policy(
    command: Command, store,
) -> Optional[RejectionReason]:
    if command.command_type != NOTIFICATION_SEND_REQUEST:
        return None

    target = command.payload["target_user_id"]
    if target != BROADCAST_TARGET and store.get_user(target) is None:
        return RejectionReason(
            code=ReasonCode.USER_NOT_FOUND,
            message=f"Notification target '{target}' not found.",
            policy_name="notification_target_must_exist_policy",
        )
    return None


def notification_must_exist_policy(
    command: Command, store,
) -> Optional[RejectionReason]:
    if command.command_type != NOTIFICATION_MARK_READ_REQUEST:
        return None

    notification_id = command.payload["notification_id"]
    if not store.exists(NOTIFICATIONS, notification_id):
        return RejectionReason(
            code=ReasonCode.NOTIFICATION_NOT_FOUND,
            message=f"Notification '{notification_id}' not found.",
            policy_name="notification_must_exist_policy",
        )
    return None


NOTIFICATION_POLICIES = (
    notification_id_must_be_unique_policy,
    notification_target_must_exist_policy,
    notification_must_exist_policy,
)
