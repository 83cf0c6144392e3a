"""
POS Wholesaler Engine — Policies
===================================
"""

from __future__ import annotations

from typing import Optional

from core.commands.base import Command
from core.commands.rejection import ReasonCode, RejectionReason
from engines.wholesaler.commands import (
    WHOLESALER_REGISTER_REQUEST,
    WHOLESALER_UPDATE_REQUEST,
)


def wholesaler_id_must_be_unique_policy(
    command: Command, store,
) -> Optional[RejectionReason]:
    if command.command_type != WHOLESALER_REGISTER_REQUEST:
        return None

    wholesaler_id = command.payload["wholesaler_id"]
    if store.get_wholesaler(wholesaler_id) is not None:
        return RejectionReason(
            code=ReasonCode.DUPLICATE_ID,
            message=f"Wholesaler '{wholesaler_id}' already exists.",
            policy_name="wholesaler_id_must_be_unique_policy",
        )
    return None


def wholesaler_must_exist_for_update_policy(
    command: Command, store,
) -> Optional[RejectionReason]:
    if command.command_type != WHOLESALER_UPDATE_REQUEST:
        return None

    wholesaler_id = command.payload["wholesaler_id"]
    if store.get_wholesaler(wholesaler_id) is None:
        return RejectionReason(
            code=ReasonCode.WHOLESALER_NOT_FOUND,
            message=f"Wholesaler '{wholesaler_id}' not found.",
            policy_name="wholesaler_must_exist_for_update_policy",
        )
    return None


WHOLESALER_POLICIES = (
    wholesaler_id_must_be_unique_policy,
    wholesaler_must_exist_for_update_policy,
)
