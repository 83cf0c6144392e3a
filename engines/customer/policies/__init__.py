"""
POS Customer Engine — Policies
=================================
Unique ids and unique (case-insensitive) usernames.
"""

from __future__ import annotations

from typing import Optional

from core.commands.base import Command
from core.commands.rejection import ReasonCode, RejectionReason
from engines.customer.commands import (
    CUSTOMER_USER_IMPORT_REQUEST,
    CUSTOMER_USER_REGISTER_REQUEST,
    CUSTOMER_USER_UPDATE_REQUEST,
)


def _incoming_users(command: Command) -> list:
    if command.command_type == CUSTOMER_USER_REGISTER_REQUEST:
        return [command.payload]
    if command.command_type == CUSTOMER_USER_IMPORT_REQUEST:
        return list(command.payload["users"])
    return []


def user_id_must_be_unique_policy(
    command: Command, store,
) -> Optional[RejectionReason]:
    taken = [u["user_id"] for u in _incoming_users(command) if store.get_user(u["user_id"])]
    if taken:
        return RejectionReason(
            code=ReasonCode.DUPLICATE_ID,
            message=f"User id(s) already exist: {', '.join(taken)}.",
            policy_name="user_id_must_be_unique_policy",
        )
    return None


def username_must_be_unique_policy(
    command: Command, store,
) -> Optional[RejectionReason]:
    if command.command_type == CUSTOMER_USER_UPDATE_REQUEST:
        username = command.payload["changes"].get("username")
        candidates = [(username, command.payload["user_id"])] if username else []
    else:
        candidates = [
            (u["username"], u["user_id"]) for u in _incoming_users(command) if u["username"]
        ]

    seen = set()
    for username, user_id in candidates:
        key = username.strip().lower()
        if key in seen or store.find_user_by_username(username, exclude_id=user_id):
            return RejectionReason(
                code=ReasonCode.DUPLICATE_USERNAME,
                message=f"Username '{username}' is already taken.",
                policy_name="username_must_be_unique_policy",
            )
        seen.add(key)
    return None


def user_must_exist_for_update_policy(
    command: Command, store,
) -> Optional[RejectionReason]:
    if command.command_type != CUSTOMER_USER_UPDATE_REQUEST:
        return None

    user_id = command.payload["user_id"]
    if store.get_user(user_id) is None:
        return RejectionReason(
            code=ReasonCode.USER_NOT_FOUND,
            message=f"User '{user_id}' not found.",
            policy_name="user_must_exist_for_update_policy",
        )
    return None


CUSTOMER_POLICIES = (
    user_id_must_be_unique_policy,
    user_must_exist_for_update_policy,
    username_must_be_unique_policy,
)
