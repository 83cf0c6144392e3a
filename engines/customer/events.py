"""
POS Customer Engine — Event Types and Payload Builders
=========================================================
"""

from __future__ import annotations

from core.commands.base import Command

CUSTOMER_USER_REGISTERED_V1 = "customer.user.registered.v1"
CUSTOMER_USERS_IMPORTED_V1 = "customer.users.imported.v1"
CUSTOMER_USER_UPDATED_V1 = "customer.user.updated.v1"

COMMAND_TO_EVENT_TYPE = {
    "customer.user.register.request": CUSTOMER_USER_REGISTERED_V1,
    "customer.user.import.request": CUSTOMER_USERS_IMPORTED_V1,
    "customer.user.update.request": CUSTOMER_USER_UPDATED_V1,
}


def resolve_customer_event_type(command_type: str) -> str | None:
    return COMMAND_TO_EVENT_TYPE.get(command_type)


def build_customer_payload(command: Command, user_ids: list) -> dict:
    payload = {
        "actor_id": command.actor_id,
        "command_id": str(command.command_id),
        "user_ids": list(user_ids),
    }
    if "changes" in command.payload:
        # Password digests never travel in events.
        payload["changed_fields"] = sorted(command.payload["changes"])
    return payload
