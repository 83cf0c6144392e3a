"""
POS Auth — Event Types and Payload Builders
=============================================
Codes and password digests never appear in event payloads.
"""

from __future__ import annotations

from core.commands.base import Command

AUTH_VERIFICATION_GENERATED_V1 = "auth.verification.generated.v1"
AUTH_ACCOUNT_REGISTERED_V1 = "auth.account.registered.v1"

COMMAND_TO_EVENT_TYPE = {
    "auth.verification.generate.request": AUTH_VERIFICATION_GENERATED_V1,
    "auth.account.register.request": AUTH_ACCOUNT_REGISTERED_V1,
}


def resolve_auth_event_type(command_type: str) -> str | None:
    return COMMAND_TO_EVENT_TYPE.get(command_type)


def build_auth_payload(command: Command, *, user_id: str, expires_at=None) -> dict:
    payload = {
        "actor_id": command.actor_id,
        "command_id": str(command.command_id),
        "identity_key": command.payload["identity_key"],
        "user_id": user_id,
    }
    if expires_at is not None:
        payload["expires_at"] = expires_at.isoformat()
    return payload
