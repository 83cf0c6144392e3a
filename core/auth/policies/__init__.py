"""
POS Auth — Policies
=====================
TOKEN_INVALID: no live token for the identity, or the code differs.
TOKEN_EXPIRED: the code matched but the command was issued after the
token's expiry.
DUPLICATE_USERNAME: signup would give the account a login that
another account already uses.
"""

from __future__ import annotations

import hmac
from typing import Optional

from core.auth.commands import (
    AUTH_ACCOUNT_REGISTER_REQUEST,
    AUTH_VERIFICATION_GENERATE_REQUEST,
)
from core.commands.base import Command
from core.commands.rejection import ReasonCode, RejectionReason
from core.store import VERIFICATION_TOKENS
from core.time import is_past


def verification_user_must_exist_policy(
    command: Command, store,
) -> Optional[RejectionReason]:
    if command.command_type != AUTH_VERIFICATION_GENERATE_REQUEST:
        return None

    user_id = command.payload["user_id"]
    if store.get_user(user_id) is None:
        return RejectionReason(
            code=ReasonCode.USER_NOT_FOUND,
            message=f"User '{user_id}' not found.",
            policy_name="verification_user_must_exist_policy",
        )
    return None


def _codes_match(expected: str, supplied: str) -> bool:
    # compare_digest only accepts ASCII str, so compare the encoded bytes.
    return hmac.compare_digest(expected.encode("utf-8"), supplied.encode("utf-8"))


def verification_code_must_match_policy(
    command: Command, store,
) -> Optional[RejectionReason]:
    if command.command_type != AUTH_ACCOUNT_REGISTER_REQUEST:
        return None

    token = store.get(VERIFICATION_TOKENS, command.payload["identity_key"])
    if token is None or not _codes_match(token.code, command.payload["code"]):
        return RejectionReason(
            code=ReasonCode.TOKEN_INVALID,
            message="Invalid verification code.",
            policy_name="verification_code_must_match_policy",
        )

    if is_past(token.expires_at, command.issued_at):
        return RejectionReason(
            code=ReasonCode.TOKEN_EXPIRED,
            message="Verification code has expired. Request a new one.",
            policy_name="verification_code_must_match_policy",
        )

    if store.get_user(token.user_id) is None:
        return RejectionReason(
            code=ReasonCode.USER_NOT_FOUND,
            message=f"User '{token.user_id}' not found.",
            policy_name="verification_code_must_match_policy",
        )
    return None


def signup_username_must_be_free_policy(
    command: Command, store,
) -> Optional[RejectionReason]:
    """
    An account without a username takes the identity key as its login,
    which must not already belong to someone else.
    """
    if command.command_type != AUTH_ACCOUNT_REGISTER_REQUEST:
        return None

    identity_key = command.payload["identity_key"]
    token = store.get(VERIFICATION_TOKENS, identity_key)
    user = store.get_user(token.user_id) if token is not None else None
    if user is None or user.username:
        return None

    if store.find_user_by_username(identity_key, exclude_id=user.user_id):
        return RejectionReason(
            code=ReasonCode.DUPLICATE_USERNAME,
            message=f"Username '{identity_key}' is already taken.",
            policy_name="signup_username_must_be_free_policy",
        )
    return None


AUTH_POLICIES = (
    verification_user_must_exist_policy,
    verification_code_must_match_policy,
    signup_username_must_be_free_policy,
)
