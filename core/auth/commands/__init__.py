"""
POS Auth — Request Commands
==============================
Verification-code issue and the signup it unlocks.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from core.auth.passwords import hash_password
from core.commands.base import Command

AUTH_VERIFICATION_GENERATE_REQUEST = "auth.verification.generate.request"
AUTH_ACCOUNT_REGISTER_REQUEST = "auth.account.register.request"

AUTH_COMMAND_TYPES = frozenset({
    AUTH_VERIFICATION_GENERATE_REQUEST,
    AUTH_ACCOUNT_REGISTER_REQUEST,
})

CODE_LENGTH = 6
MIN_PASSWORD_LENGTH = 3


@dataclass(frozen=True)
class VerificationCodeRequest:
    """Issue a fresh code for identity_key, replacing any live one."""
    user_id: str
    identity_key: str

    def __post_init__(self):
        if not self.user_id:
            raise ValueError("user_id must be non-empty.")
        if not self.identity_key or not self.identity_key.strip():
            raise ValueError("identity_key must be non-empty.")

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
            command_type=AUTH_VERIFICATION_GENERATE_REQUEST,
            actor_type=actor_type,
            actor_id=actor_id,
            actor_name=actor_name,
            payload={
                "user_id": self.user_id,
                "identity_key": self.identity_key.strip(),
            },
            issued_at=issued_at,
            correlation_id=correlation_id,
            source_engine="auth",
        )


@dataclass(frozen=True)
class AccountRegisterRequest:
    """Consume a verification code and set the account password."""
    identity_key: str
    code: str
    password: str = field(repr=False)

    def __post_init__(self):
        if not self.identity_key or not self.identity_key.strip():
            raise ValueError("identity_key must be non-empty.")
        if not isinstance(self.code, str) or not self.code:
            raise ValueError("code must be a non-empty string.")
        if not isinstance(self.password, str) or len(self.password) < MIN_PASSWORD_LENGTH:
            raise ValueError(
                f"password must be at least {MIN_PASSWORD_LENGTH} characters."
            )

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
            command_type=AUTH_ACCOUNT_REGISTER_REQUEST,
            actor_type=actor_type,
            actor_id=actor_id,
            actor_name=actor_name,
            payload={
                "identity_key": self.identity_key.strip(),
                "code": self.code.strip(),
                "password_hash": hash_password(self.password),
            },
            issued_at=issued_at,
            correlation_id=correlation_id,
            source_engine="auth",
        )
