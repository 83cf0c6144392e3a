"""
POS Auth — Application Service
================================
Verification tokens and the login check.

Token lifecycle:
    generate → (at most one live token per identity key, TTL 10 min)
    register → code + expiry checked by policy → password set,
               token deleted (single use)

Login: authenticate(role, username, password) resolves credentials to
an active User of that role, or None. The ledger engines trust whatever
User the presentation layer hands them and never call back here.
"""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass, replace
from typing import Callable, Optional

from core.auth.commands import (
    AUTH_ACCOUNT_REGISTER_REQUEST,
    AUTH_COMMAND_TYPES,
    AUTH_VERIFICATION_GENERATE_REQUEST,
    CODE_LENGTH,
)
from core.auth.events import build_auth_payload, resolve_auth_event_type
from core.auth.passwords import verify_password
from core.auth.policies import AUTH_POLICIES
from core.commands.base import Command
from core.events import ChangeEvent
from core.primitives.party import User, UserRole
from core.primitives.records import VerificationToken
from core.store import USERS, VERIFICATION_TOKENS, ChangeSet, EntityStore
from core.time import expiry_from

logger = logging.getLogger("pos.auth")

TOKEN_TTL_SECONDS = 600


def generate_numeric_code(length: int = CODE_LENGTH) -> str:
    """Uniform random digits from the OS CSPRNG (leading zeros kept)."""
    return "".join(secrets.choice("0123456789") for _ in range(length))


@dataclass(frozen=True)
class AuthExecutionResult:
    event_type: str
    user: User
    token: Optional[VerificationToken] = None


class _AuthCommandHandler:
    def __init__(self, service: "AuthService"):
        self._service = service

    def execute(self, command: Command) -> AuthExecutionResult:
        return self._service._execute_command(command)


class AuthService:
    def __init__(
        self,
        *,
        store: EntityStore,
        command_bus,
        code_generator: Callable[[], str] = generate_numeric_code,
        token_ttl_seconds: int = TOKEN_TTL_SECONDS,
    ):
        self._store = store
        self._command_bus = command_bus
        self._code_generator = code_generator
        self._token_ttl_seconds = token_ttl_seconds

        for policy in AUTH_POLICIES:
            self._command_bus.dispatcher.register_policy(policy)
        handler = _AuthCommandHandler(self)
        for command_type in sorted(AUTH_COMMAND_TYPES):
            self._command_bus.register_handler(command_type, handler)

    def _execute_command(self, command: Command) -> AuthExecutionResult:
        if command.command_type == AUTH_VERIFICATION_GENERATE_REQUEST:
            return self._generate(command)
        if command.command_type == AUTH_ACCOUNT_REGISTER_REQUEST:
            return self._register(command)
        raise ValueError(f"Unsupported auth command type: {command.command_type}")

    def _generate(self, command: Command) -> AuthExecutionResult:
        user = self._store.get_user(command.payload["user_id"])
        token = VerificationToken(
            identity_key=command.payload["identity_key"],
            user_id=user.user_id,
            code=self._code_generator(),
            expires_at=expiry_from(command.issued_at, self._token_ttl_seconds),
        )
        # Keyed by identity: putting the new token replaces any live one.
        changes = ChangeSet().put(VERIFICATION_TOKENS, token)
        event_type = resolve_auth_event_type(command.command_type)
        self._commit(
            command,
            changes,
            event_type,
            build_auth_payload(command, user_id=user.user_id, expires_at=token.expires_at),
        )
        logger.info(
            f"Verification code issued for {token.identity_key} "
            f"(expires {token.expires_at.isoformat()})"
        )
        return AuthExecutionResult(event_type=event_type, user=user, token=token)

    def _register(self, command: Command) -> AuthExecutionResult:
        identity_key = command.payload["identity_key"]
        token = self._store.get(VERIFICATION_TOKENS, identity_key)
        user = self._store.get_user(token.user_id)
        updated = replace(
            user,
            username=user.username or identity_key,
            password_hash=command.payload["password_hash"],
        )
        changes = (
            ChangeSet()
            .put(USERS, updated)
            .delete(VERIFICATION_TOKENS, identity_key)
        )
        event_type = resolve_auth_event_type(command.command_type)
        self._commit(
            command, changes, event_type,
            build_auth_payload(command, user_id=user.user_id),
        )
        logger.info(f"Account registered for {identity_key} ({user.user_id})")
        return AuthExecutionResult(event_type=event_type, user=updated)

    def _commit(self, command, changes, event_type, payload) -> None:
        event = ChangeEvent.from_command(
            command,
            event_type=event_type,
            payload=payload,
            collections=changes.touched,
        )
        self._store.commit(changes, event)

    # ══════════════════════════════════════════════════════════
    # LOGIN CHECK
    # ══════════════════════════════════════════════════════════

    def authenticate(self, role: str, username: str, password: str) -> Optional[User]:
        wanted = (username or "").strip().lower()
        if not wanted:
            return None
        try:
            wanted_role = UserRole(role)
        except ValueError:
            return None

        user = self._store.find_one(
            USERS,
            lambda u: u.username.strip().lower() == wanted and u.role == wanted_role,
        )
        if user is None or not user.is_active:
            logger.info(f"Login refused for '{wanted}' as {wanted_role.value}")
            return None
        if not verify_password(password, user.password_hash):
            logger.info(f"Login refused for '{wanted}': bad password")
            return None
        return user
