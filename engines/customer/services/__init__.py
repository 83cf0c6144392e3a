"""
POS Customer Engine — Application Service
============================================
User account records plus the credit queries the POS screen uses to
gate credit sales.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import List, Optional

from core.commands.base import Command
from core.events import ChangeEvent
from core.primitives.party import AccountStatus, User, UserRole
from core.store import USERS, ChangeSet, EntityStore
from engines.customer.commands import (
    CUSTOMER_COMMAND_TYPES,
    CUSTOMER_USER_IMPORT_REQUEST,
    CUSTOMER_USER_REGISTER_REQUEST,
    CUSTOMER_USER_UPDATE_REQUEST,
)
from engines.customer.events import (
    build_customer_payload,
    resolve_customer_event_type,
)
from engines.customer.policies import CUSTOMER_POLICIES

logger = logging.getLogger("pos.customer")


@dataclass(frozen=True)
class CustomerExecutionResult:
    event_type: str
    users: List[User]


class _CustomerCommandHandler:
    def __init__(self, service: "CustomerService"):
        self._service = service

    def execute(self, command: Command) -> CustomerExecutionResult:
        return self._service._execute_command(command)


class CustomerService:
    def __init__(self, *, store: EntityStore, command_bus):
        self._store = store
        self._command_bus = command_bus
        for policy in CUSTOMER_POLICIES:
            self._command_bus.dispatcher.register_policy(policy)
        handler = _CustomerCommandHandler(self)
        for command_type in sorted(CUSTOMER_COMMAND_TYPES):
            self._command_bus.register_handler(command_type, handler)

    def _new_user(self, data: dict, command: Command) -> User:
        role = UserRole(data["role"])
        credit_limit = data.get("credit_limit")
        if credit_limit is None:
            credit_limit = (
                self._store.settings.default_credit_limit
                if role in (UserRole.CUSTOMER, UserRole.DELIVERY_CUSTOMER)
                else 0
            )
        return User(
            user_id=data["user_id"],
            name=data["name"],
            role=role,
            username=data.get("username", ""),
            mobile=data.get("mobile", ""),
            email=data.get("email", ""),
            address=data.get("address", ""),
            credit_limit=credit_limit,
            current_balance=0,
            notes=data.get("notes", ""),
            joined_date=command.issued_at,
            password_hash=data.get("password_hash"),
        )

    def _execute_command(self, command: Command) -> CustomerExecutionResult:
        event_type = resolve_customer_event_type(command.command_type)
        if event_type is None:
            raise ValueError(
                f"Unsupported customer command type: {command.command_type}"
            )

        if command.command_type == CUSTOMER_USER_REGISTER_REQUEST:
            users = [self._new_user(command.payload, command)]
        elif command.command_type == CUSTOMER_USER_IMPORT_REQUEST:
            users = [self._new_user(row, command) for row in command.payload["users"]]
        elif command.command_type == CUSTOMER_USER_UPDATE_REQUEST:
            users = [self._updated_user(command.payload)]
        else:
            raise ValueError(f"No executor for: {command.command_type}")

        changes = ChangeSet()
        for user in users:
            changes.put(USERS, user)
        event = ChangeEvent.from_command(
            command,
            event_type=event_type,
            payload=build_customer_payload(command, [u.user_id for u in users]),
            collections=changes.touched,
        )
        self._store.commit(changes, event)

        logger.info(f"{event_type}: {len(users)} user(s)")
        return CustomerExecutionResult(event_type=event_type, users=users)

    def _updated_user(self, data: dict) -> User:
        user = self._store.get_user(data["user_id"])
        changes = dict(data["changes"])
        if "role" in changes:
            changes["role"] = UserRole(changes["role"])
        if "status" in changes:
            changes["status"] = AccountStatus(changes["status"])
        if "current_balance" in changes and changes["current_balance"] != user.current_balance:
            logger.warning(
                f"Administrative balance override for {user.user_id}: "
                f"{user.current_balance} → {changes['current_balance']}"
            )
        return replace(user, **changes)

    # ══════════════════════════════════════════════════════════
    # QUERIES
    # ══════════════════════════════════════════════════════════

    def customers(self) -> List[User]:
        return self._store.find(USERS, lambda u: u.is_customer)

    def available_credit(self, user_id: str) -> Optional[int]:
        user = self._store.get_user(user_id)
        return None if user is None else user.available_credit

    def can_afford(self, user_id: str, amount: int) -> bool:
        """Credit-limit gate applied by the POS before a credit sale."""
        available = self.available_credit(user_id)
        return available is not None and amount <= available
