"""
POS Wholesaler Engine — Application Service
==============================================
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import List

from core.commands.base import Command
from core.events import ChangeEvent
from core.primitives.party import AccountStatus, Wholesaler
from core.store import PURCHASE_ORDERS, WHOLESALERS, ChangeSet, EntityStore
from engines.wholesaler.commands import (
    WHOLESALER_COMMAND_TYPES,
    WHOLESALER_REGISTER_REQUEST,
    WHOLESALER_UPDATE_REQUEST,
)
from engines.wholesaler.events import resolve_wholesaler_event_type
from engines.wholesaler.policies import WHOLESALER_POLICIES

logger = logging.getLogger("pos.wholesaler")


@dataclass(frozen=True)
class WholesalerExecutionResult:
    event_type: str
    wholesaler: Wholesaler


class _WholesalerCommandHandler:
    def __init__(self, service: "WholesalerService"):
        self._service = service

    def execute(self, command: Command) -> WholesalerExecutionResult:
        return self._service._execute_command(command)


class WholesalerService:
    def __init__(self, *, store: EntityStore, command_bus):
        self._store = store
        self._command_bus = command_bus
        for policy in WHOLESALER_POLICIES:
            self._command_bus.dispatcher.register_policy(policy)
        handler = _WholesalerCommandHandler(self)
        for command_type in sorted(WHOLESALER_COMMAND_TYPES):
            self._command_bus.register_handler(command_type, handler)

    def _execute_command(self, command: Command) -> WholesalerExecutionResult:
        event_type = resolve_wholesaler_event_type(command.command_type)
        if event_type is None:
            raise ValueError(
                f"Unsupported wholesaler command type: {command.command_type}"
            )

        if command.command_type == WHOLESALER_REGISTER_REQUEST:
            wholesaler = Wholesaler.from_dict(command.payload)
        elif command.command_type == WHOLESALER_UPDATE_REQUEST:
            current = self._store.get_wholesaler(command.payload["wholesaler_id"])
            changes = dict(command.payload["changes"])
            for key in ("linked_inventory_ids", "tags"):
                if key in changes:
                    changes[key] = tuple(changes[key])
            if "status" in changes:
                changes["status"] = AccountStatus(changes["status"])
            wholesaler = replace(current, **changes)
        else:
            raise ValueError(f"No executor for: {command.command_type}")

        change_set = ChangeSet().put(WHOLESALERS, wholesaler)
        event = ChangeEvent.from_command(
            command,
            event_type=event_type,
            payload={
                "actor_id": command.actor_id,
                "wholesaler_id": wholesaler.wholesaler_id,
            },
            collections=change_set.touched,
        )
        self._store.commit(change_set, event)

        logger.info(f"{event_type}: {wholesaler.wholesaler_id}")
        return WholesalerExecutionResult(event_type=event_type, wholesaler=wholesaler)

    # ══════════════════════════════════════════════════════════
    # QUERIES
    # ══════════════════════════════════════════════════════════

    def active_wholesalers(self) -> List[Wholesaler]:
        return self._store.find(WHOLESALERS, lambda w: w.status == AccountStatus.ACTIVE)

    def purchase_history(self, wholesaler_id: str) -> list:
        orders = self._store.find(
            PURCHASE_ORDERS, lambda po: po.wholesaler_id == wholesaler_id,
        )
        return sorted(orders, key=lambda po: po.order_date)
