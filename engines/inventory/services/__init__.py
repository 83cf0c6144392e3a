"""
POS Inventory Engine — Application Service
=============================================
Catalog records and stock-status queries.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import List

from core.commands.base import Command
from core.events import ChangeEvent
from core.primitives.item import InventoryItem, StockStatus
from core.store import INVENTORY, ChangeSet, EntityStore
from engines.inventory.commands import (
    INVENTORY_COMMAND_TYPES,
    INVENTORY_ITEM_IMPORT_REQUEST,
    INVENTORY_ITEM_REGISTER_REQUEST,
    INVENTORY_ITEM_UPDATE_REQUEST,
)
from engines.inventory.events import (
    build_inventory_payload,
    resolve_inventory_event_type,
)
from engines.inventory.policies import INVENTORY_POLICIES

logger = logging.getLogger("pos.inventory")


@dataclass(frozen=True)
class InventoryExecutionResult:
    event_type: str
    items: List[InventoryItem]


class _InventoryCommandHandler:
    def __init__(self, service: "InventoryService"):
        self._service = service

    def execute(self, command: Command) -> InventoryExecutionResult:
        return self._service._execute_command(command)


class InventoryService:
    def __init__(self, *, store: EntityStore, command_bus):
        self._store = store
        self._command_bus = command_bus
        for policy in INVENTORY_POLICIES:
            self._command_bus.dispatcher.register_policy(policy)
        handler = _InventoryCommandHandler(self)
        for command_type in sorted(INVENTORY_COMMAND_TYPES):
            self._command_bus.register_handler(command_type, handler)

    def _execute_command(self, command: Command) -> InventoryExecutionResult:
        event_type = resolve_inventory_event_type(command.command_type)
        if event_type is None:
            raise ValueError(
                f"Unsupported inventory command type: {command.command_type}"
            )

        if command.command_type == INVENTORY_ITEM_REGISTER_REQUEST:
            items = [InventoryItem.from_dict(command.payload)]
        elif command.command_type == INVENTORY_ITEM_IMPORT_REQUEST:
            items = [InventoryItem.from_dict(row) for row in command.payload["items"]]
        elif command.command_type == INVENTORY_ITEM_UPDATE_REQUEST:
            current = self._store.get_item(command.payload["item_id"])
            items = [replace(current, **command.payload["changes"])]
        else:
            raise ValueError(f"No executor for: {command.command_type}")

        changes = ChangeSet()
        for item in items:
            changes.put(INVENTORY, item)
        event = ChangeEvent.from_command(
            command,
            event_type=event_type,
            payload=build_inventory_payload(command, items),
            collections=changes.touched,
        )
        self._store.commit(changes, event)

        logger.info(f"{event_type}: {len(items)} item(s)")
        return InventoryExecutionResult(event_type=event_type, items=items)

    # ══════════════════════════════════════════════════════════
    # QUERIES
    # ══════════════════════════════════════════════════════════

    def items_with_status(self, status: StockStatus) -> List[InventoryItem]:
        return self._store.find(INVENTORY, lambda i: i.stock_status == status)

    def low_stock(self) -> List[InventoryItem]:
        return self.items_with_status(StockStatus.LOW_STOCK)

    def out_of_stock(self) -> List[InventoryItem]:
        return self.items_with_status(StockStatus.OUT_OF_STOCK)

    def search(self, text: str) -> List[InventoryItem]:
        needle = text.strip().lower()
        return self._store.find(
            INVENTORY,
            lambda i: needle in i.name.lower() or needle in i.sku.lower(),
        )
