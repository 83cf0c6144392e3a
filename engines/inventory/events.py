"""
POS Inventory Engine — Event Types and Payload Builders
==========================================================
"""

from __future__ import annotations

from core.commands.base import Command

INVENTORY_ITEM_REGISTERED_V1 = "inventory.item.registered.v1"
INVENTORY_ITEMS_IMPORTED_V1 = "inventory.items.imported.v1"
INVENTORY_ITEM_UPDATED_V1 = "inventory.item.updated.v1"

COMMAND_TO_EVENT_TYPE = {
    "inventory.item.register.request": INVENTORY_ITEM_REGISTERED_V1,
    "inventory.item.import.request": INVENTORY_ITEMS_IMPORTED_V1,
    "inventory.item.update.request": INVENTORY_ITEM_UPDATED_V1,
}


def resolve_inventory_event_type(command_type: str) -> str | None:
    return COMMAND_TO_EVENT_TYPE.get(command_type)


def build_inventory_payload(command: Command, items: list) -> dict:
    return {
        "actor_id": command.actor_id,
        "command_id": str(command.command_id),
        "items": [{"item_id": i.item_id, "qty": i.qty} for i in items],
    }
