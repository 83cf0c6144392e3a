"""
POS Inventory Engine — Policies
==================================
"""

from __future__ import annotations

from typing import Optional

from core.commands.base import Command
from core.commands.rejection import ReasonCode, RejectionReason
from engines.inventory.commands import (
    INVENTORY_ITEM_IMPORT_REQUEST,
    INVENTORY_ITEM_REGISTER_REQUEST,
    INVENTORY_ITEM_UPDATE_REQUEST,
)


def item_id_must_be_unique_policy(
    command: Command, store,
) -> Optional[RejectionReason]:
    if command.command_type == INVENTORY_ITEM_REGISTER_REQUEST:
        incoming = [command.payload]
    elif command.command_type == INVENTORY_ITEM_IMPORT_REQUEST:
        incoming = command.payload["items"]
    else:
        return None

    taken = [i["item_id"] for i in incoming if store.get_item(i["item_id"]) is not None]
    if taken:
        return RejectionReason(
            code=ReasonCode.DUPLICATE_ID,
            message=f"Inventory item id(s) already exist: {', '.join(taken)}.",
            policy_name="item_id_must_be_unique_policy",
        )
    return None


def item_must_exist_for_update_policy(
    command: Command, store,
) -> Optional[RejectionReason]:
    if command.command_type != INVENTORY_ITEM_UPDATE_REQUEST:
        return None

    item_id = command.payload["item_id"]
    if store.get_item(item_id) is None:
        return RejectionReason(
            code=ReasonCode.INVENTORY_ITEM_NOT_FOUND,
            message=f"Inventory item '{item_id}' not found.",
            policy_name="item_must_exist_for_update_policy",
        )
    return None


INVENTORY_POLICIES = (
    item_id_must_be_unique_policy,
    item_must_exist_for_update_policy,
)
