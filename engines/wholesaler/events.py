"""
POS Wholesaler Engine — Event Types
======================================
"""

from __future__ import annotations

WHOLESALER_REGISTERED_V1 = "wholesaler.supplier.registered.v1"
WHOLESALER_UPDATED_V1 = "wholesaler.supplier.updated.v1"

COMMAND_TO_EVENT_TYPE = {
    "wholesaler.supplier.register.request": WHOLESALER_REGISTERED_V1,
    "wholesaler.supplier.update.request": WHOLESALER_UPDATED_V1,
}


def resolve_wholesaler_event_type(command_type: str) -> str | None:
    return COMMAND_TO_EVENT_TYPE.get(command_type)
