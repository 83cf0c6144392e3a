"""
POS Delivery Engine — Event Types and Transitions
====================================================
NEW → SCHEDULED → COMPLETED; NEW or SCHEDULED → CANCELLED.
"""

from __future__ import annotations

from core.primitives.records import DeliveryStatus

DELIVERY_REQUEST_SUBMITTED_V1 = "delivery.request.submitted.v1"
DELIVERY_REQUEST_STATUS_CHANGED_V1 = "delivery.request.status_changed.v1"

COMMAND_TO_EVENT_TYPE = {
    "delivery.request.submit.request": DELIVERY_REQUEST_SUBMITTED_V1,
    "delivery.request.set_status.request": DELIVERY_REQUEST_STATUS_CHANGED_V1,
}

ALLOWED_TRANSITIONS = {
    DeliveryStatus.NEW: frozenset({DeliveryStatus.SCHEDULED, DeliveryStatus.CANCELLED}),
    DeliveryStatus.SCHEDULED: frozenset({DeliveryStatus.COMPLETED, DeliveryStatus.CANCELLED}),
    DeliveryStatus.COMPLETED: frozenset(),
    DeliveryStatus.CANCELLED: frozenset(),
}


def resolve_delivery_event_type(command_type: str) -> str | None:
    return COMMAND_TO_EVENT_TYPE.get(command_type)


def is_delivery_transition_allowed(current: DeliveryStatus, target: DeliveryStatus) -> bool:
    return current == target or target in ALLOWED_TRANSITIONS[current]
