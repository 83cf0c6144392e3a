"""
POS Delivery Engine — Request Commands
=========================================
Customer delivery requests and their scheduling lifecycle.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from core.commands.base import Command
from core.primitives.records import DeliveryStatus

DELIVERY_REQUEST_SUBMIT_REQUEST = "delivery.request.submit.request"
DELIVERY_REQUEST_SET_STATUS_REQUEST = "delivery.request.set_status.request"

DELIVERY_COMMAND_TYPES = frozenset({
    DELIVERY_REQUEST_SUBMIT_REQUEST,
    DELIVERY_REQUEST_SET_STATUS_REQUEST,
})

VALID_DELIVERY_STATUSES = frozenset(s.value for s in DeliveryStatus)


@dataclass(frozen=True)
class DeliverySubmitRequest:
    """
    delivery_address defaults to the customer's address on file; either
    way it is copied onto the request at submission.
    """
    request_id: str
    customer_id: str
    requested_time: str
    delivery_address: Optional[str] = None
    notes: str = ""

    def __post_init__(self):
        if not self.request_id:
            raise ValueError("request_id must be non-empty.")
        if not self.customer_id:
            raise ValueError("customer_id must be non-empty.")
        if not self.requested_time:
            raise ValueError("requested_time must be non-empty.")

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
            command_type=DELIVERY_REQUEST_SUBMIT_REQUEST,
            actor_type=actor_type,
            actor_id=actor_id,
            actor_name=actor_name,
            payload={
                "request_id": self.request_id,
                "customer_id": self.customer_id,
                "requested_time": self.requested_time,
                "delivery_address": self.delivery_address,
                "notes": self.notes,
            },
            issued_at=issued_at,
            correlation_id=correlation_id,
            source_engine="delivery",
        )


@dataclass(frozen=True)
class DeliveryStatusUpdateRequest:
    request_id: str
    status: str

    def __post_init__(self):
        if not self.request_id:
            raise ValueError("request_id must be non-empty.")
        if self.status not in VALID_DELIVERY_STATUSES:
            raise ValueError(
                f"status '{self.status}' not valid. "
                f"Must be one of: {sorted(VALID_DELIVERY_STATUSES)}"
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
            command_type=DELIVERY_REQUEST_SET_STATUS_REQUEST,
            actor_type=actor_type,
            actor_id=actor_id,
            actor_name=actor_name,
            payload={"request_id": self.request_id, "status": self.status},
            issued_at=issued_at,
            correlation_id=correlation_id,
            source_engine="delivery",
        )
