"""
POS Delivery Engine — Application Service
============================================
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import List, Optional

from core.commands.base import Command
from core.events import ChangeEvent
from core.primitives.records import DeliveryRequest, DeliveryStatus
from core.store import DELIVERY_REQUESTS, ChangeSet, EntityStore
from engines.delivery.commands import (
    DELIVERY_COMMAND_TYPES,
    DELIVERY_REQUEST_SET_STATUS_REQUEST,
    DELIVERY_REQUEST_SUBMIT_REQUEST,
)
from engines.delivery.events import resolve_delivery_event_type
from engines.delivery.policies import DELIVERY_POLICIES

logger = logging.getLogger("pos.delivery")


@dataclass(frozen=True)
class DeliveryExecutionResult:
    event_type: str
    request: DeliveryRequest
    noop: bool = False


class _DeliveryCommandHandler:
    def __init__(self, service: "DeliveryService"):
        self._service = service

    def execute(self, command: Command) -> DeliveryExecutionResult:
        return self._service._execute_command(command)


class DeliveryService:
    def __init__(self, *, store: EntityStore, command_bus):
        self._store = store
        self._command_bus = command_bus
        for policy in DELIVERY_POLICIES:
            self._command_bus.dispatcher.register_policy(policy)
        handler = _DeliveryCommandHandler(self)
        for command_type in sorted(DELIVERY_COMMAND_TYPES):
            self._command_bus.register_handler(command_type, handler)

    def _execute_command(self, command: Command) -> DeliveryExecutionResult:
        event_type = resolve_delivery_event_type(command.command_type)
        if event_type is None:
            raise ValueError(
                f"Unsupported delivery command type: {command.command_type}"
            )

        previous: Optional[DeliveryStatus] = None
        if command.command_type == DELIVERY_REQUEST_SUBMIT_REQUEST:
            customer = self._store.get_user(command.payload["customer_id"])
            address = command.payload.get("delivery_address") or customer.address
            request = DeliveryRequest(
                request_id=command.payload["request_id"],
                customer_id=customer.user_id,
                customer_name=customer.name,
                delivery_address=address,
                requested_time=command.payload["requested_time"],
                date=command.issued_at,
                notes=command.payload.get("notes", ""),
            )
        elif command.command_type == DELIVERY_REQUEST_SET_STATUS_REQUEST:
            current = self._store.get(DELIVERY_REQUESTS, command.payload["request_id"])
            target = DeliveryStatus(command.payload["status"])
            if current.status == target:
                return DeliveryExecutionResult(
                    event_type=event_type, request=current, noop=True,
                )
            previous = current.status
            request = replace(current, status=target)
        else:
            raise ValueError(f"No executor for: {command.command_type}")

        changes = ChangeSet().put(DELIVERY_REQUESTS, request)
        payload = {
            "request_id": request.request_id,
            "customer_id": request.customer_id,
            "status": request.status.value,
        }
        if previous is not None:
            payload["previous_status"] = previous.value
        event = ChangeEvent.from_command(
            command,
            event_type=event_type,
            payload=payload,
            collections=changes.touched,
        )
        self._store.commit(changes, event)

        logger.info(f"{event_type}: {request.request_id} is {request.status.value}")
        return DeliveryExecutionResult(event_type=event_type, request=request)

    # ══════════════════════════════════════════════════════════
    # QUERIES
    # ══════════════════════════════════════════════════════════

    def requests_for_customer(self, customer_id: str) -> List[DeliveryRequest]:
        found = self._store.find(DELIVERY_REQUESTS, lambda r: r.customer_id == customer_id)
        return sorted(found, key=lambda r: r.date, reverse=True)

    def open_requests(self) -> List[DeliveryRequest]:
        return self._store.find(
            DELIVERY_REQUESTS,
            lambda r: r.status in (DeliveryStatus.NEW, DeliveryStatus.SCHEDULED),
        )
