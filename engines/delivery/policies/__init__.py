"""
POS Delivery Engine — Policies
=================================
"""

from __future__ import annotations

from typing import Optional

from core.commands.base import Command
from core.commands.rejection import ReasonCode, RejectionReason
from core.primitives.records import DeliveryStatus
from core.store import DELIVERY_REQUESTS
from engines.delivery.commands import (
    DELIVERY_REQUEST_SET_STATUS_REQUEST,
    DELIVERY_REQUEST_SUBMIT_REQUEST,
)
from engines.delivery.events import is_delivery_transition_allowed


def delivery_request_id_must_be_unique_policy(
    command: Command, store,
) -> Optional[RejectionReason]:
    if command.command_type != DELIVERY_REQUEST_SUBMIT_REQUEST:
        return None

    request_id = command.payload["request_id"]
    if store.exists(DELIVERY_REQUESTS, request_id):
        return RejectionReason(
            code=ReasonCode.DUPLICATE_ID,
            message=f"Delivery request '{request_id}' already exists.",
            policy_name="delivery_request_id_must_be_unique_policy",
        )
    return None


def delivery_customer_must_exist_policy(
    command: Command, store,
) -> Optional[RejectionReason]:
    if command.command_type != DELIVERY_REQUEST_SUBMIT_REQUEST:
        return None

    customer_id = command.payload["customer_id"]
    if store.get_user(customer_id) is None:
        return RejectionReason(
            code=ReasonCode.CUSTOMER_NOT_FOUND,
            message=f"Customer '{customer_id}' not found.",
            policy_name="delivery_customer_must_exist_policy",
        )
    return None


def delivery_request_must_exist_policy(
    command: Command, store,
) -> Optional[RejectionReason]:
    if command.command_type != DELIVERY_REQUEST_SET_STATUS_REQUEST:
        return None

    request_id = command.payload["request_id"]
    if not store.exists(DELIVERY_REQUESTS, request_id):
        return RejectionReason(
            code=ReasonCode.DELIVERY_REQUEST_NOT_FOUND,
            message=f"Delivery request '{request_id}' not found.",
            policy_name="delivery_request_must_exist_policy",
        )
    return None


def delivery_transition_must_be_allowed_policy(
    command: Command, store,
) -> Optional[RejectionReason]:
    if command.command_type != DELIVERY_REQUEST_SET_STATUS_REQUEST:
        return None

    request = store.get(DELIVERY_REQUESTS, command.payload["request_id"])
    if request is None:
        return None
    target = DeliveryStatus(command.payload["status"])
    if not is_delivery_transition_allowed(request.status, target):
        return RejectionReason(
            code=ReasonCode.INVALID_TRANSITION,
            message=(
                f"Delivery request '{request.request_id}' cannot move "
                f"from {request.status.value} to {target.value}."
            ),
            policy_name="delivery_transition_must_be_allowed_policy",
        )
    return None


DELIVERY_POLICIES = (
    delivery_request_id_must_be_unique_policy,
    delivery_customer_must_exist_policy,
    delivery_request_must_exist_policy,
    delivery_transition_must_be_allowed_policy,
)
