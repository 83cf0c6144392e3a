"""
POS Record Primitives — Notifications and Delivery Requests
=============================================================
Simple records maintained by plain CRUD commands. They reference users
but carry no ledger semantics.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from core.primitives.values import dt_from_str, dt_to_str

# Notification target meaning "every user".
BROADCAST_TARGET = "ALL"


@dataclass(frozen=True)
class Notification:
    notification_id: str
    target_user_id: str
    message: str
    date: datetime
    read: bool = False

    def __post_init__(self):
        if not self.notification_id:
            raise ValueError("notification_id must be non-empty.")
        if not self.target_user_id:
            raise ValueError("target_user_id must be non-empty.")
        if not self.message:
            raise ValueError("message must be non-empty.")

    def is_for(self, user_id: str) -> bool:
        return self.target_user_id in (user_id, BROADCAST_TARGET)

    def to_dict(self) -> dict:
        return {
            "notification_id": self.notification_id,
            "target_user_id": self.target_user_id,
            "message": self.message,
            "date": dt_to_str(self.date),
            "read": self.read,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Notification:
        return cls(
            notification_id=data["notification_id"],
            target_user_id=data["target_user_id"],
            message=data["message"],
            date=dt_from_str(data["date"]),
            read=bool(data.get("read", False)),
        )


class DeliveryStatus(Enum):
    NEW = "NEW"
    SCHEDULED = "SCHEDULED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


@dataclass(frozen=True)
class DeliveryRequest:
    """
    A customer's request for delivery. The address is a snapshot taken
    when the request is submitted.
    """
    request_id: str
    customer_id: str
    customer_name: str
    delivery_address: str
    requested_time: str
    date: datetime
    status: DeliveryStatus = DeliveryStatus.NEW
    notes: str = ""

    def __post_init__(self):
        if not self.request_id:
            raise ValueError("request_id must be non-empty.")
        if not self.customer_id:
            raise ValueError("customer_id must be non-empty.")
        if not isinstance(self.status, DeliveryStatus):
            raise ValueError("status must be DeliveryStatus enum.")

    def to_dict(self) -> dict:
        return {
            "request_id": self.request_id,
            "customer_id": self.customer_id,
            "customer_name": self.customer_name,
            "delivery_address": self.delivery_address,
            "requested_time": self.requested_time,
            "date": dt_to_str(self.date),
            "status": self.status.value,
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, data: dict) -> DeliveryRequest:
        return cls(
            request_id=data["request_id"],
            customer_id=data["customer_id"],
            customer_name=data.get("customer_name", ""),
            delivery_address=data.get("delivery_address", ""),
            requested_time=data.get("requested_time", ""),
            date=dt_from_str(data["date"]),
            status=DeliveryStatus(data.get("status", "NEW")),
            notes=data.get("notes", ""),
        )


@dataclass(frozen=True)
class VerificationToken:
    """
    One-time signup code binding an identity key to a user.

    At most one live token exists per identity_key; it is deleted when
    consumed.
    """
    identity_key: str
    user_id: str
    code: str
    expires_at: datetime

    def __post_init__(self):
        if not self.identity_key:
            raise ValueError("identity_key must be non-empty.")
        if not self.user_id:
            raise ValueError("user_id must be non-empty.")
        if not self.code or not self.code.isdigit():
            raise ValueError("code must be a string of digits.")
        if self.expires_at.tzinfo is None:
            raise ValueError("expires_at must be timezone-aware.")

    def to_dict(self) -> dict:
        return {
            "identity_key": self.identity_key,
            "user_id": self.user_id,
            "code": self.code,
            "expires_at": dt_to_str(self.expires_at),
        }

    @classmethod
    def from_dict(cls, data: dict) -> VerificationToken:
        return cls(
            identity_key=data["identity_key"],
            user_id=data["user_id"],
            code=data["code"],
            expires_at=dt_from_str(data["expires_at"]),
        )
