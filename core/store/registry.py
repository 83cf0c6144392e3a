"""
POS Entity Store — Collection Registry
========================================
Every entity collection: its record type, id attribute and the key it
is mirrored under in the key-value layer.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

from core.primitives.document import Invoice, PurchaseOrder
from core.primitives.item import InventoryItem
from core.primitives.party import User, Wholesaler
from core.primitives.records import DeliveryRequest, Notification, VerificationToken

USERS = "users"
INVENTORY = "inventory"
WHOLESALERS = "wholesalers"
INVOICES = "invoices"
PURCHASE_ORDERS = "purchase_orders"
DELIVERY_REQUESTS = "delivery_requests"
NOTIFICATIONS = "notifications"
VERIFICATION_TOKENS = "verification_tokens"

SETTINGS = "settings"
SETTINGS_KEY = "pos_settings"


@dataclass(frozen=True)
class CollectionSpec:
    name: str
    record_type: type
    id_attr: str
    storage_key: str

    def record_id(self, record) -> str:
        return getattr(record, self.id_attr)


COLLECTIONS: Dict[str, CollectionSpec] = {
    spec.name: spec
    for spec in (
        CollectionSpec(USERS, User, "user_id", "pos_users"),
        CollectionSpec(INVENTORY, InventoryItem, "item_id", "pos_inventory"),
        CollectionSpec(WHOLESALERS, Wholesaler, "wholesaler_id", "pos_wholesalers"),
        CollectionSpec(INVOICES, Invoice, "invoice_id", "pos_invoices"),
        CollectionSpec(PURCHASE_ORDERS, PurchaseOrder, "po_id", "pos_purchase_orders"),
        CollectionSpec(DELIVERY_REQUESTS, DeliveryRequest, "request_id", "pos_delivery_requests"),
        CollectionSpec(NOTIFICATIONS, Notification, "notification_id", "pos_notifications"),
        CollectionSpec(VERIFICATION_TOKENS, VerificationToken, "identity_key", "pos_verification_tokens"),
    )
}


def get_spec(collection: str) -> CollectionSpec:
    try:
        return COLLECTIONS[collection]
    except KeyError:
        raise KeyError(f"Unknown collection '{collection}'.") from None
