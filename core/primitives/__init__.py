"""
POS Core Primitives — Entity Records
======================================
Immutable records (frozen dataclasses) for every entity the store
holds. Engines never mutate a record; they build a replacement with
dataclasses.replace() and hand it to the store in one commit.

Primitives:
    values    — minor-unit money helpers, timestamp codec
    party     — User (credit account), Wholesaler
    item      — InventoryItem, derived stock status
    document  — Invoice, PurchaseOrder and their lines
    records   — Notification, DeliveryRequest, VerificationToken
"""
