"""
POS Bootstrap — First-Run Seed
================================
An empty key-value layer means a first start: the store receives the
default admin and cashier accounts and the default shop settings.
Passwords are the well-known defaults and must be changed on site.
"""

from __future__ import annotations

import logging
from datetime import datetime

from core.admin.settings import AppSettings
from core.auth.passwords import hash_password
from core.primitives.party import User, UserRole
from core.store import USERS, ChangeSet, EntityStore

logger = logging.getLogger("pos.bootstrap")

DEFAULT_SETTINGS = AppSettings(
    shop_name="Fridge MV POS",
    island="Male'",
    country="Maldives",
    contact_number="+960 777-0000",
    email="admin@fridgemv.local",
)


def default_users(joined: datetime):
    return (
        User(
            user_id="1",
            name="System Admin",
            role=UserRole.ADMIN,
            username="admin",
            mobile="0000000",
            email="admin@local.pos",
            joined_date=joined,
            password_hash=hash_password("admin"),
        ),
        User(
            user_id="2",
            name="Main Cashier",
            role=UserRole.CASHIER,
            username="cashier",
            mobile="0000000",
            email="cashier@local.pos",
            joined_date=joined,
            password_hash=hash_password("123"),
        ),
    )


def seed_defaults(store: EntityStore, now: datetime) -> None:
    changes = ChangeSet().replace_settings(DEFAULT_SETTINGS)
    for user in default_users(now):
        changes.put(USERS, user)
    store.commit(changes)
    logger.info("First start: seeded default users and settings")
