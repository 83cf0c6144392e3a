"""
POS Admin — Settings Update Command
=====================================
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from core.admin.settings import SETTINGS_FIELDS
from core.commands.base import Command

ADMIN_SETTINGS_UPDATE_REQUEST = "admin.settings.update.request"
ADMIN_SETTINGS_UPDATED_V1 = "admin.settings.updated.v1"


@dataclass(frozen=True)
class SettingsUpdateRequest:
    """Partial update: only the keys present in `changes` are replaced."""
    changes: dict

    def __post_init__(self):
        if not isinstance(self.changes, dict) or not self.changes:
            raise ValueError("changes must be a non-empty dict.")
        unknown = set(self.changes) - SETTINGS_FIELDS
        if unknown:
            raise ValueError(f"Unknown settings fields: {sorted(unknown)}")
        limit = self.changes.get("default_credit_limit", 0)
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 0:
            raise ValueError("default_credit_limit must be non-negative integer.")
        for key in ("shop_name", "currency"):
            if key in self.changes and not self.changes[key]:
                raise ValueError(f"{key} must be non-empty.")

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
            command_type=ADMIN_SETTINGS_UPDATE_REQUEST,
            actor_type=actor_type,
            actor_id=actor_id,
            actor_name=actor_name,
            payload={"changes": dict(self.changes)},
            issued_at=issued_at,
            correlation_id=correlation_id,
            source_engine="admin",
        )
