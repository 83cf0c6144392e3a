"""
POS Admin — Settings Service
==============================
Existing customers keep their credit limit when default_credit_limit
changes; the new default applies to accounts created afterwards.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from core.admin.commands import (
    ADMIN_SETTINGS_UPDATE_REQUEST,
    ADMIN_SETTINGS_UPDATED_V1,
)
from core.admin.settings import AppSettings
from core.commands.base import Command
from core.events import ChangeEvent
from core.store import ChangeSet, EntityStore

logger = logging.getLogger("pos.admin")


class _SettingsCommandHandler:
    def __init__(self, service: "SettingsService"):
        self._service = service

    def execute(self, command: Command) -> AppSettings:
        return self._service._execute_command(command)


class SettingsService:
    def __init__(self, *, store: EntityStore, command_bus):
        self._store = store
        self._command_bus = command_bus
        self._command_bus.register_handler(
            ADMIN_SETTINGS_UPDATE_REQUEST, _SettingsCommandHandler(self),
        )

    def _execute_command(self, command: Command) -> AppSettings:
        changes = command.payload["changes"]
        settings = replace(self._store.settings, **changes)

        change_set = ChangeSet().replace_settings(settings)
        event = ChangeEvent.from_command(
            command,
            event_type=ADMIN_SETTINGS_UPDATED_V1,
            payload={"changed_fields": sorted(changes)},
            collections=change_set.touched,
        )
        self._store.commit(change_set, event)

        logger.info(f"Settings updated: {', '.join(sorted(changes))}")
        return settings

    @property
    def current(self) -> AppSettings:
        return self._store.settings
