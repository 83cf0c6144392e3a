"""
POS Command Layer — Command Bus
==================================
High-level orchestration of the command lifecycle.

Flow:
    1. Resolve the engine handler for the command type
    2. Dispatch command → get Outcome
    3. If ACCEPTED → handler.execute(command) → engine commits its changes
    4. If REJECTED → publish a '.rejected' change event, nothing is mutated

The CommandBus orchestrates, it does not decide. It contains no
engine-specific logic and never touches the entity collections.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol

from core.commands.base import Command, derive_rejection_event_type
from core.commands.dispatcher import CommandDispatcher
from core.commands.outcomes import CommandOutcome
from core.commands.rejection import RejectionReason
from core.events import ChangeEvent, SubscriberRegistry, dispatch

logger = logging.getLogger("pos.commands")


# ══════════════════════════════════════════════════════════════
# ENGINE SERVICE PROTOCOL
# ══════════════════════════════════════════════════════════════

class EngineServiceProtocol(Protocol):
    """
    Each engine registers a handler that knows how to apply an
    accepted command to the entity store.
    """

    def execute(self, command: Command) -> Any:
        ...


# ══════════════════════════════════════════════════════════════
# COMMAND BUS ERRORS
# ══════════════════════════════════════════════════════════════

class CommandBusError(Exception):
    """Base error for command bus operations."""
    pass


class NoHandlerRegistered(CommandBusError):
    """No engine service handler registered for command type."""

    def __init__(self, command_type: str):
        self.command_type = command_type
        super().__init__(
            f"No engine service handler registered for "
            f"command type '{command_type}'."
        )


# ══════════════════════════════════════════════════════════════
# COMMAND BUS RESULT
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class CommandResult:
    """Result of CommandBus.handle() — outcome + engine execution result."""

    outcome: CommandOutcome
    execution_result: Any = None

    @property
    def is_accepted(self) -> bool:
        return self.outcome.is_accepted

    @property
    def is_rejected(self) -> bool:
        return self.outcome.is_rejected

    @property
    def reason(self) -> Optional[RejectionReason]:
        return self.outcome.reason

    @property
    def message(self) -> str:
        """Text the presentation layer shows after the command."""
        if self.outcome.reason is not None:
            return self.outcome.reason.message
        return "OK"


# ══════════════════════════════════════════════════════════════
# COMMAND BUS
# ══════════════════════════════════════════════════════════════

class CommandBus:
    """
    Orchestration layer for command lifecycle.

    Usage:
        bus = CommandBus(dispatcher=dispatcher, subscribers=registry)
        bus.register_handler("invoicing.invoice.create.request", handler)
        result = bus.handle(command)
    """

    def __init__(
        self,
        dispatcher: CommandDispatcher,
        subscribers: Optional[SubscriberRegistry] = None,
    ):
        self._dispatcher = dispatcher
        self._subscribers = subscribers
        self._handlers: Dict[str, Any] = {}

    @property
    def dispatcher(self) -> CommandDispatcher:
        return self._dispatcher

    def register_handler(self, command_type: str, handler: Any) -> None:
        """Register engine service handler (must have .execute())."""
        if not command_type.endswith(".request"):
            raise ValueError(
                f"command_type '{command_type}' must end with '.request'."
            )

        if not hasattr(handler, "execute") or not callable(handler.execute):
            raise TypeError("Handler must have callable .execute() method.")

        self._handlers[command_type] = handler
        logger.debug(f"Handler registered: {command_type}")

    def has_handler(self, command_type: str) -> bool:
        return command_type in self._handlers

    def handle(self, command: Command) -> CommandResult:
        """
        Full command lifecycle. Every command produces exactly one
        CommandResult; unknown command types are wiring bugs and raise.
        """
        handler = self._handlers.get(command.command_type)
        if handler is None:
            raise NoHandlerRegistered(command.command_type)

        outcome = self._dispatcher.dispatch(command)

        if outcome.is_rejected:
            self._publish_rejection(command, outcome)
            return CommandResult(outcome=outcome)

        logger.info(
            f"Executing accepted command {command.command_id} "
            f"({command.command_type})"
        )
        execution_result = handler.execute(command)
        return CommandResult(outcome=outcome, execution_result=execution_result)

    def _publish_rejection(
        self, command: Command, outcome: CommandOutcome
    ) -> None:
        if self._subscribers is None:
            return

        event = ChangeEvent(
            event_id=uuid.uuid4(),
            event_type=derive_rejection_event_type(command.command_type),
            source_engine=command.source_engine,
            actor_id=command.actor_id,
            correlation_id=command.correlation_id,
            occurred_at=outcome.occurred_at,
            payload={
                "command_id": str(command.command_id),
                "command_type": command.command_type,
                "rejection": outcome.reason.to_dict(),
                "original_payload": command.payload,
            },
        )
        dispatch(event, self._subscribers)
