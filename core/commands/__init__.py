"""
POS Command Layer
====================
Every state change begins as a Command.
Every Command produces exactly one Outcome.
REJECTED commands carry a typed reason and never mutate state.
"""

from core.commands.base import (
    Command,
    VALID_ACTOR_TYPES,
    derive_rejection_event_type,
    derive_source_engine,
)
from core.commands.outcomes import (
    CommandOutcome,
    CommandStatus,
)
from core.commands.rejection import (
    ReasonCode,
    RejectionReason,
)
from core.commands.dispatcher import (
    CommandDispatcher,
    PolicyEvaluator,
)
from core.commands.bus import (
    CommandBus,
    CommandBusError,
    CommandResult,
    NoHandlerRegistered,
)

__all__ = [
    # ── Base ──────────────────────────────────────────────────
    "Command",
    "VALID_ACTOR_TYPES",
    "derive_rejection_event_type",
    "derive_source_engine",
    # ── Outcomes ──────────────────────────────────────────────
    "CommandOutcome",
    "CommandStatus",
    # ── Rejection ─────────────────────────────────────────────
    "RejectionReason",
    "ReasonCode",
    # ── Dispatcher ────────────────────────────────────────────
    "CommandDispatcher",
    "PolicyEvaluator",
    # ── Bus ────────────────────────────────────────────────────
    "CommandBus",
    "CommandBusError",
    "CommandResult",
    "NoHandlerRegistered",
]
