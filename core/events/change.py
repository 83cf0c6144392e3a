"""
POS Event Bus — Change Event
==============================
The notification published after every committed command (and after
every rejection). Subscribers re-render or react from it; they never
receive mutable references into the entity store.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Tuple


@dataclass(frozen=True)
class ChangeEvent:
    """
    Fields:
        event_id:       Unique identifier.
        event_type:     engine.domain.action(.vN), e.g.
                        'invoicing.invoice.created.v1'.
        source_engine:  Engine that produced the change.
        actor_id:       User who issued the command.
        correlation_id: Correlation id copied from the command.
        occurred_at:    Command issued_at.
        payload:        Event payload (plain values).
        collections:    Entity collections touched by the commit.
    """

    event_id: uuid.UUID
    event_type: str
    source_engine: str
    actor_id: str
    occurred_at: datetime
    payload: dict
    correlation_id: Optional[uuid.UUID] = None
    collections: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self):
        if not isinstance(self.event_id, uuid.UUID):
            raise ValueError("event_id must be UUID.")
        if not self.event_type or len(self.event_type.split(".")) < 3:
            raise ValueError(
                f"event_type '{self.event_type}' does not follow "
                f"engine.domain.action format."
            )
        if not isinstance(self.payload, dict):
            raise TypeError("payload must be a dict.")

    @property
    def is_rejection(self) -> bool:
        return self.event_type.endswith(".rejected")

    @classmethod
    def from_command(
        cls,
        command,
        *,
        event_type: str,
        payload: dict,
        collections: Tuple[str, ...] = (),
    ) -> "ChangeEvent":
        """Build the event published for an accepted command."""
        return cls(
            event_id=uuid.uuid4(),
            event_type=event_type,
            source_engine=command.source_engine,
            actor_id=command.actor_id,
            occurred_at=command.issued_at,
            payload=payload,
            correlation_id=command.correlation_id,
            collections=tuple(collections),
        )
