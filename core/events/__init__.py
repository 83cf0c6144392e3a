"""
POS Event Bus — Public API
============================
Explicit change notification: the entity store publishes, subscribers
(screens, reports, audit hooks) listen. The engines never call back
into the presentation layer.
"""

from core.events.change import ChangeEvent
from core.events.dispatcher import dispatch
from core.events.registry import (
    ALL_EVENTS,
    DuplicateSubscriberError,
    EventBusError,
    InvalidEventTypeFormat,
    SubscriberRegistry,
)

__all__ = [
    "ALL_EVENTS",
    "ChangeEvent",
    "dispatch",
    "SubscriberRegistry",
    "EventBusError",
    "InvalidEventTypeFormat",
    "DuplicateSubscriberError",
]
