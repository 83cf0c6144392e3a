"""
POS Event Bus — Subscriber Registry
======================================
Controls which handlers hear which change events.

Rules:
- Event types must follow engine.domain.action format
- Multiple subscribers per event type allowed
- Duplicate handler for same event type forbidden
- ALL_EVENTS subscribers hear every event (re-render hooks)
- In-memory only, thread-safe
"""

import logging
from threading import Lock
from typing import Callable

logger = logging.getLogger("pos.events")

ALL_EVENTS = "*"


class EventBusError(Exception):
    pass


class InvalidEventTypeFormat(EventBusError):
    def __init__(self, event_type: str):
        self.event_type = event_type
        super().__init__(
            f"Cannot subscribe to '{event_type}': change event types are "
            f"dotted engine.domain.action names (or '{ALL_EVENTS}')."
        )


class DuplicateSubscriberError(EventBusError):
    def __init__(self, event_type: str, handler_name: str):
        self.event_type = event_type
        self.handler_name = handler_name
        super().__init__(f"{handler_name} is already listening to {event_type}.")


class SubscriberRegistry:
    """
    In-memory registry of change subscribers.

    Each entry maps an event_type to a list of
    (handler, subscriber_name) tuples.
    """

    def __init__(self):
        self._subscribers: dict[str, list[tuple[Callable, str]]] = {}
        self._lock = Lock()

    @staticmethod
    def _validate_event_type_format(event_type: str) -> None:
        if not event_type or not isinstance(event_type, str):
            raise InvalidEventTypeFormat(event_type or "")

        if event_type == ALL_EVENTS:
            return

        parts = event_type.strip().split(".")
        if len(parts) < 3:
            raise InvalidEventTypeFormat(event_type)

    def register_subscriber(
        self,
        event_type: str,
        handler: Callable,
        subscriber_name: str,
    ) -> None:
        """
        Register a handler for an event type (or ALL_EVENTS).

        Raises:
            InvalidEventTypeFormat:   Bad event type format
            DuplicateSubscriberError: Handler already registered
        """
        self._validate_event_type_format(event_type)

        if not callable(handler):
            raise EventBusError(
                f"Handler must be callable, got {type(handler)}."
            )

        handler_name = getattr(handler, "__qualname__", str(handler))

        with self._lock:
            entries = self._subscribers.setdefault(event_type, [])
            for existing_handler, _ in entries:
                if existing_handler is handler:
                    raise DuplicateSubscriberError(event_type, handler_name)
            entries.append((handler, subscriber_name))

        logger.debug(
            f"Subscriber registered: {handler_name} → {event_type} "
            f"(from: {subscriber_name})"
        )

    def subscribe_all(self, handler: Callable, subscriber_name: str) -> None:
        """Register a handler that hears every change event."""
        self.register_subscriber(ALL_EVENTS, handler, subscriber_name)

    def unregister_subscriber(self, event_type: str, handler: Callable) -> bool:
        with self._lock:
            entries = self._subscribers.get(event_type, [])
            for index, (existing_handler, _) in enumerate(entries):
                if existing_handler is handler:
                    del entries[index]
                    return True
        return False

    def get_subscribers(self, event_type: str) -> list[tuple[Callable, str]]:
        """
        Subscribers for an event type followed by ALL_EVENTS subscribers.
        Returns empty list if none (not an error).
        """
        with self._lock:
            specific = list(self._subscribers.get(event_type, []))
            wildcard = list(self._subscribers.get(ALL_EVENTS, []))
        return specific + wildcard

    def has_subscribers(self, event_type: str) -> bool:
        return bool(self.get_subscribers(event_type))

    def subscriber_count(self, event_type: str) -> int:
        return len(self.get_subscribers(event_type))
