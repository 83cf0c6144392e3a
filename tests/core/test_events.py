"""
POS Event Bus — Tests
=======================
Subscriber registry and the never-raising dispatcher.
"""

import uuid
from datetime import datetime, timezone

import pytest

from core.events import (
    ALL_EVENTS,
    ChangeEvent,
    DuplicateSubscriberError,
    InvalidEventTypeFormat,
    SubscriberRegistry,
    dispatch,
)

NOW = datetime(2026, 3, 1, 9, 0, 0, tzinfo=timezone.utc)


def make_event(event_type="invoicing.invoice.created.v1"):
    return ChangeEvent(
        event_id=uuid.uuid4(),
        event_type=event_type,
        source_engine="invoicing",
        actor_id="user-1",
        occurred_at=NOW,
        payload={"invoice_id": "inv-1"},
        correlation_id=uuid.uuid4(),
    )


class Recorder:
    def __init__(self):
        self.events = []

    def __call__(self, event):
        self.events.append(event)


def exploding_handler(event):
    raise RuntimeError("subscriber broke")


class TestSubscriberRegistry:
    def test_register_and_lookup(self):
        registry = SubscriberRegistry()
        recorder = Recorder()
        registry.register_subscriber("invoicing.invoice.created.v1", recorder, "ui")
        assert registry.has_subscribers("invoicing.invoice.created.v1")
        assert registry.subscriber_count("procurement.order.created.v1") == 0

    def test_wildcard_subscribers_follow_specific(self):
        registry = SubscriberRegistry()
        specific, wildcard = Recorder(), Recorder()
        registry.subscribe_all(wildcard, "rerender")
        registry.register_subscriber("invoicing.invoice.created.v1", specific, "audit")
        names = [name for _, name in registry.get_subscribers("invoicing.invoice.created.v1")]
        assert names == ["audit", "rerender"]

    def test_bad_event_type_format(self):
        with pytest.raises(InvalidEventTypeFormat):
            SubscriberRegistry().register_subscriber("invoice", Recorder(), "ui")

    def test_duplicate_subscriber_rejected(self):
        registry = SubscriberRegistry()
        recorder = Recorder()
        registry.register_subscriber(ALL_EVENTS, recorder, "ui")
        with pytest.raises(DuplicateSubscriberError):
            registry.register_subscriber(ALL_EVENTS, recorder, "ui")

    def test_unregister(self):
        registry = SubscriberRegistry()
        recorder = Recorder()
        registry.subscribe_all(recorder, "ui")
        assert registry.unregister_subscriber(ALL_EVENTS, recorder) is True
        assert registry.subscriber_count("invoicing.invoice.created.v1") == 0


class TestDispatch:
    def test_delivers_to_every_subscriber(self):
        registry = SubscriberRegistry()
        first, second = Recorder(), Recorder()
        registry.register_subscriber("invoicing.invoice.created.v1", first, "a")
        registry.subscribe_all(second, "b")

        report = dispatch(make_event(), registry)

        assert report["subscribers_notified"] == 2
        assert len(first.events) == 1
        assert len(second.events) == 1

    def test_subscriber_failure_is_contained(self):
        registry = SubscriberRegistry()
        survivor = Recorder()
        registry.subscribe_all(exploding_handler, "broken")
        registry.register_subscriber("invoicing.invoice.created.v1", survivor, "ok")

        report = dispatch(make_event(), registry)

        assert report["subscribers_failed"] == 1
        assert report["failures"][0]["error_type"] == "RuntimeError"
        assert len(survivor.events) == 1

    def test_no_subscribers_is_not_an_error(self):
        report = dispatch(make_event(), SubscriberRegistry())
        assert report["subscribers_notified"] == 0


class TestChangeEvent:
    def test_rejection_flag(self):
        assert make_event("invoicing.invoice.create.rejected").is_rejection
        assert not make_event().is_rejection

    def test_payload_must_be_dict(self):
        with pytest.raises(TypeError):
            ChangeEvent(
                event_id=uuid.uuid4(),
                event_type="invoicing.invoice.created.v1",
                source_engine="invoicing",
                actor_id="user-1",
                occurred_at=NOW,
                payload="nope",
                correlation_id=uuid.uuid4(),
            )
