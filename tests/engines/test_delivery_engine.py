"""POS Delivery Engine tests (delivery requests)."""

import uuid
from datetime import datetime, timedelta, timezone

import pytest

NOW = datetime(2026, 3, 1, 9, 0, 0, tzinfo=timezone.utc)


def kw(issued_at=NOW):
    return dict(
        actor_type="HUMAN",
        actor_id="c-1",
        command_id=uuid.uuid4(),
        correlation_id=uuid.uuid4(),
        issued_at=issued_at,
    )


def _wire():
    from core.commands import CommandBus, CommandDispatcher
    from core.primitives.party import User, UserRole
    from core.store import USERS, ChangeSet, EntityStore
    from engines.delivery.services import DeliveryService

    store = EntityStore()
    bus = CommandBus(CommandDispatcher(store), subscribers=store.subscribers)
    svc = DeliveryService(store=store, command_bus=bus)
    store.commit(ChangeSet().put(USERS, User(
        "c-1", "Aisha", UserRole.DELIVERY_CUSTOMER, address="H. Blue Lagoon, Male'",
    )))
    return store, bus, svc


def _submit(bus, request_id="d-1", customer_id="c-1", issued_at=NOW, **extra):
    from engines.delivery.commands import DeliverySubmitRequest

    return bus.handle(DeliverySubmitRequest(
        request_id=request_id,
        customer_id=customer_id,
        requested_time="2026-03-02T10:00",
        **extra,
    ).to_command(**kw(issued_at)))


def _set_status(bus, status, request_id="d-1"):
    from engines.delivery.commands import DeliveryStatusUpdateRequest

    return bus.handle(DeliveryStatusUpdateRequest(
        request_id=request_id, status=status,
    ).to_command(**kw()))


class TestDeliveryCommands:
    def test_bad_status_rejected(self):
        from engines.delivery.commands import DeliveryStatusUpdateRequest

        with pytest.raises(ValueError, match="not valid"):
            DeliveryStatusUpdateRequest(request_id="d-1", status="LOST")

    def test_requested_time_required(self):
        from engines.delivery.commands import DeliverySubmitRequest

        with pytest.raises(ValueError, match="requested_time"):
            DeliverySubmitRequest(request_id="d-1", customer_id="c-1", requested_time="")


class TestSubmit:
    def test_address_defaults_to_customer(self):
        store, bus, _ = _wire()
        result = _submit(bus)
        assert result.is_accepted
        request = store.get("delivery_requests", "d-1")
        assert request.delivery_address == "H. Blue Lagoon, Male'"
        assert request.customer_name == "Aisha"
        assert request.status.value == "NEW"

    def test_explicit_address(self):
        store, bus, _ = _wire()
        _submit(bus, delivery_address="Hulhumale' Ph2")
        assert store.get("delivery_requests", "d-1").delivery_address == "Hulhumale' Ph2"

    def test_unknown_customer(self):
        _, bus, _ = _wire()
        assert _submit(bus, customer_id="c-404").reason.code == "CUSTOMER_NOT_FOUND"

    def test_duplicate_id(self):
        _, bus, _ = _wire()
        _submit(bus)
        assert _submit(bus).reason.code == "DUPLICATE_ID"


class TestLifecycle:
    def test_schedule_then_complete(self):
        store, bus, _ = _wire()
        _submit(bus)
        scheduled = _set_status(bus, "SCHEDULED")
        assert scheduled.execution_result.event_type == "delivery.request.status_changed.v1"
        assert _set_status(bus, "COMPLETED").is_accepted
        assert store.get("delivery_requests", "d-1").status.value == "COMPLETED"

    def test_completed_is_final(self):
        _, bus, _ = _wire()
        _submit(bus)
        _set_status(bus, "SCHEDULED")
        _set_status(bus, "COMPLETED")
        assert _set_status(bus, "CANCELLED").reason.code == "INVALID_TRANSITION"

    def test_new_cannot_complete(self):
        _, bus, _ = _wire()
        _submit(bus)
        assert _set_status(bus, "COMPLETED").reason.code == "INVALID_TRANSITION"

    def test_same_status_is_noop(self):
        store, bus, _ = _wire()
        _submit(bus)
        commits = store.commit_count
        result = _set_status(bus, "NEW")
        assert result.execution_result.noop is True
        assert store.commit_count == commits

    def test_unknown_request(self):
        _, bus, _ = _wire()
        assert _set_status(bus, "SCHEDULED", "d-404").reason.code == "DELIVERY_REQUEST_NOT_FOUND"


class TestDeliveryQueries:
    def test_open_and_per_customer(self):
        _, bus, svc = _wire()
        _submit(bus, "d-1", issued_at=NOW)
        _submit(bus, "d-2", issued_at=NOW + timedelta(hours=1))
        _set_status(bus, "CANCELLED", "d-1")
        assert [r.request_id for r in svc.open_requests()] == ["d-2"]
        assert [r.request_id for r in svc.requests_for_customer("c-1")] == ["d-2", "d-1"]
