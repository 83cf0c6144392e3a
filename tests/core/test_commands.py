"""
POS Command Layer — Tests
===========================
Command → Outcome chain through the dispatcher and the bus.

Scenarios:
1. Valid command → ACCEPTED, handler executed
2. Invalid structure → ValueError at construction
3. Policy failure → REJECTED outcome, handler not executed
4. REJECTED publishes a '.rejected' change event
5. Unknown command type → NoHandlerRegistered
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Optional

import pytest

from core.commands.base import (
    Command,
    derive_rejection_event_type,
    derive_source_engine,
)
from core.commands.bus import CommandBus, CommandResult, NoHandlerRegistered
from core.commands.dispatcher import CommandDispatcher
from core.commands.outcomes import CommandOutcome, CommandStatus
from core.commands.rejection import ReasonCode, RejectionReason
from core.events import SubscriberRegistry

NOW = datetime(2026, 3, 1, 9, 0, 0, tzinfo=timezone.utc)


# ══════════════════════════════════════════════════════════════
# STUBS
# ══════════════════════════════════════════════════════════════

class StubEngineService:
    def __init__(self):
        self.executed = []

    def execute(self, command: Command) -> dict:
        self.executed.append(command)
        return {"handled": command.command_type}


def reject_everything(command, store) -> Optional[RejectionReason]:
    return RejectionReason(
        code=ReasonCode.INVOICE_NOT_FOUND,
        message="nothing exists",
        policy_name="reject_everything",
    )


def reject_with_transition(command, store) -> Optional[RejectionReason]:
    return RejectionReason(
        code=ReasonCode.INVALID_TRANSITION,
        message="second",
        policy_name="reject_with_transition",
    )


def allow_everything(command, store) -> Optional[RejectionReason]:
    return None


def make_command(**overrides) -> Command:
    fields = dict(
        command_id=uuid.uuid4(),
        command_type="invoicing.invoice.create.request",
        actor_type="HUMAN",
        actor_id="user-1",
        payload={"invoice_id": "inv-1"},
        issued_at=NOW,
        correlation_id=uuid.uuid4(),
        source_engine="invoicing",
    )
    fields.update(overrides)
    return Command(**fields)


@pytest.fixture
def valid_command():
    return make_command()


@pytest.fixture
def dispatcher():
    return CommandDispatcher(store=object())


@pytest.fixture
def registry():
    return SubscriberRegistry()


@pytest.fixture
def engine_service():
    return StubEngineService()


@pytest.fixture
def command_bus(dispatcher, registry, engine_service):
    bus = CommandBus(dispatcher=dispatcher, subscribers=registry)
    bus.register_handler("invoicing.invoice.create.request", engine_service)
    return bus


# ══════════════════════════════════════════════════════════════
# 1. VALID COMMAND → ACCEPTED
# ══════════════════════════════════════════════════════════════

class TestValidCommandAccepted:
    def test_valid_command_accepted(self, dispatcher, valid_command):
        outcome = dispatcher.dispatch(valid_command)
        assert outcome.status == CommandStatus.ACCEPTED
        assert outcome.reason is None

    def test_outcome_uses_issued_at(self, dispatcher, valid_command):
        outcome = dispatcher.dispatch(valid_command)
        assert outcome.occurred_at == NOW

    def test_bus_accepted_calls_handler(self, command_bus, engine_service, valid_command):
        result = command_bus.handle(valid_command)
        assert isinstance(result, CommandResult)
        assert result.is_accepted
        assert result.message == "OK"
        assert engine_service.executed == [valid_command]
        assert result.execution_result == {"handled": valid_command.command_type}


# ══════════════════════════════════════════════════════════════
# 2. INVALID STRUCTURE
# ══════════════════════════════════════════════════════════════

class TestInvalidStructure:
    def test_command_type_without_request_suffix(self):
        with pytest.raises(ValueError, match="must end with"):
            make_command(command_type="invoicing.invoice.create")

    def test_command_type_too_few_segments(self):
        with pytest.raises(ValueError, match="minimum 4 segments"):
            make_command(command_type="invoicing.create.request")

    def test_namespace_must_match_source_engine(self):
        with pytest.raises(ValueError, match="does not match"):
            make_command(source_engine="procurement")

    def test_invalid_actor_type(self):
        with pytest.raises(ValueError, match="actor_type"):
            make_command(actor_type="AI")

    def test_empty_actor_id(self):
        with pytest.raises(ValueError, match="actor_id"):
            make_command(actor_id="")

    def test_payload_not_dict(self):
        with pytest.raises(TypeError, match="payload"):
            make_command(payload=["x"])

    def test_naive_issued_at_rejected(self):
        with pytest.raises(ValueError, match="timezone-aware"):
            make_command(issued_at=datetime(2026, 3, 1, 9, 0, 0))

    def test_command_is_frozen(self, valid_command):
        with pytest.raises(AttributeError):
            valid_command.actor_id = "someone-else"

    def test_actor_label_falls_back_to_id(self):
        assert make_command().actor_label == "user-1"
        assert make_command(actor_name="Aisha").actor_label == "Aisha"


# ══════════════════════════════════════════════════════════════
# 3. POLICY REJECTION
# ══════════════════════════════════════════════════════════════

class TestPolicyRejection:
    def test_policy_rejects(self, dispatcher, valid_command):
        dispatcher.register_policy(reject_everything)
        outcome = dispatcher.dispatch(valid_command)
        assert outcome.is_rejected
        assert outcome.reason.code == ReasonCode.INVOICE_NOT_FOUND
        assert outcome.reason.is_not_found

    def test_first_rejection_wins(self, dispatcher, valid_command):
        dispatcher.register_policy(allow_everything)
        dispatcher.register_policy(reject_everything)
        dispatcher.register_policy(reject_with_transition)
        outcome = dispatcher.dispatch(valid_command)
        assert outcome.reason.policy_name == "reject_everything"

    def test_policy_count(self, dispatcher):
        dispatcher.register_policy(allow_everything)
        dispatcher.register_policy(reject_everything)
        assert dispatcher.policy_count == 2

    def test_non_callable_policy_refused(self, dispatcher):
        with pytest.raises(TypeError, match="callable"):
            dispatcher.register_policy("not a policy")

    def test_rejected_bus_result_skips_handler(
        self, command_bus, dispatcher, engine_service, valid_command,
    ):
        dispatcher.register_policy(reject_everything)
        result = command_bus.handle(valid_command)
        assert result.is_rejected
        assert result.message == "nothing exists"
        assert result.execution_result is None
        assert engine_service.executed == []

    def test_rejected_outcome_requires_reason(self):
        with pytest.raises(ValueError):
            CommandOutcome(
                command_id=uuid.uuid4(),
                status=CommandStatus.REJECTED,
                reason=None,
                occurred_at=NOW,
            )


# ══════════════════════════════════════════════════════════════
# 4. REJECTION EVENT
# ══════════════════════════════════════════════════════════════

class TestRejectedProducesEvent:
    def test_rejection_event_published(
        self, command_bus, dispatcher, registry, valid_command,
    ):
        seen = []
        registry.subscribe_all(seen.append, "recorder")
        dispatcher.register_policy(reject_everything)

        command_bus.handle(valid_command)

        assert len(seen) == 1
        event = seen[0]
        assert event.event_type == "invoicing.invoice.create.rejected"
        assert event.is_rejection
        assert event.payload["rejection"]["code"] == ReasonCode.INVOICE_NOT_FOUND
        assert event.correlation_id == valid_command.correlation_id

    def test_rejection_event_naming(self):
        assert (
            derive_rejection_event_type("procurement.order.set_status.request")
            == "procurement.order.set_status.rejected"
        )

    def test_source_engine_derivation(self):
        assert derive_source_engine("invoicing.invoice.create.request") == "invoicing"


# ══════════════════════════════════════════════════════════════
# 5. WIRING ERRORS
# ══════════════════════════════════════════════════════════════

class TestHandlerRegistration:
    def test_no_handler_raises_error(self, dispatcher):
        bus = CommandBus(dispatcher=dispatcher)
        with pytest.raises(NoHandlerRegistered):
            bus.handle(make_command())

    def test_handler_type_must_end_with_request(self, command_bus, engine_service):
        with pytest.raises(ValueError, match=".request"):
            command_bus.register_handler("invoicing.invoice.create", engine_service)

    def test_handler_must_have_execute(self, command_bus):
        with pytest.raises(TypeError, match="execute"):
            command_bus.register_handler("invoicing.invoice.create.request", object())

    def test_has_handler(self, command_bus):
        assert command_bus.has_handler("invoicing.invoice.create.request")
        assert not command_bus.has_handler("procurement.order.create.request")
