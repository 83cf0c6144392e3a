"""
POS Command Layer — Command Dispatcher
=========================================
Accept Command → Evaluate Policies → Produce Outcome.

The Dispatcher is the DECISION MAKER. It decides ACCEPTED or REJECTED
before any collection is touched: validate first, then apply
unconditionally.

Policies are registered as callables returning Optional[RejectionReason].
Each receives the command and the read-only entity store. If any policy
rejects, the command is REJECTED with the first rejection reason.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, List, Optional

from core.commands.base import Command
from core.commands.outcomes import CommandOutcome
from core.commands.rejection import RejectionReason

logger = logging.getLogger("pos.commands")


# A policy is a callable:
#   (Command, store) → Optional[RejectionReason]
PolicyEvaluator = Callable[[Command, Any], Optional[RejectionReason]]


class CommandDispatcher:
    """
    Evaluate a command through the registered policies.

    Usage:
        dispatcher = CommandDispatcher(store=entity_store)
        dispatcher.register_policy(invoice_must_exist_policy)
        outcome = dispatcher.dispatch(command)

    Policies are evaluated in registration order.
    First rejection wins — remaining policies are skipped.
    """

    def __init__(self, store: Any):
        self._store = store
        self._policies: List[PolicyEvaluator] = []

    def register_policy(self, policy: PolicyEvaluator) -> None:
        if not callable(policy):
            raise TypeError(
                f"Policy must be callable, got {type(policy).__name__}."
            )
        self._policies.append(policy)

        policy_name = getattr(policy, "__qualname__", str(policy))
        logger.debug(f"Policy registered: {policy_name}")

    @property
    def policy_count(self) -> int:
        return len(self._policies)

    def dispatch(self, command: Command) -> CommandOutcome:
        """
        Evaluate command and produce outcome.

        Returns:
            CommandOutcome — never None, never ambiguous.
        """
        for policy in self._policies:
            rejection = policy(command, self._store)
            if rejection is None:
                continue

            if not isinstance(rejection, RejectionReason):
                raise TypeError(
                    f"Policy must return RejectionReason or None, "
                    f"got {type(rejection).__name__}."
                )

            logger.info(
                f"Command {command.command_id} ({command.command_type}) "
                f"rejected by policy '{rejection.policy_name}': "
                f"[{rejection.code}] {rejection.message}"
            )
            return CommandOutcome.rejected(
                command.command_id, rejection, command.issued_at,
            )

        logger.info(f"Command {command.command_id} ACCEPTED")
        return CommandOutcome.accepted(command.command_id, command.issued_at)
