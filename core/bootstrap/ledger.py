"""
POS Bootstrap — Ledger Facade
===============================
Wires one EntityStore, one CommandDispatcher/CommandBus and every
engine service into a single object the presentation layer holds.

The facade stamps each request with the clock's time and the acting
user, runs it through the bus and returns the CommandResult. It never
decides anything itself; policies and services do.

Usage:
    ledger = build_pos_ledger(kv_store=DjangoKeyValueStore())
    user = ledger.login("ADMIN", "admin", "admin")
    result = ledger.create_invoice(InvoiceCreateRequest(...), actor=user)
"""

from __future__ import annotations

import logging
import uuid
from typing import Callable, Optional

from core.admin.commands import SettingsUpdateRequest
from core.admin.service import SettingsService
from core.auth.commands import AccountRegisterRequest, VerificationCodeRequest
from core.auth.service import AuthService, generate_numeric_code
from core.bootstrap.seed import seed_defaults
from core.commands import CommandBus, CommandDispatcher, CommandResult
from core.events import SubscriberRegistry
from core.primitives.document import InvoiceStatus
from core.primitives.party import User
from core.store import EntityStore, KeyValueStore
from core.time import Clock, get_default_clock
from engines.customer.services import CustomerService
from engines.delivery.services import DeliveryService
from engines.inventory.services import InventoryService
from engines.invoicing.commands import InvoiceStatusUpdateRequest
from engines.invoicing.services import InvoicingService
from engines.notification.services import NotificationService
from engines.procurement.services import ProcurementService
from engines.reporting.services import ReportingService
from engines.wholesaler.services import WholesalerService

logger = logging.getLogger("pos.bootstrap")

SYSTEM_ACTOR_ID = "system"


class PosLedger:
    def __init__(
        self,
        *,
        kv_store: Optional[KeyValueStore] = None,
        clock: Optional[Clock] = None,
        code_generator: Callable[[], str] = generate_numeric_code,
        subscribers: Optional[SubscriberRegistry] = None,
    ):
        self.clock = clock or get_default_clock()
        self.subscribers = subscribers or SubscriberRegistry()
        self.store = EntityStore(kv_store=kv_store, subscribers=self.subscribers)
        self.dispatcher = CommandDispatcher(self.store)
        self.bus = CommandBus(self.dispatcher, subscribers=self.subscribers)

        self.invoicing = InvoicingService(store=self.store, command_bus=self.bus)
        self.procurement = ProcurementService(store=self.store, command_bus=self.bus)
        self.customers = CustomerService(store=self.store, command_bus=self.bus)
        self.inventory = InventoryService(store=self.store, command_bus=self.bus)
        self.wholesalers = WholesalerService(store=self.store, command_bus=self.bus)
        self.notifications = NotificationService(store=self.store, command_bus=self.bus)
        self.deliveries = DeliveryService(store=self.store, command_bus=self.bus)
        self.settings = SettingsService(store=self.store, command_bus=self.bus)
        self.auth = AuthService(
            store=self.store, command_bus=self.bus, code_generator=code_generator,
        )
        self.reporting = ReportingService(store=self.store)

    def start(self) -> bool:
        """Load persisted state; seed defaults on a first run."""
        loaded = self.store.load()
        if not loaded:
            seed_defaults(self.store, self.clock.now_utc())
        return loaded

    # ══════════════════════════════════════════════════════════
    # COMMAND SUBMISSION
    # ══════════════════════════════════════════════════════════

    def submit(self, request, *, actor: Optional[User] = None) -> CommandResult:
        """Convert a request to a Command issued now by `actor`, then run it."""
        if actor is None:
            actor_type, actor_id, actor_name = "SYSTEM", SYSTEM_ACTOR_ID, None
        else:
            actor_type, actor_id, actor_name = "HUMAN", actor.user_id, actor.name
        command = request.to_command(
            actor_type=actor_type,
            actor_id=actor_id,
            actor_name=actor_name,
            command_id=uuid.uuid4(),
            correlation_id=uuid.uuid4(),
            issued_at=self.clock.now_utc(),
        )
        result = self.bus.handle(command)
        if result.is_rejected:
            logger.info(
                f"{command.command_type} rejected: {result.reason.code}"
            )
        return result

    # ── invoice ledger ────────────────────────────────────────

    def create_invoice(self, request, *, actor: Optional[User] = None) -> CommandResult:
        return self.submit(request, actor=actor)

    def update_invoice_status(
        self,
        invoice_id: str,
        status: str,
        proof_of_payment: Optional[str] = None,
        *,
        actor: Optional[User] = None,
    ) -> CommandResult:
        return self.submit(
            InvoiceStatusUpdateRequest(
                invoice_id=invoice_id,
                status=status,
                proof_of_payment=proof_of_payment,
            ),
            actor=actor,
        )

    def submit_payment_proof(
        self, invoice_id: str, proof: str, *, actor: Optional[User] = None,
    ) -> CommandResult:
        return self.update_invoice_status(
            invoice_id, InvoiceStatus.PENDING_APPROVAL.value, proof, actor=actor,
        )

    def approve_payment(self, invoice_id: str, *, actor: Optional[User] = None) -> CommandResult:
        return self.update_invoice_status(invoice_id, InvoiceStatus.PAID.value, actor=actor)

    def reject_payment(self, invoice_id: str, *, actor: Optional[User] = None) -> CommandResult:
        return self.update_invoice_status(invoice_id, InvoiceStatus.UNPAID.value, actor=actor)

    # ── purchase orders ───────────────────────────────────────

    def create_purchase_order(self, request, *, actor: Optional[User] = None) -> CommandResult:
        return self.submit(request, actor=actor)

    def update_purchase_order_status(
        self, request, *, actor: Optional[User] = None,
    ) -> CommandResult:
        return self.submit(request, actor=actor)

    # ── accounts ──────────────────────────────────────────────

    def generate_verification_code(
        self, user_id: str, identity_key: str, *, actor: Optional[User] = None,
    ) -> CommandResult:
        return self.submit(
            VerificationCodeRequest(user_id=user_id, identity_key=identity_key),
            actor=actor,
        )

    def register_user(
        self, identity_key: str, code: str, password: str,
    ) -> CommandResult:
        return self.submit(
            AccountRegisterRequest(identity_key=identity_key, code=code, password=password),
        )

    def login(self, role: str, username: str, password: str) -> Optional[User]:
        return self.auth.authenticate(role, username, password)

    def update_settings(self, changes: dict, *, actor: Optional[User] = None) -> CommandResult:
        return self.submit(SettingsUpdateRequest(changes=changes), actor=actor)


def build_pos_ledger(
    *,
    kv_store: Optional[KeyValueStore] = None,
    clock: Optional[Clock] = None,
    code_generator: Callable[[], str] = generate_numeric_code,
) -> PosLedger:
    """Construct and start a ledger (loading or seeding its state)."""
    ledger = PosLedger(kv_store=kv_store, clock=clock, code_generator=code_generator)
    ledger.start()
    return ledger
