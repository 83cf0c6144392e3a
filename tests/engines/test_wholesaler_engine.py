"""POS Wholesaler Engine tests (supplier records)."""

import uuid
from datetime import datetime, timedelta, timezone

import pytest

NOW = datetime(2026, 3, 1, 9, 0, 0, tzinfo=timezone.utc)


def kw(issued_at=NOW):
    return dict(
        actor_type="HUMAN",
        actor_id="admin-1",
        command_id=uuid.uuid4(),
        correlation_id=uuid.uuid4(),
        issued_at=issued_at,
    )


def _wire():
    from core.commands import CommandBus, CommandDispatcher
    from core.store import EntityStore, InMemoryKeyValueStore
    from engines.wholesaler.services import WholesalerService

    store = EntityStore(kv_store=InMemoryKeyValueStore())
    bus = CommandBus(CommandDispatcher(store), subscribers=store.subscribers)
    return store, bus, WholesalerService(store=store, command_bus=bus)


def _register(bus, wholesaler_id="w-1", **extra):
    from engines.wholesaler.commands import WholesalerRegisterRequest

    extra.setdefault("name", "Island Wholesale")
    return bus.handle(WholesalerRegisterRequest(
        wholesaler_id=wholesaler_id, **extra,
    ).to_command(**kw()))


def _update(bus, wholesaler_id="w-1", **changes):
    from engines.wholesaler.commands import WholesalerUpdateRequest

    return bus.handle(WholesalerUpdateRequest(
        wholesaler_id=wholesaler_id, changes=changes,
    ).to_command(**kw()))


class TestWholesalerCommands:
    def test_register_to_command(self):
        from engines.wholesaler.commands import WholesalerRegisterRequest

        cmd = WholesalerRegisterRequest(
            wholesaler_id="w-1", name="Island Wholesale", tags=("drinks",),
        ).to_command(**kw())
        assert cmd.command_type == "wholesaler.supplier.register.request"
        assert cmd.payload["tags"] == ["drinks"]

    def test_tags_must_be_tuple(self):
        from engines.wholesaler.commands import WholesalerRegisterRequest

        with pytest.raises(ValueError, match="tags"):
            WholesalerRegisterRequest(wholesaler_id="w-1", name="X", tags=["a"])

    def test_bad_status_rejected(self):
        from engines.wholesaler.commands import WholesalerUpdateRequest

        with pytest.raises(ValueError, match="status"):
            WholesalerUpdateRequest(wholesaler_id="w-1", changes={"status": "CLOSED"})


class TestWholesalerService:
    def test_register(self):
        store, bus, _ = _wire()
        result = _register(bus, code="IW", linked_inventory_ids=("i-1", "i-2"))
        assert result.is_accepted
        w = store.get_wholesaler("w-1")
        assert w.code == "IW"
        assert w.linked_inventory_ids == ("i-1", "i-2")
        assert w.status.value == "ACTIVE"

    def test_duplicate_id(self):
        _, bus, _ = _wire()
        _register(bus)
        assert _register(bus).reason.code == "DUPLICATE_ID"

    def test_update_and_deactivate(self):
        store, bus, svc = _wire()
        _register(bus, wholesaler_id="w-1")
        _register(bus, wholesaler_id="w-2", name="Atoll Supplies")
        result = _update(bus, wholesaler_id="w-2", status="INACTIVE", tags=["frozen"])
        assert result.execution_result.event_type == "wholesaler.supplier.updated.v1"
        assert store.get_wholesaler("w-2").tags == ("frozen",)
        assert [w.wholesaler_id for w in svc.active_wholesalers()] == ["w-1"]

    def test_update_unknown(self):
        _, bus, _ = _wire()
        assert _update(bus, wholesaler_id="w-404", name="X").reason.code == "WHOLESALER_NOT_FOUND"


class TestPurchaseHistory:
    def test_history_sorted_by_order_date(self):
        from core.primitives.document import POItem, PurchaseOrder, PurchaseOrderStatus
        from core.store import PURCHASE_ORDERS, ChangeSet

        store, bus, svc = _wire()
        _register(bus)

        def order(po_id, wholesaler_id, days):
            return PurchaseOrder(
                po_id=po_id,
                po_number=f"PO-{po_id}",
                wholesaler_id=wholesaler_id,
                wholesaler_name="Island Wholesale",
                order_date=NOW + timedelta(days=days),
                status=PurchaseOrderStatus.DRAFT,
                items=(POItem("i-1", "Cola", qty=1, unit_cost=5),),
                subtotal=5,
                tax=0,
                shipping=0,
                discount=0,
                total_cost=5,
            )

        store.commit(
            ChangeSet()
            .put(PURCHASE_ORDERS, order("po-b", "w-1", 3))
            .put(PURCHASE_ORDERS, order("po-a", "w-1", 1))
            .put(PURCHASE_ORDERS, order("po-x", "w-9", 2))
        )
        assert [po.po_id for po in svc.purchase_history("w-1")] == ["po-a", "po-b"]
