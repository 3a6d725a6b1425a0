"""
Inventory Manager: movements, counter/ledger agreement, advisories
"""
import pytest
from sqlalchemy.exc import OperationalError

from polimarket.core.exceptions import (
    ConcurrentModification, InsufficientStock, InvalidInputError, InvalidQuantity,
    MovementImmutable, ProductInactive, ProductNotFound, StorageUnavailableError,
)
from polimarket.models import InventoryMovement, MovementType, Product
from polimarket.services import InventoryManager, KeyedLocks, LedgerStore, StockAdvisory


@pytest.fixture
def inventory(facade):
    return facade.inventory


def test_outbound_then_insufficient_stock(inventory, product):
    outcome = inventory.record_movement("P100", MovementType.OUTBOUND, 4, "sale", None, "u1")

    assert outcome.current_stock == 6
    assert outcome.movement.stock_before == 10
    assert outcome.movement.stock_after == 6
    assert outcome.movement.quantity == -4
    assert outcome.movement.performed_by == "u1"

    with pytest.raises(InsufficientStock) as exc:
        inventory.record_movement("P100", MovementType.OUTBOUND, 10, "sale", None, "u1")
    assert exc.value.current_stock == 6
    assert exc.value.requested == 10
    assert inventory.current_stock("P100") == 6


def test_rejected_outbound_writes_no_movement(inventory, product, db):
    before = db.query(InventoryMovement).count()

    with pytest.raises(InsufficientStock):
        inventory.record_movement("P100", MovementType.OUTBOUND, 11, "sale")

    assert db.query(InventoryMovement).count() == before
    assert inventory.current_stock("P100") == 10


def test_outbound_of_exact_stock_reaches_zero(inventory, product):
    outcome = inventory.record_movement("P100", "OUTBOUND", 10, "clearance")
    assert outcome.current_stock == 0
    assert outcome.advisory == StockAdvisory.BELOW_MINIMUM


def test_counter_equals_sum_of_deltas(inventory, product):
    for movement_type, quantity in [
        (MovementType.INBOUND, 25),
        (MovementType.OUTBOUND, 7),
        (MovementType.ADJUSTMENT, -3),
        (MovementType.ADJUSTMENT, 5),
        (MovementType.OUTBOUND, 12),
    ]:
        inventory.record_movement("P100", movement_type, quantity, "mixed")

    # 10 initial + 25 - 7 - 3 + 5 - 12
    assert inventory.current_stock("P100") == 18
    assert inventory.ledger_stock("P100") == 18

    audit = inventory.verify_ledger("P100")
    assert audit.movement_count == 6
    assert audit.chain_intact
    assert audit.is_consistent


def test_movements_chain_without_gaps(inventory, product):
    inventory.record_movement("P100", MovementType.INBOUND, 5, "restock")
    inventory.record_movement("P100", MovementType.OUTBOUND, 3, "sale")

    history = list(reversed(inventory.movement_history("P100")))
    assert [m.sequence for m in history] == [1, 2, 3]
    assert history[0].stock_before == 0
    for previous, current in zip(history, history[1:]):
        assert current.stock_before == previous.stock_after


@pytest.mark.parametrize("movement_type,quantity", [
    (MovementType.INBOUND, 0),
    (MovementType.INBOUND, -5),
    (MovementType.OUTBOUND, 0),
    (MovementType.OUTBOUND, -1),
    (MovementType.ADJUSTMENT, 0),
])
def test_invalid_quantities_rejected(inventory, product, movement_type, quantity):
    with pytest.raises(InvalidQuantity):
        inventory.record_movement("P100", movement_type, quantity, "bad")
    assert inventory.current_stock("P100") == 10


def test_non_integer_quantity_rejected(inventory, product):
    with pytest.raises(InvalidQuantity):
        inventory.record_movement("P100", MovementType.INBOUND, 2.5, "bad")


def test_unknown_movement_type_rejected(inventory, product):
    with pytest.raises(InvalidInputError):
        inventory.record_movement("P100", "TRANSFER", 1, "bad")


def test_negative_adjustment_cannot_go_below_zero(inventory, product):
    with pytest.raises(InsufficientStock):
        inventory.record_movement("P100", MovementType.ADJUSTMENT, -11, "count correction")
    assert inventory.current_stock("P100") == 10


def test_missing_product(inventory):
    with pytest.raises(ProductNotFound):
        inventory.record_movement("NOPE", MovementType.INBOUND, 1, "restock")
    with pytest.raises(ProductNotFound):
        inventory.current_stock("NOPE")


def test_inactive_product_rejects_movements(inventory, facade, product):
    assert facade.deactivate_product("P100").success

    with pytest.raises(ProductInactive):
        inventory.record_movement("P100", MovementType.INBOUND, 1, "restock")


def test_advisories_do_not_block(inventory, product):
    above = inventory.record_movement("P100", MovementType.INBOUND, 45, "big delivery")
    assert above.advisory == StockAdvisory.ABOVE_MAXIMUM
    assert above.current_stock == 55

    normal = inventory.record_movement("P100", MovementType.OUTBOUND, 40, "sale")
    assert normal.advisory == StockAdvisory.NONE
    assert not normal.has_advisory

    below = inventory.record_movement("P100", MovementType.OUTBOUND, 14, "sale")
    assert below.advisory == StockAdvisory.BELOW_MINIMUM
    assert below.current_stock == 1


def test_low_stock_products(inventory, product):
    assert inventory.low_stock_products() == []
    inventory.record_movement("P100", MovementType.OUTBOUND, 9, "sale")
    assert [p.id for p in inventory.low_stock_products()] == ["P100"]


def test_set_stock_writes_adjustment(inventory, product):
    outcome = inventory.set_stock("P100", 4, "physical count", "auditor")
    assert outcome.movement.movement_type == MovementType.ADJUSTMENT.value
    assert outcome.movement.quantity == -6
    assert inventory.current_stock("P100") == 4

    assert inventory.set_stock("P100", 4, "physical count") is None
    with pytest.raises(InvalidQuantity):
        inventory.set_stock("P100", -1, "physical count")


def test_movements_are_immutable(inventory, product, db):
    movement = db.query(InventoryMovement).filter(InventoryMovement.product_id == "P100").first()
    movement.quantity = 999

    with pytest.raises(MovementImmutable):
        db.commit()
    db.rollback()

    db.delete(db.query(InventoryMovement).first())
    with pytest.raises(MovementImmutable):
        db.commit()
    db.rollback()

    assert inventory.verify_ledger("P100").is_consistent


class InterferingStore(LedgerStore):
    """Bumps the product's version from another session right after each locked read"""

    def __init__(self, db, other_sessions, interferences):
        super().__init__(db)
        self.other_sessions = other_sessions
        self.remaining = interferences

    def get_for_update(self, model, key):
        obj = super().get_for_update(model, key)
        if self.remaining > 0:
            self.remaining -= 1
            other = self.other_sessions()
            try:
                rival = other.get(Product, key)
                rival.description = f"{rival.description} (edited)"
                other.commit()
            finally:
                other.close()
        return obj


def test_stale_write_is_retried_once(product, session_factory):
    db = session_factory()
    try:
        store = InterferingStore(db, session_factory, interferences=1)
        manager = InventoryManager(store, locks=KeyedLocks(), retry_limit=1)

        outcome = manager.record_movement("P100", MovementType.OUTBOUND, 3, "sale")

        assert outcome.movement.stock_before == 10
        assert manager.current_stock("P100") == 7
        assert manager.verify_ledger("P100").is_consistent
    finally:
        db.close()


def test_conflict_after_retry_exhausted(product, session_factory):
    db = session_factory()
    try:
        store = InterferingStore(db, session_factory, interferences=2)
        manager = InventoryManager(store, locks=KeyedLocks(), retry_limit=1)

        with pytest.raises(ConcurrentModification):
            manager.record_movement("P100", MovementType.OUTBOUND, 3, "sale")

        assert manager.current_stock("P100") == 10
        assert manager.verify_ledger("P100").movement_count == 1
    finally:
        db.close()


def test_storage_fault_leaves_no_partial_effect(inventory, product, monkeypatch):
    def broken_sequence(product_id):
        raise OperationalError("SELECT max(sequence)", {}, Exception("disk I/O error"))

    monkeypatch.setattr(inventory.store, "next_sequence", broken_sequence)

    with pytest.raises(StorageUnavailableError):
        inventory.record_movement("P100", MovementType.OUTBOUND, 2, "sale")

    monkeypatch.undo()
    assert inventory.current_stock("P100") == 10
    assert inventory.verify_ledger("P100").movement_count == 1
