"""
Inventory Manager - Business Logic for Stock

Every change to Product.current_stock goes through here. A change is
written as one InventoryMovement plus the new counter value in the same
transaction, serialized per product so that each movement's stock_before
is the previous movement's stock_after.
"""
from dataclasses import dataclass
from typing import Callable, List, Optional, Union
import enum
import logging

from polimarket.core import settings
from polimarket.core.exceptions import (
    AlreadyExists, ConcurrentModification, InsufficientStock, InvalidInputError, InvalidQuantity,
    ProductInactive, ProductNotFound, WriteConflict,
)
from polimarket.models import InventoryMovement, MovementType, Product
from polimarket.models.base import utcnow
from .ledger_store import KeyedLocks, LedgerStore, product_locks

logger = logging.getLogger(__name__)


class StockAdvisory(str, enum.Enum):
    NONE = "NONE"
    BELOW_MINIMUM = "BELOW_MINIMUM"
    ABOVE_MAXIMUM = "ABOVE_MAXIMUM"


@dataclass
class MovementOutcome:
    movement: InventoryMovement
    current_stock: int
    advisory: StockAdvisory = StockAdvisory.NONE

    @property
    def has_advisory(self) -> bool:
        return self.advisory != StockAdvisory.NONE


@dataclass
class LedgerAudit:
    product_id: str
    current_stock: int
    ledger_stock: int
    movement_count: int
    chain_intact: bool

    @property
    def is_consistent(self) -> bool:
        return self.chain_intact and self.current_stock == self.ledger_stock


def advisory_for(product: Product, stock: int) -> StockAdvisory:
    if stock < product.min_stock:
        return StockAdvisory.BELOW_MINIMUM
    if stock > product.max_stock:
        return StockAdvisory.ABOVE_MAXIMUM
    return StockAdvisory.NONE


class InventoryManager:
    """Owns the invariant between a product's counter and its movement log"""

    def __init__(
        self,
        store: LedgerStore,
        locks: KeyedLocks = product_locks,
        retry_limit: Optional[int] = None
    ):
        self.store = store
        self.locks = locks
        self.retry_limit = settings.MOVEMENT_RETRY_LIMIT if retry_limit is None else retry_limit

    @staticmethod
    def signed_delta(movement_type: MovementType, quantity: int) -> int:
        """Turn a requested quantity into the signed delta for its movement type"""
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise InvalidQuantity(quantity, f"Quantity must be an integer, got {quantity!r}")

        if movement_type == MovementType.ADJUSTMENT:
            if quantity == 0:
                raise InvalidQuantity(quantity, "Adjustment quantity must not be zero")
            return quantity

        if quantity <= 0:
            raise InvalidQuantity(quantity, f"{movement_type.value} quantity must be greater than zero")
        return quantity if movement_type == MovementType.INBOUND else -quantity

    def record_movement(
        self,
        product_id: str,
        movement_type: Union[MovementType, str],
        quantity: int,
        reason: str,
        reference_document: Optional[str] = None,
        performed_by: str = "system"
    ) -> MovementOutcome:
        """Append one movement and move the counter with it"""
        try:
            movement_type = MovementType(movement_type)
        except ValueError:
            raise InvalidInputError(
                f"Unknown movement type: {movement_type}", movement_type=str(movement_type)
            )

        delta = self.signed_delta(movement_type, quantity)
        return self._apply_serialized(
            product_id, movement_type, lambda product: delta,
            reason, reference_document, performed_by
        )

    def set_stock(
        self,
        product_id: str,
        target_stock: int,
        reason: str,
        performed_by: str = "system",
        prepare: Optional[Callable[[Product], None]] = None
    ) -> Optional[MovementOutcome]:
        """
        Bring the counter to an absolute value with an ADJUSTMENT; None when already there.

        ``prepare`` runs on the locked product before the activity check and is
        committed or rolled back together with the adjustment.
        """
        if isinstance(target_stock, bool) or not isinstance(target_stock, int) or target_stock < 0:
            raise InvalidQuantity(target_stock, f"Target stock must be a non-negative integer, got {target_stock!r}")

        return self._apply_serialized(
            product_id, MovementType.ADJUSTMENT,
            lambda product: target_stock - product.current_stock,
            reason, None, performed_by, prepare
        )

    def register_product(self, product: Product, initial_stock: int = 0, performed_by: str = "system") -> Product:
        """Insert a new product, opening its ledger with an INBOUND for any initial stock"""
        if isinstance(initial_stock, bool) or not isinstance(initial_stock, int) or initial_stock < 0:
            raise InvalidQuantity(initial_stock, f"Initial stock must be a non-negative integer, got {initial_stock!r}")

        with self.locks.hold(product.id):
            with self.store.transaction("register_product", duplicate=AlreadyExists("Product", product.id)):
                product.current_stock = 0
                self.store.upsert(product)
                self.store.flush()

                if initial_stock > 0:
                    self._append(product, MovementType.INBOUND, initial_stock, "Initial stock", None, performed_by)

        logger.info(f"Product {product.id} registered with initial stock {initial_stock}")
        return product

    def _apply_serialized(
        self,
        product_id: str,
        movement_type: MovementType,
        delta_for: Callable[[Product], int],
        reason: str,
        reference_document: Optional[str],
        performed_by: str,
        prepare: Optional[Callable[[Product], None]] = None
    ) -> Optional[MovementOutcome]:
        attempts = 0
        with self.locks.hold(product_id):
            while True:
                attempts += 1
                try:
                    with self.store.transaction("record_movement"):
                        outcome = self._apply(
                            product_id, movement_type, delta_for,
                            reason, reference_document, performed_by, prepare
                        )
                    break
                except WriteConflict:
                    if attempts > self.retry_limit:
                        logger.error(f"Giving up on movement for {product_id} after {attempts} attempts")
                        raise ConcurrentModification(product_id, attempts)
                    logger.warning(f"Stale stock for {product_id}, retrying (attempt {attempts})")

        if outcome is None:
            return None

        movement = outcome.movement
        logger.info(
            f"Movement {movement.movement_type} {movement.quantity:+d} on {product_id}: "
            f"{movement.stock_before} -> {movement.stock_after} by {movement.performed_by}"
        )
        if outcome.has_advisory:
            logger.warning(f"Stock advisory {outcome.advisory.value} for {product_id}: stock {outcome.current_stock}")
        return outcome

    def _apply(
        self,
        product_id: str,
        movement_type: MovementType,
        delta_for: Callable[[Product], int],
        reason: str,
        reference_document: Optional[str],
        performed_by: str,
        prepare: Optional[Callable[[Product], None]] = None
    ) -> Optional[MovementOutcome]:
        product = self.store.get_for_update(Product, product_id)
        if product is None:
            raise ProductNotFound(product_id)
        if prepare is not None:
            prepare(product)
        if not product.is_active:
            raise ProductInactive(product_id)

        delta = delta_for(product)
        if delta == 0:
            return None

        stock_before = product.current_stock
        if stock_before + delta < 0:
            raise InsufficientStock(product_id, stock_before, -delta)

        movement = self._append(product, movement_type, delta, reason, reference_document, performed_by)
        return MovementOutcome(
            movement=movement,
            current_stock=movement.stock_after,
            advisory=advisory_for(product, movement.stock_after)
        )

    def _append(
        self,
        product: Product,
        movement_type: MovementType,
        delta: int,
        reason: str,
        reference_document: Optional[str],
        performed_by: str
    ) -> InventoryMovement:
        now = utcnow()
        stock_before = product.current_stock
        movement = InventoryMovement(
            product_id=product.id,
            sequence=self.store.next_sequence(product.id),
            movement_type=movement_type.value,
            quantity=delta,
            stock_before=stock_before,
            stock_after=stock_before + delta,
            reason=reason or "",
            reference_document=reference_document,
            performed_by=performed_by or "system",
            created_at=now
        )
        self.store.append_movement(movement)

        product.current_stock = movement.stock_after
        product.updated_at = now
        return movement

    # ===================== READS =====================

    def _require_product(self, product_id: str) -> Product:
        product = self.store.get(Product, product_id, fresh=True)
        if product is None:
            raise ProductNotFound(product_id)
        return product

    def current_stock(self, product_id: str) -> int:
        return self._require_product(product_id).current_stock

    def ledger_stock(self, product_id: str) -> int:
        """Stock recomputed from the movement log alone"""
        self._require_product(product_id)
        return self.store.ledger_sum(product_id)

    def verify_ledger(self, product_id: str) -> LedgerAudit:
        product = self._require_product(product_id)
        movements = self.store.movements_for(product_id)

        running = 0
        chain_intact = True
        for movement in movements:
            if (
                movement.stock_before != running
                or movement.stock_after != movement.stock_before + movement.quantity
            ):
                chain_intact = False
            running = movement.stock_after

        audit = LedgerAudit(
            product_id=product_id,
            current_stock=product.current_stock,
            ledger_stock=sum(m.quantity for m in movements),
            movement_count=len(movements),
            chain_intact=chain_intact
        )
        if not audit.is_consistent:
            logger.error(f"Ledger mismatch for {product_id}: {audit}")
        return audit

    def movement_history(self, product_id: str, limit: int = 50) -> List[InventoryMovement]:
        """Movements for a product, newest first"""
        self._require_product(product_id)
        return self.store.movements_for(product_id, newest_first=True, limit=limit)

    def low_stock_products(self) -> List[Product]:
        """Active products currently below their minimum"""
        return self.store.query(Product).filter(
            Product.is_active == True,
            Product.current_stock < Product.min_stock
        ).order_by(Product.id).all()
