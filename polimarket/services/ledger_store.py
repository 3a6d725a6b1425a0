"""
Ledger Store - persistence contract for the core services

Keyed reads, upserts, an append-only movement log and a locked
read-then-write on a single key. No business rules live here.
"""
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional, Type, TypeVar
import logging
import threading

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from polimarket.core.exceptions import (
    PoliMarketError, StorageUnavailableError, WriteConflict
)
from polimarket.models import InventoryMovement

logger = logging.getLogger(__name__)

T = TypeVar("T")


class KeyedLocks:
    """
    Process-wide registry of one mutex per key.

    Entries are never evicted; one small lock per product id ever touched.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: Dict[str, threading.Lock] = {}

    def lock_for(self, key: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            return lock

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        with self.lock_for(key):
            yield


# Shared by every session in this process
product_locks = KeyedLocks()


class LedgerStore:
    """SQLAlchemy-backed store bound to one session"""

    def __init__(self, db: Session):
        self.db = db

    # ===================== READS =====================

    def get(self, model: Type[T], key, fresh: bool = False) -> Optional[T]:
        """Get by primary key"""
        if fresh:
            return self.db.get(model, key, populate_existing=True)
        return self.db.get(model, key)

    def get_for_update(self, model: Type[T], key) -> Optional[T]:
        """Get by primary key holding a row lock until commit (FOR UPDATE where supported)"""
        pk = model.__mapper__.primary_key[0]
        return self.db.execute(
            select(model)
            .where(pk == key)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()

    def exists(self, model: Type[T], key) -> bool:
        return self.get(model, key) is not None

    def query(self, model: Type[T]):
        return self.db.query(model)

    # ===================== WRITES =====================

    def upsert(self, obj: T) -> T:
        """Insert a new row or attach changes to an existing one"""
        self.db.add(obj)
        return obj

    def append_movement(self, movement: InventoryMovement) -> InventoryMovement:
        """Append to the movement log; rows are never updated afterwards"""
        self.db.add(movement)
        return movement

    def flush(self) -> None:
        self.db.flush()

    def rollback(self) -> None:
        try:
            self.db.rollback()
        except SQLAlchemyError:
            logger.exception("Rollback failed")

    @contextmanager
    def transaction(self, operation: str, duplicate: Optional[PoliMarketError] = None) -> Iterator[None]:
        """
        Commit everything written inside the block, or nothing.

        Stale versions and duplicate keys surface as WriteConflict, or as
        ``duplicate`` when given; any other database fault surfaces as
        StorageUnavailableError.
        """
        try:
            yield
            self.db.commit()
        except PoliMarketError:
            self.rollback()
            raise
        except IntegrityError as e:
            self.rollback()
            if duplicate is not None:
                logger.info(f"Duplicate key during {operation}: {duplicate.message}")
                raise duplicate from e
            logger.warning(f"Write conflict during {operation}: {e}")
            raise WriteConflict(operation) from e
        except StaleDataError as e:
            self.rollback()
            logger.warning(f"Write conflict during {operation}: {e}")
            raise WriteConflict(operation) from e
        except SQLAlchemyError as e:
            self.rollback()
            logger.error(f"Storage fault during {operation}: {e}")
            raise StorageUnavailableError(operation, e) from e
        except Exception:
            self.rollback()
            raise

    # ===================== MOVEMENT LOG =====================

    def next_sequence(self, product_id: str) -> int:
        last = self.db.query(func.max(InventoryMovement.sequence)).filter(
            InventoryMovement.product_id == product_id
        ).scalar()
        return (last or 0) + 1

    def movements_for(
        self,
        product_id: str,
        newest_first: bool = False,
        limit: Optional[int] = None
    ) -> List[InventoryMovement]:
        query = self.db.query(InventoryMovement).filter(
            InventoryMovement.product_id == product_id
        )
        order = InventoryMovement.sequence.desc() if newest_first else InventoryMovement.sequence
        query = query.order_by(order)
        if limit:
            query = query.limit(limit)
        return query.all()

    def ledger_sum(self, product_id: str) -> int:
        total = self.db.query(func.sum(InventoryMovement.quantity)).filter(
            InventoryMovement.product_id == product_id
        ).scalar()
        return int(total or 0)
