"""
Business Facade - single entry point for the API layer and the seeder

Composes InventoryManager and AuthorizationRegistry and returns every
outcome as an OperationResult. Domain errors become failed results with
their kind and code; database faults become StorageUnavailable.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, List, Optional
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from polimarket.core.exceptions import (
    AlreadyExists, EmployeeNotFound, ErrorKind, PoliMarketError,
    ProductNotFound, SellerNotFound, StorageUnavailableError,
)
from polimarket.models import HREmployee, MovementType, Product, Seller
from polimarket.models.base import utcnow
from polimarket.schemas.hr import EmployeeCreate
from polimarket.schemas.product import ProductCreate, ProductUpdate
from polimarket.schemas.seller import SellerCreate
from .authorization_service import AuthorizationRegistry
from .hr_service import HRService
from .inventory_service import InventoryManager
from .ledger_store import KeyedLocks, LedgerStore, product_locks
from .product_service import ProductService

logger = logging.getLogger(__name__)


@dataclass
class OperationResult:
    success: bool
    data: Any = None
    message: str = ""
    errors: List[str] = field(default_factory=list)
    error_kind: Optional[ErrorKind] = None
    error_code: Optional[str] = None
    timestamp: datetime = field(default_factory=utcnow)

    @classmethod
    def ok(cls, data: Any = None, message: str = "Operation successful") -> "OperationResult":
        return cls(success=True, data=data, message=message)

    @classmethod
    def fail(cls, error: PoliMarketError) -> "OperationResult":
        return cls(
            success=False,
            message=error.message,
            errors=[error.message],
            error_kind=error.kind,
            error_code=error.code
        )


class BusinessFacade:

    def __init__(self, db: Session, locks: KeyedLocks = product_locks, retry_limit: Optional[int] = None):
        self.db = db
        self.store = LedgerStore(db)
        self.inventory = InventoryManager(self.store, locks=locks, retry_limit=retry_limit)
        self.authorization = AuthorizationRegistry(self.store)

    def _execute(self, operation: str, action: Callable[[], Any], message: str = "Operation successful") -> OperationResult:
        try:
            data = action()
        except StorageUnavailableError as e:
            logger.error(f"{operation} failed: {e.message}")
            return OperationResult.fail(e)
        except PoliMarketError as e:
            self.store.rollback()
            logger.info(f"{operation} rejected [{e.code}]: {e.message}")
            return OperationResult.fail(e)
        except SQLAlchemyError as e:
            self.store.rollback()
            logger.exception(f"{operation} failed on storage")
            return OperationResult.fail(StorageUnavailableError(operation, e))
        return OperationResult.ok(data, message)

    def _require_product(self, product_id: str) -> Product:
        product = self.store.get(Product, product_id)
        if product is None:
            raise ProductNotFound(product_id)
        return product

    def _require_seller(self, seller_code: str) -> Seller:
        seller = self.store.get(Seller, seller_code)
        if seller is None:
            raise SellerNotFound(seller_code)
        return seller

    def _require_employee(self, employee_id: str) -> HREmployee:
        employee = self.store.get(HREmployee, employee_id)
        if employee is None:
            raise EmployeeNotFound(employee_id)
        return employee

    # ===================== INVENTORY =====================

    def record_movement(
        self,
        product_id: str,
        movement_type: MovementType,
        quantity: int,
        reason: str,
        reference_document: Optional[str] = None,
        performed_by: str = "system"
    ) -> OperationResult:
        def action():
            self._require_product(product_id)
            return self.inventory.record_movement(
                product_id, movement_type, quantity, reason, reference_document, performed_by
            )
        return self._execute("record_movement", action, "Movement recorded")

    def current_stock(self, product_id: str) -> OperationResult:
        return self._execute("current_stock", lambda: self.inventory.current_stock(product_id))

    def verify_ledger(self, product_id: str) -> OperationResult:
        return self._execute("verify_ledger", lambda: self.inventory.verify_ledger(product_id))

    def movement_history(self, product_id: str, limit: int = 50) -> OperationResult:
        return self._execute("movement_history", lambda: self.inventory.movement_history(product_id, limit))

    def low_stock_products(self) -> OperationResult:
        return self._execute("low_stock_products", self.inventory.low_stock_products)

    # ===================== CATALOG =====================

    def list_products(
        self,
        page: int = 1,
        page_size: int = 50,
        category: Optional[str] = None,
        active: Optional[bool] = True,
        search: Optional[str] = None
    ) -> OperationResult:
        def action():
            products, total = ProductService.get_products(self.db, category, search, active, page, page_size)
            return {
                "products": products,
                "total_count": total,
                "page": page,
                "page_size": page_size,
                "total_pages": ProductService.total_pages(total, page_size)
            }
        return self._execute("list_products", action)

    def get_product(self, product_id: str) -> OperationResult:
        return self._execute("get_product", lambda: self._require_product(product_id))

    def list_categories(self) -> OperationResult:
        return self._execute("list_categories", lambda: ProductService.get_categories(self.db))

    def create_product(self, product_data: ProductCreate, performed_by: str = "system") -> OperationResult:
        def action():
            if product_data.id and self.store.exists(Product, product_data.id):
                raise AlreadyExists("Product", product_data.id)
            product = ProductService.build_product(product_data)
            return self.inventory.register_product(product, product_data.stock, performed_by)
        return self._execute("create_product", action, "Product created")

    def update_product(self, product_id: str, product_data: ProductUpdate, performed_by: str = "system") -> OperationResult:
        def action():
            product = self._require_product(product_id)
            if product_data.stock is None:
                with self.store.transaction("update_product"):
                    ProductService.apply_update(product, product_data)
            else:
                # Field changes and the ADJUSTMENT commit together
                self.inventory.set_stock(
                    product_id, product_data.stock, "Stock set from product update", performed_by,
                    prepare=lambda locked: ProductService.apply_update(locked, product_data)
                )
            return self.store.get(Product, product_id, fresh=True)
        return self._execute("update_product", action, "Product updated")

    def deactivate_product(self, product_id: str) -> OperationResult:
        def action():
            product = self._require_product(product_id)
            with self.store.transaction("deactivate_product"):
                product.is_active = False
                product.updated_at = utcnow()
            logger.info(f"Product {product_id} deactivated")
            return True
        return self._execute("deactivate_product", action, "Product deactivated")

    # ===================== AUTHORIZATION =====================

    def authorize_seller(self, seller_code: str, approving_employee_id: str, commission_override=None) -> OperationResult:
        def action():
            self._require_seller(seller_code)
            self._require_employee(approving_employee_id)
            return self.authorization.authorize(seller_code, approving_employee_id, commission_override)
        return self._execute("authorize_seller", action, "Seller authorized")

    def validate_seller(self, seller_code: str) -> OperationResult:
        return self._execute("validate_seller", lambda: self.authorization.validate(seller_code), "Validation completed")

    def get_seller(self, seller_code: str) -> OperationResult:
        return self._execute("get_seller", lambda: self.authorization.get(seller_code))

    def list_sellers(self, active_only: bool = False) -> OperationResult:
        return self._execute("list_sellers", lambda: self.authorization.list_sellers(active_only))

    def list_authorized_sellers(self) -> OperationResult:
        return self._execute("list_authorized_sellers", self.authorization.list_authorized)

    def list_pending_sellers(self) -> OperationResult:
        return self._execute("list_pending_sellers", self.authorization.list_pending)

    def create_seller(self, seller_data: SellerCreate) -> OperationResult:
        return self._execute(
            "create_seller",
            lambda: self.authorization.register(
                seller_data.code, seller_data.name, seller_data.territory, seller_data.commission
            ),
            "Seller created"
        )

    def deactivate_seller(self, seller_code: str) -> OperationResult:
        return self._execute("deactivate_seller", lambda: self.authorization.deactivate(seller_code), "Seller deactivated")

    # ===================== HR =====================

    def list_employees(self, active_only: bool = True) -> OperationResult:
        return self._execute("list_employees", lambda: HRService.get_employees(self.db, active_only))

    def get_employee(self, employee_id: str) -> OperationResult:
        return self._execute("get_employee", lambda: self._require_employee(employee_id))

    def create_employee(self, employee_data: EmployeeCreate) -> OperationResult:
        def action():
            if self.store.exists(HREmployee, employee_data.id):
                raise AlreadyExists("HR employee", employee_data.id)
            employee = HRService.build_employee(employee_data)
            with self.store.transaction("create_employee", duplicate=AlreadyExists("HR employee", employee.id)):
                self.store.upsert(employee)
            logger.info(f"HR employee {employee.id} created")
            return employee
        return self._execute("create_employee", action, "HR employee created")

    def deactivate_employee(self, employee_id: str) -> OperationResult:
        def action():
            employee = self._require_employee(employee_id)
            with self.store.transaction("deactivate_employee"):
                employee.is_active = False
            logger.info(f"HR employee {employee_id} deactivated")
            return True
        return self._execute("deactivate_employee", action, "HR employee deactivated")
