# Services Package
from .ledger_store import LedgerStore, KeyedLocks, product_locks
from .inventory_service import InventoryManager, MovementOutcome, LedgerAudit, StockAdvisory
from .authorization_service import AuthorizationRegistry, ValidationResult
from .product_service import ProductService
from .hr_service import HRService
from .business_facade import BusinessFacade, OperationResult

__all__ = [
    "LedgerStore", "KeyedLocks", "product_locks",
    "InventoryManager", "MovementOutcome", "LedgerAudit", "StockAdvisory",
    "AuthorizationRegistry", "ValidationResult",
    "ProductService",
    "HRService",
    "BusinessFacade", "OperationResult",
]
