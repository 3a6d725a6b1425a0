"""
Domain Errors

Every error carries a stable ``kind`` (the family callers branch on) and a
``code`` (the specific rule that failed), plus a human readable message.

    PoliMarketError
    +-- NotFoundError          ProductNotFound, SellerNotFound, EmployeeNotFound
    +-- InvalidStateError      ProductInactive, SellerInactive, EmployeeInactive, InsufficientStock,
    |                          MovementImmutable
    +-- InvalidInputError      InvalidQuantity, InvalidCommission, InvalidThresholds, InvalidPrice
    +-- ConflictError          ConcurrentModification, WriteConflict, AlreadyExists
    +-- StorageUnavailableError
"""
from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    NOT_FOUND = "NotFound"
    INVALID_STATE = "InvalidState"
    INVALID_INPUT = "InvalidInput"
    CONFLICT = "Conflict"
    STORAGE_UNAVAILABLE = "StorageUnavailable"


class PoliMarketError(Exception):
    """Base class for all domain errors"""
    kind: ErrorKind = ErrorKind.INVALID_STATE
    code: str = "POLIMARKET_ERROR"

    def __init__(self, message: str, **details: Any):
        super().__init__(message)
        self.message = message
        self.details: Dict[str, Any] = details

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


# ===================== NOT FOUND =====================

class NotFoundError(PoliMarketError):
    kind = ErrorKind.NOT_FOUND
    code = "NOT_FOUND"


class ProductNotFound(NotFoundError):
    code = "PRODUCT_NOT_FOUND"

    def __init__(self, product_id: str):
        super().__init__(f"Product {product_id} not found", product_id=product_id)
        self.product_id = product_id


class SellerNotFound(NotFoundError):
    code = "SELLER_NOT_FOUND"

    def __init__(self, seller_code: str):
        super().__init__(f"Seller {seller_code} not found", seller_code=seller_code)
        self.seller_code = seller_code


class EmployeeNotFound(NotFoundError):
    code = "EMPLOYEE_NOT_FOUND"

    def __init__(self, employee_id: str):
        super().__init__(f"HR employee {employee_id} not found", employee_id=employee_id)
        self.employee_id = employee_id


# ===================== INVALID STATE =====================

class InvalidStateError(PoliMarketError):
    kind = ErrorKind.INVALID_STATE
    code = "INVALID_STATE"


class ProductInactive(InvalidStateError):
    code = "PRODUCT_INACTIVE"

    def __init__(self, product_id: str):
        super().__init__(f"Product {product_id} is inactive", product_id=product_id)
        self.product_id = product_id


class SellerInactive(InvalidStateError):
    code = "SELLER_INACTIVE"

    def __init__(self, seller_code: str):
        super().__init__(f"Seller {seller_code} is inactive", seller_code=seller_code)
        self.seller_code = seller_code


class EmployeeInactive(InvalidStateError):
    code = "EMPLOYEE_INACTIVE"

    def __init__(self, employee_id: str):
        super().__init__(
            f"HR employee {employee_id} is inactive and cannot approve sellers",
            employee_id=employee_id,
        )
        self.employee_id = employee_id


class InsufficientStock(InvalidStateError):
    code = "INSUFFICIENT_STOCK"

    def __init__(self, product_id: str, current_stock: int, requested: int):
        super().__init__(
            f"Insufficient stock for product {product_id}: "
            f"available {current_stock}, requested {requested}",
            product_id=product_id,
            current_stock=current_stock,
            requested=requested,
        )
        self.product_id = product_id
        self.current_stock = current_stock
        self.requested = requested


class MovementImmutable(InvalidStateError):
    code = "MOVEMENT_IMMUTABLE"

    def __init__(self, movement_id: Any, action: str):
        super().__init__(
            f"Inventory movement {movement_id} is append-only and cannot be {action}",
            movement_id=str(movement_id),
            action=action,
        )


# ===================== INVALID INPUT =====================

class InvalidInputError(PoliMarketError):
    kind = ErrorKind.INVALID_INPUT
    code = "INVALID_INPUT"


class InvalidQuantity(InvalidInputError):
    code = "INVALID_QUANTITY"

    def __init__(self, quantity: Any, reason: Optional[str] = None):
        super().__init__(reason or f"Invalid quantity: {quantity}", quantity=quantity)
        self.quantity = quantity


class InvalidCommission(InvalidInputError):
    code = "INVALID_COMMISSION"

    def __init__(self, commission: Any):
        super().__init__(
            f"Commission must be between 0 and 100, got {commission}",
            commission=commission,
        )
        self.commission = commission


class InvalidThresholds(InvalidInputError):
    code = "INVALID_THRESHOLDS"

    def __init__(self, min_stock: Any, max_stock: Any):
        super().__init__(
            f"Minimum stock ({min_stock}) must be between 0 and maximum stock ({max_stock})",
            min_stock=min_stock,
            max_stock=max_stock,
        )


class InvalidPrice(InvalidInputError):
    code = "INVALID_PRICE"

    def __init__(self, price: Any):
        super().__init__(f"Price must be non-negative, got {price}", price=price)


# ===================== CONFLICT =====================

class ConflictError(PoliMarketError):
    kind = ErrorKind.CONFLICT
    code = "CONFLICT"


class ConcurrentModification(ConflictError):
    code = "CONCURRENT_MODIFICATION"

    def __init__(self, product_id: str, attempts: int):
        super().__init__(
            f"Stock of product {product_id} changed concurrently; "
            f"gave up after {attempts} attempts",
            product_id=product_id,
            attempts=attempts,
        )
        self.product_id = product_id


class WriteConflict(ConflictError):
    """A write collided with a concurrent one (stale version or duplicate key)"""
    code = "WRITE_CONFLICT"

    def __init__(self, operation: str):
        super().__init__(f"Concurrent write detected during {operation}", operation=operation)
        self.operation = operation


class AlreadyExists(ConflictError):
    code = "ALREADY_EXISTS"

    def __init__(self, entity: str, key: str):
        super().__init__(f"{entity} {key} already exists", entity=entity, key=key)


# ===================== STORAGE =====================

class StorageUnavailableError(PoliMarketError):
    kind = ErrorKind.STORAGE_UNAVAILABLE
    code = "STORAGE_UNAVAILABLE"

    def __init__(self, operation: str, cause: Optional[BaseException] = None):
        super().__init__(
            f"Storage unavailable during {operation}",
            operation=operation,
            cause=type(cause).__name__ if cause else None,
        )
        self.operation = operation
