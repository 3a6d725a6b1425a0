# Pydantic Schemas Package
from .common import ApiResponse
from .product import (
    ProductCreate, ProductUpdate, ProductResponse, ProductListResponse,
    MovementCreate, MovementResponse, MovementOutcomeResponse, StockResponse, LedgerAuditResponse,
)
from .seller import SellerCreate, SellerResponse, AuthorizationRequest, ValidationResponse
from .hr import EmployeeCreate, EmployeeResponse

__all__ = [
    "ApiResponse",
    "ProductCreate", "ProductUpdate", "ProductResponse", "ProductListResponse",
    "MovementCreate", "MovementResponse", "MovementOutcomeResponse", "StockResponse", "LedgerAuditResponse",
    "SellerCreate", "SellerResponse", "AuthorizationRequest", "ValidationResponse",
    "EmployeeCreate", "EmployeeResponse",
]
