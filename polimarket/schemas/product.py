"""
Product & Inventory Schemas
"""
from pydantic import BaseModel
from typing import Optional, List
from uuid import UUID
from decimal import Decimal
from datetime import datetime

from polimarket.models.movement import MovementType

class ProductCreate(BaseModel):
    id: Optional[str] = None
    name: str
    description: str = ""
    price: Decimal = Decimal("0")
    category: str
    stock: int = 0
    min_stock: int = 10
    max_stock: int = 1000
    unit_of_measure: str = "Unidad"

class ProductUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[Decimal] = None
    category: Optional[str] = None
    stock: Optional[int] = None  # Applied as an ADJUSTMENT movement
    min_stock: Optional[int] = None
    max_stock: Optional[int] = None
    unit_of_measure: Optional[str] = None
    is_active: Optional[bool] = None

class ProductResponse(BaseModel):
    id: str
    name: str
    description: Optional[str]
    price: Decimal
    category: str
    current_stock: int
    min_stock: int
    max_stock: int
    unit_of_measure: str
    is_active: bool
    created_at: datetime
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True

class ProductListResponse(BaseModel):
    products: List[ProductResponse]
    total_count: int
    page: int
    page_size: int
    total_pages: int

class MovementCreate(BaseModel):
    movement_type: MovementType
    quantity: int
    reason: str
    reference_document: Optional[str] = None
    performed_by: Optional[str] = None  # Falls back to the X-User header

class MovementResponse(BaseModel):
    id: UUID
    product_id: str
    sequence: int
    movement_type: str
    quantity: int
    stock_before: int
    stock_after: int
    reason: str
    reference_document: Optional[str]
    performed_by: str
    created_at: datetime

    class Config:
        from_attributes = True

class MovementOutcomeResponse(BaseModel):
    movement: MovementResponse
    current_stock: int
    advisory: str

class StockResponse(BaseModel):
    product_id: str
    current_stock: int

class LedgerAuditResponse(BaseModel):
    product_id: str
    current_stock: int
    ledger_stock: int
    movement_count: int
    chain_intact: bool
    is_consistent: bool
