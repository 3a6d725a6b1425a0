"""
Seller & Authorization Schemas
"""
from pydantic import BaseModel
from typing import Optional
from decimal import Decimal
from datetime import datetime

from polimarket.models.seller import AuthorizationState

class SellerCreate(BaseModel):
    code: str
    name: str
    territory: str = ""
    commission: Decimal = Decimal("0")

class SellerResponse(BaseModel):
    code: str
    name: str
    territory: str
    commission: Decimal
    is_authorized: bool
    authorized_at: Optional[datetime]
    approved_by: Optional[str]
    is_active: bool
    state: AuthorizationState

    class Config:
        from_attributes = True

class AuthorizationRequest(BaseModel):
    seller_code: str
    hr_employee_id: str
    commission: Optional[Decimal] = None

class ValidationResponse(BaseModel):
    is_valid: bool
    reason: str
    seller: Optional[SellerResponse] = None
