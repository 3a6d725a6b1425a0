"""
Seller Model
"""
import enum

from sqlalchemy import Column, String, Boolean, DateTime, Numeric, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from polimarket.core import Base
from .base import TimestampMixin


class AuthorizationState(str, enum.Enum):
    PENDING = "PENDING"
    AUTHORIZED = "AUTHORIZED"


class Seller(Base, TimestampMixin):
    """Seller (vendedor). is_authorized is written only by AuthorizationRegistry"""
    __tablename__ = "seller"
    
    code = Column(String(20), primary_key=True)  # V001, DEMO...
    name = Column(String(200), nullable=False)
    territory = Column(String(200), nullable=False, default="")
    commission = Column(Numeric(5, 2), nullable=False, default=0)  # Percent 0-100
    is_active = Column(Boolean, default=True, nullable=False)
    
    # Authorization
    is_authorized = Column(Boolean, default=False, nullable=False)
    authorized_at = Column(DateTime(timezone=True))  # None while pending
    approved_by = Column(String(50), ForeignKey("hr_employee.id"))  # None while pending
    
    # Relationships
    approver = relationship("HREmployee", back_populates="approved_sellers")
    
    __table_args__ = (
        CheckConstraint("commission >= 0 AND commission <= 100", name="ck_seller_commission_range"),
    )
    
    @property
    def state(self) -> AuthorizationState:
        return AuthorizationState.AUTHORIZED if self.is_authorized else AuthorizationState.PENDING
