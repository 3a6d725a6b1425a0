"""
HR Employee Model
"""
from sqlalchemy import Column, String, Boolean, DateTime
from sqlalchemy.orm import relationship
from polimarket.core import Base
from .base import TimestampMixin

class HREmployee(Base, TimestampMixin):
    """HR employee, the only party allowed to approve sellers"""
    __tablename__ = "hr_employee"
    
    id = Column(String(50), primary_key=True)  # HR001...
    name = Column(String(200), nullable=False)
    role = Column(String(200), nullable=False)  # Cargo
    department = Column(String(200), nullable=False, default="Recursos Humanos")
    email = Column(String(200))
    phone = Column(String(50))
    hired_at = Column(DateTime(timezone=True))
    is_active = Column(Boolean, default=True, nullable=False)
    
    # Relationships
    approved_sellers = relationship("Seller", back_populates="approver")
