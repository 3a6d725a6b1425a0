"""
Product Model
"""
from sqlalchemy import Column, String, Numeric, Boolean, Integer, Text, CheckConstraint
from sqlalchemy.orm import relationship
from polimarket.core import Base
from .base import TimestampMixin

class Product(Base, TimestampMixin):
    """Product Master"""
    __tablename__ = "product"
    
    id = Column(String(50), primary_key=True)  # P001, P002...
    name = Column(String(300), nullable=False)
    description = Column(Text, default="")
    category = Column(String(100), nullable=False, index=True)
    price = Column(Numeric(12, 2), default=0, nullable=False)
    unit_of_measure = Column(String(50), default="Unidad", nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    
    # Written only by InventoryManager
    current_stock = Column(Integer, default=0, nullable=False)
    min_stock = Column(Integer, default=10, nullable=False)  # Low stock alert threshold
    max_stock = Column(Integer, default=1000, nullable=False)
    
    # Optimistic concurrency token, bumped on every UPDATE
    version = Column(Integer, nullable=False)
    
    # Relationships
    movements = relationship(
        "InventoryMovement",
        back_populates="product",
        order_by="InventoryMovement.sequence"
    )
    
    __table_args__ = (
        CheckConstraint("current_stock >= 0", name="ck_product_stock_non_negative"),
        CheckConstraint("price >= 0", name="ck_product_price_non_negative"),
        CheckConstraint("min_stock <= max_stock", name="ck_product_thresholds"),
    )
    __mapper_args__ = {"version_id_col": version}
