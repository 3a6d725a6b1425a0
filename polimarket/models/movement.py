"""
Inventory Movement Ledger
"""
import enum

from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, Text, UniqueConstraint, event
from sqlalchemy.orm import relationship
from polimarket.core import Base
from polimarket.core.exceptions import MovementImmutable
from .base import UUIDMixin, utcnow


class MovementType(str, enum.Enum):
    INBOUND = "INBOUND"
    OUTBOUND = "OUTBOUND"
    ADJUSTMENT = "ADJUSTMENT"


class InventoryMovement(Base, UUIDMixin):
    """Append-only stock movement. stock_after = stock_before + quantity"""
    __tablename__ = "inventory_movement"
    
    product_id = Column(String(50), ForeignKey("product.id"), nullable=False, index=True)
    # Per-product position in the ledger, 1-based
    sequence = Column(Integer, nullable=False)
    
    movement_type = Column(String(20), nullable=False)  # INBOUND, OUTBOUND, ADJUSTMENT
    quantity = Column(Integer, nullable=False)  # Signed delta
    stock_before = Column(Integer, nullable=False)
    stock_after = Column(Integer, nullable=False)
    
    reason = Column(Text, nullable=False, default="")
    reference_document = Column(String(100))
    performed_by = Column(String(100), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
    
    # Relationships
    product = relationship("Product", back_populates="movements")
    
    __table_args__ = (
        UniqueConstraint("product_id", "sequence", name="uq_movement_product_sequence"),
    )


@event.listens_for(InventoryMovement, "before_update")
def _reject_movement_update(mapper, connection, target):
    raise MovementImmutable(target.id, "updated")


@event.listens_for(InventoryMovement, "before_delete")
def _reject_movement_delete(mapper, connection, target):
    raise MovementImmutable(target.id, "deleted")
