from .base import TimestampMixin, UUIDMixin
from .product import Product
from .movement import InventoryMovement, MovementType
from .hr import HREmployee
from .seller import Seller, AuthorizationState

__all__ = [
    # Base
    "TimestampMixin", "UUIDMixin",
    # Product
    "Product",
    # Inventory
    "InventoryMovement", "MovementType",
    # HR
    "HREmployee",
    # Seller
    "Seller", "AuthorizationState",
]
