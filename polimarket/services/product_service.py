"""
Product Service - Catalog queries and descriptive updates

Stock is never written here; see InventoryManager.
"""
from sqlalchemy.orm import Session
from sqlalchemy import or_, func
from typing import List, Optional, Tuple
from decimal import Decimal, InvalidOperation
import math
import uuid

from polimarket.core.exceptions import InvalidPrice, InvalidThresholds
from polimarket.models import Product
from polimarket.schemas.product import ProductCreate, ProductUpdate

class ProductService:
    """Product business logic"""
    
    @staticmethod
    def get_products(
        db: Session,
        category: Optional[str] = None,
        search: Optional[str] = None,
        active: Optional[bool] = True,
        page: int = 1,
        page_size: int = 50
    ) -> Tuple[List[Product], int]:
        """Get products with filters and pagination"""
        query = db.query(Product)
        
        if active is not None:
            query = query.filter(Product.is_active == active)
        
        if category:
            query = query.filter(Product.category == category)
        
        if search:
            search_term = f"%{search}%"
            query = query.filter(
                or_(
                    Product.id.ilike(search_term),
                    Product.name.ilike(search_term),
                    Product.description.ilike(search_term)
                )
            )
        
        total = query.count()
        
        products = query.order_by(Product.id)\
            .offset((page - 1) * page_size)\
            .limit(page_size)\
            .all()
        
        return products, total
    
    @staticmethod
    def total_pages(total: int, page_size: int) -> int:
        return math.ceil(total / page_size) if page_size else 0
    
    @staticmethod
    def get_categories(db: Session) -> List[str]:
        """Distinct categories of active products"""
        rows = db.query(func.distinct(Product.category))\
            .filter(Product.is_active == True)\
            .order_by(Product.category)\
            .all()
        return [r[0] for r in rows]
    
    @staticmethod
    def validate_fields(price, min_stock: int, max_stock: int) -> Decimal:
        try:
            price = Decimal(str(price))
        except (InvalidOperation, ValueError):
            raise InvalidPrice(price)
        if not price.is_finite() or price < 0:
            raise InvalidPrice(price)
        if min_stock < 0 or min_stock > max_stock:
            raise InvalidThresholds(min_stock, max_stock)
        return price
    
    @staticmethod
    def new_product_id() -> str:
        return f"P{uuid.uuid4().hex[:8].upper()}"
    
    @staticmethod
    def build_product(product_data: ProductCreate) -> Product:
        """Build an unsaved product; stock starts at zero"""
        price = ProductService.validate_fields(
            product_data.price, product_data.min_stock, product_data.max_stock
        )
        return Product(
            id=product_data.id or ProductService.new_product_id(),
            name=product_data.name,
            description=product_data.description,
            price=price,
            category=product_data.category,
            current_stock=0,
            min_stock=product_data.min_stock,
            max_stock=product_data.max_stock,
            unit_of_measure=product_data.unit_of_measure,
            is_active=True
        )
    
    @staticmethod
    def apply_update(product: Product, product_data: ProductUpdate) -> Product:
        """Apply descriptive fields from an update; stock is left to the caller"""
        changes = product_data.model_dump(exclude_unset=True, exclude={"stock"})
        
        def pick(field):
            value = changes.get(field)
            return getattr(product, field) if value is None else value
        
        price = ProductService.validate_fields(pick("price"), pick("min_stock"), pick("max_stock"))
        if "price" in changes:
            changes["price"] = price
        
        for field, value in changes.items():
            if value is None and field != "description":
                continue
            setattr(product, field, value)
        
        return product
