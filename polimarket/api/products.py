"""
Products & Inventory API
"""
from fastapi import APIRouter, Depends, Query, status
from typing import Optional

from polimarket.api.deps import get_current_user, get_facade, respond
from polimarket.schemas.product import (
    LedgerAuditResponse, MovementCreate, MovementOutcomeResponse, MovementResponse,
    ProductCreate, ProductListResponse, ProductResponse, ProductUpdate, StockResponse,
)
from polimarket.services import BusinessFacade

router = APIRouter(prefix="/productos", tags=["Productos"])


def _product(p):
    return ProductResponse.model_validate(p)

def _outcome(outcome):
    return MovementOutcomeResponse(
        movement=MovementResponse.model_validate(outcome.movement),
        current_stock=outcome.current_stock,
        advisory=outcome.advisory.value
    )

def _audit(audit):
    return LedgerAuditResponse(
        product_id=audit.product_id,
        current_stock=audit.current_stock,
        ledger_stock=audit.ledger_stock,
        movement_count=audit.movement_count,
        chain_intact=audit.chain_intact,
        is_consistent=audit.is_consistent
    )

# ===================== CATALOG =====================

@router.get("")
def list_products(
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=100),
    categoria: Optional[str] = Query(None),
    activo: Optional[bool] = Query(True),
    search: Optional[str] = Query(None),
    facade: BusinessFacade = Depends(get_facade)
):
    result = facade.list_products(page, page_size, categoria, activo, search)
    return respond(result, lambda data: ProductListResponse(
        products=[_product(p) for p in data["products"]],
        total_count=data["total_count"],
        page=data["page"],
        page_size=data["page_size"],
        total_pages=data["total_pages"]
    ))

@router.get("/categorias")
def list_categories(facade: BusinessFacade = Depends(get_facade)):
    return respond(facade.list_categories())

@router.get("/bajo-stock")
def low_stock_products(facade: BusinessFacade = Depends(get_facade)):
    return respond(facade.low_stock_products(), lambda products: [_product(p) for p in products])

@router.get("/{product_id}")
def get_product(product_id: str, facade: BusinessFacade = Depends(get_facade)):
    return respond(facade.get_product(product_id), _product)

@router.post("")
def create_product(
    data: ProductCreate,
    user: str = Depends(get_current_user),
    facade: BusinessFacade = Depends(get_facade)
):
    return respond(facade.create_product(data, performed_by=user), _product, status.HTTP_201_CREATED)

@router.put("/{product_id}")
def update_product(
    product_id: str,
    data: ProductUpdate,
    user: str = Depends(get_current_user),
    facade: BusinessFacade = Depends(get_facade)
):
    return respond(facade.update_product(product_id, data, performed_by=user), _product)

@router.delete("/{product_id}")
def delete_product(product_id: str, facade: BusinessFacade = Depends(get_facade)):
    """Soft delete: the product is deactivated, its ledger is kept"""
    return respond(facade.deactivate_product(product_id))

# ===================== INVENTORY =====================

@router.post("/{product_id}/movimientos")
def record_movement(
    product_id: str,
    data: MovementCreate,
    user: str = Depends(get_current_user),
    facade: BusinessFacade = Depends(get_facade)
):
    result = facade.record_movement(
        product_id,
        data.movement_type,
        data.quantity,
        data.reason,
        data.reference_document,
        data.performed_by or user
    )
    return respond(result, _outcome, status.HTTP_201_CREATED)

@router.get("/{product_id}/movimientos")
def movement_history(
    product_id: str,
    limit: int = Query(50, ge=1, le=500),
    facade: BusinessFacade = Depends(get_facade)
):
    result = facade.movement_history(product_id, limit)
    return respond(result, lambda movements: [MovementResponse.model_validate(m) for m in movements])

@router.get("/{product_id}/stock")
def current_stock(product_id: str, facade: BusinessFacade = Depends(get_facade)):
    result = facade.current_stock(product_id)
    return respond(result, lambda stock: StockResponse(product_id=product_id, current_stock=stock))

@router.get("/{product_id}/auditoria")
def verify_ledger(product_id: str, facade: BusinessFacade = Depends(get_facade)):
    return respond(facade.verify_ledger(product_id), _audit)
