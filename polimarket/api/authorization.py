"""
Seller Authorization API
"""
from fastapi import APIRouter, Depends, status

from polimarket.api.deps import get_facade, respond
from polimarket.schemas.seller import (
    AuthorizationRequest, SellerCreate, SellerResponse, ValidationResponse,
)
from polimarket.services import BusinessFacade

router = APIRouter(prefix="/autorizacion", tags=["Autorizacion"])


def _seller(s):
    return SellerResponse.model_validate(s)

def _sellers(sellers):
    return [_seller(s) for s in sellers]


@router.post("/authorize")
def authorize_seller(data: AuthorizationRequest, facade: BusinessFacade = Depends(get_facade)):
    result = facade.authorize_seller(data.seller_code, data.hr_employee_id, data.commission)
    return respond(result, _seller)

@router.get("/validate/{seller_code}")
def validate_seller(seller_code: str, facade: BusinessFacade = Depends(get_facade)):
    result = facade.validate_seller(seller_code)
    return respond(result, lambda v: ValidationResponse(
        is_valid=v.is_valid,
        reason=v.reason,
        seller=_seller(v.seller) if v.seller else None
    ))

@router.get("/vendedores")
def list_authorized_sellers(facade: BusinessFacade = Depends(get_facade)):
    return respond(facade.list_authorized_sellers(), _sellers)

@router.get("/vendedores/pendientes")
def list_pending_sellers(facade: BusinessFacade = Depends(get_facade)):
    return respond(facade.list_pending_sellers(), _sellers)

@router.get("/vendedores/todos")
def list_all_sellers(facade: BusinessFacade = Depends(get_facade)):
    return respond(facade.list_sellers(), _sellers)

@router.get("/vendedores/{seller_code}")
def get_seller(seller_code: str, facade: BusinessFacade = Depends(get_facade)):
    return respond(facade.get_seller(seller_code), _seller)

@router.post("/vendedores")
def create_seller(data: SellerCreate, facade: BusinessFacade = Depends(get_facade)):
    return respond(facade.create_seller(data), _seller, status.HTTP_201_CREATED)

@router.delete("/vendedores/{seller_code}")
def deactivate_seller(seller_code: str, facade: BusinessFacade = Depends(get_facade)):
    return respond(facade.deactivate_seller(seller_code), _seller)
