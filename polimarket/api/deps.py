"""
Shared API dependencies and response translation
"""
from fastapi import Depends, Header, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from typing import Any, Callable, Optional

from polimarket.core import get_db
from polimarket.core.exceptions import ErrorKind
from polimarket.schemas.common import ApiResponse
from polimarket.services import BusinessFacade, OperationResult

STATUS_BY_KIND = {
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.INVALID_INPUT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INVALID_STATE: status.HTTP_409_CONFLICT,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.STORAGE_UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def get_facade(db: Session = Depends(get_db)) -> BusinessFacade:
    return BusinessFacade(db)


def get_current_user(x_user: Optional[str] = Header(None)) -> str:
    """Acting user for audit fields, supplied by the caller"""
    return x_user or "anonymous"


def respond(
    result: OperationResult,
    serialize: Optional[Callable[[Any], Any]] = None,
    success_status: int = status.HTTP_200_OK
) -> JSONResponse:
    """Wrap an OperationResult in the ApiResponse envelope"""
    if result.success:
        data = serialize(result.data) if serialize else result.data
        status_code = success_status
    else:
        data = None
        status_code = STATUS_BY_KIND.get(result.error_kind, status.HTTP_500_INTERNAL_SERVER_ERROR)
    
    envelope = ApiResponse(
        success=result.success,
        message=result.message,
        data=data,
        errors=result.errors,
        error_kind=result.error_kind.value if result.error_kind else None,
        error_code=result.error_code,
        timestamp=result.timestamp
    )
    return JSONResponse(status_code=status_code, content=jsonable_encoder(envelope))
