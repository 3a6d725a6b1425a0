"""
Authorization Registry - seller approval workflow

PENDING -> AUTHORIZED, granted by an active HR employee. There is no edge
back to PENDING; taking a seller out of service is a deactivation.
"""
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import List, Optional
import logging

from polimarket.core.exceptions import (
    AlreadyExists, EmployeeInactive, EmployeeNotFound, InvalidCommission,
    SellerInactive, SellerNotFound,
)
from polimarket.models import AuthorizationState, HREmployee, Seller
from polimarket.models.base import utcnow
from .ledger_store import LedgerStore

logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    is_valid: bool
    reason: str
    seller: Optional[Seller] = None


def normalize_commission(value) -> Decimal:
    """Commission as a Decimal percentage within 0-100"""
    if isinstance(value, bool):
        raise InvalidCommission(value)
    try:
        commission = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise InvalidCommission(value)
    if not commission.is_finite() or commission < 0 or commission > 100:
        raise InvalidCommission(value)
    return commission


class AuthorizationRegistry:
    """Owns Seller.is_authorized"""

    def __init__(self, store: LedgerStore):
        self.store = store

    def register(
        self,
        code: str,
        name: str,
        territory: str = "",
        commission=Decimal("0")
    ) -> Seller:
        """Create a seller in the PENDING state"""
        commission = normalize_commission(commission)
        if self.store.exists(Seller, code):
            raise AlreadyExists("Seller", code)

        seller = Seller(
            code=code,
            name=name,
            territory=territory or "",
            commission=commission,
            is_active=True,
            is_authorized=False,
            authorized_at=None,
            approved_by=None
        )
        with self.store.transaction("register_seller", duplicate=AlreadyExists("Seller", code)):
            self.store.upsert(seller)

        logger.info(f"Seller {code} registered, pending authorization")
        return seller

    def authorize(
        self,
        seller_code: str,
        approving_employee_id: str,
        commission_override=None
    ) -> Seller:
        """
        Approve a pending seller.

        Re-authorizing an AUTHORIZED seller returns it unchanged.
        """
        with self.store.transaction("authorize_seller"):
            seller = self.store.get_for_update(Seller, seller_code)
            if seller is None:
                raise SellerNotFound(seller_code)
            if not seller.is_active:
                raise SellerInactive(seller_code)

            if seller.state == AuthorizationState.AUTHORIZED:
                logger.info(f"Seller {seller_code} already authorized by {seller.approved_by}")
                return seller

            employee = self.store.get(HREmployee, approving_employee_id)
            if employee is None:
                raise EmployeeNotFound(approving_employee_id)
            if not employee.is_active:
                raise EmployeeInactive(approving_employee_id)

            if commission_override is not None:
                seller.commission = normalize_commission(commission_override)

            seller.is_authorized = True
            seller.authorized_at = utcnow()
            seller.approved_by = employee.id

        logger.info(f"Seller {seller_code} authorized by {approving_employee_id}")
        return seller

    def validate(self, seller_code: str) -> ValidationResult:
        seller = self.store.get(Seller, seller_code, fresh=True)
        if seller is None:
            return ValidationResult(False, f"Seller {seller_code} not found")
        if not seller.is_active:
            return ValidationResult(False, f"Seller {seller_code} is inactive", seller)
        if seller.state == AuthorizationState.PENDING:
            return ValidationResult(False, f"Seller {seller_code} is pending authorization", seller)
        return ValidationResult(
            True,
            f"Seller {seller_code} authorized by {seller.approved_by}",
            seller
        )

    def deactivate(self, seller_code: str) -> Seller:
        with self.store.transaction("deactivate_seller"):
            seller = self.store.get_for_update(Seller, seller_code)
            if seller is None:
                raise SellerNotFound(seller_code)
            seller.is_active = False

        logger.info(f"Seller {seller_code} deactivated")
        return seller

    def get(self, seller_code: str) -> Seller:
        seller = self.store.get(Seller, seller_code)
        if seller is None:
            raise SellerNotFound(seller_code)
        return seller

    def list_sellers(self, active_only: bool = False) -> List[Seller]:
        query = self.store.query(Seller)
        if active_only:
            query = query.filter(Seller.is_active == True)
        return query.order_by(Seller.code).all()

    def list_authorized(self) -> List[Seller]:
        return self.store.query(Seller).filter(
            Seller.is_authorized == True,
            Seller.is_active == True
        ).order_by(Seller.code).all()

    def list_pending(self) -> List[Seller]:
        return self.store.query(Seller).filter(
            Seller.is_authorized == False,
            Seller.is_active == True
        ).order_by(Seller.code).all()
