# app/routers/coupons.py
from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from app.core.auth import require_admin
from app.database import get_session
from app.repositories.coupon_repo import CouponRepository
from app.schemas.coupon import CouponApply, CouponCreate, CouponResult
from app.services.coupon_service import CouponService

router = APIRouter(prefix="/coupons", tags=["Coupons"])

repo = CouponRepository()
service = CouponService(repo)


@router.post("/apply", response_model=CouponResult)
def apply_coupon(
    payload: CouponApply,
    session: Session = Depends(get_session),
):
    """
    Preview the discount a coupon gives on a subtotal.

    Unknown or expired codes are not errors: they come back
    with success=false and amount=0.
    """
    return service.apply_coupon(session, payload.code, payload.subtotal)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_coupon(
    payload: CouponCreate,
    session: Session = Depends(get_session),
) -> dict[str, str]:
    """
    Create a coupon (admin only).
    """
    coupon = service.create_coupon(session, payload)
    return {"id": str(coupon.id), "code": coupon.code}
