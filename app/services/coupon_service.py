# app/services/coupon_service.py
from datetime import datetime, timezone

from fastapi import HTTPException, status
from sqlmodel import Session

from app.models.coupon import Coupon
from app.repositories.coupon_repo import CouponRepository
from app.schemas.coupon import CouponCreate, CouponResult


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; they are stored as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def calculate_discount(
    coupon: Coupon,
    subtotal: float,
    now: datetime | None = None,
) -> CouponResult:
    """
    Discount a coupon grants on a subtotal.

    Rules:
      - inactive or past expires_at => not applicable, amount 0
      - PERCENTAGE => subtotal * value / 100
      - FIXED => value
      - never more than the subtotal
    """
    now = now or datetime.now(timezone.utc)

    if not coupon.active or (
        coupon.expires_at is not None and _as_utc(coupon.expires_at) < _as_utc(now)
    ):
        return CouponResult(success=False, message="Coupon expired", amount=0.0)

    if coupon.discount_type == "PERCENTAGE":
        discount = subtotal * coupon.discount_value / 100
    elif coupon.discount_type == "FIXED":
        discount = coupon.discount_value
    else:
        discount = 0.0

    amount = round(min(discount, subtotal), 2)
    return CouponResult(
        success=True,
        amount=amount,
        total=round(subtotal - amount, 2),
    )


class CouponService:
    """
    Coupon lookup and discount calculation for checkout.
    """

    def __init__(self, repo: CouponRepository):
        self.repo = repo

    def apply_coupon(
        self,
        session: Session,
        code: str,
        subtotal: float,
        now: datetime | None = None,
    ) -> CouponResult:
        coupon = self.repo.get_by_code(session, code.strip().upper())
        if coupon is None:
            return CouponResult(success=False, message="Invalid coupon", amount=0.0)
        return calculate_discount(coupon, subtotal, now)

    def create_coupon(self, session: Session, payload: CouponCreate) -> Coupon:
        if self.repo.get_by_code(session, payload.code) is not None:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Coupon code already exists",
            )
        coupon = Coupon(**payload.model_dump())
        return self.repo.create(session, coupon)
