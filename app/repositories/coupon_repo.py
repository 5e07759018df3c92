# app/repositories/coupon_repo.py
from sqlmodel import Session, select

from app.models.coupon import Coupon


class CouponRepository:

    def get_by_code(self, session: Session, code: str) -> Coupon | None:
        stmt = select(Coupon).where(Coupon.code == code)
        return session.exec(stmt).first()

    def create(self, session: Session, coupon: Coupon) -> Coupon:
        session.add(coupon)
        session.commit()
        session.refresh(coupon)
        return coupon
