# app/models/coupon.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class Coupon(SQLModel, table=True):
    """
    Discount code applied at checkout.

    discount_type:
      - "PERCENTAGE": discount_value is a percent of the subtotal
      - "FIXED": discount_value is a flat amount
    """

    __tablename__ = "coupons"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    code: str = Field(
        max_length=50,
        unique=True,
        index=True,
    )

    # PERCENTAGE | FIXED
    discount_type: str = Field(default="PERCENTAGE")

    discount_value: float = Field(ge=0)

    active: bool = Field(default=True)

    expires_at: datetime | None = Field(
        default=None,
        description="No expiry when empty",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
