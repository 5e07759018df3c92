# app/schemas/coupon.py
from datetime import datetime
from typing import Literal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field


class CouponCreate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    code: str = Field(max_length=50)
    discount_type: Literal["PERCENTAGE", "FIXED"] = "PERCENTAGE"
    discount_value: float = Field(ge=0)
    active: bool = True
    expires_at: datetime | None = None

    @field_validator("code")
    @classmethod
    def normalize_code(cls, v: str) -> str:
        v = v.strip().upper()
        if not v:
            raise ValueError("code cannot be empty")
        return v


class CouponApply(SQLModel):
    code: str
    subtotal: float = Field(ge=0)


class CouponResult(SQLModel):
    success: bool
    message: str | None = None
    amount: float = 0.0
    total: float | None = None
