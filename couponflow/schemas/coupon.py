"""Coupon and CouponEvent schemas."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, SecretStr, computed_field

from couponflow.core.branches import BranchCode
from couponflow.models.coupon import DiscountType, HeadcountType
from couponflow.services.coupon_options import discount_label, headcount_label


class CouponCreate(BaseModel):
    """Validated data for a new coupon row."""

    code: str = Field(min_length=8, max_length=8)
    customer_phone: str = Field(min_length=1, max_length=32)
    discount_type: DiscountType
    discount_custom_text: str | None = None
    headcount_type: HeadcountType
    headcount_custom_text: str | None = None
    issued_branch_code: BranchCode


class CouponIssueRequest(BaseModel):
    """Issue form as submitted by staff.

    Fields are validated by the issuance service in a fixed order so every
    missing value produces its own message.
    """

    branch_code: BranchCode
    branch_password: SecretStr
    customer_phone: str = ""
    discount_type: DiscountType | None = None
    discount_custom_text: str | None = None
    headcount_type: HeadcountType | None = None
    headcount_custom_text: str | None = None
    send_sms: bool = False


class CouponVerifyRequest(BaseModel):
    branch_code: BranchCode
    branch_password: SecretStr
    send_sms: bool = False


class CouponScanRequest(BaseModel):
    raw: str = Field(max_length=512)


class CouponScanResponse(BaseModel):
    coupon_code: str


class CouponResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    code: str
    status: str
    customer_phone: str
    discount_type: str
    discount_custom_text: str | None = None
    headcount_type: str
    headcount_custom_text: str | None = None
    issued_branch_code: str
    issued_at: datetime
    verified_branch_code: str | None = None
    verified_at: datetime | None = None
    verify_attempt_count: int
    last_verify_attempt_at: datetime | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def discount_label(self) -> str:
        return discount_label(self.discount_type, self.discount_custom_text)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def headcount_label(self) -> str:
        return headcount_label(self.headcount_type, self.headcount_custom_text)


class CouponEventResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    coupon_code: str
    event_type: str
    branch_code: str | None = None
    meta: dict[str, Any]
    created_at: datetime
