"""SmsTemplate and SMS gateway schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from couponflow.models.sms_template import SmsTemplateType


class SmsTemplateCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1, max_length=255)
    type: SmsTemplateType
    content: str = Field(min_length=1)


class SmsTemplateUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str | None = Field(default=None, min_length=1, max_length=255)
    content: str | None = Field(default=None, min_length=1)


class SmsTemplateResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    type: str
    content: str
    is_default: bool
    created_at: datetime
    updated_at: datetime


class SmsSendRequest(BaseModel):
    """Notification request, field names as sent by the coupon screens."""

    type: SmsTemplateType
    phone: str | None = None
    coupon_code: str | None = Field(default=None, alias="couponCode")
    discount_label: str = Field(default="", alias="discountLabel")
    headcount_label: str = Field(default="", alias="headcountLabel")
    issued_branch: str = Field(default="", alias="issuedBranch")
    verified_branch: str | None = Field(default=None, alias="verifiedBranch")
    verified_at: str | None = Field(default=None, alias="verifiedAt")

    model_config = ConfigDict(populate_by_name=True)


class SmsSendResponse(BaseModel):
    success: bool
    error: str | None = None
