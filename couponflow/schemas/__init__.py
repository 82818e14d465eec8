from couponflow.schemas.coupon import (
    CouponCreate,
    CouponEventResponse,
    CouponIssueRequest,
    CouponResponse,
    CouponScanRequest,
    CouponScanResponse,
    CouponVerifyRequest,
)
from couponflow.schemas.profile import (
    LoginRequest,
    ProfileCreate,
    ProfileResponse,
    TokenResponse,
)
from couponflow.schemas.sms_template import (
    SmsSendRequest,
    SmsSendResponse,
    SmsTemplateCreate,
    SmsTemplateResponse,
    SmsTemplateUpdate,
)

__all__ = [
    "CouponCreate",
    "CouponEventResponse",
    "CouponIssueRequest",
    "CouponResponse",
    "CouponScanRequest",
    "CouponScanResponse",
    "CouponVerifyRequest",
    "LoginRequest",
    "ProfileCreate",
    "ProfileResponse",
    "SmsSendRequest",
    "SmsSendResponse",
    "SmsTemplateCreate",
    "SmsTemplateResponse",
    "SmsTemplateUpdate",
    "TokenResponse",
]
