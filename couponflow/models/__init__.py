from couponflow.models.coupon import Coupon, CouponStatus, DiscountType, HeadcountType
from couponflow.models.coupon_event import CouponEvent, CouponEventType
from couponflow.models.profile import Profile, ProfileRole
from couponflow.models.sms_template import SmsTemplate, SmsTemplateType

__all__ = [
    "Coupon",
    "CouponEvent",
    "CouponEventType",
    "CouponStatus",
    "DiscountType",
    "HeadcountType",
    "Profile",
    "ProfileRole",
    "SmsTemplate",
    "SmsTemplateType",
]
