from couponflow.repositories.coupon_event_repository import CouponEventRepository
from couponflow.repositories.coupon_repository import CouponRepository
from couponflow.repositories.profile_repository import ProfileRepository
from couponflow.repositories.sms_template_repository import SmsTemplateRepository

__all__ = [
    "CouponEventRepository",
    "CouponRepository",
    "ProfileRepository",
    "SmsTemplateRepository",
]
