"""Coupon model for single-use branch coupons."""

from enum import Enum

from sqlalchemy import CheckConstraint, Column, DateTime, Index, Integer, String, Text, func

from couponflow.core.database import Base


class CouponStatus(str, Enum):
    ISSUED = "ISSUED"
    VERIFIED = "VERIFIED"
    VOID = "VOID"


class DiscountType(str, Enum):
    MINUS_2000 = "-2000"
    MINUS_3000 = "-3000"
    MINUS_5000 = "-5000"
    MINUS_10000 = "-10000"
    FREE = "FREE"
    CUSTOM = "CUSTOM"


class HeadcountType(str, Enum):
    ONE = "1"
    TWO = "2"
    THREE = "3"
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    TEAM_ALL = "TEAM_ALL"
    CUSTOM = "CUSTOM"


class Coupon(Base):
    """Coupon model - one row per issued code."""

    __tablename__ = "coupons"
    __table_args__ = (
        CheckConstraint(
            "status IN ('ISSUED', 'VERIFIED', 'VOID')",
            name="ck_coupons_status",
        ),
        CheckConstraint("verify_attempt_count >= 0", name="ck_coupons_attempt_count"),
        Index("ix_coupons_issued_at", "issued_at"),
    )

    code = Column(String(8), primary_key=True)
    status = Column(String(20), nullable=False, default=CouponStatus.ISSUED.value)

    customer_phone = Column(String(32), nullable=False, index=True)

    discount_type = Column(String(20), nullable=False)
    discount_custom_text = Column(Text, nullable=True)
    headcount_type = Column(String(20), nullable=False)
    headcount_custom_text = Column(Text, nullable=True)

    issued_branch_code = Column(String(10), nullable=False, index=True)
    issued_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    verified_branch_code = Column(String(10), nullable=True)
    verified_at = Column(DateTime(timezone=True), nullable=True)

    verify_attempt_count = Column(Integer, nullable=False, default=0)
    last_verify_attempt_at = Column(DateTime(timezone=True), nullable=True)
