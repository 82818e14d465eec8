"""CouponEvent model - append-only audit trail of coupon activity."""

from enum import Enum

from sqlalchemy import JSON, Column, DateTime, String, func

from couponflow.core.database import Base
from couponflow.models.shared import UUIDType, generate_uuid


class CouponEventType(str, Enum):
    ISSUE = "ISSUE"
    SCAN = "SCAN"
    VERIFY_FAIL = "VERIFY_FAIL"
    VERIFY_SUCCESS = "VERIFY_SUCCESS"


class CouponEvent(Base):
    """Audit record of an issue, scan or verification attempt.

    ``coupon_code`` is deliberately not a foreign key: scans log whatever code
    was decoded, including codes that were never issued.
    """

    __tablename__ = "coupon_events"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    coupon_code = Column(String(64), nullable=False, index=True)
    event_type = Column(String(20), nullable=False, index=True)
    branch_code = Column(String(10), nullable=True)
    meta = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
