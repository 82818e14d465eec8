"""Best-effort audit logging of coupon activity."""

import logging
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from couponflow.models.coupon_event import CouponEvent, CouponEventType
from couponflow.repositories.coupon_event_repository import CouponEventRepository

logger = logging.getLogger(__name__)


class CouponEventService:
    """Service for appending coupon events.

    Event writes never fail the operation that triggered them: a store error
    is logged, the session is rolled back and None is returned.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = CouponEventRepository(db)

    def record(
        self,
        coupon_code: str,
        event_type: CouponEventType,
        branch_code: str | None = None,
        meta: dict[str, Any] | None = None,
    ) -> CouponEvent | None:
        try:
            return self.repo.create(
                coupon_code=coupon_code,
                event_type=event_type,
                branch_code=branch_code,
                meta=meta,
            )
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.warning(
                "Failed to record %s event for coupon %s: %s",
                event_type.value,
                coupon_code,
                exc,
            )
            return None

    def record_issue(self, coupon_code: str, branch_code: str) -> CouponEvent | None:
        return self.record(
            coupon_code,
            CouponEventType.ISSUE,
            branch_code=branch_code,
            meta={"issued_branch": branch_code},
        )

    def record_scan(self, coupon_code: str, raw: str) -> CouponEvent | None:
        return self.record(coupon_code, CouponEventType.SCAN, meta={"raw": raw})

    def record_verify_fail(
        self, coupon_code: str, branch_code: str, reason: str, attempt_count: int | None
    ) -> CouponEvent | None:
        return self.record(
            coupon_code,
            CouponEventType.VERIFY_FAIL,
            branch_code=branch_code,
            meta={"reason": reason, "attempt_count": attempt_count},
        )

    def record_verify_success(self, coupon_code: str, branch_code: str) -> CouponEvent | None:
        return self.record(
            coupon_code,
            CouponEventType.VERIFY_SUCCESS,
            branch_code=branch_code,
            meta={"verified_branch": branch_code},
        )
