"""Coupon verification (redemption) state machine."""

import logging
from datetime import datetime

from sqlalchemy.orm import Session

from couponflow.core.branches import BranchCode, check_branch_password
from couponflow.core.codes import normalize_coupon_code
from couponflow.core.config import settings
from couponflow.core.lockout import LockoutPolicy
from couponflow.models.coupon import Coupon, CouponStatus
from couponflow.models.shared import utc_now
from couponflow.repositories.coupon_repository import CouponRepository
from couponflow.services.coupon_errors import (
    CouponAlreadyProcessedError,
    CouponNotFoundError,
    CouponValidationError,
    InvalidBranchPasswordError,
    VerificationLockedError,
)
from couponflow.services.coupon_event_service import CouponEventService

logger = logging.getLogger(__name__)

WRONG_PASSWORD = "WRONG_PASSWORD"


class CouponVerificationService:
    """Service for looking up and verifying coupons.

    The ISSUED -> VERIFIED transition is a conditional update on the stored
    status, so of several concurrent verifications at most one succeeds.
    """

    def __init__(
        self,
        db: Session,
        lockout: LockoutPolicy,
        max_attempts: int | None = None,
    ):
        self.db = db
        self.coupon_repo = CouponRepository(db)
        self.events = CouponEventService(db)
        self.lockout = lockout
        self.max_attempts = max_attempts or settings.VERIFY_MAX_ATTEMPTS

    def lookup(self, raw_code: str) -> Coupon:
        """Fetch a coupon by its (normalized) code."""
        code = normalize_coupon_code(raw_code)
        if not code:
            raise CouponValidationError("Coupon code required")
        coupon = self.coupon_repo.get_by_code(code)
        if coupon is None:
            raise CouponNotFoundError(code)
        return coupon

    def verify(
        self,
        raw_code: str,
        branch_code: BranchCode,
        branch_password: str,
        now: datetime | None = None,
    ) -> Coupon:
        """Redeem a coupon at ``branch_code``.

        Returns:
            The coupon after the transition to VERIFIED.

        Raises:
            CouponValidationError: If the code is empty after normalization.
            CouponNotFoundError: If no coupon has this code.
            CouponAlreadyProcessedError: If the coupon is not ISSUED, or a
                concurrent request verified it first.
            VerificationLockedError: If this (coupon, branch) pair is locked out.
            InvalidBranchPasswordError: If the password is wrong; the attempt
                is counted and logged.
        """
        now = now or utc_now()
        coupon = self.lookup(raw_code)
        code = str(coupon.code)
        branch = branch_code.value

        if coupon.status != CouponStatus.ISSUED.value:
            raise CouponAlreadyProcessedError(code, str(coupon.status))

        lock = self.lockout.check(code, branch, now)
        if lock.locked:
            raise VerificationLockedError(lock.remaining_seconds)

        if not check_branch_password(branch_code, branch_password):
            self._record_failure(code, branch, now)
            raise InvalidBranchPasswordError()

        if not self.coupon_repo.mark_verified(code, branch, now):
            current = self.coupon_repo.get_by_code(code)
            raise CouponAlreadyProcessedError(code, str(current.status) if current else None)

        self.events.record_verify_success(code, branch)
        logger.info("Verified coupon %s at branch %s", code, branch)

        verified = self.coupon_repo.get_by_code(code)
        assert verified is not None
        return verified

    def _record_failure(self, code: str, branch: str, now: datetime) -> None:
        attempt_count = self.coupon_repo.record_failed_attempt(code, now)
        self.events.record_verify_fail(code, branch, WRONG_PASSWORD, attempt_count)
        logger.warning(
            "Wrong branch password for coupon %s at branch %s (attempt %s)",
            code,
            branch,
            attempt_count,
        )
        if attempt_count is not None and attempt_count >= self.max_attempts:
            self.lockout.lock(code, branch, now)
            logger.warning("Locked verification of coupon %s at branch %s", code, branch)
