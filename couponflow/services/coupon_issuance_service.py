"""Coupon issuance: form validation, code generation and collision retry."""

import logging
from collections.abc import Callable

from sqlalchemy.orm import Session

from couponflow.core.branches import BranchCode, check_branch_password
from couponflow.core.codes import generate_coupon_code, normalize_phone
from couponflow.core.config import settings
from couponflow.models.coupon import Coupon, DiscountType, HeadcountType
from couponflow.repositories.coupon_repository import CouponCodeConflictError, CouponRepository
from couponflow.schemas.coupon import CouponCreate
from couponflow.services.coupon_errors import CouponValidationError, InvalidBranchPasswordError
from couponflow.services.coupon_event_service import CouponEventService
from couponflow.services.coupon_options import CouponOption

logger = logging.getLogger(__name__)

MAX_PHONE_DIGITS = 32


class CouponIssuanceService:
    """Service for issuing new coupons."""

    def __init__(
        self,
        db: Session,
        code_generator: Callable[[], str] = generate_coupon_code,
        max_attempts: int | None = None,
    ):
        self.db = db
        self.coupon_repo = CouponRepository(db)
        self.events = CouponEventService(db)
        self.code_generator = code_generator
        self.max_attempts = max_attempts or settings.ISSUE_MAX_ATTEMPTS

    def issue(
        self,
        branch_code: BranchCode,
        branch_password: str,
        customer_phone: str | None,
        discount_type: DiscountType | None,
        discount_custom_text: str | None = None,
        headcount_type: HeadcountType | None = None,
        headcount_custom_text: str | None = None,
    ) -> Coupon:
        """Validate the issue form and create a new ISSUED coupon.

        Checks run in order and stop at the first failure: branch password,
        phone, discount, headcount. A code collision on insert is retried with
        a fresh code up to ``max_attempts`` times.

        Returns:
            The created Coupon.

        Raises:
            InvalidBranchPasswordError: If the password does not match the branch.
            CouponValidationError: If a required field is missing or the phone is too long.
            CouponCodeConflictError: If every attempt collided.
        """
        if not check_branch_password(branch_code, branch_password):
            raise InvalidBranchPasswordError()

        phone = normalize_phone(customer_phone)
        if not phone:
            raise CouponValidationError("Phone required")
        if len(phone) > MAX_PHONE_DIGITS:
            raise CouponValidationError("Phone too long")

        discount = self._option(
            discount_type,
            discount_custom_text,
            missing="Discount required",
            custom_missing="Custom discount text required",
        )
        headcount = self._option(
            headcount_type,
            headcount_custom_text,
            missing="Headcount required",
            custom_missing="Custom headcount text required",
        )

        last_error: CouponCodeConflictError | None = None
        for attempt in range(1, self.max_attempts + 1):
            code = self.code_generator()
            try:
                coupon = self.coupon_repo.create(
                    CouponCreate(
                        code=code,
                        customer_phone=phone,
                        discount_type=discount.kind,  # type: ignore[arg-type]
                        discount_custom_text=discount.custom_text,
                        headcount_type=headcount.kind,  # type: ignore[arg-type]
                        headcount_custom_text=headcount.custom_text,
                        issued_branch_code=branch_code,
                    )
                )
            except CouponCodeConflictError as exc:
                logger.info("Coupon code collision on attempt %d, retrying", attempt)
                last_error = exc
                continue

            self.events.record_issue(str(coupon.code), branch_code.value)
            logger.info("Issued coupon %s at branch %s", coupon.code, branch_code.value)
            return coupon

        assert last_error is not None
        raise last_error

    @staticmethod
    def _option(
        kind: DiscountType | HeadcountType | None,
        custom_text: str | None,
        *,
        missing: str,
        custom_missing: str,
    ) -> CouponOption:
        if kind is None:
            raise CouponValidationError(missing)
        try:
            return CouponOption(kind=kind, custom_text=custom_text)
        except ValueError:
            raise CouponValidationError(custom_missing) from None
