"""Coupon repository for data access."""

from datetime import datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Query, Session

from couponflow.models.coupon import Coupon, CouponStatus
from couponflow.schemas.coupon import CouponCreate


class CouponCodeConflictError(Exception):
    """Raised when an insert collides with an existing coupon code."""

    def __init__(self, code: str):
        super().__init__(f"Coupon code {code} already exists")
        self.code = code


class CouponRepository:
    """Repository for Coupon model."""

    def __init__(self, db: Session):
        self.db = db

    def _filtered(
        self,
        status: CouponStatus | None = None,
        branch_code: str | None = None,
        phone: str | None = None,
    ) -> Query:  # type: ignore[type-arg]
        query = self.db.query(Coupon)
        if status:
            query = query.filter(Coupon.status == status.value)
        if branch_code:
            query = query.filter(
                (Coupon.issued_branch_code == branch_code)
                | (Coupon.verified_branch_code == branch_code)
            )
        if phone:
            query = query.filter(Coupon.customer_phone.contains(phone))
        return query

    def get_all(
        self,
        skip: int = 0,
        limit: int = 100,
        status: CouponStatus | None = None,
        branch_code: str | None = None,
        phone: str | None = None,
    ) -> list[Coupon]:
        """Get coupons, newest issued first, with optional filters."""
        query = self._filtered(status=status, branch_code=branch_code, phone=phone)
        return query.order_by(Coupon.issued_at.desc()).offset(skip).limit(limit).all()

    def count(
        self,
        status: CouponStatus | None = None,
        branch_code: str | None = None,
        phone: str | None = None,
    ) -> int:
        """Count coupons matching the same filters as ``get_all``."""
        return self._filtered(status=status, branch_code=branch_code, phone=phone).count()

    def get_by_code(self, code: str) -> Coupon | None:
        """Get a coupon by code."""
        return self.db.query(Coupon).filter(Coupon.code == code).first()

    def create(self, data: CouponCreate) -> Coupon:
        """Insert a new ISSUED coupon.

        Raises:
            CouponCodeConflictError: If the code is already taken.
        """
        coupon = Coupon(
            code=data.code,
            status=CouponStatus.ISSUED.value,
            customer_phone=data.customer_phone,
            discount_type=data.discount_type.value,
            discount_custom_text=data.discount_custom_text,
            headcount_type=data.headcount_type.value,
            headcount_custom_text=data.headcount_custom_text,
            issued_branch_code=data.issued_branch_code.value,
            verify_attempt_count=0,
        )
        self.db.add(coupon)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            if self.get_by_code(data.code) is not None:
                raise CouponCodeConflictError(data.code) from None
            raise
        self.db.refresh(coupon)
        return coupon

    def record_failed_attempt(self, code: str, attempted_at: datetime) -> int | None:
        """Increment the failed-attempt counter of an ISSUED coupon.

        The increment is evaluated by the database so concurrent failures are
        all counted. Returns the new count, or None if the coupon is no longer
        ISSUED.
        """
        updated = (
            self.db.query(Coupon)
            .filter(Coupon.code == code, Coupon.status == CouponStatus.ISSUED.value)
            .update(
                {
                    Coupon.verify_attempt_count: Coupon.verify_attempt_count + 1,
                    Coupon.last_verify_attempt_at: attempted_at,
                },
                synchronize_session=False,
            )
        )
        self.db.commit()
        if not updated:
            return None
        count = (
            self.db.query(Coupon.verify_attempt_count).filter(Coupon.code == code).scalar()
        )
        return int(count or 0)

    def mark_verified(self, code: str, branch_code: str, verified_at: datetime) -> bool:
        """Transition ISSUED -> VERIFIED if and only if the row is still ISSUED.

        Returns True when this call performed the transition. A False result
        means another request already verified (or voided) the coupon.
        """
        updated = (
            self.db.query(Coupon)
            .filter(Coupon.code == code, Coupon.status == CouponStatus.ISSUED.value)
            .update(
                {
                    Coupon.status: CouponStatus.VERIFIED.value,
                    Coupon.verified_branch_code: branch_code,
                    Coupon.verified_at: verified_at,
                },
                synchronize_session=False,
            )
        )
        self.db.commit()
        return updated == 1

    def mark_void(self, code: str) -> bool:
        """Transition ISSUED -> VOID under the same precondition as verification."""
        updated = (
            self.db.query(Coupon)
            .filter(Coupon.code == code, Coupon.status == CouponStatus.ISSUED.value)
            .update({Coupon.status: CouponStatus.VOID.value}, synchronize_session=False)
        )
        self.db.commit()
        return updated == 1
