"""Tests for CouponVerificationService."""

from datetime import UTC, datetime, timedelta
from types import SimpleNamespace
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from couponflow.core.branches import BranchCode
from couponflow.core.lockout import LockoutPolicy
from couponflow.models.coupon import CouponStatus, DiscountType, HeadcountType
from couponflow.models.coupon_event import CouponEventType
from couponflow.repositories.coupon_event_repository import CouponEventRepository
from couponflow.repositories.coupon_repository import CouponRepository
from couponflow.services.coupon_errors import (
    CouponAlreadyProcessedError,
    CouponNotFoundError,
    CouponValidationError,
    InvalidBranchPasswordError,
    VerificationLockedError,
)
from couponflow.services.coupon_issuance_service import CouponIssuanceService
from couponflow.services.coupon_verification_service import (
    WRONG_PASSWORD,
    CouponVerificationService,
)
from tests.conftest import BRANCH_PASSWORDS

T0 = datetime(2026, 3, 1, 12, 0, 0, tzinfo=UTC)
CODE = "ABCD2345"


@pytest.fixture
def lockout():
    return LockoutPolicy(duration_seconds=600)


@pytest.fixture
def service(db_session, lockout):
    return CouponVerificationService(db_session, lockout)


@pytest.fixture
def coupon(db_session):
    return CouponIssuanceService(db_session, code_generator=lambda: CODE).issue(
        BranchCode.GDXC,
        BRANCH_PASSWORDS["GDXC"],
        "01012345678",
        DiscountType.MINUS_5000,
        None,
        HeadcountType.FOUR,
    )


def _events(db_session, event_type=None):
    return CouponEventRepository(db_session).get_by_coupon(CODE, event_type=event_type)


class TestLookup:
    def test_normalizes_input(self, service, coupon):
        assert service.lookup(" abcd-2345 ").code == CODE

    def test_empty_code(self, service):
        with pytest.raises(CouponValidationError, match="Coupon code required"):
            service.lookup(" - ")

    def test_not_found(self, service):
        with pytest.raises(CouponNotFoundError) as exc_info:
            service.lookup("ZZZZ9999")
        assert exc_info.value.code == "ZZZZ9999"


class TestVerifySuccess:
    def test_verifies_at_other_branch(self, service, coupon, db_session):
        verified = service.verify(CODE, BranchCode.NWXC, BRANCH_PASSWORDS["NWXC"], now=T0)

        assert verified.status == CouponStatus.VERIFIED.value
        assert verified.verified_branch_code == "NWXC"
        assert verified.verified_at is not None
        assert verified.issued_branch_code == "GDXC"

        events = _events(db_session, CouponEventType.VERIFY_SUCCESS)
        assert len(events) == 1
        assert events[0].branch_code == "NWXC"
        assert events[0].meta == {"verified_branch": "NWXC"}

    def test_accepts_unnormalized_code(self, service, coupon):
        verified = service.verify("abcd 2345", BranchCode.GDXC, BRANCH_PASSWORDS["GDXC"], now=T0)
        assert verified.status == CouponStatus.VERIFIED.value

    def test_verifies_after_failures_below_threshold(self, service, coupon):
        for _ in range(4):
            with pytest.raises(InvalidBranchPasswordError):
                service.verify(CODE, BranchCode.GDXC, "00000", now=T0)

        verified = service.verify(CODE, BranchCode.GDXC, BRANCH_PASSWORDS["GDXC"], now=T0)
        assert verified.status == CouponStatus.VERIFIED.value
        assert verified.verify_attempt_count == 4

    def test_event_failure_does_not_fail_verification(self, service, coupon, db_session):
        with patch.object(
            CouponEventRepository,
            "create",
            side_effect=OperationalError("INSERT", {}, Exception("locked")),
        ):
            verified = service.verify(CODE, BranchCode.GDXC, BRANCH_PASSWORDS["GDXC"], now=T0)

        assert verified.status == CouponStatus.VERIFIED.value


class TestVerifyAlreadyProcessed:
    def test_second_verification_conflicts(self, service, coupon, db_session):
        service.verify(CODE, BranchCode.GDXC, BRANCH_PASSWORDS["GDXC"], now=T0)

        with pytest.raises(CouponAlreadyProcessedError) as exc_info:
            service.verify(CODE, BranchCode.NWXC, BRANCH_PASSWORDS["NWXC"], now=T0)

        assert exc_info.value.status == "VERIFIED"
        assert str(exc_info.value) == "Coupon already processed (status: VERIFIED)"
        assert CouponRepository(db_session).get_by_code(CODE).verified_branch_code == "GDXC"
        assert len(_events(db_session, CouponEventType.VERIFY_SUCCESS)) == 1

    def test_wrong_password_on_verified_coupon_is_not_counted(self, service, coupon, db_session):
        service.verify(CODE, BranchCode.GDXC, BRANCH_PASSWORDS["GDXC"], now=T0)

        with pytest.raises(CouponAlreadyProcessedError):
            service.verify(CODE, BranchCode.GDXC, "00000", now=T0)

        assert CouponRepository(db_session).get_by_code(CODE).verify_attempt_count == 0
        assert _events(db_session, CouponEventType.VERIFY_FAIL) == []

    def test_void_coupon_conflicts(self, service, coupon, db_session):
        CouponRepository(db_session).mark_void(CODE)

        with pytest.raises(CouponAlreadyProcessedError) as exc_info:
            service.verify(CODE, BranchCode.GDXC, BRANCH_PASSWORDS["GDXC"], now=T0)
        assert exc_info.value.status == "VOID"

    def test_concurrent_verification_has_one_winner(self, db_session, lockout, coupon):
        winner = CouponVerificationService(db_session, lockout)
        loser = CouponVerificationService(db_session, lockout)

        # The loser read the row while it was still ISSUED.
        stale = SimpleNamespace(code=CODE, status=CouponStatus.ISSUED.value)
        winner.verify(CODE, BranchCode.GDXC, BRANCH_PASSWORDS["GDXC"], now=T0)

        with (
            patch.object(loser, "lookup", return_value=stale),
            pytest.raises(CouponAlreadyProcessedError) as exc_info,
        ):
            loser.verify(CODE, BranchCode.NWXC, BRANCH_PASSWORDS["NWXC"], now=T0)

        assert exc_info.value.status == "VERIFIED"
        stored = CouponRepository(db_session).get_by_code(CODE)
        assert stored.verified_branch_code == "GDXC"
        assert len(_events(db_session, CouponEventType.VERIFY_SUCCESS)) == 1


class TestVerifyWrongPassword:
    def test_counts_and_logs_failure(self, service, coupon, db_session):
        with pytest.raises(InvalidBranchPasswordError):
            service.verify(CODE, BranchCode.GDXC, "00000", now=T0)

        stored = CouponRepository(db_session).get_by_code(CODE)
        assert stored.status == CouponStatus.ISSUED.value
        assert stored.verify_attempt_count == 1
        assert stored.last_verify_attempt_at is not None

        events = _events(db_session, CouponEventType.VERIFY_FAIL)
        assert len(events) == 1
        assert events[0].branch_code == "GDXC"
        assert events[0].meta == {"reason": WRONG_PASSWORD, "attempt_count": 1}

    def test_password_of_other_branch_is_wrong(self, service, coupon):
        with pytest.raises(InvalidBranchPasswordError):
            service.verify(CODE, BranchCode.GDXC, BRANCH_PASSWORDS["NWXC"], now=T0)

    def test_locks_after_five_failures(self, service, coupon, db_session, lockout):
        for attempt in range(1, 6):
            with pytest.raises(InvalidBranchPasswordError):
                service.verify(CODE, BranchCode.GDXC, "00000", now=T0)
            assert CouponRepository(db_session).get_by_code(CODE).verify_attempt_count == attempt

        with pytest.raises(VerificationLockedError) as exc_info:
            service.verify(CODE, BranchCode.GDXC, BRANCH_PASSWORDS["GDXC"], now=T0)
        assert exc_info.value.remaining_seconds == 600

        with pytest.raises(VerificationLockedError) as exc_info:
            service.verify(
                CODE, BranchCode.GDXC, BRANCH_PASSWORDS["GDXC"], now=T0 + timedelta(seconds=1)
            )
        assert exc_info.value.remaining_seconds == 599

        # Locked attempts are neither counted nor logged.
        assert CouponRepository(db_session).get_by_code(CODE).verify_attempt_count == 5
        assert len(_events(db_session, CouponEventType.VERIFY_FAIL)) == 5

    def test_lock_is_per_branch(self, service, coupon):
        for _ in range(5):
            with pytest.raises(InvalidBranchPasswordError):
                service.verify(CODE, BranchCode.GDXC, "00000", now=T0)

        verified = service.verify(CODE, BranchCode.NWXC, BRANCH_PASSWORDS["NWXC"], now=T0)
        assert verified.verified_branch_code == "NWXC"

    def test_unlocks_after_ten_minutes(self, service, coupon):
        for _ in range(5):
            with pytest.raises(InvalidBranchPasswordError):
                service.verify(CODE, BranchCode.GDXC, "00000", now=T0)

        verified = service.verify(
            CODE, BranchCode.GDXC, BRANCH_PASSWORDS["GDXC"], now=T0 + timedelta(minutes=10)
        )
        assert verified.status == CouponStatus.VERIFIED.value

    def test_failure_after_unlock_relocks(self, service, coupon, lockout):
        for _ in range(5):
            with pytest.raises(InvalidBranchPasswordError):
                service.verify(CODE, BranchCode.GDXC, "00000", now=T0)

        later = T0 + timedelta(minutes=11)
        with pytest.raises(InvalidBranchPasswordError):
            service.verify(CODE, BranchCode.GDXC, "00000", now=later)

        assert lockout.check(CODE, "GDXC", later).remaining_seconds == 600

    def test_max_attempts_override(self, db_session, lockout, coupon):
        service = CouponVerificationService(db_session, lockout, max_attempts=2)
        for _ in range(2):
            with pytest.raises(InvalidBranchPasswordError):
                service.verify(CODE, BranchCode.GDXC, "00000", now=T0)

        assert lockout.check(CODE, "GDXC", T0).locked is True
