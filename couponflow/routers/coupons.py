"""Coupon issue, lookup, scan and verification endpoints."""

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from couponflow.core.auth import ensure_branch_access, get_current_profile, require_admin
from couponflow.core.branches import BranchCode
from couponflow.core.codes import normalize_coupon_code
from couponflow.core.config import settings
from couponflow.core.database import get_db
from couponflow.core.lockout import LockoutPolicy
from couponflow.models.coupon import Coupon, CouponStatus
from couponflow.models.coupon_event import CouponEvent
from couponflow.models.profile import Profile
from couponflow.models.sms_template import SmsTemplateType
from couponflow.repositories.coupon_event_repository import CouponEventRepository
from couponflow.repositories.coupon_repository import CouponCodeConflictError, CouponRepository
from couponflow.schemas.coupon import (
    CouponEventResponse,
    CouponIssueRequest,
    CouponResponse,
    CouponScanRequest,
    CouponScanResponse,
    CouponVerifyRequest,
)
from couponflow.services.coupon_errors import (
    CouponAlreadyProcessedError,
    CouponNotFoundError,
    CouponValidationError,
    InvalidBranchPasswordError,
    VerificationLockedError,
)
from couponflow.services.coupon_event_service import CouponEventService
from couponflow.services.coupon_issuance_service import CouponIssuanceService
from couponflow.services.coupon_verification_service import CouponVerificationService
from couponflow.services.sms_gateway_service import build_sms_request
from couponflow.tasks import enqueue_send_coupon_sms

router = APIRouter()

# Advisory, per-process lockout of (coupon, branch) pairs after repeated wrong passwords.
verify_lockout = LockoutPolicy(duration_seconds=settings.VERIFY_LOCKOUT_SECONDS)


def _to_http_error(e: ValueError) -> HTTPException:
    if isinstance(e, CouponValidationError):
        return HTTPException(status_code=422, detail=str(e))
    if isinstance(e, InvalidBranchPasswordError):
        return HTTPException(status_code=403, detail=str(e))
    if isinstance(e, CouponNotFoundError):
        return HTTPException(status_code=404, detail="Coupon not found")
    if isinstance(e, CouponAlreadyProcessedError):
        return HTTPException(status_code=409, detail=str(e))
    if isinstance(e, VerificationLockedError):
        return HTTPException(
            status_code=429,
            detail=str(e),
            headers={"Retry-After": str(e.remaining_seconds)},
        )
    return HTTPException(status_code=400, detail=str(e))


@router.post(
    "/",
    response_model=CouponResponse,
    status_code=201,
    summary="Issue coupon",
    responses={
        401: {"description": "Unauthorized"},
        403: {"description": "Invalid branch password or branch not allowed"},
        409: {"description": "Could not allocate a unique coupon code"},
        422: {"description": "Validation error"},
    },
)
async def issue_coupon(
    data: CouponIssueRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    profile: Profile = Depends(get_current_profile),
) -> Coupon:
    """Issue a new single-use coupon for a customer."""
    ensure_branch_access(profile, data.branch_code)
    service = CouponIssuanceService(db)
    try:
        coupon = service.issue(
            branch_code=data.branch_code,
            branch_password=data.branch_password.get_secret_value(),
            customer_phone=data.customer_phone,
            discount_type=data.discount_type,
            discount_custom_text=data.discount_custom_text,
            headcount_type=data.headcount_type,
            headcount_custom_text=data.headcount_custom_text,
        )
    except CouponCodeConflictError:
        raise HTTPException(
            status_code=409, detail="Could not allocate a unique coupon code"
        ) from None
    except ValueError as e:
        raise _to_http_error(e) from None

    if data.send_sms:
        background_tasks.add_task(
            enqueue_send_coupon_sms, build_sms_request(coupon, SmsTemplateType.ISSUE)
        )
    return coupon


@router.get(
    "/",
    response_model=list[CouponResponse],
    summary="List coupons",
    responses={401: {"description": "Unauthorized"}},
)
async def list_coupons(
    response: Response,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=settings.COUPON_LIST_MAX_LIMIT, ge=1, le=settings.COUPON_LIST_MAX_LIMIT),
    status: CouponStatus | None = None,
    branch_code: BranchCode | None = None,
    phone: str | None = Query(default=None, max_length=32),
    db: Session = Depends(get_db),
    profile: Profile = Depends(get_current_profile),
) -> list[Coupon]:
    """List coupons, most recently issued first."""
    repo = CouponRepository(db)
    branch = branch_code.value if branch_code else None
    digits = "".join(ch for ch in phone if ch.isdigit()) if phone else None
    response.headers["X-Total-Count"] = str(
        repo.count(status=status, branch_code=branch, phone=digits)
    )
    return repo.get_all(skip=skip, limit=limit, status=status, branch_code=branch, phone=digits)


@router.post(
    "/scan",
    response_model=CouponScanResponse,
    summary="Record QR scan",
    responses={
        401: {"description": "Unauthorized"},
        422: {"description": "Scanned text contains no coupon code"},
    },
)
async def scan_coupon(
    data: CouponScanRequest,
    db: Session = Depends(get_db),
    profile: Profile = Depends(get_current_profile),
) -> CouponScanResponse:
    """Normalize a decoded QR payload and log the scan."""
    code = normalize_coupon_code(data.raw)
    if not code:
        raise HTTPException(status_code=422, detail="Scanned text contains no coupon code")
    CouponEventService(db).record_scan(code, data.raw)
    return CouponScanResponse(coupon_code=code)


@router.get(
    "/{code}",
    response_model=CouponResponse,
    summary="Get coupon",
    responses={
        401: {"description": "Unauthorized"},
        404: {"description": "Coupon not found"},
    },
)
async def get_coupon(
    code: str,
    db: Session = Depends(get_db),
    profile: Profile = Depends(get_current_profile),
) -> Coupon:
    """Look up a coupon by code; dashes, spaces and case are ignored."""
    service = CouponVerificationService(db, verify_lockout)
    try:
        return service.lookup(code)
    except ValueError as e:
        raise _to_http_error(e) from None


@router.get(
    "/{code}/events",
    response_model=list[CouponEventResponse],
    summary="List coupon events",
    responses={401: {"description": "Unauthorized"}},
)
async def list_coupon_events(
    code: str,
    response: Response,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=1000),
    db: Session = Depends(get_db),
    profile: Profile = Depends(get_current_profile),
) -> list[CouponEvent]:
    """List the audit trail of a coupon, newest first."""
    normalized = normalize_coupon_code(code)
    repo = CouponEventRepository(db)
    response.headers["X-Total-Count"] = str(repo.count_by_coupon(normalized))
    return repo.get_by_coupon(normalized, skip=skip, limit=limit)


@router.post(
    "/{code}/verify",
    response_model=CouponResponse,
    summary="Verify coupon",
    responses={
        401: {"description": "Unauthorized"},
        403: {"description": "Invalid branch password or branch not allowed"},
        404: {"description": "Coupon not found"},
        409: {"description": "Coupon already processed"},
        429: {"description": "Too many failed attempts for this coupon and branch"},
    },
)
async def verify_coupon(
    code: str,
    data: CouponVerifyRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    profile: Profile = Depends(get_current_profile),
) -> Coupon:
    """Redeem an ISSUED coupon at a branch."""
    ensure_branch_access(profile, data.branch_code)
    service = CouponVerificationService(db, verify_lockout)
    try:
        coupon = service.verify(
            code,
            branch_code=data.branch_code,
            branch_password=data.branch_password.get_secret_value(),
        )
    except ValueError as e:
        raise _to_http_error(e) from None

    if data.send_sms:
        background_tasks.add_task(
            enqueue_send_coupon_sms, build_sms_request(coupon, SmsTemplateType.VERIFY)
        )
    return coupon


@router.post(
    "/{code}/void",
    response_model=CouponResponse,
    summary="Void coupon",
    responses={
        401: {"description": "Unauthorized"},
        403: {"description": "Admin only"},
        404: {"description": "Coupon not found"},
        409: {"description": "Coupon already processed"},
    },
)
async def void_coupon(
    code: str,
    db: Session = Depends(get_db),
    profile: Profile = Depends(require_admin),
) -> Coupon:
    """Void an ISSUED coupon so it can no longer be verified."""
    normalized = normalize_coupon_code(code)
    repo = CouponRepository(db)
    coupon = repo.get_by_code(normalized)
    if not coupon:
        raise HTTPException(status_code=404, detail="Coupon not found")
    if not repo.mark_void(normalized):
        raise HTTPException(status_code=409, detail="Coupon already processed")
    db.refresh(coupon)
    return coupon
