"""SMS template administration endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from couponflow.core.auth import require_admin
from couponflow.core.database import get_db
from couponflow.models.profile import Profile
from couponflow.models.sms_template import SmsTemplate, SmsTemplateType
from couponflow.schemas.sms_template import (
    SmsTemplateCreate,
    SmsTemplateResponse,
    SmsTemplateUpdate,
)
from couponflow.services.sms_template_service import SmsTemplateConflictError, SmsTemplateService

router = APIRouter()


@router.get(
    "/",
    response_model=list[SmsTemplateResponse],
    summary="List SMS templates",
    responses={401: {"description": "Unauthorized"}, 403: {"description": "Admin only"}},
)
async def list_sms_templates(
    type: SmsTemplateType | None = None,
    db: Session = Depends(get_db),
    profile: Profile = Depends(require_admin),
) -> list[SmsTemplate]:
    """List templates grouped by type, default first."""
    return SmsTemplateService(db).list_templates(type)


@router.post(
    "/",
    response_model=SmsTemplateResponse,
    status_code=201,
    summary="Create SMS template",
    responses={
        401: {"description": "Unauthorized"},
        403: {"description": "Admin only"},
        409: {"description": "Default template changed concurrently"},
        422: {"description": "Validation error"},
    },
)
async def create_sms_template(
    data: SmsTemplateCreate,
    db: Session = Depends(get_db),
    profile: Profile = Depends(require_admin),
) -> SmsTemplate:
    """Create a template. The first template of a type becomes its default."""
    try:
        return SmsTemplateService(db).create_template(data)
    except SmsTemplateConflictError as e:
        raise HTTPException(status_code=409, detail=str(e)) from None


@router.put(
    "/{template_id}",
    response_model=SmsTemplateResponse,
    summary="Update SMS template",
    responses={
        401: {"description": "Unauthorized"},
        403: {"description": "Admin only"},
        404: {"description": "SMS template not found"},
    },
)
async def update_sms_template(
    template_id: UUID,
    data: SmsTemplateUpdate,
    db: Session = Depends(get_db),
    profile: Profile = Depends(require_admin),
) -> SmsTemplate:
    """Update a template's name or content."""
    template = SmsTemplateService(db).update_template(template_id, data)
    if not template:
        raise HTTPException(status_code=404, detail="SMS template not found")
    return template


@router.post(
    "/{template_id}/default",
    response_model=SmsTemplateResponse,
    summary="Set default SMS template",
    responses={
        401: {"description": "Unauthorized"},
        403: {"description": "Admin only"},
        404: {"description": "SMS template not found"},
        409: {"description": "Default template changed concurrently"},
    },
)
async def set_default_sms_template(
    template_id: UUID,
    db: Session = Depends(get_db),
    profile: Profile = Depends(require_admin),
) -> SmsTemplate:
    """Make a template the default for its type."""
    try:
        template = SmsTemplateService(db).set_default(template_id)
    except SmsTemplateConflictError as e:
        raise HTTPException(status_code=409, detail=str(e)) from None
    if not template:
        raise HTTPException(status_code=404, detail="SMS template not found")
    return template
