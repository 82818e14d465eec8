"""SMS notification gateway endpoint."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from couponflow.core.auth import get_current_profile
from couponflow.core.database import get_db
from couponflow.models.profile import Profile
from couponflow.schemas.sms_template import SmsSendRequest, SmsSendResponse
from couponflow.services.sms_gateway_service import SmsGatewayError, SmsGatewayService

router = APIRouter()


@router.post(
    "/sms",
    response_model=SmsSendResponse,
    summary="Send coupon SMS",
    responses={
        400: {"model": SmsSendResponse, "description": "Missing input or default template"},
        401: {"description": "Unauthorized"},
        502: {"model": SmsSendResponse, "description": "SMS provider rejected the message"},
        503: {"model": SmsSendResponse, "description": "SMS is not configured"},
    },
)
async def send_sms(
    data: SmsSendRequest,
    db: Session = Depends(get_db),
    profile: Profile = Depends(get_current_profile),
) -> SmsSendResponse | JSONResponse:
    """Render the default template for ``type`` and send it to ``phone``."""
    try:
        return SmsGatewayService(db).send(data)
    except SmsGatewayError as e:
        return JSONResponse(
            status_code=e.status_code,
            content=SmsSendResponse(success=False, error=e.message).model_dump(),
        )
