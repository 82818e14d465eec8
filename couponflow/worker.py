import logging
from typing import Any

from couponflow.core.database import SessionLocal
from couponflow.schemas.sms_template import SmsSendRequest
from couponflow.services.sms_gateway_service import SmsGatewayError, SmsGatewayService
from couponflow.tasks import redis_settings

logger = logging.getLogger(__name__)


async def send_coupon_sms_task(ctx: dict[str, Any], payload: dict[str, Any]) -> bool:
    """Background task: send an issue/verify SMS for a coupon.

    Delivery problems are logged and reported through the return value; the
    job itself does not fail, so arq does not retry a rejected message.
    """
    db = SessionLocal()
    try:
        request = SmsSendRequest.model_validate(payload)
        SmsGatewayService(db).send(request)
        return True
    except SmsGatewayError as exc:
        logger.warning(
            "SMS for coupon %s not sent (%s): %s",
            payload.get("couponCode"),
            exc.status_code,
            exc.message,
        )
        return False
    finally:
        db.close()


class WorkerSettings:
    functions = [send_coupon_sms_task]
    redis_settings = redis_settings
