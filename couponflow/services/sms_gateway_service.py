"""SMS delivery of coupon notifications through the SOLAPI send API."""

import hashlib
import hmac
import logging
import secrets
from datetime import UTC, datetime
from typing import Any

import httpx
from sqlalchemy.orm import Session

from couponflow.core.codes import normalize_phone, to_domestic_phone
from couponflow.core.config import settings
from couponflow.models.coupon import Coupon
from couponflow.models.sms_template import SmsTemplateType
from couponflow.schemas.sms_template import SmsSendRequest, SmsSendResponse
from couponflow.services.coupon_options import discount_label, headcount_label
from couponflow.services.sms_template_service import SmsTemplateService, render_template

logger = logging.getLogger(__name__)


class SmsGatewayError(Exception):
    """Base class for notification failures; ``status_code`` is the HTTP status to report."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class SmsBadRequestError(SmsGatewayError):
    status_code = 400


class SmsNotConfiguredError(SmsGatewayError):
    status_code = 503


class SmsUpstreamError(SmsGatewayError):
    status_code = 502


def build_solapi_auth_header(
    api_key: str,
    api_secret: str,
    now: datetime | None = None,
    salt: str | None = None,
) -> str:
    """Build the SOLAPI ``Authorization`` header.

    The signature is HMAC-SHA256 over ``date + salt`` keyed with the API
    secret, where ``date`` is ISO 8601 UTC without fractional seconds and
    ``salt`` is 16 random bytes as hex.
    """
    now = now or datetime.now(UTC)
    date = now.astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%SZ")
    salt = salt or secrets.token_hex(16)
    signature = hmac.new(
        api_secret.encode("utf-8"),
        (date + salt).encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()
    return f"HMAC-SHA256 apiKey={api_key}, date={date}, salt={salt}, signature={signature}"


def build_sms_request(coupon: Coupon, template_type: SmsTemplateType) -> SmsSendRequest:
    """Build the notification request for an issued or verified coupon."""
    verified_at = coupon.verified_at.isoformat() if coupon.verified_at else None
    return SmsSendRequest(
        type=template_type,
        phone=str(coupon.customer_phone),
        coupon_code=str(coupon.code),
        discount_label=discount_label(coupon.discount_type, coupon.discount_custom_text),
        headcount_label=headcount_label(coupon.headcount_type, coupon.headcount_custom_text),
        issued_branch=str(coupon.issued_branch_code),
        verified_branch=coupon.verified_branch_code,
        verified_at=verified_at,
    )


class SmsGatewayService:
    """Renders the default template for a notification type and sends it."""

    def __init__(self, db: Session):
        self.db = db
        self.templates = SmsTemplateService(db)

    def render(self, data: SmsSendRequest) -> str:
        """Render the default template of ``data.type``.

        Raises:
            SmsBadRequestError: If phone or coupon code is missing, or no
                default template exists for the type.
        """
        if not data.phone or not data.coupon_code:
            raise SmsBadRequestError("phone and couponCode are required")

        template = self.templates.get_default(data.type)
        if template is None or not template.content:
            raise SmsBadRequestError(f"No default template for type '{data.type.value}'")

        variables = {
            "couponCode": data.coupon_code,
            "discountLabel": data.discount_label,
            "headcountLabel": data.headcount_label,
            "issuedBranch": data.issued_branch,
            "customerPhone": to_domestic_phone(data.phone),
            "verifiedBranch": data.verified_branch,
            "verifiedAt": data.verified_at,
        }
        return render_template(str(template.content), variables)

    def send(self, data: SmsSendRequest) -> SmsSendResponse:
        """Render and deliver one SMS.

        Raises:
            SmsBadRequestError: Missing input or default template (400).
            SmsNotConfiguredError: SOLAPI credentials are not set (503).
            SmsUpstreamError: The provider rejected or could not be reached (502).
        """
        text = self.render(data)

        if not settings.sms_enabled:
            raise SmsNotConfiguredError(
                "SMS is not configured (SOLAPI_API_KEY, SOLAPI_API_SECRET, SOLAPI_FROM_NUMBER)"
            )

        to_number = to_domestic_phone(data.phone)
        body: dict[str, Any] = {
            "messages": [
                {
                    "to": to_number,
                    "from": normalize_phone(settings.SOLAPI_FROM_NUMBER),
                    "text": text,
                }
            ]
        }
        headers = {
            "Authorization": build_solapi_auth_header(
                settings.SOLAPI_API_KEY, settings.SOLAPI_API_SECRET
            ),
            "Content-Type": "application/json",
        }

        try:
            with httpx.Client(timeout=settings.SMS_TIMEOUT_SECONDS) as client:
                resp = client.post(settings.SOLAPI_SEND_URL, json=body, headers=headers)
        except httpx.HTTPError as exc:
            logger.warning("SMS delivery for coupon %s failed: %s", data.coupon_code, exc)
            raise SmsUpstreamError(str(exc)[:1000]) from exc

        if not 200 <= resp.status_code < 300:
            error = _provider_error(resp)
            logger.warning(
                "SMS provider rejected coupon %s (HTTP %s): %s",
                data.coupon_code,
                resp.status_code,
                error,
            )
            raise SmsUpstreamError(error)

        logger.info("Sent %s SMS for coupon %s", data.type.value, data.coupon_code)
        return SmsSendResponse(success=True)


def _provider_error(resp: httpx.Response) -> str:
    try:
        payload = resp.json()
    except ValueError:
        payload = {}
    if isinstance(payload, dict) and payload.get("errorMessage"):
        return str(payload["errorMessage"])
    return resp.reason_phrase or f"HTTP {resp.status_code}"
