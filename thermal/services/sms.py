"""
SMS Delivery Service

Thin wrapper over the Twilio Messages REST API. Delivery failures are
logged and raised; retry policy belongs to the caller.
"""

import os
import secrets
from typing import Optional

import httpx

from thermal.errors import ERROR_SMS_FAILED, ERROR_SMS_NOT_CONFIGURED
from thermal.logging import get_logger, sanitize_id_for_logging

logger = get_logger(__name__)

TWILIO_API_BASE = "https://api.twilio.com/2010-04-01"
REQUEST_TIMEOUT = 10.0


class SmsError(Exception):
    """Base class for messaging failures."""


class SmsConfigError(SmsError):
    """Twilio credentials are missing."""


class SmsDeliveryError(SmsError):
    """The provider rejected the message or could not be reached."""


class SmsService:
    def __init__(
        self,
        account_sid: Optional[str] = None,
        auth_token: Optional[str] = None,
        from_number: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.account_sid = account_sid or os.environ.get("TWILIO_ACCOUNT_SID", "")
        self.auth_token = auth_token or os.environ.get("TWILIO_AUTH_TOKEN", "")
        self.from_number = from_number or os.environ.get("TWILIO_PHONE_NUMBER", "")
        if not self.account_sid or not self.auth_token or not self.from_number:
            raise SmsConfigError(ERROR_SMS_NOT_CONFIGURED)
        self._client = client

    @property
    def messages_url(self) -> str:
        return f"{TWILIO_API_BASE}/Accounts/{self.account_sid}/Messages.json"

    async def send_sms(self, to: str, message: str) -> None:
        """Send `message` to `to`. Raises SmsDeliveryError on any provider failure."""
        payload = {"To": to, "From": self.from_number, "Body": message}
        try:
            if self._client is not None:
                response = await self._post(self._client, payload)
            else:
                async with httpx.AsyncClient() as client:
                    response = await self._post(client, payload)
        except httpx.HTTPError as e:
            logger.error(f"Failed to send SMS to {sanitize_id_for_logging(to)}: {e}")
            raise SmsDeliveryError(ERROR_SMS_FAILED) from e

        if response.status_code >= 300:
            error_text = response.text[:200] if response.text else "No response body"
            logger.error(
                f"Failed to send SMS to {sanitize_id_for_logging(to)}: "
                f"{response.status_code} {error_text}"
            )
            raise SmsDeliveryError(ERROR_SMS_FAILED)

        logger.info(f"SMS sent to {sanitize_id_for_logging(to)}")

    async def _post(self, client: httpx.AsyncClient, payload: dict) -> httpx.Response:
        return await client.post(
            self.messages_url,
            data=payload,
            auth=(self.account_sid, self.auth_token),
            timeout=REQUEST_TIMEOUT,
        )


def generate_reset_code() -> str:
    """Six-digit verification code, uniform in [100000, 999999]."""
    return str(100000 + secrets.randbelow(900000))


_sms_service: Optional[SmsService] = None


def get_sms_service() -> SmsService:
    """Get SmsService singleton. Raises SmsConfigError when unconfigured."""
    global _sms_service
    if _sms_service is None:
        _sms_service = SmsService()
    return _sms_service
