"""SMS delivery through the Twilio REST API."""

import logging
from dataclasses import dataclass

import httpx

from zamora.config import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SmsResult:
    success: bool
    sid: str | None = None
    error: str | None = None


class SmsSender:
    """Thin async client for ``POST /Accounts/{sid}/Messages.json``.

    Missing credentials are not an error: the message is logged and dropped
    so local and test environments work without a Twilio account.
    """

    def __init__(
        self,
        account_sid: str | None = None,
        auth_token: str | None = None,
        from_number: str | None = None,
        admin_number: str | None = None,
        *,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.account_sid = settings.twilio_account_sid if account_sid is None else account_sid
        self.auth_token = settings.twilio_auth_token if auth_token is None else auth_token
        self.from_number = settings.twilio_phone_number if from_number is None else from_number
        self.admin_number = settings.admin_phone_number if admin_number is None else admin_number
        self.base_url = (base_url or settings.twilio_api_base_url).rstrip("/")
        self.timeout = timeout or settings.notification_timeout_seconds
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.account_sid and self.auth_token and self.from_number)

    async def send(self, to: str, body: str) -> SmsResult:
        if not self.configured:
            logger.warning("Twilio credentials not found. SMS to %s not sent: %s", to, body)
            return SmsResult(success=False, error="Missing credentials")

        url = f"{self.base_url}/Accounts/{self.account_sid}/Messages.json"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(
                    url,
                    data={"To": to, "From": self.from_number, "Body": body},
                    auth=(self.account_sid, self.auth_token),
                )
                response.raise_for_status()
            sid = response.json().get("sid")
        except httpx.HTTPError as exc:
            logger.error("Error sending SMS to %s: %s", to, exc)
            return SmsResult(success=False, error=str(exc))
        except ValueError:
            logger.warning("SMS to %s accepted but the response was not JSON", to)
            sid = None

        logger.info("SMS sent: %s", sid)
        return SmsResult(success=True, sid=sid)

    async def notify_admin(self, message: str, phone: str | None = None) -> SmsResult:
        """Text ``message`` to ``phone``, or to the platform admin number."""
        target = phone or self.admin_number
        if not target:
            logger.warning("Admin phone number not set. Notification skipped.")
            return SmsResult(success=False, error="Missing admin phone")
        return await self.send(target, message)
