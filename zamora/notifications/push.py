"""Web Push delivery (VAPID) via pywebpush."""

import asyncio
import json
import logging
from dataclasses import dataclass

from pywebpush import WebPushException, webpush
from requests.exceptions import RequestException

from zamora.config import settings

logger = logging.getLogger(__name__)

# Push service answers for subscriptions that will never work again
_GONE_STATUSES = {404, 410}


@dataclass(frozen=True)
class PushResult:
    success: bool
    expired: bool = False
    error: str | None = None


class PushSender:
    def __init__(
        self,
        vapid_private_key: str | None = None,
        vapid_subject: str | None = None,
        *,
        timeout: float | None = None,
    ) -> None:
        self.vapid_private_key = settings.vapid_private_key if vapid_private_key is None else vapid_private_key
        self.vapid_subject = vapid_subject or settings.vapid_subject
        self.timeout = timeout or settings.notification_timeout_seconds

    @property
    def configured(self) -> bool:
        return bool(self.vapid_private_key)

    async def send(self, subscription_info: dict, payload: dict) -> PushResult:
        """Deliver ``payload`` to one browser subscription.

        ``webpush`` is blocking (it uses ``requests``), so it runs in a worker
        thread. A 404/410 answer marks the subscription as expired.
        """
        if not self.configured:
            logger.warning("VAPID keys not configured. Push to %s skipped.", subscription_info.get("endpoint"))
            return PushResult(success=False, error="Missing VAPID keys")

        try:
            await asyncio.to_thread(
                webpush,
                subscription_info=subscription_info,
                data=json.dumps(payload),
                vapid_private_key=self.vapid_private_key,
                vapid_claims={"sub": self.vapid_subject},
                timeout=self.timeout,
            )
        except WebPushException as exc:
            status_code = exc.response.status_code if exc.response is not None else None
            if status_code in _GONE_STATUSES:
                logger.info("Push subscription expired: %s", subscription_info.get("endpoint"))
                return PushResult(success=False, expired=True, error=str(exc))
            logger.error("Error sending push notification: %s", exc)
            return PushResult(success=False, error=str(exc))
        except RequestException as exc:
            logger.error("Push service unreachable for %s: %s", subscription_info.get("endpoint"), exc)
            return PushResult(success=False, error=str(exc))
        return PushResult(success=True)
