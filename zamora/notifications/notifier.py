"""Notification fan-out used by the order, booking and service-request routes.

Routes schedule these calls as background tasks after the response is sent,
so a slow or failing SMS gateway never affects the request that triggered it.
"""

import logging
import uuid

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from zamora.database import async_session_factory
from zamora.models.push_subscription import PushSubscription
from zamora.notifications.push import PushResult, PushSender
from zamora.notifications.sms import SmsResult, SmsSender

logger = logging.getLogger(__name__)

TEMPLATES = {
    "food_order": "New Food Order #{short_id} from {location}. Total: K{total}",
    "bar_order": "New Bar Order #{short_id} from {location}. Total: K{total}",
    "service_request": "Service request ({request_type}) from {location}",
}


def render(template: str, **values: object) -> str:
    return TEMPLATES[template].format(**values)


class Notifier:
    def __init__(
        self,
        sms: SmsSender | None = None,
        push: PushSender | None = None,
        session_factory: async_sessionmaker[AsyncSession] | None = None,
    ) -> None:
        self.sms = sms or SmsSender()
        self.push = push or PushSender()
        self.session_factory = session_factory or async_session_factory

    async def notify_admin(self, message: str, phone: str | None = None) -> SmsResult:
        try:
            return await self.sms.notify_admin(message, phone)
        except Exception:
            logger.exception("Failed to send SMS notification")
            return SmsResult(success=False, error="SMS delivery failed")

    async def send_push(self, subscription: PushSubscription, payload: dict) -> PushResult:
        return await self.push.send(subscription.as_webpush_info(), payload)

    async def push_to_property(self, property_id: uuid.UUID, payload: dict) -> int:
        """Push ``payload`` to every subscription of a property.

        Runs in its own session because it is called after the request
        session has been closed. Expired subscriptions are deleted.

        Returns:
            Number of subscriptions that accepted the message.
        """
        sent = 0
        async with self.session_factory() as session:
            result = await session.execute(
                select(PushSubscription).where(PushSubscription.property_id == property_id)
            )
            subscriptions = result.scalars().all()

            expired: list[uuid.UUID] = []
            for subscription in subscriptions:
                try:
                    outcome = await self.send_push(subscription, payload)
                except Exception:
                    logger.exception("Push to subscription %s failed", subscription.id)
                    continue
                if outcome.success:
                    sent += 1
                elif outcome.expired:
                    expired.append(subscription.id)

            if expired:
                await session.execute(delete(PushSubscription).where(PushSubscription.id.in_(expired)))
                await session.commit()
                logger.info("Removed %d expired push subscriptions for property %s", len(expired), property_id)

        logger.info("Push sent to %d/%d subscriptions for property %s", sent, len(subscriptions), property_id)
        return sent

    async def announce(self, property_id: uuid.UUID, message: str, phone: str | None, payload: dict) -> None:
        """SMS the admin and push to staff devices; never raises."""
        await self.notify_admin(message, phone)
        try:
            await self.push_to_property(property_id, payload)
        except Exception:
            logger.exception("Failed to push notification for property %s", property_id)


_notifier: Notifier | None = None


def get_notifier() -> Notifier:
    """FastAPI dependency returning the process-wide notifier."""
    global _notifier
    if _notifier is None:
        _notifier = Notifier()
    return _notifier
