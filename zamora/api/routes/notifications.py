"""Push subscription management and manual SMS / push sends."""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from zamora.api.deps import get_caller, get_db, get_notifier, get_property_or_404
from zamora.auth.policy import Action, Caller, authorize
from zamora.errors import AuthorizationError
from zamora.models.push_subscription import PushSubscription
from zamora.notifications.notifier import Notifier
from zamora.schemas.auth import MessageResponse
from zamora.schemas.notification import (
    PushSendRequest,
    PushSendResponse,
    PushSubscribeRequest,
    PushUnsubscribeRequest,
    SmsSendRequest,
    SmsSendResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


@router.post("/subscribe", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def subscribe(
    body: PushSubscribeRequest,
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> MessageResponse:
    """Register (or move) a browser push subscription for a property."""
    await get_property_or_404(db, body.property_id)
    authorize(caller, Action.NOTIFICATIONS_SUBSCRIBE, body.property_id)

    result = await db.execute(select(PushSubscription).where(PushSubscription.endpoint == body.endpoint))
    subscription = result.scalar_one_or_none()
    if subscription is None:
        subscription = PushSubscription(endpoint=body.endpoint)
        db.add(subscription)

    subscription.property_id = body.property_id
    subscription.user_id = caller.id
    subscription.keys = body.keys.model_dump()
    await db.flush()
    logger.info("Push subscription saved for user %s at property %s", caller.id, body.property_id)
    return MessageResponse(message="Subscribed")


@router.delete("/subscribe", response_model=MessageResponse)
async def unsubscribe(
    body: PushUnsubscribeRequest,
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> MessageResponse:
    query = delete(PushSubscription).where(PushSubscription.endpoint == body.endpoint)
    if not caller.is_admin:
        query = query.where(PushSubscription.user_id == caller.id)
    await db.execute(query)
    return MessageResponse(message="Unsubscribed")


@router.post("/push/send", response_model=PushSendResponse)
async def send_push(
    body: PushSendRequest,
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
    notifier: Notifier = Depends(get_notifier),
) -> PushSendResponse:
    await get_property_or_404(db, body.property_id)
    authorize(caller, Action.NOTIFICATIONS_SEND, body.property_id)

    payload = {"title": body.title, "body": body.body, "url": body.url or "/"}
    sent = await notifier.push_to_property(body.property_id, payload)
    return PushSendResponse(success=sent > 0, sent=sent)


@router.post("/sms", response_model=SmsSendResponse)
async def send_sms(
    body: SmsSendRequest,
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
    notifier: Notifier = Depends(get_notifier),
) -> SmsSendResponse:
    """Text the given number, the property's admin phone, or the platform admin.

    Without ``property_id`` the send is not scoped to any tenant, so only
    admins may make it.
    """
    phone = body.to
    if body.property_id is not None:
        prop = await get_property_or_404(db, body.property_id)
        authorize(caller, Action.NOTIFICATIONS_SEND, prop.id)
        phone = phone or prop.admin_notification_phone
    elif not caller.is_admin:
        raise AuthorizationError("Forbidden: property_id is required unless you are an admin")

    result = await notifier.notify_admin(body.message, phone)
    return SmsSendResponse(success=result.success, sid=result.sid, error=result.error)
