"""Schemas for push subscriptions and manual notification sends."""

import uuid

from pydantic import BaseModel, Field


class PushKeys(BaseModel):
    p256dh: str
    auth: str


class PushSubscribeRequest(BaseModel):
    property_id: uuid.UUID
    endpoint: str = Field(..., min_length=1, max_length=1024)
    keys: PushKeys


class PushUnsubscribeRequest(BaseModel):
    endpoint: str = Field(..., min_length=1, max_length=1024)


class PushSendRequest(BaseModel):
    property_id: uuid.UUID
    title: str = Field(..., min_length=1, max_length=255)
    body: str = Field(..., min_length=1)
    url: str | None = None


class PushSendResponse(BaseModel):
    success: bool
    sent: int


class SmsSendRequest(BaseModel):
    message: str = Field(..., min_length=1, max_length=1600)
    to: str | None = Field(None, max_length=50)
    property_id: uuid.UUID | None = None


class SmsSendResponse(BaseModel):
    success: bool
    sid: str | None = None
    error: str | None = None
