"""Web Push subscriptions registered by staff browsers."""

import uuid

from sqlalchemy import JSON, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from zamora.database import Base, TimestampMixin, UUIDPrimaryKeyMixin


class PushSubscription(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "push_subscriptions"

    property_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=True,
    )
    endpoint: Mapped[str] = mapped_column(String(1024), unique=True, nullable=False)
    keys: Mapped[dict] = mapped_column(JSON, default=dict)  # {"p256dh": ..., "auth": ...}

    def as_webpush_info(self) -> dict:
        return {"endpoint": self.endpoint, "keys": self.keys or {}}
