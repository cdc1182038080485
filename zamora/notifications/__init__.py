"""Outbound staff notifications: SMS to the property admin, Web Push to staff devices."""

from zamora.notifications.notifier import Notifier, get_notifier
from zamora.notifications.push import PushResult, PushSender
from zamora.notifications.sms import SmsResult, SmsSender

__all__ = [
    "Notifier",
    "PushResult",
    "PushSender",
    "SmsResult",
    "SmsSender",
    "get_notifier",
]
