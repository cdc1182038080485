"""SMS and push senders with the network replaced."""

import uuid

import httpx
import pytest
from pywebpush import WebPushException
from requests.exceptions import ConnectionError as RequestsConnectionError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import async_sessionmaker

from zamora.models.push_subscription import PushSubscription
from zamora.notifications import push as push_module
from zamora.notifications.notifier import TEMPLATES, Notifier, render
from zamora.notifications.push import PushResult, PushSender
from zamora.notifications.sms import SmsResult, SmsSender


def _twilio(handler) -> SmsSender:
    return SmsSender(
        account_sid="AC123",
        auth_token="secret",
        from_number="+15550000000",
        admin_number="+260971111111",
        base_url="https://twilio.test/2010-04-01",
        transport=httpx.MockTransport(handler),
    )


class TestSmsSender:
    async def test_posts_form_to_messages_endpoint(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["body"] = request.content.decode()
            seen["auth"] = request.headers.get("authorization")
            return httpx.Response(201, json={"sid": "SM42"})

        result = await _twilio(handler).send("+260970000001", "Hello")

        assert result == SmsResult(success=True, sid="SM42")
        assert seen["url"] == "https://twilio.test/2010-04-01/Accounts/AC123/Messages.json"
        assert "To=%2B260970000001" in seen["body"]
        assert "Body=Hello" in seen["body"]
        assert seen["auth"].startswith("Basic ")

    async def test_gateway_error_is_reported_not_raised(self):
        result = await _twilio(lambda request: httpx.Response(500, json={})).send("+260970000001", "Hi")
        assert result.success is False
        assert result.error

    async def test_non_json_success_body_still_counts_as_sent(self):
        result = await _twilio(lambda request: httpx.Response(201, text="queued")).send("+260970000001", "Hi")
        assert result == SmsResult(success=True, sid=None)

    async def test_missing_credentials_skip(self):
        sender = SmsSender(account_sid="", auth_token="", from_number="")
        result = await sender.send("+260970000001", "Hi")
        assert result == SmsResult(success=False, error="Missing credentials")

    async def test_notify_admin_falls_back_to_platform_number(self):
        targets = []

        def handler(request: httpx.Request) -> httpx.Response:
            targets.append(request.content.decode())
            return httpx.Response(201, json={"sid": "SM1"})

        await _twilio(handler).notify_admin("Alert")
        assert "To=%2B260971111111" in targets[0]

    async def test_notify_admin_without_any_number(self):
        sender = SmsSender(account_sid="AC1", auth_token="t", from_number="+1", admin_number="")
        result = await sender.notify_admin("Alert")
        assert result.error == "Missing admin phone"


class _FakeResponse:
    def __init__(self, status_code: int) -> None:
        self.status_code = status_code


class TestPushSender:
    async def test_unconfigured_skips(self):
        result = await PushSender(vapid_private_key="").send({"endpoint": "https://push.test/1"}, {})
        assert result.success is False
        assert result.error == "Missing VAPID keys"

    async def test_success(self, monkeypatch):
        calls = []
        monkeypatch.setattr(push_module, "webpush", lambda **kwargs: calls.append(kwargs))

        result = await PushSender(vapid_private_key="key").send({"endpoint": "https://push.test/1"}, {"title": "t"})

        assert result.success is True
        assert calls[0]["data"] == '{"title": "t"}'

    @pytest.mark.parametrize("status_code", [404, 410])
    async def test_gone_marks_expired(self, monkeypatch, status_code):
        def gone(**kwargs):
            raise WebPushException("gone", response=_FakeResponse(status_code))

        monkeypatch.setattr(push_module, "webpush", gone)
        result = await PushSender(vapid_private_key="key").send({"endpoint": "https://push.test/1"}, {})
        assert result.expired is True

    async def test_other_failure_not_expired(self, monkeypatch):
        def boom(**kwargs):
            raise WebPushException("server error", response=_FakeResponse(500))

        monkeypatch.setattr(push_module, "webpush", boom)
        result = await PushSender(vapid_private_key="key").send({"endpoint": "https://push.test/1"}, {})
        assert result.success is False
        assert result.expired is False

    async def test_unreachable_push_service_is_reported_not_raised(self, monkeypatch):
        def unreachable(**kwargs):
            raise RequestsConnectionError("push service unreachable")

        monkeypatch.setattr(push_module, "webpush", unreachable)
        result = await PushSender(vapid_private_key="key").send({"endpoint": "https://push.test/1"}, {})
        assert result.success is False
        assert result.expired is False
        assert "unreachable" in result.error


class _ScriptedPush:
    """Push sender whose answer depends on the endpoint."""

    def __init__(self, answers: dict[str, PushResult | Exception]) -> None:
        self.answers = answers

    async def send(self, subscription_info: dict, payload: dict) -> PushResult:
        answer = self.answers[subscription_info["endpoint"]]
        if isinstance(answer, Exception):
            raise answer
        return answer


class TestNotifier:
    def test_templates(self):
        assert set(TEMPLATES) == {"food_order", "bar_order", "service_request"}
        message = render("bar_order", short_id="abcd1234", location="Table 4", total="143.00")
        assert message == "New Bar Order #abcd1234 from Table 4. Total: K143.00"

    async def test_push_to_property_removes_expired(self, test_engine, db_session, hotel):
        for endpoint in ("https://push.test/ok", "https://push.test/gone"):
            db_session.add(
                PushSubscription(property_id=hotel.id, endpoint=endpoint, keys={"p256dh": "p", "auth": "a"})
            )
        await db_session.commit()

        notifier = Notifier(
            push=_ScriptedPush(
                {
                    "https://push.test/ok": PushResult(success=True),
                    "https://push.test/gone": PushResult(success=False, expired=True),
                }
            ),
            session_factory=async_sessionmaker(test_engine, expire_on_commit=False),
        )
        sent = await notifier.push_to_property(hotel.id, {"title": "Hi"})

        assert sent == 1
        result = await db_session.execute(select(PushSubscription.endpoint))
        assert result.scalars().all() == ["https://push.test/ok"]

    async def test_one_failing_subscription_does_not_stop_the_rest(self, test_engine, db_session, hotel):
        endpoints = ("https://push.test/a-broken", "https://push.test/b-gone", "https://push.test/c-ok")
        for endpoint in endpoints:
            db_session.add(
                PushSubscription(property_id=hotel.id, endpoint=endpoint, keys={"p256dh": "p", "auth": "a"})
            )
        await db_session.commit()

        notifier = Notifier(
            push=_ScriptedPush(
                {
                    "https://push.test/a-broken": RuntimeError("socket closed"),
                    "https://push.test/b-gone": PushResult(success=False, expired=True),
                    "https://push.test/c-ok": PushResult(success=True),
                }
            ),
            session_factory=async_sessionmaker(test_engine, expire_on_commit=False),
        )
        sent = await notifier.push_to_property(hotel.id, {"title": "Hi"})

        assert sent == 1
        result = await db_session.execute(select(PushSubscription.endpoint).order_by(PushSubscription.endpoint))
        assert result.scalars().all() == ["https://push.test/a-broken", "https://push.test/c-ok"]

    async def test_push_to_property_without_subscriptions(self, test_engine):
        notifier = Notifier(
            push=_ScriptedPush({}),
            session_factory=async_sessionmaker(test_engine, expire_on_commit=False),
        )
        assert await notifier.push_to_property(uuid.uuid4(), {}) == 0

    async def test_notify_admin_swallows_sender_errors(self):
        class Exploding:
            async def notify_admin(self, message, phone=None):
                raise RuntimeError("boom")

        result = await Notifier(sms=Exploding(), push=_ScriptedPush({})).notify_admin("x")
        assert result.success is False
