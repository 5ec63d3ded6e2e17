import httpx

from portfolio.core.config import settings
from portfolio.services.notifications import (
    LoggingNotificationDispatcher,
    Notification,
    WebhookNotificationDispatcher,
    get_notification_dispatcher,
)


def test_payload_shape():
    n = Notification("submission", "a1", "t1")
    assert n.as_payload() == {"type": "submission", "assignmentId": "a1", "recipientId": "t1"}


def test_webhook_posts_payload(monkeypatch):
    calls = []

    def fake_post(url, json, timeout):
        calls.append((url, json, timeout))
        return httpx.Response(200, request=httpx.Request("POST", url))

    monkeypatch.setattr(httpx, "post", fake_post)
    WebhookNotificationDispatcher("https://hooks.local/email", timeout=2.0).dispatch(
        Notification("verification", "a1", "s1")
    )
    assert calls == [
        (
            "https://hooks.local/email",
            {"type": "verification", "assignmentId": "a1", "recipientId": "s1"},
            2.0,
        )
    ]


def test_webhook_failures_are_logged_not_raised(monkeypatch, caplog):
    def failing_post(url, json, timeout):
        raise httpx.ConnectError("unreachable")

    monkeypatch.setattr(httpx, "post", failing_post)
    WebhookNotificationDispatcher("https://hooks.local/email").dispatch(Notification("submission", "a1", "t1"))
    assert "failed" in caplog.text


def test_webhook_error_status_is_logged(monkeypatch, caplog):
    def bad_status(url, json, timeout):
        return httpx.Response(500, request=httpx.Request("POST", url))

    monkeypatch.setattr(httpx, "post", bad_status)
    WebhookNotificationDispatcher("https://hooks.local/email").dispatch(Notification("submission", "a1", "t1"))
    assert "failed" in caplog.text


def test_dispatcher_selection(monkeypatch):
    monkeypatch.setattr(settings, "NOTIFICATION_WEBHOOK_URL", None)
    assert isinstance(get_notification_dispatcher(), LoggingNotificationDispatcher)

    monkeypatch.setattr(settings, "NOTIFICATION_WEBHOOK_URL", "https://hooks.local/email")
    assert isinstance(get_notification_dispatcher(), WebhookNotificationDispatcher)
