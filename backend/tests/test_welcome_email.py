import json

import httpx
import pytest

from core.config import get_settings
from services.welcome_email import RESEND_EMAILS_URL, ResendNotifier


@pytest.fixture
def configured(monkeypatch):
    settings = get_settings()
    monkeypatch.setattr(settings, "resend_api_key", "re_test_key")
    monkeypatch.setattr(settings, "resend_from_email", "Waitlist <hello@example.com>")
    return settings


def _client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


def test_unconfigured_notifier_skips_sending():
    result = ResendNotifier().notify("alice@example.com")
    assert result.success is False
    assert result.detail == "Email service not configured"


def test_sends_welcome_email(configured):
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["url"] = str(request.url)
        captured["auth"] = request.headers["authorization"]
        captured["body"] = json.loads(request.content)
        return httpx.Response(200, json={"id": "email_123"})

    result = ResendNotifier(client=_client(handler)).notify("alice@example.com", "alice")

    assert result.success is True
    assert result.detail == "email_123"
    assert captured["url"] == RESEND_EMAILS_URL
    assert captured["auth"] == "Bearer re_test_key"
    assert captured["body"]["to"] == ["alice@example.com"]
    assert "Hey alice!" in captured["body"]["text"]


def test_display_name_is_escaped_in_html(configured):
    bodies = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        return httpx.Response(200, json={"id": "email_1"})

    ResendNotifier(client=_client(handler)).notify("x@example.com", "<b>x</b>")

    assert "&lt;b&gt;x&lt;/b&gt;" in bodies[0]["html"]


def test_provider_error_is_reported_not_raised(configured):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, json={"message": "bad gateway"})

    result = ResendNotifier(client=_client(handler)).notify("alice@example.com")

    assert result.success is False
    assert "HTTPStatusError" in result.detail


def test_transport_timeout_is_reported_not_raised(configured):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    result = ResendNotifier(client=_client(handler)).notify("alice@example.com")

    assert result.success is False
    assert "ReadTimeout" in result.detail
