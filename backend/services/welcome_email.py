"""Welcome email sent after a successful waitlist signup."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from html import escape
from typing import Protocol

import httpx

from core.config import get_settings

logger = logging.getLogger(__name__)

RESEND_EMAILS_URL = "https://api.resend.com/emails"


@dataclass(frozen=True)
class NotifyResult:
    success: bool
    detail: str


class Notifier(Protocol):
    def notify(self, email: str, display_name: str | None = None) -> NotifyResult: ...


def _render_welcome_html(display_name: str) -> str:
    name = escape(display_name)
    return f"""<!DOCTYPE html>
<html>
<head><meta charset="utf-8"><meta name="viewport" content="width=device-width,initial-scale=1"></head>
<body style="margin:0;padding:0;background:#f4f1ec;font-family:-apple-system,BlinkMacSystemFont,'Segoe UI',Roboto,sans-serif;">
  <div style="max-width:560px;margin:0 auto;padding:40px 24px;">
    <div style="background:white;border-radius:16px;padding:40px 32px;">
      <h1 style="font-size:24px;color:#1a1a1a;margin:0 0 16px;">Hey {name}!</h1>
      <p style="font-size:16px;color:#555;line-height:1.6;margin:0 0 16px;">
        Thanks for joining our waitlist. We'll send you updates on our progress and early access when we launch.
      </p>
      <p style="font-size:16px;color:#555;line-height:1.6;margin:0;">
        Have a question or a concern? Just reply to this email.
      </p>
    </div>
  </div>
</body>
</html>"""


def _render_welcome_text(display_name: str) -> str:
    return (
        f"Hey {display_name}!\n\n"
        "Thanks for joining our waitlist. We'll send you updates on our progress "
        "and early access when we launch.\n\n"
        "Have a question or a concern? Just reply to this email.\n"
    )


class ResendNotifier:
    def __init__(self, client: httpx.Client | None = None) -> None:
        self.settings = get_settings()
        self._client = client

    def _post(self, client: httpx.Client, payload: dict) -> httpx.Response:
        response = client.post(
            RESEND_EMAILS_URL,
            headers={
                "Authorization": f"Bearer {self.settings.resend_api_key}",
                "Content-Type": "application/json",
            },
            json=payload,
        )
        response.raise_for_status()
        return response

    def notify(self, email: str, display_name: str | None = None) -> NotifyResult:
        if not self.settings.resend_api_key:
            logger.info("Email service not configured, skipping welcome email")
            return NotifyResult(success=False, detail="Email service not configured")

        name = display_name or email.split("@", 1)[0]
        payload = {
            "from": self.settings.resend_from_email,
            "to": [email],
            "subject": "Welcome to the waitlist!",
            "html": _render_welcome_html(name),
            "text": _render_welcome_text(name),
        }

        try:
            if self._client is not None:
                response = self._post(self._client, payload)
            else:
                with httpx.Client(timeout=self.settings.email_timeout_seconds) as client:
                    response = self._post(client, payload)
        except httpx.HTTPError as exc:
            return NotifyResult(success=False, detail=f"Failed to send welcome email: {exc.__class__.__name__}")

        try:
            data = response.json()
        except ValueError:
            data = {}
        message_id = data.get("id") if isinstance(data, dict) else None
        return NotifyResult(success=True, detail=str(message_id or "Welcome email sent"))


def get_notifier() -> Notifier:
    return ResendNotifier()
