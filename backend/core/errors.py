"""Admission error taxonomy.

Every error carries a machine-readable ``kind`` and the HTTP status the API
maps it to. Messages are safe to show to end users; store faults never carry
driver detail.
"""
from __future__ import annotations


class AdmissionError(Exception):
    kind = "AdmissionError"
    http_status = 500
    default_message = "Server error, please try again"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_response(self) -> dict:
        return {"success": False, "message": self.message, "error": self.kind}


class InvalidEmail(AdmissionError):
    kind = "InvalidEmail"
    http_status = 400
    default_message = "Please enter a valid email address"


class InvalidProfileUrl(AdmissionError):
    kind = "InvalidProfileUrl"
    http_status = 400
    default_message = "Please enter a valid social profile URL"


class RateLimited(AdmissionError):
    kind = "RateLimited"
    http_status = 429
    default_message = "Too many signup attempts, please try again later."


class DuplicateEmail(AdmissionError):
    kind = "DuplicateEmail"
    http_status = 409
    default_message = "This email is already on the waitlist!"


class StoreUnavailable(AdmissionError):
    kind = "StoreUnavailable"
    http_status = 500
    default_message = "Server error, please try again"


class NotifierFailed(AdmissionError):
    """Recorded when the welcome email cannot be sent. Never reaches callers."""

    kind = "NotifierFailed"
    http_status = 500
    default_message = "Failed to send welcome email"
