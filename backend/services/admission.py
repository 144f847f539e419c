"""Signup admission: rate limit, validate, persist, then notify.

An admission succeeds once the entry is committed. The welcome email runs
afterwards as a post-commit hook whose outcome is only reported through
``email_sent``.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from core.errors import InvalidEmail, InvalidProfileUrl, NotifierFailed, RateLimited
from core.rate_limit import RateLimiter
from models import STATUS_COMPLETE, STATUS_INCOMPLETE, WaitlistEntry
from services.waitlist_store import WaitlistStore
from services.welcome_email import Notifier
from utils.sanitization import sanitize_optional
from utils.validation import (
    RECOGNIZED_PROFILE_DOMAINS,
    display_name_for,
    normalize_profile_url,
    validate_email,
    validate_profile_url,
)

logger = logging.getLogger(__name__)

CLIENT_AGENT_MAX_LENGTH = 1000
EMAIL_MAX_LENGTH = 320

COMPLETE_MESSAGE = "Successfully joined the waitlist!"
INCOMPLETE_MESSAGE = "Entry recorded, but a social profile is needed for full access"


@dataclass(frozen=True)
class AdmissionResult:
    id: int
    status: str
    email_sent: bool = False

    @property
    def message(self) -> str:
        return COMPLETE_MESSAGE if self.status == STATUS_COMPLETE else INCOMPLETE_MESSAGE


class AdmissionPipeline:
    def __init__(
        self,
        store: WaitlistStore,
        rate_limiter: RateLimiter,
        notifier: Notifier | None = None,
        profile_domains: tuple[str, ...] | list[str] = RECOGNIZED_PROFILE_DOMAINS,
    ) -> None:
        self.store = store
        self.rate_limiter = rate_limiter
        self.notifier = notifier
        self.profile_domains = tuple(profile_domains)

    def admit(self, source_address: str) -> None:
        if not self.rate_limiter.admit(source_address):
            logger.info("Signup rate limited", extra={"source_address": source_address, "error_code": RateLimited.kind})
            raise RateLimited()

    def submit(
        self,
        email: str | None,
        raw_profile_url: str | None = None,
        willing_to_pay: bool | None = False,
        *,
        source_address: str,
        client_agent: str | None = None,
        display_name: str | None = None,
        admitted: bool = False,
    ) -> AdmissionResult:
        # Callers that already charged this attempt against the limiter pass admitted=True.
        if not admitted:
            self.admit(source_address)

        if not email or not email.strip():
            raise InvalidEmail("Email is required")
        email = email.strip()
        if len(email) > EMAIL_MAX_LENGTH or not validate_email(email):
            raise InvalidEmail()

        social_profile_url = None
        if raw_profile_url is not None and raw_profile_url.strip():
            if not validate_profile_url(raw_profile_url, self.profile_domains):
                raise InvalidProfileUrl()
            social_profile_url = normalize_profile_url(raw_profile_url)

        entry = WaitlistEntry(
            email=email,
            social_profile_url=social_profile_url,
            willing_to_pay=bool(willing_to_pay),
            source_address=source_address,
            client_agent=sanitize_optional(client_agent, CLIENT_AGENT_MAX_LENGTH),
        )
        entry_id = self.store.insert(entry)
        status = STATUS_COMPLETE if social_profile_url else STATUS_INCOMPLETE
        logger.info("Waitlist entry admitted", extra={"entry_id": entry_id, "status": status})

        email_sent = self._after_commit(entry_id, email, display_name)
        return AdmissionResult(id=entry_id, status=status, email_sent=email_sent)

    def _after_commit(self, entry_id: int, email: str, display_name: str | None) -> bool:
        if self.notifier is None:
            return False
        name = display_name or display_name_for(email)
        try:
            result = self.notifier.notify(email, name)
        except Exception:
            logger.warning(
                "Welcome email raised",
                exc_info=True,
                extra={"entry_id": entry_id, "error_code": NotifierFailed.kind},
            )
            return False
        if not result.success:
            logger.warning(
                "Welcome email not sent: %s",
                result.detail,
                extra={"entry_id": entry_id, "error_code": NotifierFailed.kind},
            )
        return result.success
