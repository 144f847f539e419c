"""Pure checks for signup input: email shape and social profile URLs."""
from __future__ import annotations

import re
from collections.abc import Iterable
from urllib.parse import urlsplit

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
RECOGNIZED_SCHEMES = ("http://", "https://")
RECOGNIZED_PROFILE_DOMAINS: tuple[str, ...] = ("facebook.com", "fb.com")


def validate_email(value: object) -> bool:
    if not isinstance(value, str):
        return False
    return EMAIL_PATTERN.match(value) is not None


def normalize_profile_url(value: str) -> str:
    """Turn ``facebook.com/alice`` into ``https://facebook.com/alice``.

    Values that already carry an http(s) scheme are returned trimmed but
    otherwise untouched, which keeps the function idempotent.
    """
    normalized = value.strip()
    if not normalized:
        return ""
    if normalized.lower().startswith(RECOGNIZED_SCHEMES):
        return normalized
    return f"https://{normalized}"


def _host_matches(host: str, domain: str) -> bool:
    domain = domain.lower().lstrip(".")
    return host == domain or host.endswith(f".{domain}")


def validate_profile_url(value: str | None, domains: Iterable[str] = RECOGNIZED_PROFILE_DOMAINS) -> bool:
    if not isinstance(value, str) or not value.strip():
        return False
    normalized = normalize_profile_url(value)
    try:
        host = urlsplit(normalized).hostname
    except ValueError:
        return False
    if not host:
        return False
    return any(_host_matches(host, domain) for domain in domains)


def display_name_for(email: str) -> str:
    return email.split("@", 1)[0]
