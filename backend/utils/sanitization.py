from __future__ import annotations

import bleach


ALLOWED_TAGS: list[str] = []
ALLOWED_ATTRIBUTES: dict[str, list[str]] = {}


def sanitize_text(value: str) -> str:
    return bleach.clean(value, tags=ALLOWED_TAGS, attributes=ALLOWED_ATTRIBUTES, strip=True)


def sanitize_optional(value: str | None, max_length: int | None = None) -> str | None:
    if value is None:
        return None
    cleaned = sanitize_text(value).strip()
    if max_length is not None:
        cleaned = cleaned[:max_length]
    return cleaned or None
