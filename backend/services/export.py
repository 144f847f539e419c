from __future__ import annotations

import csv
import io
from collections.abc import Iterable

from models import WaitlistEntry

EXPORT_FILENAME = "waitlist-export.csv"
EXPORT_HEADER = ["Email", "Social Profile", "Willing to Pay", "Status", "Timestamp", "IP Address"]


def _spreadsheet_safe(value: str) -> str:
    # Keep spreadsheet apps from evaluating user-supplied cells as formulas.
    if value and value[0] in ("=", "+", "-", "@"):
        return f"'{value}"
    return value


def render_waitlist_csv(entries: Iterable[WaitlistEntry]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(EXPORT_HEADER)
    for entry in entries:
        writer.writerow(
            [
                _spreadsheet_safe(entry.email),
                _spreadsheet_safe(entry.social_profile_url or ""),
                "Yes" if entry.willing_to_pay else "No",
                entry.status,
                entry.created_at.isoformat() if entry.created_at else "",
                entry.source_address,
            ]
        )
    return buffer.getvalue()
