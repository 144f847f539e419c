import csv
import io
from datetime import datetime, timezone

from models import WaitlistEntry
from services.export import EXPORT_HEADER, render_waitlist_csv


def _rows(content: str) -> list[list[str]]:
    return list(csv.reader(io.StringIO(content)))


def test_renders_header_and_rows():
    entries = [
        WaitlistEntry(
            email="alice@example.com",
            social_profile_url="https://facebook.com/alice",
            willing_to_pay=True,
            source_address="10.0.0.1",
            created_at=datetime(2026, 10, 19, 12, 30, tzinfo=timezone.utc),
        ),
        WaitlistEntry(
            email="bob@example.com",
            social_profile_url=None,
            willing_to_pay=False,
            source_address="10.0.0.2",
            created_at=datetime(2026, 10, 18, 8, 0, tzinfo=timezone.utc),
        ),
    ]

    rows = _rows(render_waitlist_csv(entries))

    assert rows[0] == EXPORT_HEADER
    assert rows[1] == [
        "alice@example.com",
        "https://facebook.com/alice",
        "Yes",
        "complete",
        "2026-10-19T12:30:00+00:00",
        "10.0.0.1",
    ]
    assert rows[2][1:4] == ["", "No", "incomplete"]


def test_quotes_commas_and_neutralizes_formulas():
    entry = WaitlistEntry(
        email="=HYPERLINK(\"x\",\"y\")@example.com",
        social_profile_url="https://facebook.com/a,b",
        willing_to_pay=False,
        source_address="10.0.0.1",
        created_at=datetime(2026, 10, 19, tzinfo=timezone.utc),
    )

    rows = _rows(render_waitlist_csv([entry]))

    assert rows[1][0].startswith("'=")
    assert rows[1][1] == "https://facebook.com/a,b"


def test_empty_export_has_only_header():
    assert _rows(render_waitlist_csv([])) == [EXPORT_HEADER]
