from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timezone

from sqlalchemy import case, distinct, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from core.errors import DuplicateEmail, StoreUnavailable
from models import EMAIL_UNIQUE_CONSTRAINT, WaitlistEntry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DailySignups:
    date: date
    count: int
    unique_addresses: int


@dataclass(frozen=True)
class OverallStats:
    total_signups: int
    unique_visitors: int
    willing_to_pay_count: int


@dataclass(frozen=True)
class WaitlistStats:
    daily: list[DailySignups] = field(default_factory=list)
    overall: OverallStats = OverallStats(0, 0, 0)
    today_signups: int = 0


def signup_date_expression(dialect_name: str):
    """UTC calendar day of ``created_at`` for the given SQL dialect."""
    if dialect_name == "postgresql":
        # timestamptz values are otherwise rendered in the session TimeZone.
        return func.date(func.timezone("UTC", WaitlistEntry.created_at))
    return func.date(WaitlistEntry.created_at)


def _is_email_conflict(exc: IntegrityError) -> bool:
    diag = getattr(exc.orig, "diag", None)
    constraint_name = getattr(diag, "constraint_name", None)
    if constraint_name:
        return constraint_name == EMAIL_UNIQUE_CONSTRAINT
    message = str(exc.orig)
    return "UNIQUE" in message.upper() and "waitlist_entries.email" in message


def _as_date(value: date | datetime | str) -> date:
    # SQLite hands DATE() back as text, PostgreSQL as a date.
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


class WaitlistStore:
    """Persistence for waitlist entries.

    Email uniqueness is left to the table's unique constraint so that two
    concurrent inserts cannot both pass a read-then-write check.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    def insert(self, entry: WaitlistEntry) -> int:
        try:
            self.db.add(entry)
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            if _is_email_conflict(exc):
                raise DuplicateEmail() from exc
            logger.error("Waitlist insert rejected", exc_info=True, extra={"error_code": StoreUnavailable.kind})
            raise StoreUnavailable() from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("Waitlist insert failed", exc_info=True, extra={"error_code": StoreUnavailable.kind})
            raise StoreUnavailable() from exc
        return entry.id

    def list_all(self) -> list[WaitlistEntry]:
        query = select(WaitlistEntry).order_by(WaitlistEntry.created_at.desc(), WaitlistEntry.id.desc())
        try:
            return list(self.db.scalars(query).all())
        except SQLAlchemyError as exc:
            logger.error("Waitlist listing failed", exc_info=True, extra={"error_code": StoreUnavailable.kind})
            raise StoreUnavailable() from exc

    def aggregate_by_day(self, limit: int = 30, today: date | None = None) -> WaitlistStats:
        signup_date = signup_date_expression(self.db.get_bind().dialect.name)
        daily_query = (
            select(
                signup_date.label("signup_date"),
                func.count(WaitlistEntry.id).label("count"),
                func.count(distinct(WaitlistEntry.source_address)).label("unique_addresses"),
            )
            .group_by(signup_date)
            .order_by(signup_date.desc())
            .limit(limit)
        )
        overall_query = select(
            func.count(WaitlistEntry.id),
            func.count(distinct(WaitlistEntry.source_address)),
            func.coalesce(func.sum(case((WaitlistEntry.willing_to_pay.is_(True), 1), else_=0)), 0),
        )
        try:
            daily_rows = self.db.execute(daily_query).all()
            total, unique_visitors, willing_to_pay_count = self.db.execute(overall_query).one()
        except SQLAlchemyError as exc:
            logger.error("Waitlist aggregation failed", exc_info=True, extra={"error_code": StoreUnavailable.kind})
            raise StoreUnavailable() from exc

        daily = [
            DailySignups(date=_as_date(row.signup_date), count=row.count, unique_addresses=row.unique_addresses)
            for row in daily_rows
        ]
        today = today or datetime.now(tz=timezone.utc).date()
        today_signups = next((day.count for day in daily if day.date == today), 0)
        return WaitlistStats(
            daily=daily,
            overall=OverallStats(
                total_signups=int(total),
                unique_visitors=int(unique_visitors),
                willing_to_pay_count=int(willing_to_pay_count),
            ),
            today_signups=today_signups,
        )

    def ping(self) -> bool:
        try:
            self.db.execute(select(1))
        except SQLAlchemyError:
            logger.warning("Database readiness check failed", exc_info=True)
            return False
        return True
