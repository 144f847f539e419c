from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Integer, String, Text, UniqueConstraint, case, false, func
from sqlalchemy.ext.hybrid import hybrid_property
from sqlalchemy.orm import Mapped, mapped_column

from db.base_class import Base

STATUS_COMPLETE = "complete"
STATUS_INCOMPLETE = "incomplete"
EMAIL_UNIQUE_CONSTRAINT = "uq_waitlist_entries_email"


class WaitlistEntry(Base):
    __tablename__ = "waitlist_entries"
    __table_args__ = (UniqueConstraint("email", name=EMAIL_UNIQUE_CONSTRAINT),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    social_profile_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    willing_to_pay: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default=false())
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), index=True
    )
    source_address: Mapped[str] = mapped_column(String(45), nullable=False)
    client_agent: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Derived from the profile URL; there is no column to write.
    @hybrid_property
    def status(self) -> str:
        return STATUS_COMPLETE if self.social_profile_url else STATUS_INCOMPLETE

    @status.inplace.expression
    @classmethod
    def _status_expression(cls):
        return case(
            (func.coalesce(cls.social_profile_url, "") != "", STATUS_COMPLETE),
            else_=STATUS_INCOMPLETE,
        )
