from __future__ import annotations

from datetime import date, datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class WaitlistRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: str | None = None
    profile_url: str | None = Field(
        default=None,
        max_length=2048,
        validation_alias=AliasChoices("profileUrl", "profile_url", "facebook"),
    )
    willing_to_pay: bool = Field(
        default=False,
        validation_alias=AliasChoices("willingToPay", "willing_to_pay"),
    )
    name: str | None = Field(default=None, max_length=120)

    @field_validator("willing_to_pay", mode="before")
    @classmethod
    def default_missing_flag(cls, value: object) -> object:
        return False if value is None else value


class WaitlistResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    message: str
    id: int
    status: str
    email_sent: bool = Field(alias="emailSent")


class WaitlistEntryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    social_profile_url: str | None
    willing_to_pay: bool
    status: str
    created_at: datetime
    source_address: str
    client_agent: str | None


class WaitlistListResponse(BaseModel):
    success: bool = True
    data: list[WaitlistEntryOut]
    total: int


class DailyStatsOut(BaseModel):
    signup_date: date
    daily_signups: int
    unique_ips: int


class OverallStatsOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_signups: int
    unique_visitors: int
    willing_to_pay_count: int


class TodayStatsOut(BaseModel):
    today_signups: int


class WaitlistStatsData(BaseModel):
    daily_stats: list[DailyStatsOut]
    overall: OverallStatsOut
    today: TodayStatsOut


class WaitlistStatsResponse(BaseModel):
    success: bool = True
    data: WaitlistStatsData
