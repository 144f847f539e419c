from __future__ import annotations

from functools import lru_cache
from typing import Annotated, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=("../.env", ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "Waitlist API"
    environment: Literal["development", "staging", "production"] = "development"

    database_url: str = Field(alias="DATABASE_URL")
    database_timeout_seconds: int = 5
    auto_create_tables: bool = False

    resend_api_key: str | None = Field(default=None, alias="RESEND_API_KEY")
    resend_from_email: str = "Waitlist <hello@example.com>"
    email_timeout_seconds: float = 10.0

    session_secret: str = "change-me"
    admin_username: str = "admin"
    admin_password_hash: str | None = None
    admin_password_salt: str | None = None
    admin_session_ttl_seconds: int = 60 * 60 * 24

    rate_limit_signup_max: int = 5
    rate_limit_signup_window_seconds: int = 15 * 60
    rate_limit_admin_login: str = "5/15 minutes"
    trust_forwarded_for: bool = False

    profile_domains: Annotated[list[str], NoDecode] = Field(default_factory=lambda: ["facebook.com", "fb.com"])
    cors_origins: Annotated[list[str], NoDecode] = Field(default_factory=lambda: ["http://localhost:3000"])

    log_level: str = "INFO"
    log_format: Literal["json", "text"] = "text"

    @field_validator("cors_origins", "profile_domains", mode="before")
    @classmethod
    def parse_csv_list(cls, value: str | list[str]) -> list[str]:
        if isinstance(value, list):
            return value
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        raise TypeError("Expected a comma-separated string or a list")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


def normalize_database_url(url: str) -> str:
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql+psycopg://", 1)
    if url.startswith("postgresql://") and "+psycopg" not in url:
        return url.replace("postgresql://", "postgresql+psycopg://", 1)
    return url
