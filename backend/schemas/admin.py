from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class AdminLoginRequest(BaseModel):
    username: str = Field(min_length=1, max_length=120)
    password: str = Field(min_length=1, max_length=256)


class AdminLoginResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    message: str
    session_token: str = Field(alias="sessionToken")


class AdminLogoutResponse(BaseModel):
    success: bool = True
    message: str


class AdminSessionResponse(BaseModel):
    success: bool = True
    authenticated: bool
    username: str | None = None
