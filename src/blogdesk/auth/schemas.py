from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class UserPublic(BaseModel):
    """User view safe to hand to clients (never carries the password hash)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    name: str
    role: str
    created_at: datetime
    last_login_at: datetime | None = None


class RegisterRequest(BaseModel):
    # Plain str with no minimums: format, strength and role rules live in the
    # service so that every violation is reported together.
    email: str = Field(max_length=320)
    name: str = Field(min_length=1, max_length=80)
    password: str = Field(max_length=256)
    role: str | None = Field(default=None, max_length=32)


class LoginRequest(BaseModel):
    email: str = Field(min_length=1, max_length=320)
    password: str = Field(min_length=1, max_length=256)


class ChangePasswordRequest(BaseModel):
    old_password: str = Field(min_length=1, max_length=256)
    new_password: str = Field(max_length=256)


class AuthResponse(BaseModel):
    user: UserPublic


class OkResponse(BaseModel):
    ok: bool = True
