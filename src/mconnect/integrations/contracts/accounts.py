"""
Account contracts: the signed-in user and the session a login or registration
hands back.
"""

from __future__ import annotations

from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

ACCOUNT_ROLES: Tuple[str, ...] = ("buyer", "farmer")


class User(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    email: str
    role: str
    avatar: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class AuthSession(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str
    user: User
    access_token: str = Field(min_length=1)
    refresh_token: Optional[str] = None
    token_type: str = "bearer"
    expires_in: int = Field(default=3600, ge=0)
