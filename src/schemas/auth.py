"""Authentication and profile schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class UserRegister(BaseModel):
    """User registration request."""

    email: EmailStr = Field(..., max_length=255)
    password: str = Field(..., min_length=8, max_length=128)
    name: str = Field(..., min_length=1, max_length=255)
    default_currency: str = Field("GBP", min_length=3, max_length=3)
    beverage_type: Literal["wine", "beer"] = "wine"


class UserLogin(BaseModel):
    """User login request."""

    email: EmailStr = Field(..., max_length=255)
    password: str = Field(..., min_length=1, max_length=128)


class UserUpdate(BaseModel):
    """Profile update."""

    name: str | None = Field(None, min_length=1, max_length=255)
    default_currency: str | None = Field(None, min_length=3, max_length=3)
    beverage_type: Literal["wine", "beer"] | None = None
    scoring_mode: Literal["detailed", "casual"] | None = None
    preferred_language: str | None = Field(None, max_length=5)


class UserResponse(BaseModel):
    """User information response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    name: str
    default_currency: str
    beverage_type: str
    scoring_mode: str
    preferred_language: str | None
    created_at: datetime


class AuthResponse(BaseModel):
    """Authentication response with token and user info."""

    access_token: str
    token_type: str = "bearer"  # noqa: S105
    user: UserResponse
