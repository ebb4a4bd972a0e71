"""Pydantic schemas for API requests and responses."""

from src.schemas.auth import AuthResponse, UserLogin, UserRegister, UserResponse, UserUpdate
from src.schemas.bottle import (
    BottleCreate,
    BottleResponse,
    BottleStatusUpdate,
    BottleUpdate,
    DrinkLogCreate,
    DrinkLogResponse,
)
from src.schemas.guest import GuestJoinRequest, GuestJoinResponse, GuestSessionView
from src.schemas.location import LocationCreate, LocationResponse
from src.schemas.tasting import (
    EntryScoreUpdate,
    GuestScoreSubmit,
    SocialResultsResponse,
    TastingCreate,
    TastingEntryCreate,
    TastingEntryResponse,
    TastingResponse,
    TastingUpdate,
)

__all__ = [
    "UserRegister",
    "UserLogin",
    "UserUpdate",
    "UserResponse",
    "AuthResponse",
    "LocationCreate",
    "LocationResponse",
    "BottleCreate",
    "BottleUpdate",
    "BottleStatusUpdate",
    "BottleResponse",
    "DrinkLogCreate",
    "DrinkLogResponse",
    "TastingCreate",
    "TastingUpdate",
    "TastingResponse",
    "TastingEntryCreate",
    "TastingEntryResponse",
    "EntryScoreUpdate",
    "GuestScoreSubmit",
    "SocialResultsResponse",
    "GuestJoinRequest",
    "GuestJoinResponse",
    "GuestSessionView",
]
