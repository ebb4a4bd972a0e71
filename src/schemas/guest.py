"""Guest flow schemas."""

from datetime import datetime

from pydantic import BaseModel, Field

from src.schemas.tasting import GuestResponse, TastingEntryResponse


class GuestJoinRequest(BaseModel):
    """Join a social session with a code."""

    session_code: str = Field(..., min_length=1, max_length=8)
    guest_name: str = Field(..., min_length=1, max_length=100)


class GuestJoinResponse(BaseModel):
    """Guest token and session details. The token is only returned here."""

    token: str
    guest_id: str
    guest_name: str
    session_code: str
    session_id: int
    session_name: str
    venue: str | None


class GuestSessionMeta(BaseModel):
    id: int
    name: str
    venue: str | None
    tasted_at: datetime
    is_social_mode: bool


class GuestSessionView(BaseModel):
    """Everything a guest needs to score a session."""

    session: GuestSessionMeta
    host_entries: list[TastingEntryResponse]
    my_entries: list[TastingEntryResponse]
    guests: list[GuestResponse]
