"""Tasting session, entry and results schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

TastingNotes = dict[str, str | None]

# --- Sessions ---


class TastingCreate(BaseModel):
    """Create a tasting session."""

    name: str = Field(..., min_length=1, max_length=255)
    tasted_at: datetime | None = None
    venue: str | None = Field(None, max_length=255)
    participants: str | None = None
    notes: str | None = None


class TastingUpdate(BaseModel):
    """Partial update of a tasting session."""

    name: str | None = Field(None, min_length=1, max_length=255)
    tasted_at: datetime | None = None
    venue: str | None = Field(None, max_length=255)
    participants: str | None = None
    notes: str | None = None
    summary: str | None = None


class TastingResponse(BaseModel):
    """Tasting session response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    name: str
    tasted_at: datetime
    venue: str | None
    participants: str | None
    notes: str | None
    summary: str | None
    is_social_mode: bool
    session_code: str | None
    invite_expires_at: datetime | None
    created_at: datetime
    updated_at: datetime


class SocialModeToggle(BaseModel):
    """Open or close a session to guests."""

    enabled: bool


# --- Entries ---


class TastingEntryCreate(BaseModel):
    """Add a wine to a session, either from the cellar or ad hoc."""

    bottle_id: int | None = None
    ad_hoc_name: str | None = Field(None, max_length=255)
    ad_hoc_photo_url: str | None = None
    save_to_cellar: bool = False


class EntryScoreUpdate(BaseModel):
    """Owner's score for a host entry."""

    total_score: int | None = Field(None, ge=0, le=100)
    appearance_score: int | None = Field(None, ge=0, le=20)
    nose_score: int | None = Field(None, ge=0, le=20)
    palate_score: int | None = Field(None, ge=0, le=20)
    finish_score: int | None = Field(None, ge=0, le=20)
    balance_score: int | None = Field(None, ge=0, le=20)
    tasting_notes: TastingNotes | None = None
    entry_photo_url: str | None = None
    notes_short: str | None = Field(None, max_length=500)
    notes_long: str | None = None
    tags: list[str] | None = None


class GuestScoreSubmit(BaseModel):
    """A guest's score for a host entry."""

    total_score: int | None = Field(None, ge=0, le=100)
    tasting_notes: TastingNotes | None = None
    notes_short: str | None = Field(None, max_length=500)
    notes_long: str | None = None
    tags: list[str] | None = None


class TastingEntryResponse(BaseModel):
    """Tasting entry with denormalised bottle details."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    tasting_session_id: int
    bottle_id: int | None
    ad_hoc_name: str | None
    ad_hoc_photo_url: str | None
    save_to_cellar: bool
    appearance_score: int | None
    nose_score: int | None
    palate_score: int | None
    finish_score: int | None
    balance_score: int | None
    total_score: int | None
    tasting_notes: TastingNotes | None
    entry_photo_url: str | None
    notes_short: str | None
    notes_long: str | None
    tags: list[str] | None
    guest_id: str | None
    guest_name: str | None
    parent_entry_id: int | None
    bottle_name: str | None = None
    bottle_producer: str | None = None
    bottle_vintage: int | None = None
    bottle_photo_url: str | None = None
    created_at: datetime
    updated_at: datetime


class TastingDetailResponse(TastingResponse):
    """Tasting session with its host entries."""

    entries: list[TastingEntryResponse]


class SaveToCellarRequest(BaseModel):
    """Turn an ad-hoc entry into a cellar bottle."""

    location_id: int | None = None
    sub_location_text: str | None = Field(None, max_length=255)
    quantity: int = Field(1, ge=1)


# --- Guests ---


class GuestResponse(BaseModel):
    """A participant of a social session."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    guest_name: str
    joined_at: datetime
    is_active: bool


# --- Results ---


class GuestScoreLine(BaseModel):
    """One guest's score of one wine."""

    guest_id: str
    guest_name: str | None
    total_score: int | None
    notes_short: str | None
    tasting_notes: TastingNotes | None


class WineResult(BaseModel):
    """Host score, guest scores and average for one wine."""

    entry_id: int
    wine_name: str
    producer: str | None
    vintage: int | None
    photo_url: str | None
    host_score: int | None
    host_notes: str | None
    average_score: int
    score_count: int
    guest_scores: list[GuestScoreLine]


class GuestAverage(BaseModel):
    """A guest's average across the session."""

    guest_id: str
    guest_name: str | None
    average_score: int
    score_count: int


class TopWine(BaseModel):
    entry_id: int
    wine_name: str
    average_score: int
    score_count: int


class SuperlativesResponse(BaseModel):
    top_wine: TopWine | None
    most_generous: GuestAverage | None
    harshest_critic: GuestAverage | None


class SocialResultsResponse(BaseModel):
    """Aggregated results of a social session."""

    session_id: int
    session_name: str
    guests: list[GuestResponse]
    wines: list[WineResult]
    guest_averages: list[GuestAverage]
    superlatives: SuperlativesResponse
