"""Bottle and drink log schemas."""

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

BottleStatusValue = Literal["in_cellar", "consumed", "archived"]
PurchaseSource = Literal["RESTAURANT", "SHOP", "OTHER"]


class BottleCreate(BaseModel):
    """Add a bottle to the cellar."""

    name: str = Field(..., min_length=1, max_length=255)
    location_id: int | None = None
    producer: str | None = Field(None, max_length=255)
    vintage: int | None = Field(None, ge=1000, le=9999)
    grapes: list[str] | None = None
    country: str | None = Field(None, max_length=255)
    region: str | None = Field(None, max_length=255)
    beverage_type: Literal["wine", "beer"] = "wine"
    purchase_date: date | None = None
    purchase_source_type: PurchaseSource | None = None
    purchase_source_name: str | None = Field(None, max_length=255)
    price_amount: float | None = Field(None, gt=0)
    price_currency: str | None = Field(None, min_length=3, max_length=3)
    sub_location_text: str | None = Field(None, max_length=255)
    quantity: int = Field(1, ge=1)
    photo_url: str | None = None
    notes_short: str | None = Field(None, max_length=500)
    notes_long: str | None = None
    tags: list[str] | None = None


class BottleUpdate(BaseModel):
    """Partial bottle update."""

    name: str | None = Field(None, min_length=1, max_length=255)
    location_id: int | None = None
    producer: str | None = Field(None, max_length=255)
    vintage: int | None = Field(None, ge=1000, le=9999)
    grapes: list[str] | None = None
    country: str | None = Field(None, max_length=255)
    region: str | None = Field(None, max_length=255)
    beverage_type: Literal["wine", "beer"] | None = None
    purchase_date: date | None = None
    purchase_source_type: PurchaseSource | None = None
    purchase_source_name: str | None = Field(None, max_length=255)
    price_amount: float | None = Field(None, gt=0)
    price_currency: str | None = Field(None, min_length=3, max_length=3)
    sub_location_text: str | None = Field(None, max_length=255)
    quantity: int | None = Field(None, ge=0)
    photo_url: str | None = None
    notes_short: str | None = Field(None, max_length=500)
    notes_long: str | None = None
    tags: list[str] | None = None


class BottleStatusUpdate(BaseModel):
    """Explicit lifecycle transition."""

    status: BottleStatusValue


class BottleResponse(BaseModel):
    """Bottle response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    name: str
    producer: str | None
    vintage: int | None
    grapes: list[str] | None
    country: str | None
    region: str | None
    beverage_type: str
    status: str
    location_id: int | None
    sub_location_text: str | None
    quantity: int
    purchase_date: date | None
    purchase_source_type: str | None
    purchase_source_name: str | None
    price_amount: float | None
    price_currency: str | None
    photo_url: str | None
    notes_short: str | None
    notes_long: str | None
    tags: list[str] | None
    created_at: datetime
    updated_at: datetime


# --- Drink logs ---


class DrinkLogCreate(BaseModel):
    """Log a drinking occasion."""

    drank_at: datetime | None = None
    context: str | None = Field(None, max_length=255)
    venue: str | None = Field(None, max_length=255)
    rating: int | None = Field(None, ge=0, le=100)
    tasting_notes: dict[str, str | None] | None = None
    notes: str | None = None
    bottles_opened: int = Field(1, ge=0)


class DrinkLogResponse(BaseModel):
    """Drink log response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    bottle_id: int
    drank_at: datetime
    context: str | None
    venue: str | None
    rating: int | None
    tasting_notes: dict[str, str | None] | None
    notes: str | None
    created_at: datetime


class DrinkLogCreatedResponse(BaseModel):
    """A new drink log along with the bottle it consumed from."""

    drink_log: DrinkLogResponse
    bottle: BottleResponse
