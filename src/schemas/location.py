"""Location schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class LocationCreate(BaseModel):
    """Create or rename a storage location."""

    name: str = Field(..., min_length=1, max_length=255)


class LocationResponse(BaseModel):
    """Location response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    name: str
    created_at: datetime
    updated_at: datetime
