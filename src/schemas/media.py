"""Upload and label scan schemas."""

from typing import Literal

from pydantic import BaseModel, Field


class UploadResponse(BaseModel):
    """Stored image location."""

    photo_url: str
    public_id: str


class LabelScanRequest(BaseModel):
    """Label photo, base64 encoded (a data URL prefix is allowed)."""

    image_base64: str = Field(..., min_length=1)


class LabelScanResponse(BaseModel):
    """Best-effort guess at a label's details.

    Only ``auto_fill`` results should be written into a form without the
    user confirming them.
    """

    name: str | None
    producer: str | None
    vintage: int | None
    country: str | None
    region: str | None
    grapes: list[str]
    confidence: Literal["high", "medium", "low"]
    auto_fill: bool
