"""Label scan API endpoint."""

import logging
from typing import Annotated

import anthropic
from fastapi import APIRouter, Depends, HTTPException, status

from src.api.dependencies import get_current_user, get_label_scan_service
from src.models.user import User
from src.schemas.media import LabelScanRequest, LabelScanResponse
from src.services.label_scan import LabelScanError, LabelScanService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/scan-label", tags=["scan-label"])


@router.post("", response_model=LabelScanResponse)
def scan_label(
    request: LabelScanRequest,
    current_user: Annotated[User, Depends(get_current_user)],
    scanner: Annotated[LabelScanService, Depends(get_label_scan_service)],
):
    """Read name, producer, vintage and origin from a label photo."""
    if not scanner.is_configured:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Label scanning is not configured",
        )

    try:
        details = scanner.scan(request.image_base64)
    except (LabelScanError, anthropic.APIError) as e:
        logger.error(f"Label scan failed for user {current_user.id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Could not read the label",
        ) from e

    return LabelScanResponse(
        name=details.name,
        producer=details.producer,
        vintage=details.vintage,
        country=details.country,
        region=details.region,
        grapes=details.grapes,
        confidence=details.confidence,
        auto_fill=details.auto_fill,
    )
