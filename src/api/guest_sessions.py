"""Guest API endpoints for social tastings.

Guests have no account: they join with a session code and then send the
guest token they were issued as a bearer token.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from src.api.dependencies import get_bearer_token, get_guest_access, get_tasting_service
from src.api.tastings import build_social_results, entry_response
from src.models.tasting import TastingSession
from src.schemas.guest import (
    GuestJoinRequest,
    GuestJoinResponse,
    GuestSessionMeta,
    GuestSessionView,
)
from src.schemas.tasting import (
    GuestResponse,
    GuestScoreSubmit,
    SocialResultsResponse,
    TastingEntryResponse,
)
from src.services.auth import GuestClaims
from src.services.guest_access import GuestAccessController
from src.services.tasting_service import TastingService

router = APIRouter(prefix="/api/v1/guest-sessions", tags=["guest-sessions"])


def get_current_guest(
    session_code: str,
    token: Annotated[str, Depends(get_bearer_token)],
    guests: Annotated[GuestAccessController, Depends(get_guest_access)],
) -> tuple[GuestClaims, TastingSession]:
    """Authorize the guest token for the session in the path."""
    return guests.authorize(token, session_code)


@router.post("/join", response_model=GuestJoinResponse)
def join_session(
    join_data: GuestJoinRequest,
    guests: Annotated[GuestAccessController, Depends(get_guest_access)],
):
    """Join a social session with its code."""
    joined = guests.join(join_data.session_code, join_data.guest_name)
    return GuestJoinResponse(
        token=joined.token,
        guest_id=joined.guest.id,
        guest_name=joined.guest.guest_name,
        session_code=joined.session.session_code,
        session_id=joined.session.id,
        session_name=joined.session.name,
        venue=joined.session.venue,
    )


@router.get("/{session_code}", response_model=GuestSessionView)
def get_guest_session(
    guest: Annotated[tuple[GuestClaims, TastingSession], Depends(get_current_guest)],
    tastings: Annotated[TastingService, Depends(get_tasting_service)],
):
    """Get the wines to score, the guest's own scores and who else joined."""
    claims, session = guest
    return GuestSessionView(
        session=GuestSessionMeta(
            id=session.id,
            name=session.name,
            venue=session.venue,
            tasted_at=session.tasted_at,
            is_social_mode=session.is_social_mode,
        ),
        host_entries=[entry_response(entry) for entry in tastings.host_entries(session)],
        my_entries=[
            entry_response(entry) for entry in tastings.guest_entries(session, claims.guest_id)
        ],
        guests=[GuestResponse.model_validate(g) for g in tastings.guests(session)],
    )


@router.post(
    "/{session_code}/entries/{entry_id}/score",
    response_model=TastingEntryResponse,
    status_code=status.HTTP_201_CREATED,
)
def score_entry(
    entry_id: int,
    score_data: GuestScoreSubmit,
    response: Response,
    guest: Annotated[tuple[GuestClaims, TastingSession], Depends(get_current_guest)],
    tastings: Annotated[TastingService, Depends(get_tasting_service)],
):
    """Submit or update the guest's score for a wine."""
    claims, session = guest
    entry, created = tastings.score_entry(
        session, entry_id, score_data.model_dump(exclude_unset=True), guest=claims
    )
    if not created:
        response.status_code = status.HTTP_200_OK
    return entry_response(entry)


@router.get("/{session_code}/results", response_model=SocialResultsResponse)
def get_results(
    guest: Annotated[tuple[GuestClaims, TastingSession], Depends(get_current_guest)],
    tastings: Annotated[TastingService, Depends(get_tasting_service)],
):
    """Get the session's aggregated results."""
    _, session = guest
    return build_social_results(tastings, session)
