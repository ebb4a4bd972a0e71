"""Tasting session API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from src.api.dependencies import get_current_user, get_tasting_service
from src.models.tasting import TastingEntry, TastingSession
from src.models.user import User
from src.schemas.bottle import BottleResponse
from src.schemas.tasting import (
    EntryScoreUpdate,
    GuestAverage,
    GuestResponse,
    GuestScoreLine,
    SaveToCellarRequest,
    SocialModeToggle,
    SocialResultsResponse,
    SuperlativesResponse,
    TastingCreate,
    TastingDetailResponse,
    TastingEntryCreate,
    TastingEntryResponse,
    TastingResponse,
    TastingUpdate,
    TopWine,
    WineResult,
)
from src.services.scoring import GuestScore
from src.services.tasting_service import TastingService

router = APIRouter(prefix="/api/v1/tastings", tags=["tastings"])


def entry_response(entry: TastingEntry) -> TastingEntryResponse:
    """Serialize an entry with the details of its cellar bottle."""
    response = TastingEntryResponse.model_validate(entry)
    if entry.bottle is not None:
        response.bottle_name = entry.bottle.name
        response.bottle_producer = entry.bottle.producer
        response.bottle_vintage = entry.bottle.vintage
        response.bottle_photo_url = entry.bottle.photo_url
    return response


def guest_average(score: GuestScore) -> GuestAverage:
    return GuestAverage(
        guest_id=score.guest_id,
        guest_name=score.guest_name,
        average_score=score.average,
        score_count=score.count,
    )


def build_social_results(tastings: TastingService, session: TastingSession) -> SocialResultsResponse:
    """Aggregate a session's scores into the results table.

    Shared by the owner and guest results endpoints.
    """
    host_entries = tastings.host_entries(session)
    guest_entries = tastings.guest_entries(session)
    results = tastings.results(session, host_entries, guest_entries)

    by_id = {entry.id: entry for entry in host_entries}
    wines = []
    for wine in results.wines:
        entry = by_id[wine.entry_id]
        bottle = entry.bottle
        wines.append(
            WineResult(
                entry_id=entry.id,
                wine_name=entry.display_name,
                producer=bottle.producer if bottle else None,
                vintage=bottle.vintage if bottle else None,
                photo_url=entry.photo_url,
                host_score=entry.total_score,
                host_notes=entry.notes_short,
                average_score=wine.average,
                score_count=wine.count,
                guest_scores=[
                    GuestScoreLine(
                        guest_id=guest_entry.guest_id,
                        guest_name=guest_entry.guest_name,
                        total_score=guest_entry.total_score,
                        notes_short=guest_entry.notes_short,
                        tasting_notes=guest_entry.tasting_notes,
                    )
                    for guest_entry in guest_entries
                    if guest_entry.parent_entry_id == entry.id
                ],
            )
        )

    top = results.superlatives.top_wine
    most_generous = results.superlatives.most_generous
    harshest_critic = results.superlatives.harshest_critic
    return SocialResultsResponse(
        session_id=session.id,
        session_name=session.name,
        guests=[GuestResponse.model_validate(guest) for guest in tastings.guests(session)],
        wines=wines,
        guest_averages=[guest_average(score) for score in results.guests],
        superlatives=SuperlativesResponse(
            top_wine=TopWine(
                entry_id=top.entry_id,
                wine_name=by_id[top.entry_id].display_name,
                average_score=top.average,
                score_count=top.count,
            )
            if top
            else None,
            most_generous=guest_average(most_generous) if most_generous else None,
            harshest_critic=guest_average(harshest_critic) if harshest_critic else None,
        ),
    )


@router.get("", response_model=list[TastingResponse])
def get_tastings(
    current_user: Annotated[User, Depends(get_current_user)],
    tastings: Annotated[TastingService, Depends(get_tasting_service)],
):
    """Get the user's tasting sessions, most recent first."""
    return tastings.list_sessions(current_user.id)


@router.post("", response_model=TastingResponse, status_code=status.HTTP_201_CREATED)
def create_tasting(
    tasting_data: TastingCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    tastings: Annotated[TastingService, Depends(get_tasting_service)],
):
    """Create a tasting session."""
    return tastings.create_session(current_user.id, tasting_data.model_dump())


@router.get("/{session_id}", response_model=TastingDetailResponse)
def get_tasting(
    session_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    tastings: Annotated[TastingService, Depends(get_tasting_service)],
):
    """Get a session with its host entries."""
    session = tastings.get_session(session_id, current_user.id)
    response = TastingResponse.model_validate(session)
    return TastingDetailResponse(
        **response.model_dump(),
        entries=[entry_response(entry) for entry in tastings.host_entries(session)],
    )


@router.patch("/{session_id}", response_model=TastingResponse)
def update_tasting(
    session_id: int,
    tasting_data: TastingUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    tastings: Annotated[TastingService, Depends(get_tasting_service)],
):
    """Update a session."""
    session = tastings.get_session(session_id, current_user.id)
    changes = tasting_data.model_dump(exclude_unset=True)
    for field in ("name", "tasted_at"):
        if changes.get(field, "") is None:
            del changes[field]
    return tastings.update_session(session, changes)


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_tasting(
    session_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    tastings: Annotated[TastingService, Depends(get_tasting_service)],
):
    """Delete a session with its entries and guests."""
    session = tastings.get_session(session_id, current_user.id)
    tastings.delete_session(session)


@router.post(
    "/{session_id}/entries",
    response_model=TastingEntryResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_entry(
    session_id: int,
    entry_data: TastingEntryCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    tastings: Annotated[TastingService, Depends(get_tasting_service)],
):
    """Add a wine to the session."""
    session = tastings.get_session(session_id, current_user.id)
    entry = tastings.add_entry(session, entry_data.model_dump())
    return entry_response(entry)


@router.patch("/{session_id}/entries/{entry_id}", response_model=TastingEntryResponse)
def score_entry(
    session_id: int,
    entry_id: int,
    score_data: EntryScoreUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    tastings: Annotated[TastingService, Depends(get_tasting_service)],
):
    """Record the owner's score and notes for a wine."""
    session = tastings.get_session(session_id, current_user.id)
    entry, _ = tastings.score_entry(session, entry_id, score_data.model_dump(exclude_unset=True))
    return entry_response(entry)


@router.delete("/{session_id}/entries/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_entry(
    session_id: int,
    entry_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    tastings: Annotated[TastingService, Depends(get_tasting_service)],
):
    """Remove a wine and every guest score of it."""
    session = tastings.get_session(session_id, current_user.id)
    tastings.delete_entry(session, entry_id)


@router.post(
    "/{session_id}/entries/{entry_id}/save-to-cellar",
    response_model=BottleResponse,
    status_code=status.HTTP_201_CREATED,
)
def save_entry_to_cellar(
    session_id: int,
    entry_id: int,
    request: SaveToCellarRequest,
    current_user: Annotated[User, Depends(get_current_user)],
    tastings: Annotated[TastingService, Depends(get_tasting_service)],
):
    """Create a cellar bottle from an ad-hoc entry."""
    session = tastings.get_session(session_id, current_user.id)
    bottle, _ = tastings.save_entry_to_cellar(session, entry_id, request.model_dump())
    return bottle


@router.patch("/{session_id}/social-mode", response_model=TastingResponse)
def toggle_social_mode(
    session_id: int,
    toggle: SocialModeToggle,
    current_user: Annotated[User, Depends(get_current_user)],
    tastings: Annotated[TastingService, Depends(get_tasting_service)],
):
    """Open the session to guests, or stop accepting new ones."""
    session = tastings.get_session(session_id, current_user.id)
    return tastings.set_social_mode(session, toggle.enabled)


@router.post("/{session_id}/join-code", response_model=TastingResponse)
def reserve_join_code(
    session_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    tastings: Annotated[TastingService, Depends(get_tasting_service)],
):
    """Allocate the join code ahead of opening the session."""
    session = tastings.get_session(session_id, current_user.id)
    return tastings.reserve_join_code(session)


@router.get("/{session_id}/social-results", response_model=SocialResultsResponse)
def get_social_results(
    session_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    tastings: Annotated[TastingService, Depends(get_tasting_service)],
):
    """Get aggregated scores, guest averages and superlatives."""
    session = tastings.get_session(session_id, current_user.id)
    return build_social_results(tastings, session)
