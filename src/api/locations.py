"""Storage location API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from src.api.dependencies import get_cellar_service, get_current_user
from src.database import get_db
from src.models.location import Location
from src.models.user import User
from src.schemas.location import LocationCreate, LocationResponse
from src.services.cellar_service import CellarService

router = APIRouter(prefix="/api/v1/locations", tags=["locations"])


@router.get("", response_model=list[LocationResponse])
def get_locations(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Get all of the user's storage locations."""
    return (
        db.query(Location)
        .filter(Location.user_id == current_user.id)
        .order_by(Location.created_at.desc(), Location.id.desc())
        .all()
    )


@router.post("", response_model=LocationResponse, status_code=status.HTTP_201_CREATED)
def create_location(
    location_data: LocationCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Create a storage location."""
    location = Location(user_id=current_user.id, name=location_data.name.strip())
    db.add(location)
    db.commit()
    db.refresh(location)
    return location


@router.get("/{location_id}", response_model=LocationResponse)
def get_location(
    location_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    cellar: Annotated[CellarService, Depends(get_cellar_service)],
):
    """Get a specific location."""
    return cellar.get_location(location_id, current_user.id)


@router.patch("/{location_id}", response_model=LocationResponse)
def rename_location(
    location_id: int,
    location_data: LocationCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    cellar: Annotated[CellarService, Depends(get_cellar_service)],
    db: Annotated[Session, Depends(get_db)],
):
    """Rename a location."""
    location = cellar.get_location(location_id, current_user.id)
    location.name = location_data.name.strip()
    db.commit()
    db.refresh(location)
    return location
