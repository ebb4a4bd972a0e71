"""Bottle and drink log API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from src.api.dependencies import get_cellar_service, get_current_user
from src.database import get_db
from src.models.bottle import Bottle
from src.models.user import User
from src.schemas.bottle import (
    BottleCreate,
    BottleResponse,
    BottleStatusUpdate,
    BottleStatusValue,
    BottleUpdate,
    DrinkLogCreate,
    DrinkLogCreatedResponse,
    DrinkLogResponse,
)
from src.services.cellar_service import CellarService

router = APIRouter(prefix="/api/v1/bottles", tags=["bottles"])

# Columns that cannot be cleared with an explicit null
REQUIRED_FIELDS = {"name", "beverage_type", "quantity"}


@router.get("", response_model=list[BottleResponse])
def get_bottles(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    location_id: int | None = None,
    q: Annotated[str | None, Query(max_length=255)] = None,
    in_stock: bool | None = None,
    bottle_status: Annotated[BottleStatusValue | None, Query(alias="status")] = None,
):
    """Get the user's bottles, newest first."""
    query = db.query(Bottle).filter(Bottle.user_id == current_user.id)
    if location_id is not None:
        query = query.filter(Bottle.location_id == location_id)
    if q:
        query = query.filter(Bottle.name.ilike(f"%{q}%"))
    if in_stock is True:
        query = query.filter(Bottle.quantity > 0)
    elif in_stock is False:
        query = query.filter(Bottle.quantity == 0)
    if bottle_status is not None:
        query = query.filter(Bottle.status == bottle_status)
    return query.order_by(Bottle.created_at.desc(), Bottle.id.desc()).all()


@router.post("", response_model=BottleResponse, status_code=status.HTTP_201_CREATED)
def create_bottle(
    bottle_data: BottleCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    cellar: Annotated[CellarService, Depends(get_cellar_service)],
):
    """Add a bottle to the cellar."""
    data = bottle_data.model_dump()
    if data.get("price_currency"):
        data["price_currency"] = data["price_currency"].upper()
    return cellar.create_bottle(current_user.id, data)


@router.get("/{bottle_id}", response_model=BottleResponse)
def get_bottle(
    bottle_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    cellar: Annotated[CellarService, Depends(get_cellar_service)],
):
    """Get a specific bottle."""
    return cellar.get_bottle(bottle_id, current_user.id)


@router.patch("/{bottle_id}", response_model=BottleResponse)
def update_bottle(
    bottle_id: int,
    bottle_data: BottleUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    cellar: Annotated[CellarService, Depends(get_cellar_service)],
):
    """Update a bottle."""
    bottle = cellar.get_bottle(bottle_id, current_user.id)
    changes = {
        field: value
        for field, value in bottle_data.model_dump(exclude_unset=True).items()
        if value is not None or field not in REQUIRED_FIELDS
    }
    if changes.get("price_currency"):
        changes["price_currency"] = changes["price_currency"].upper()
    return cellar.update_bottle(bottle, changes)


@router.patch("/{bottle_id}/status", response_model=BottleResponse)
def update_bottle_status(
    bottle_id: int,
    status_data: BottleStatusUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    cellar: Annotated[CellarService, Depends(get_cellar_service)],
):
    """Move a bottle to another lifecycle status."""
    bottle = cellar.get_bottle(bottle_id, current_user.id)
    return cellar.change_status(bottle, status_data.status)


@router.get("/{bottle_id}/drinks", response_model=list[DrinkLogResponse])
def get_drinks(
    bottle_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    cellar: Annotated[CellarService, Depends(get_cellar_service)],
):
    """Get drink logs for a bottle, most recent first."""
    bottle = cellar.get_bottle(bottle_id, current_user.id)
    return cellar.list_drinks(bottle)


@router.post(
    "/{bottle_id}/drinks",
    response_model=DrinkLogCreatedResponse,
    status_code=status.HTTP_201_CREATED,
)
def log_drink(
    bottle_id: int,
    drink_data: DrinkLogCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    cellar: Annotated[CellarService, Depends(get_cellar_service)],
):
    """Log drinking from a bottle."""
    bottle = cellar.get_bottle(bottle_id, current_user.id)
    drink_log = cellar.log_drink(bottle, current_user.id, drink_data.model_dump())
    return DrinkLogCreatedResponse(
        drink_log=DrinkLogResponse.model_validate(drink_log),
        bottle=BottleResponse.model_validate(bottle),
    )
