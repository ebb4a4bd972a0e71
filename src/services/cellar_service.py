"""Cellar service: bottle ownership, lifecycle and consumption."""

import logging
from typing import Any

from sqlalchemy.orm import Session

from src.exceptions import NotFoundError, ValidationError
from src.models.bottle import Bottle
from src.models.drink_log import DrinkLog
from src.models.enums import BottleStatus
from src.models.location import Location

logger = logging.getLogger(__name__)


class CellarService:
    """Service for bottle and drink log operations."""

    def __init__(self, db: Session):
        self.db = db

    def get_location(self, location_id: int, user_id: int) -> Location:
        """Get a location owned by the user."""
        location = (
            self.db.query(Location)
            .filter(Location.id == location_id, Location.user_id == user_id)
            .first()
        )
        if not location:
            raise NotFoundError("Location not found")
        return location

    def get_bottle(self, bottle_id: int, user_id: int) -> Bottle:
        """Get a bottle owned by the user."""
        bottle = (
            self.db.query(Bottle).filter(Bottle.id == bottle_id, Bottle.user_id == user_id).first()
        )
        if not bottle:
            raise NotFoundError("Bottle not found")
        return bottle

    def create_bottle(self, user_id: int, data: dict[str, Any]) -> Bottle:
        """Add a bottle to the user's cellar."""
        if data.get("location_id") is not None:
            self.get_location(data["location_id"], user_id)

        bottle = Bottle(user_id=user_id, status=BottleStatus.IN_CELLAR.value, **data)
        self.db.add(bottle)
        self.db.commit()
        self.db.refresh(bottle)
        return bottle

    def update_bottle(self, bottle: Bottle, changes: dict[str, Any]) -> Bottle:
        """Apply a partial update.

        Dropping the quantity of a cellared bottle to zero marks it consumed.
        """
        if changes.get("location_id") is not None:
            self.get_location(changes["location_id"], bottle.user_id)

        for field, value in changes.items():
            setattr(bottle, field, value)

        if "quantity" in changes:
            self._consume_if_empty(bottle)

        self.db.commit()
        self.db.refresh(bottle)
        return bottle

    def change_status(self, bottle: Bottle, status: str) -> Bottle:
        """Explicitly move a bottle through its lifecycle."""
        current = BottleStatus(bottle.status)
        target = BottleStatus(status)
        if not current.can_transition_to(target):
            raise ValidationError(f"Cannot change status from {current.value} to {target.value}")

        bottle.status = target.value
        self.db.commit()
        self.db.refresh(bottle)
        return bottle

    def log_drink(self, bottle: Bottle, user_id: int, data: dict[str, Any]) -> DrinkLog:
        """Append a drink log and take the opened bottles out of stock."""
        bottles_opened = data.pop("bottles_opened", 1)
        if data.get("drank_at") is None:
            data.pop("drank_at", None)

        drink_log = DrinkLog(user_id=user_id, bottle_id=bottle.id, **data)
        self.db.add(drink_log)

        if bottles_opened:
            bottle.quantity = max(bottle.quantity - bottles_opened, 0)
            self._consume_if_empty(bottle)

        self.db.commit()
        self.db.refresh(drink_log)
        self.db.refresh(bottle)
        return drink_log

    def list_drinks(self, bottle: Bottle) -> list[DrinkLog]:
        """Drink logs for a bottle, most recent first."""
        return (
            self.db.query(DrinkLog)
            .filter(DrinkLog.bottle_id == bottle.id)
            .order_by(DrinkLog.drank_at.desc(), DrinkLog.id.desc())
            .all()
        )

    def _consume_if_empty(self, bottle: Bottle) -> None:
        if bottle.quantity == 0 and bottle.status == BottleStatus.IN_CELLAR.value:
            bottle.status = BottleStatus.CONSUMED.value
            logger.info(f"Bottle {bottle.id} is empty, marked consumed")
