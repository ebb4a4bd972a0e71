"""SQLAlchemy models."""

from src.models.bottle import Bottle
from src.models.drink_log import DrinkLog
from src.models.location import Location
from src.models.session_guest import SessionGuest
from src.models.tasting import TastingEntry, TastingSession
from src.models.user import User

__all__ = [
    "User",
    "Location",
    "Bottle",
    "DrinkLog",
    "TastingSession",
    "TastingEntry",
    "SessionGuest",
]
