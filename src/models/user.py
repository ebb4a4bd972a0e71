"""User model."""

from sqlalchemy import Column, Integer, String

from src.database import Base
from src.models.enums import BeverageType, ScoringMode
from src.models.mixins import TimestampMixin


class User(Base, TimestampMixin):
    """User model for authentication and ownership."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False)
    default_currency = Column(String(3), nullable=False, default="GBP")
    beverage_type = Column(String(10), nullable=False, default=BeverageType.WINE.value)
    scoring_mode = Column(String(10), nullable=False, default=ScoringMode.CASUAL.value)
    preferred_language = Column(String(5), nullable=True)
