"""Bottle model."""

from sqlalchemy import JSON, Column, Date, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from src.database import Base
from src.models.enums import BeverageType, BottleStatus
from src.models.mixins import TimestampMixin


class Bottle(Base, TimestampMixin):
    """A bottle (or several identical bottles) in a user's cellar."""

    __tablename__ = "bottles"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    photo_url = Column(Text, nullable=True)
    name = Column(String(255), nullable=False)
    producer = Column(String(255), nullable=True)
    vintage = Column(Integer, nullable=True)
    grapes = Column(JSON, nullable=True)  # ["Merlot", "Cabernet Sauvignon"]
    country = Column(String(255), nullable=True)
    region = Column(String(255), nullable=True)
    beverage_type = Column(String(10), nullable=False, default=BeverageType.WINE.value)
    status = Column(String(20), nullable=False, default=BottleStatus.IN_CELLAR.value, index=True)

    # Storage
    location_id = Column(Integer, ForeignKey("locations.id"), nullable=True, index=True)
    sub_location_text = Column(String(255), nullable=True)
    quantity = Column(Integer, nullable=False, default=1)

    # Purchase info
    purchase_date = Column(Date, nullable=True)
    purchase_source_type = Column(String(20), nullable=True)  # RESTAURANT | SHOP | OTHER
    purchase_source_name = Column(String(255), nullable=True)
    price_amount = Column(Numeric(10, 2), nullable=True)
    price_currency = Column(String(3), nullable=True)

    # Notes
    notes_short = Column(String(500), nullable=True)
    notes_long = Column(Text, nullable=True)
    tags = Column(JSON, nullable=True)

    # Relationships
    user = relationship("User", backref="bottles")
    location = relationship("Location", back_populates="bottles")
    drink_logs = relationship("DrinkLog", back_populates="bottle", cascade="all, delete-orphan")
