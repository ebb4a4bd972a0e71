"""Storage location model."""

from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from src.database import Base
from src.models.mixins import TimestampMixin


class Location(Base, TimestampMixin):
    """A place where bottles are stored (rack, fridge, cellar...)."""

    __tablename__ = "locations"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)

    # Relationships
    user = relationship("User", backref="locations")
    bottles = relationship("Bottle", back_populates="location")
