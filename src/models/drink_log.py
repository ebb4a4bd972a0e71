"""Drink log model."""

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import relationship

from src.database import Base


class DrinkLog(Base):
    """An occasion on which a bottle was drunk. Append-only."""

    __tablename__ = "drink_logs"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    bottle_id = Column(Integer, ForeignKey("bottles.id"), nullable=False, index=True)
    drank_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    context = Column(String(255), nullable=True)
    venue = Column(String(255), nullable=True)
    rating = Column(Integer, nullable=True)  # 0-100
    tasting_notes = Column(JSON, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # Relationships
    bottle = relationship("Bottle", back_populates="drink_logs")
