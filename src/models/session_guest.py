"""Session guest model."""

import uuid

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, func
from sqlalchemy.orm import relationship

from src.database import Base


def new_guest_id() -> str:
    """Generate a fresh guest identifier."""
    return str(uuid.uuid4())


class SessionGuest(Base):
    """An unauthenticated participant of one tasting session.

    Only a digest of the issued guest token is stored.
    """

    __tablename__ = "session_guests"

    id = Column(String(36), primary_key=True, default=new_guest_id)
    tasting_session_id = Column(
        Integer, ForeignKey("tasting_sessions.id"), nullable=False, index=True
    )
    guest_name = Column(String(100), nullable=False)
    guest_token_hash = Column(String(64), nullable=False)
    joined_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)

    # Relationships
    tasting_session = relationship("TastingSession", back_populates="guests")
    entries = relationship("TastingEntry", back_populates="guest")
