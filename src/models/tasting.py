"""Tasting session and tasting entry models."""

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import relationship

from src.database import Base
from src.models.mixins import TimestampMixin


class TastingSession(Base, TimestampMixin):
    """A tasting occasion owned by one user, optionally open to guests."""

    __tablename__ = "tasting_sessions"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    tasted_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    venue = Column(String(255), nullable=True)
    participants = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    summary = Column(Text, nullable=True)

    # Social mode
    is_social_mode = Column(Boolean, nullable=False, default=False)
    session_code = Column(String(8), unique=True, nullable=True, index=True)
    invite_expires_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    user = relationship("User", backref="tasting_sessions")
    entries = relationship(
        "TastingEntry",
        back_populates="tasting_session",
        cascade="all, delete-orphan",
        order_by="TastingEntry.id",
    )
    guests = relationship(
        "SessionGuest",
        back_populates="tasting_session",
        cascade="all, delete-orphan",
        order_by="SessionGuest.joined_at",
    )

    @property
    def host_entries(self) -> list["TastingEntry"]:
        """Template entries registered by the owner."""
        return [entry for entry in self.entries if entry.is_host_entry]


class TastingEntry(Base, TimestampMixin):
    """A wine tasted in a session.

    Host (template) entries have no guest_id and no parent_entry_id. Guest
    score entries point at the host entry they score and carry a copy of
    its bottle/ad-hoc identity.
    """

    __tablename__ = "tasting_entries"
    __table_args__ = (
        UniqueConstraint(
            "tasting_session_id",
            "guest_id",
            "parent_entry_id",
            name="uq_tasting_entry_guest_parent",
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    tasting_session_id = Column(
        Integer, ForeignKey("tasting_sessions.id"), nullable=False, index=True
    )
    bottle_id = Column(Integer, ForeignKey("bottles.id"), nullable=True)
    ad_hoc_name = Column(String(255), nullable=True)
    ad_hoc_photo_url = Column(Text, nullable=True)
    save_to_cellar = Column(Boolean, nullable=False, default=False)

    # Scores (sub-scores are 0-20, total is 0-100)
    appearance_score = Column(Integer, nullable=True)
    nose_score = Column(Integer, nullable=True)
    palate_score = Column(Integer, nullable=True)
    finish_score = Column(Integer, nullable=True)
    balance_score = Column(Integer, nullable=True)
    total_score = Column(Integer, nullable=True, index=True)
    tasting_notes = Column(JSON, nullable=True)  # {"acidity": "high", "casualVibes": "..."}

    entry_photo_url = Column(Text, nullable=True)
    notes_short = Column(String(500), nullable=True)
    notes_long = Column(Text, nullable=True)
    tags = Column(JSON, nullable=True)

    # Guest scoring
    guest_id = Column(String(36), ForeignKey("session_guests.id"), nullable=True, index=True)
    guest_name = Column(String(100), nullable=True)
    parent_entry_id = Column(Integer, ForeignKey("tasting_entries.id"), nullable=True, index=True)

    # Relationships
    tasting_session = relationship("TastingSession", back_populates="entries")
    bottle = relationship("Bottle")
    guest = relationship("SessionGuest", back_populates="entries")

    @property
    def is_host_entry(self) -> bool:
        """Check if this is a template entry rather than a guest's score."""
        return self.guest_id is None and self.parent_entry_id is None

    @property
    def display_name(self) -> str:
        """Name to show for the wine."""
        if self.ad_hoc_name:
            return self.ad_hoc_name
        if self.bottle is not None:
            return self.bottle.name
        return "Unknown"

    @property
    def photo_url(self) -> str | None:
        """Best available photo for the wine."""
        if self.ad_hoc_photo_url:
            return self.ad_hoc_photo_url
        if self.bottle is not None:
            return self.bottle.photo_url
        return None
