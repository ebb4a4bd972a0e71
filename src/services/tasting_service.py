"""Tasting service: session lifecycle, entries, social mode and scoring."""

import logging
import secrets
from datetime import timedelta
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from src.config import get_settings
from src.exceptions import ConflictError, ForbiddenError, NotFoundError, ValidationError
from src.models.bottle import Bottle
from src.models.mixins import utcnow
from src.models.session_guest import SessionGuest
from src.models.tasting import TastingEntry, TastingSession
from src.services.auth import GuestClaims
from src.services.cellar_service import CellarService
from src.services.scoring import ScoreRecord, SessionResults, aggregate
from src.services.tasting_notes import unrecognized_note_keys

logger = logging.getLogger(__name__)

# No I, O, 0 or 1 so codes can be read aloud and typed without confusion
JOIN_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
JOIN_CODE_LENGTH = 6
JOIN_CODE_ATTEMPTS = 5

SUB_SCORE_FIELDS = (
    "appearance_score",
    "nose_score",
    "palate_score",
    "finish_score",
    "balance_score",
)
GUEST_SCORE_FIELDS = frozenset(
    {"total_score", "tasting_notes", "notes_short", "notes_long", "tags"}
)
HOST_SCORE_FIELDS = GUEST_SCORE_FIELDS | set(SUB_SCORE_FIELDS) | {"entry_photo_url"}


def generate_join_code() -> str:
    """Mint a random join code."""
    return "".join(secrets.choice(JOIN_CODE_ALPHABET) for _ in range(JOIN_CODE_LENGTH))


def normalize_join_code(code: str) -> str:
    """Join codes are case-insensitive and stored uppercase."""
    return code.strip().upper()


class TastingService:
    """Service for tasting session operations."""

    def __init__(self, db: Session, cellar: CellarService | None = None):
        self.db = db
        self.settings = get_settings()
        self.cellar = cellar or CellarService(db)

    # --- Sessions ---

    def list_sessions(self, user_id: int) -> list[TastingSession]:
        return (
            self.db.query(TastingSession)
            .filter(TastingSession.user_id == user_id)
            .order_by(TastingSession.tasted_at.desc(), TastingSession.id.desc())
            .all()
        )

    def get_session(self, session_id: int, user_id: int) -> TastingSession:
        """Get a session owned by the user."""
        session = (
            self.db.query(TastingSession)
            .filter(TastingSession.id == session_id, TastingSession.user_id == user_id)
            .first()
        )
        if not session:
            raise NotFoundError("Tasting session not found")
        return session

    def create_session(self, user_id: int, data: dict[str, Any]) -> TastingSession:
        if data.get("tasted_at") is None:
            data.pop("tasted_at", None)
        session = TastingSession(user_id=user_id, **data)
        self.db.add(session)
        self.db.commit()
        self.db.refresh(session)
        return session

    def update_session(self, session: TastingSession, changes: dict[str, Any]) -> TastingSession:
        for field, value in changes.items():
            setattr(session, field, value)
        self.db.commit()
        self.db.refresh(session)
        return session

    def delete_session(self, session: TastingSession) -> None:
        # Guest entries reference their parents, remove them first
        self.db.query(TastingEntry).filter(
            TastingEntry.tasting_session_id == session.id,
            TastingEntry.parent_entry_id.isnot(None),
        ).delete(synchronize_session=False)
        self.db.expire(session, ["entries"])
        self.db.delete(session)
        self.db.commit()

    # --- Social mode ---

    def set_social_mode(self, session: TastingSession, enabled: bool) -> TastingSession:
        if enabled:
            return self.enable_social(session)
        return self.disable_social(session)

    def enable_social(self, session: TastingSession) -> TastingSession:
        """Open the session to guests.

        The join code is minted once and reused afterwards; every call
        pushes the invite expiry to ``invite_ttl_hours`` from now.
        """
        expires_at = utcnow() + timedelta(hours=self.settings.invite_ttl_hours)
        self._commit_join_code(session, is_social_mode=True, invite_expires_at=expires_at)
        logger.info(
            f"Social mode enabled for session {session.id} "
            f"(code {session.session_code}, expires {expires_at.isoformat()})"
        )
        return session

    def disable_social(self, session: TastingSession) -> TastingSession:
        """Stop accepting new guests. The code, expiry and guests are kept."""
        session.is_social_mode = False
        self.db.commit()
        self.db.refresh(session)
        logger.info(f"Social mode disabled for session {session.id}")
        return session

    def reserve_join_code(self, session: TastingSession) -> TastingSession:
        """Allocate the join code without opening the session to guests."""
        if not session.session_code:
            self._commit_join_code(session)
        return session

    def _commit_join_code(self, session: TastingSession, **changes: Any) -> None:
        for attempt in range(1, JOIN_CODE_ATTEMPTS + 1):
            if not session.session_code:
                session.session_code = generate_join_code()
            for field, value in changes.items():
                setattr(session, field, value)
            try:
                self.db.commit()
            except IntegrityError:
                self.db.rollback()
                logger.warning(
                    f"Join code collision for session {session.id} (attempt {attempt})"
                )
                continue
            self.db.refresh(session)
            return
        raise ConflictError("Could not allocate a unique join code, please try again")

    # --- Entries ---

    def host_entries(self, session: TastingSession) -> list[TastingEntry]:
        return (
            self.db.query(TastingEntry)
            .filter(
                TastingEntry.tasting_session_id == session.id,
                TastingEntry.guest_id.is_(None),
                TastingEntry.parent_entry_id.is_(None),
            )
            .order_by(TastingEntry.id)
            .all()
        )

    def guest_entries(
        self, session: TastingSession, guest_id: str | None = None
    ) -> list[TastingEntry]:
        """Guest score entries of the session, optionally for one guest."""
        query = self.db.query(TastingEntry).filter(
            TastingEntry.tasting_session_id == session.id,
            TastingEntry.guest_id.isnot(None),
        )
        if guest_id is not None:
            query = query.filter(TastingEntry.guest_id == guest_id)
        return query.order_by(TastingEntry.id).all()

    def guests(self, session: TastingSession) -> list[SessionGuest]:
        return (
            self.db.query(SessionGuest)
            .filter(SessionGuest.tasting_session_id == session.id)
            .order_by(SessionGuest.joined_at, SessionGuest.id)
            .all()
        )

    def get_host_entry(self, session: TastingSession, entry_id: int) -> TastingEntry:
        entry = (
            self.db.query(TastingEntry)
            .filter(
                TastingEntry.id == entry_id,
                TastingEntry.tasting_session_id == session.id,
                TastingEntry.guest_id.is_(None),
                TastingEntry.parent_entry_id.is_(None),
            )
            .first()
        )
        if not entry:
            raise NotFoundError("Entry not found")
        return entry

    def add_entry(self, session: TastingSession, data: dict[str, Any]) -> TastingEntry:
        """Register a wine to be tasted in the session.

        Needs either a bottle from the owner's cellar or an ad-hoc name.
        """
        bottle_id = data.get("bottle_id")
        ad_hoc_name = (data.get("ad_hoc_name") or "").strip() or None
        if bottle_id is None and ad_hoc_name is None:
            raise ValidationError("Either bottle_id or ad_hoc_name must be provided")
        if bottle_id is not None:
            self.cellar.get_bottle(bottle_id, session.user_id)

        entry = TastingEntry(
            tasting_session_id=session.id,
            bottle_id=bottle_id,
            ad_hoc_name=ad_hoc_name,
            ad_hoc_photo_url=data.get("ad_hoc_photo_url"),
            save_to_cellar=data.get("save_to_cellar", False),
        )
        self.db.add(entry)
        self.db.commit()
        self.db.refresh(entry)
        return entry

    def delete_entry(self, session: TastingSession, entry_id: int) -> None:
        """Remove a host entry together with every guest score of it."""
        entry = self.get_host_entry(session, entry_id)
        self.db.query(TastingEntry).filter(TastingEntry.parent_entry_id == entry.id).delete(
            synchronize_session=False
        )
        self.db.delete(entry)
        self.db.commit()

    def save_entry_to_cellar(
        self, session: TastingSession, entry_id: int, data: dict[str, Any]
    ) -> tuple[Bottle, TastingEntry]:
        """Create a cellar bottle from an ad-hoc entry and link the entry to it."""
        entry = self.get_host_entry(session, entry_id)
        if not entry.ad_hoc_name:
            raise ValidationError("Entry must have an ad hoc name to save to cellar")
        if entry.bottle_id is not None:
            raise ConflictError("Entry is already linked to a cellar bottle")

        bottle = self.cellar.create_bottle(
            session.user_id,
            {
                "name": entry.ad_hoc_name,
                "photo_url": entry.ad_hoc_photo_url,
                "location_id": data.get("location_id"),
                "sub_location_text": data.get("sub_location_text"),
                "quantity": data.get("quantity", 1),
            },
        )
        entry.bottle_id = bottle.id
        entry.save_to_cellar = True
        self.db.commit()
        self.db.refresh(entry)
        return bottle, entry

    # --- Scoring ---

    def score_entry(
        self,
        session: TastingSession,
        entry_id: int,
        payload: dict[str, Any],
        guest: GuestClaims | None = None,
    ) -> tuple[TastingEntry, bool]:
        """Score a host entry as the owner (``guest=None``) or as a guest.

        Returns the stored entry and whether a new row was created. Owner
        scores edit the host entry in place; guest scores are upserted,
        one row per (session, guest, host entry).
        """
        if guest is None:
            return self._score_host_entry(session, entry_id, payload), False
        return self._upsert_guest_score(session, entry_id, payload, guest)

    def _score_host_entry(
        self, session: TastingSession, entry_id: int, payload: dict[str, Any]
    ) -> TastingEntry:
        entry = self.get_host_entry(session, entry_id)
        changes = self._filter_payload(payload, HOST_SCORE_FIELDS)
        self._apply_score(entry, changes)

        if "total_score" not in changes and any(f in changes for f in SUB_SCORE_FIELDS):
            sub_scores = [getattr(entry, f) for f in SUB_SCORE_FIELDS]
            if all(score is not None for score in sub_scores):
                entry.total_score = sum(sub_scores)

        self.db.commit()
        self.db.refresh(entry)
        return entry

    def _upsert_guest_score(
        self,
        session: TastingSession,
        entry_id: int,
        payload: dict[str, Any],
        guest: GuestClaims,
    ) -> tuple[TastingEntry, bool]:
        if normalize_join_code(guest.session_code) != session.session_code:
            raise ForbiddenError("Unauthorized for this session")
        if self.settings.guest_scoring_requires_social_mode and not session.is_social_mode:
            raise ForbiddenError("This session is not accepting scores")

        parent = self.get_host_entry(session, entry_id)
        changes = self._filter_payload(payload, GUEST_SCORE_FIELDS)

        existing = self._find_guest_entry(session.id, guest.guest_id, parent.id)
        if existing is not None:
            self._apply_score(existing, changes)
            self.db.commit()
            self.db.refresh(existing)
            return existing, False

        entry = TastingEntry(
            tasting_session_id=session.id,
            bottle_id=parent.bottle_id,
            ad_hoc_name=parent.ad_hoc_name,
            ad_hoc_photo_url=parent.ad_hoc_photo_url,
            guest_id=guest.guest_id,
            guest_name=guest.guest_name,
            parent_entry_id=parent.id,
        )
        self._apply_score(entry, changes)
        self.db.add(entry)
        try:
            self.db.commit()
        except IntegrityError:
            # A concurrent submission inserted the row first; update it instead
            self.db.rollback()
            logger.warning(
                f"Concurrent score insert for guest {guest.guest_id} on entry {parent.id}"
            )
            existing = self._find_guest_entry(session.id, guest.guest_id, parent.id)
            if existing is None:
                raise
            self._apply_score(existing, changes)
            self.db.commit()
            self.db.refresh(existing)
            return existing, False

        self.db.refresh(entry)
        logger.info(f"Guest {guest.guest_id} scored entry {parent.id} in session {session.id}")
        return entry, True

    def _find_guest_entry(
        self, session_id: int, guest_id: str, parent_entry_id: int
    ) -> TastingEntry | None:
        return (
            self.db.query(TastingEntry)
            .filter(
                TastingEntry.tasting_session_id == session_id,
                TastingEntry.guest_id == guest_id,
                TastingEntry.parent_entry_id == parent_entry_id,
            )
            .first()
        )

    @staticmethod
    def _filter_payload(payload: dict[str, Any], allowed: frozenset[str] | set[str]) -> dict:
        return {field: value for field, value in payload.items() if field in allowed}

    def _apply_score(self, entry: TastingEntry, changes: dict[str, Any]) -> None:
        unknown = unrecognized_note_keys(changes.get("tasting_notes"))
        if unknown:
            logger.debug(f"Storing unrecognised tasting note keys: {unknown}")
        for field, value in changes.items():
            setattr(entry, field, value)

    # --- Results ---

    def results(
        self,
        session: TastingSession,
        host_entries: list[TastingEntry] | None = None,
        guest_entries: list[TastingEntry] | None = None,
    ) -> SessionResults:
        """Aggregate host and guest scores for the session.

        Entries already loaded by the caller can be passed in to avoid
        querying them twice.
        """
        if host_entries is None:
            host_entries = self.host_entries(session)
        if guest_entries is None:
            guest_entries = self.guest_entries(session)
        return aggregate(
            [self.score_record(entry) for entry in host_entries],
            [self.score_record(entry) for entry in guest_entries],
        )

    @staticmethod
    def score_record(entry: TastingEntry) -> ScoreRecord:
        return ScoreRecord(
            entry_id=entry.id,
            total_score=entry.total_score,
            parent_entry_id=entry.parent_entry_id,
            guest_id=entry.guest_id,
            guest_name=entry.guest_name,
        )
