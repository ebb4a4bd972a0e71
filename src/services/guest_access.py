"""Guest access: joining social sessions and checking guest tokens."""

import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from src.exceptions import ExpiredError, ForbiddenError, NotFoundError, ValidationError
from src.models.mixins import as_utc, utcnow
from src.models.session_guest import SessionGuest, new_guest_id
from src.models.tasting import TastingSession
from src.services.auth import GuestClaims, create_guest_token, hash_guest_token, verify_guest_token
from src.services.tasting_service import normalize_join_code

logger = logging.getLogger(__name__)


@dataclass
class GuestJoin:
    """Result of a successful join. ``token`` is never stored in clear."""

    token: str
    guest: SessionGuest
    session: TastingSession


class GuestAccessController:
    """Admits guests to social sessions and authorizes their requests."""

    def __init__(self, db: Session):
        self.db = db

    def get_session_by_code(self, code: str) -> TastingSession:
        session = (
            self.db.query(TastingSession)
            .filter(TastingSession.session_code == normalize_join_code(code))
            .first()
        )
        if not session:
            raise NotFoundError("Session not found")
        return session

    def join(self, code: str, guest_name: str) -> GuestJoin:
        """Register a guest with a join code and issue their token.

        Raises:
            ValidationError: the guest name is blank.
            NotFoundError: no session has this code.
            ForbiddenError: the session is not open to guests.
            ExpiredError: the invite window has closed.
        """
        name = guest_name.strip()
        if not name:
            raise ValidationError("Guest name is required")

        session = self.get_session_by_code(code)
        if not session.is_social_mode:
            logger.warning(f"Rejected join for session {session.id}: social mode is off")
            raise ForbiddenError("Session is not accepting guests")

        expires_at = as_utc(session.invite_expires_at)
        if expires_at is not None and utcnow() > expires_at:
            logger.warning(f"Rejected join for session {session.id}: invite expired")
            raise ExpiredError("Session invite has expired")

        guest_id = new_guest_id()
        token = create_guest_token(guest_id, session.session_code, name)

        guest = SessionGuest(
            id=guest_id,
            tasting_session_id=session.id,
            guest_name=name,
            guest_token_hash=hash_guest_token(token),
        )
        self.db.add(guest)
        self.db.commit()
        self.db.refresh(guest)

        logger.info(f"Guest {guest_id} ({name}) joined session {session.id}")
        return GuestJoin(token=token, guest=guest, session=session)

    def authorize(self, token: str, code: str) -> tuple[GuestClaims, TastingSession]:
        """Check a guest token against the session addressed by ``code``.

        Raises:
            InvalidTokenError: the token is not a valid guest token.
            NotFoundError: no session has this code.
            ForbiddenError: the token belongs to another session.
        """
        claims = verify_guest_token(token)
        if normalize_join_code(claims.session_code) != normalize_join_code(code):
            raise ForbiddenError("Unauthorized for this session")

        # Stored token hashes are not consulted here
        return claims, self.get_session_by_code(code)
