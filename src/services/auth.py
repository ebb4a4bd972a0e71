"""Credential and token service.

Owner tokens and guest tokens are both HS256 JWTs signed with the same
secret, but they carry a distinct ``kind`` claim and are checked by
separate verifiers, so a guest token is never accepted where an owner
token is required (and vice versa).
"""

import hashlib
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from src.config import get_settings
from src.exceptions import InvalidTokenError
from src.models.user import User

settings = get_settings()

OWNER_TOKEN_KIND = "owner"
GUEST_TOKEN_KIND = "guest"

# Password hashing context
pwd_context = CryptContext(
    schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.bcrypt_rounds
)


@dataclass(frozen=True)
class OwnerClaims:
    """Verified claims of an owner session token."""

    user_id: int
    email: str


@dataclass(frozen=True)
class GuestClaims:
    """Verified claims of a guest token scoped to one session code."""

    guest_id: str
    session_code: str
    guest_name: str


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)


def _encode(claims: dict, kind: str, expires_in: timedelta) -> str:
    now = datetime.now(UTC)
    to_encode = {**claims, "kind": kind, "iat": now, "exp": now + expires_in}
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def _decode(token: str, kind: str) -> dict:
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError as e:
        raise InvalidTokenError("Invalid authentication credentials") from e
    if payload.get("kind") != kind:
        raise InvalidTokenError("Invalid authentication credentials")
    return payload


def create_access_token(user_id: int, email: str) -> str:
    """Create an owner session token (expires after jwt_expiration_minutes)."""
    return _encode(
        {"sub": str(user_id), "email": email},
        OWNER_TOKEN_KIND,
        timedelta(minutes=settings.jwt_expiration_minutes),
    )


def verify_access_token(token: str) -> OwnerClaims:
    """Verify an owner session token.

    Raises:
        InvalidTokenError: bad signature, expired, or not an owner token.
    """
    payload = _decode(token, OWNER_TOKEN_KIND)
    try:
        return OwnerClaims(user_id=int(payload["sub"]), email=payload["email"])
    except (KeyError, TypeError, ValueError) as e:
        raise InvalidTokenError("Invalid authentication credentials") from e


def create_guest_token(guest_id: str, session_code: str, guest_name: str) -> str:
    """Create a guest token scoped to a single session code."""
    return _encode(
        {"guestId": guest_id, "sessionCode": session_code, "guestName": guest_name},
        GUEST_TOKEN_KIND,
        timedelta(minutes=settings.guest_token_expiration_minutes),
    )


def verify_guest_token(token: str) -> GuestClaims:
    """Verify a guest token.

    Raises:
        InvalidTokenError: bad signature, expired, or not a guest token.
    """
    payload = _decode(token, GUEST_TOKEN_KIND)
    try:
        return GuestClaims(
            guest_id=payload["guestId"],
            session_code=payload["sessionCode"],
            guest_name=payload["guestName"],
        )
    except KeyError as e:
        raise InvalidTokenError("Invalid guest token") from e


def hash_guest_token(token: str) -> str:
    """Deterministic digest of a guest token for storage."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def authenticate_user(db: Session, email: str, password: str) -> User | None:
    """Authenticate a user by email and password."""
    user = get_user_by_email(db, email)
    if not user:
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user


def get_user_by_email(db: Session, email: str) -> User | None:
    """Get a user by email."""
    return db.query(User).filter(User.email == email.lower()).first()


def create_user(
    db: Session,
    email: str,
    password: str,
    name: str,
    default_currency: str = "GBP",
    beverage_type: str = "wine",
) -> User:
    """Create a new user."""
    user = User(
        email=email.lower(),
        password_hash=get_password_hash(password),
        name=name,
        default_currency=default_currency.upper(),
        beverage_type=beverage_type,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user
