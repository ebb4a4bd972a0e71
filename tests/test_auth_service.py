"""Tests for credential and token handling."""

from datetime import UTC, datetime, timedelta

import pytest
from jose import jwt

from src.config import get_settings
from src.exceptions import InvalidTokenError, UnauthorizedError
from src.services.auth import (
    authenticate_user,
    create_access_token,
    create_guest_token,
    create_user,
    get_password_hash,
    hash_guest_token,
    verify_access_token,
    verify_guest_token,
    verify_password,
)


class TestPasswords:
    def test_hash_and_verify(self):
        hashed = get_password_hash("correct horse")
        assert hashed != "correct horse"
        assert verify_password("correct horse", hashed)
        assert not verify_password("wrong horse", hashed)

    def test_authenticate_user(self, db):
        create_user(db, "Someone@Example.com", "password123", "Someone")
        assert authenticate_user(db, "someone@example.com", "password123") is not None
        assert authenticate_user(db, "SOMEONE@example.com", "password123") is not None
        assert authenticate_user(db, "someone@example.com", "nope") is None
        assert authenticate_user(db, "nobody@example.com", "password123") is None


class TestOwnerTokens:
    def test_round_trip(self):
        claims = verify_access_token(create_access_token(42, "owner@example.com"))
        assert claims.user_id == 42
        assert claims.email == "owner@example.com"

    def test_guest_token_rejected(self):
        token = create_guest_token("guest-1", "ABC234", "Alice")
        with pytest.raises(InvalidTokenError):
            verify_access_token(token)

    def test_tampered_token_rejected(self):
        token = create_access_token(1, "owner@example.com")
        with pytest.raises(InvalidTokenError):
            verify_access_token(token[:-2] + ("AA" if token[-2:] != "AA" else "BB"))

    def test_expired_token_rejected(self):
        settings = get_settings()
        past = datetime.now(UTC) - timedelta(hours=1)
        token = jwt.encode(
            {"sub": "1", "email": "a@b.c", "kind": "owner", "exp": past},
            settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
        )
        with pytest.raises(UnauthorizedError):
            verify_access_token(token)


class TestGuestTokens:
    def test_round_trip(self):
        claims = verify_guest_token(create_guest_token("guest-1", "ABC234", "Alice"))
        assert claims.guest_id == "guest-1"
        assert claims.session_code == "ABC234"
        assert claims.guest_name == "Alice"

    def test_owner_token_rejected(self):
        with pytest.raises(InvalidTokenError):
            verify_guest_token(create_access_token(1, "owner@example.com"))

    def test_wrong_secret_rejected(self):
        token = jwt.encode(
            {"guestId": "g", "sessionCode": "ABC234", "guestName": "A", "kind": "guest"},
            "some-other-secret",
            algorithm="HS256",
        )
        with pytest.raises(InvalidTokenError):
            verify_guest_token(token)

    def test_hash_is_stable_and_opaque(self):
        token = create_guest_token("guest-1", "ABC234", "Alice")
        assert hash_guest_token(token) == hash_guest_token(token)
        assert len(hash_guest_token(token)) == 64
        assert token not in hash_guest_token(token)
