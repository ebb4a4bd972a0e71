"""Authentication API endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from src.api.dependencies import get_current_user
from src.database import get_db
from src.exceptions import ConflictError, UnauthorizedError
from src.models.user import User
from src.schemas.auth import AuthResponse, UserLogin, UserRegister, UserResponse, UserUpdate
from src.services.auth import authenticate_user, create_access_token, create_user, get_user_by_email

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    user_data: UserRegister,
    db: Annotated[Session, Depends(get_db)],
):
    """Register a new user."""
    if get_user_by_email(db, user_data.email):
        raise ConflictError("Email already registered")

    user = create_user(
        db,
        user_data.email,
        user_data.password,
        user_data.name,
        default_currency=user_data.default_currency,
        beverage_type=user_data.beverage_type,
    )
    logger.info(f"Registered user {user.id}")

    return AuthResponse(
        access_token=create_access_token(user.id, user.email),
        user=UserResponse.model_validate(user),
    )


@router.post("/login", response_model=AuthResponse)
def login(
    credentials: UserLogin,
    db: Annotated[Session, Depends(get_db)],
):
    """Login with email and password."""
    user = authenticate_user(db, credentials.email, credentials.password)
    if not user:
        raise UnauthorizedError("Incorrect email or password")

    return AuthResponse(
        access_token=create_access_token(user.id, user.email),
        user=UserResponse.model_validate(user),
    )


@router.get("/me", response_model=UserResponse)
def get_me(
    current_user: Annotated[User, Depends(get_current_user)],
):
    """Get current user information."""
    return current_user


@router.patch("/me", response_model=UserResponse)
def update_me(
    changes: UserUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Update profile and preferences."""
    for field, value in changes.model_dump(exclude_unset=True).items():
        if value is None and field != "preferred_language":
            continue
        if field == "default_currency":
            value = value.upper()
        setattr(current_user, field, value)
    db.commit()
    db.refresh(current_user)
    return current_user


@router.post("/logout")
def logout(
    current_user: Annotated[User, Depends(get_current_user)],
):
    """Logout (client should discard token)."""
    return {"message": "Logged out successfully"}
