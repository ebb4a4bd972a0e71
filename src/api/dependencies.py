"""FastAPI dependencies for authentication, database and services."""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from src.database import get_db
from src.exceptions import UnauthorizedError
from src.models.user import User
from src.services.auth import verify_access_token
from src.services.cellar_service import CellarService
from src.services.guest_access import GuestAccessController
from src.services.label_scan import LabelScanService
from src.services.storage import FileStore
from src.services.tasting_service import TastingService

# auto_error=False so a missing header is a 401 like any other bad credential
security = HTTPBearer(auto_error=False)


def get_bearer_token(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> str:
    """Extract the bearer token from the Authorization header."""
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError("Not authenticated")
    return credentials.credentials


def get_current_user(
    token: Annotated[str, Depends(get_bearer_token)],
    db: Annotated[Session, Depends(get_db)],
) -> User:
    """Get the current owner from their session token.

    Guest tokens are rejected here.
    """
    claims = verify_access_token(token)
    user = db.query(User).filter(User.id == claims.user_id).first()
    if user is None:
        raise UnauthorizedError("User not found")
    return user


def get_cellar_service(
    db: Annotated[Session, Depends(get_db)],
) -> CellarService:
    """Get cellar service with dependencies."""
    return CellarService(db)


def get_tasting_service(
    db: Annotated[Session, Depends(get_db)],
) -> TastingService:
    """Get tasting service with dependencies."""
    return TastingService(db)


def get_guest_access(
    db: Annotated[Session, Depends(get_db)],
) -> GuestAccessController:
    """Get guest access controller with dependencies."""
    return GuestAccessController(db)


def get_label_scan_service() -> LabelScanService:
    """Get label scan service instance."""
    return LabelScanService()


def get_file_store() -> FileStore:
    """Get file store instance."""
    return FileStore()
