"""FastAPI dependencies for authentication, database and services."""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from src.database import get_db
from src.exceptions import UnauthorizedError
from src.models.user import User
from src.services.auth import decode_access_token
from src.services.dividend_service import DividendService

security = HTTPBearer()


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
) -> User:
    """Get the current authenticated user from JWT token."""
    token = credentials.credentials
    payload = decode_access_token(token)

    if payload is None:
        raise UnauthorizedError("Invalid authentication credentials")

    user_id = payload.get("sub")
    if user_id is None:
        raise UnauthorizedError("Invalid authentication credentials")

    user = db.query(User).filter(User.id == int(user_id)).first()
    if user is None:
        raise UnauthorizedError("User not found")

    return user


def get_dividend_service(
    db: Annotated[Session, Depends(get_db)],
) -> DividendService:
    """Get dividend service with dependencies."""
    return DividendService(db)
