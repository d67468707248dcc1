"""Authentication API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from src.api.dependencies import get_current_user
from src.database import get_db
from src.exceptions import UnauthorizedError
from src.models.user import User
from src.schemas.auth import (
    AuthResponse,
    UserLogin,
    UserRegister,
    UserResponse,
    VerifyEmailRequest,
)
from src.schemas.common import OkResponse
from src.services.auth import (
    authenticate_user,
    create_access_token,
    create_user,
    find_one_by_email_or_save,
    verify_email,
)
from src.services.oauth import get_oauth_provider

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


def _auth_response(user: User) -> AuthResponse:
    return AuthResponse(
        access_token=create_access_token(user.id, user.email),
        user=UserResponse.model_validate(user),
    )


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserRegister,
    db: Annotated[Session, Depends(get_db)],
):
    """Register a new user with email and password."""
    user = create_user(db, user_data.email, user_data.password, user_data.name)
    return _auth_response(user)


@router.post("/login", response_model=AuthResponse)
async def login(
    credentials: UserLogin,
    db: Annotated[Session, Depends(get_db)],
):
    """Login with email and password."""
    user = authenticate_user(db, credentials.email, credentials.password)

    if not user:
        raise UnauthorizedError("Incorrect email or password")

    return _auth_response(user)


@router.post("/verify-email", response_model=OkResponse)
async def verify(
    request: VerifyEmailRequest,
    db: Annotated[Session, Depends(get_db)],
):
    """Confirm an email address with the code sent at registration."""
    verify_email(db, request.code)
    return OkResponse()


@router.get("/me", response_model=UserResponse)
async def get_me(
    current_user: Annotated[User, Depends(get_current_user)],
):
    """Get current user information."""
    return current_user


@router.post("/logout", response_model=OkResponse)
async def logout(
    current_user: Annotated[User, Depends(get_current_user)],
):
    """Logout (client should discard token)."""
    return OkResponse()


@router.get("/{provider}/login", response_class=RedirectResponse)
async def oauth_login(provider: str, state: str | None = None):
    """Redirect to the provider's consent page."""
    oauth = get_oauth_provider(provider)
    return RedirectResponse(oauth.authorization_url(state=state))


@router.get("/{provider}/callback", response_model=AuthResponse)
async def oauth_callback(
    provider: str,
    db: Annotated[Session, Depends(get_db)],
    code: Annotated[str, Query(min_length=1)],
):
    """Finish a provider login and issue a token for the matching local user."""
    oauth = get_oauth_provider(provider)
    profile = await oauth.authenticate(code)
    user = find_one_by_email_or_save(db, profile.email, profile.name, profile.provider)
    return _auth_response(user)
