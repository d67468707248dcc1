"""Authentication service for JWT, password handling and account lookup."""

import logging
import secrets
from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from src.config import get_settings
from src.exceptions import ConflictError, InvalidInputError
from src.models.enums import AuthProvider
from src.models.user import User
from src.models.verification import Verification
from src.services.dates import to_canonical_instant

logger = logging.getLogger(__name__)

settings = get_settings()

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)


def create_access_token(user_id: int, email: str) -> str:
    """Create a JWT access token."""
    expire = datetime.now(UTC) + timedelta(minutes=settings.jwt_expiration_minutes)
    to_encode = {
        "sub": str(user_id),
        "email": email,
        "exp": expire,
    }
    encoded_jwt = jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)
    return encoded_jwt


def decode_access_token(token: str) -> dict | None:
    """Decode and validate a JWT token."""
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
        return payload
    except JWTError:
        return None


def authenticate_user(db: Session, email: str, password: str) -> User | None:
    """Authenticate a user by email and password.

    Accounts created through an OAuth provider have no password and can
    never authenticate this way.
    """
    user = get_user_by_email(db, email)
    if not user or not user.password_hash:
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user


def get_user_by_email(db: Session, email: str) -> User | None:
    """Get a user by email."""
    return db.query(User).filter(User.email == email).first()


def create_user(db: Session, email: str, password: str, name: str) -> User:
    """Create a new email/password user and issue a verification code."""
    if get_user_by_email(db, email):
        raise ConflictError("Email already registered")

    user = User(
        email=email,
        password_hash=get_password_hash(password),
        name=name,
        provider=AuthProvider.LOCAL.value,
        verified=False,
    )
    db.add(user)
    db.flush()

    verification = Verification(
        user_id=user.id,
        code=secrets.token_hex(16),
        expires_at=datetime.now(UTC)
        + timedelta(minutes=settings.verification_code_expiration_minutes),
    )
    db.add(verification)
    db.commit()
    db.refresh(user)

    logger.info(f"Registered user {user.id}; verification code issued to {user.email}")
    send_verification_email(user, verification.code)
    return user


def send_verification_email(user: User, code: str) -> None:
    """Deliver a verification code to the user.

    Mail delivery is handled outside this service; the code is logged so it
    can be picked up by whatever relays outbound mail.
    """
    logger.info(f"Verification code for {user.email}: {code}")


def verify_email(db: Session, code: str) -> User:
    """Mark the owner of a verification code as verified and consume the code."""
    verification = db.query(Verification).filter(Verification.code == code).first()
    if not verification:
        logger.warning("Email verification attempted with unknown code")
        raise InvalidInputError("Verification code is invalid")

    if to_canonical_instant(verification.expires_at) < datetime.now(UTC):
        user_id = verification.user_id
        db.delete(verification)
        db.commit()
        logger.warning(f"Expired verification code used for user {user_id}")
        raise InvalidInputError("Verification code has expired")

    user = verification.user
    user.verified = True
    db.delete(verification)
    db.commit()
    db.refresh(user)

    logger.info(f"User {user.id} verified their email")
    return user


def find_one_by_email_or_save(db: Session, email: str, name: str, provider: str) -> User:
    """Return the user with this email, creating a password-less one if none exists.

    An existing account is returned unchanged, whichever provider created it.
    """
    user = get_user_by_email(db, email)
    if user:
        logger.info(f"{provider} login matched existing user {user.id}")
        return user

    user = User(
        email=email,
        password_hash=None,
        name=name,
        provider=provider,
        verified=True,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # A concurrent first login for the same email inserted the row first
        db.rollback()
        existing = get_user_by_email(db, email)
        if existing is None:
            raise
        logger.info(f"{provider} login matched concurrently created user {existing.id}")
        return existing
    db.refresh(user)

    logger.info(f"{provider} login created user {user.id}")
    return user
