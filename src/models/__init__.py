"""SQLAlchemy models."""

from src.models.dividend import Dividend
from src.models.user import User
from src.models.verification import Verification

__all__ = [
    "User",
    "Verification",
    "Dividend",
]
