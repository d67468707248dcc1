"""Pydantic schemas for API requests and responses."""

from src.schemas.auth import AuthResponse, UserLogin, UserRegister, UserResponse, VerifyEmailRequest
from src.schemas.common import ErrorResponse, OkResponse
from src.schemas.dividend import (
    DividendCreate,
    DividendDetailResponse,
    DividendListResponse,
    DividendResponse,
    DividendStatistic,
    DividendStatisticsResponse,
    DividendUpdate,
    PaginationMeta,
)

__all__ = [
    "UserRegister",
    "UserLogin",
    "VerifyEmailRequest",
    "AuthResponse",
    "UserResponse",
    "OkResponse",
    "ErrorResponse",
    "DividendCreate",
    "DividendUpdate",
    "DividendResponse",
    "DividendListResponse",
    "DividendDetailResponse",
    "DividendStatistic",
    "DividendStatisticsResponse",
    "PaginationMeta",
]
