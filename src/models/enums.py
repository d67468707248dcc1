"""Enums for model fields."""

from enum import Enum


class Currency(str, Enum):
    """Currencies a dividend can be paid in."""

    KRW = "KRW"
    USD = "USD"
    JPY = "JPY"
    EUR = "EUR"
    CNY = "CNY"
    HKD = "HKD"


class AuthProvider(str, Enum):
    """How a user account was created."""

    LOCAL = "local"
    KAKAO = "kakao"
    GOOGLE = "google"
