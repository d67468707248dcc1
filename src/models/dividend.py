"""Dividend model."""

from sqlalchemy import Column, DateTime, Float, ForeignKey, Index, Integer, String

from src.database import Base
from src.models.mixins import TimestampMixin


class Dividend(Base, TimestampMixin):
    """A single dividend payment received by a user."""

    __tablename__ = "dividends"
    __table_args__ = (Index("ix_dividends_user_id_dividend_at", "user_id", "dividend_at"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    dividend_at = Column(DateTime(timezone=True), nullable=False, index=True)  # stored in UTC
    company_name = Column(String(255), nullable=False)
    currency = Column(String(10), nullable=False)  # Currency enum value
    dividend = Column(Float, nullable=False)  # gross amount
    tax = Column(Float, nullable=False, default=0)
    unit = Column(String(10), nullable=False)  # unit the amounts are recorded in
