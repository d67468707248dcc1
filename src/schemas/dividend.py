"""Dividend schemas.

Field names are snake_case in Python and camelCase on the wire.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from src.exceptions import InvalidInputError
from src.models.enums import Currency
from src.services.dates import to_canonical_instant


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _parse_dividend_at(value):
    if value is None:
        return value
    try:
        return to_canonical_instant(value)
    except InvalidInputError as e:
        raise ValueError(e.message) from e


class DividendCreate(CamelModel):
    """Create a new dividend record."""

    dividend_at: datetime = Field(..., description="Payment date (ISO 8601)")
    company_name: str = Field(..., min_length=1, max_length=255, description="Stock name")
    currency: Currency
    dividend: float = Field(..., allow_inf_nan=False, description="Gross dividend amount")
    tax: float | None = Field(None, allow_inf_nan=False, description="Withheld tax")
    unit: str | None = Field(None, min_length=1, max_length=10)

    @field_validator("dividend_at", mode="before")
    @classmethod
    def normalize_dividend_at(cls, value):
        return _parse_dividend_at(value)


class DividendUpdate(CamelModel):
    """Partially update a dividend record."""

    dividend_at: datetime | None = None
    company_name: str | None = Field(None, min_length=1, max_length=255)
    currency: Currency | None = None
    dividend: float | None = Field(None, allow_inf_nan=False)
    tax: float | None = Field(None, allow_inf_nan=False)
    unit: str | None = Field(None, min_length=1, max_length=10)

    @field_validator("dividend_at", mode="before")
    @classmethod
    def normalize_dividend_at(cls, value):
        return _parse_dividend_at(value)


class DividendResponse(CamelModel):
    """Dividend as returned to its owner. The owner id is never exposed."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    dividend_at: datetime
    company_name: str
    currency: Currency
    dividend: float
    tax: float
    unit: str
    created_at: datetime
    updated_at: datetime


class PaginationMeta(CamelModel):
    page: int
    per_page: int
    total: int
    total_pages: int


class DividendListResponse(CamelModel):
    ok: bool = True
    data: list[DividendResponse]
    meta: PaginationMeta


class DividendDetailResponse(CamelModel):
    ok: bool = True
    data: DividendResponse


class DividendStatistic(CamelModel):
    """Totals for one month and unit."""

    date: str = Field(..., description="YYYY-MM")
    unit: str
    dividend: float
    tax: float
    total: float


class DividendStatisticsResponse(CamelModel):
    ok: bool = True
    data: list[DividendStatistic]
