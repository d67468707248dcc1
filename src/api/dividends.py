"""Dividend API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from src.api.dependencies import get_current_user, get_dividend_service
from src.models.user import User
from src.schemas.common import ErrorResponse, OkResponse
from src.schemas.dividend import (
    DividendCreate,
    DividendDetailResponse,
    DividendListResponse,
    DividendStatisticsResponse,
    DividendUpdate,
)
from src.services.dividend_service import DividendService

router = APIRouter(prefix="/api/v1/dividends", tags=["dividends"])

OWNED_RESOURCE_ERRORS = {
    403: {"model": ErrorResponse, "description": "Dividend belongs to another user"},
    404: {"model": ErrorResponse, "description": "Dividend not found"},
}


@router.post("", response_model=OkResponse, status_code=status.HTTP_201_CREATED)
def create_dividend(
    dividend_data: DividendCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[DividendService, Depends(get_dividend_service)],
):
    """Record a dividend."""
    return service.create_dividend(current_user, dividend_data)


@router.get(
    "",
    response_model=DividendListResponse,
    responses={400: {"model": ErrorResponse, "description": "Invalid reference date"}},
)
def get_dividends(
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[DividendService, Depends(get_dividend_service)],
    date: Annotated[str | None, Query(description="Any instant in the month to list")] = None,
    page: Annotated[int, Query(ge=1)] = 1,
    per_page: Annotated[int, Query(alias="perPage", ge=1, le=100)] = 10,
):
    """List dividends paid in one month, oldest first."""
    return service.get_dividends(current_user, date=date, page=page, per_page=per_page)


@router.get("/statistics", response_model=DividendStatisticsResponse)
def get_dividends_statistics(
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[DividendService, Depends(get_dividend_service)],
):
    """Monthly dividend, tax and net totals per unit over the user's whole history."""
    return service.get_dividends_statistics(current_user)


@router.get(
    "/{dividend_id}", response_model=DividendDetailResponse, responses=OWNED_RESOURCE_ERRORS
)
def get_dividend(
    dividend_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[DividendService, Depends(get_dividend_service)],
):
    """Get a single dividend."""
    return {"ok": True, "data": service.get_dividend(current_user, dividend_id)}


@router.patch("/{dividend_id}", response_model=OkResponse, responses=OWNED_RESOURCE_ERRORS)
def update_dividend(
    dividend_id: int,
    dividend_data: DividendUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[DividendService, Depends(get_dividend_service)],
):
    """Update some fields of a dividend."""
    return service.update_dividend(current_user, dividend_id, dividend_data)


@router.delete("/{dividend_id}", response_model=OkResponse, responses=OWNED_RESOURCE_ERRORS)
def delete_dividend(
    dividend_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[DividendService, Depends(get_dividend_service)],
):
    """Delete a dividend."""
    return service.delete_dividend(current_user, dividend_id)
