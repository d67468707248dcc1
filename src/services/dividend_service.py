"""Dividend service: user-scoped CRUD, monthly listing and statistics."""

import logging
import math
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import String, delete, func, update
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.orm import Session
from sqlalchemy.sql.functions import FunctionElement

from src.exceptions import ForbiddenError, NotFoundError
from src.models.dividend import Dividend
from src.models.user import User
from src.schemas.dividend import DividendCreate, DividendUpdate
from src.services.dates import month_bounds, to_canonical_instant

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "Dividend not found"
FORBIDDEN_READ_MESSAGE = "You do not have permission to view this dividend"
FORBIDDEN_UPDATE_MESSAGE = "You do not have permission to change this dividend"
FORBIDDEN_DELETE_MESSAGE = "You do not have permission to delete this dividend"


class year_month(FunctionElement):
    """``YYYY-MM`` of a timestamp column, evaluated in UTC by the database."""

    type = String()
    name = "year_month"
    inherit_cache = True


@compiles(year_month)
def _compile_year_month(element, compiler, **kw):
    (column,) = list(element.clauses)
    return compiler.process(func.strftime("%Y-%m", column), **kw)


@compiles(year_month, "postgresql")
def _compile_year_month_postgresql(element, compiler, **kw):
    (column,) = list(element.clauses)
    return "TO_CHAR(%s AT TIME ZONE 'UTC', 'YYYY-MM')" % compiler.process(column, **kw)


def is_own_dividend(user: User, dividend: Dividend) -> bool:
    """Check whether the dividend belongs to the user."""
    return dividend.user_id == user.id


class DividendService:
    """Service for dividend records owned by a single user per call."""

    def __init__(self, db: Session):
        self.db = db

    def create_dividend(self, user: User, payload: DividendCreate) -> dict[str, Any]:
        """Record a dividend for the user.

        Tax defaults to 0 and the unit defaults to the currency code. The new
        record's id is not returned; clients re-list to see it.
        """
        dividend = Dividend(
            user_id=user.id,
            dividend_at=to_canonical_instant(payload.dividend_at),
            company_name=payload.company_name,
            currency=payload.currency.value,
            dividend=payload.dividend,
            tax=payload.tax if payload.tax else 0,
            unit=payload.unit or payload.currency.value,
        )
        self.db.add(dividend)
        self.db.commit()

        logger.info(f"User {user.id} created dividend {dividend.id}")
        return {"ok": True}

    def get_dividends(
        self,
        user: User,
        date: str | datetime | None = None,
        page: int = 1,
        per_page: int = 10,
    ) -> dict[str, Any]:
        """List the user's dividends paid in the month of ``date`` (default: now).

        Raises:
            InvalidInputError: if ``date`` cannot be parsed.
        """
        reference = to_canonical_instant(date) if date is not None else datetime.now(UTC)
        start, end = month_bounds(reference)

        query = self.db.query(Dividend).filter(
            Dividend.user_id == user.id,
            Dividend.dividend_at >= start,
            Dividend.dividend_at <= end,
        )
        total = query.count()
        rows = (
            query.order_by(Dividend.dividend_at.asc(), Dividend.id.asc())
            .offset((page - 1) * per_page)
            .limit(per_page)
            .all()
        )

        return {
            "ok": True,
            "data": rows,
            "meta": {
                "page": page,
                "per_page": per_page,
                "total": total,
                "total_pages": math.ceil(total / per_page) if total else 0,
            },
        }

    def get_dividend(self, user: User, dividend_id: int) -> Dividend:
        """Get one of the user's dividends."""
        return self._get_owned_dividend(user, dividend_id, FORBIDDEN_READ_MESSAGE)

    def update_dividend(
        self, user: User, dividend_id: int, payload: DividendUpdate
    ) -> dict[str, Any]:
        """Apply a partial update to one of the user's dividends.

        Only fields present and non-null in the payload are written.
        """
        self._get_owned_dividend(user, dividend_id, FORBIDDEN_UPDATE_MESSAGE)

        values = {
            key: value
            for key, value in payload.model_dump(exclude_unset=True).items()
            if value is not None
        }

        dividend_at = values.pop("dividend_at", None)
        if dividend_at is not None:
            values["dividend_at"] = to_canonical_instant(dividend_at)
        if "currency" in values:
            values["currency"] = values["currency"].value

        if values:
            # Conditional on the owner so a concurrent reassignment or delete
            # can never result in a write to someone else's row.
            result = self.db.execute(
                update(Dividend)
                .where(Dividend.id == dividend_id, Dividend.user_id == user.id)
                .values(**values)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                self.db.rollback()
                raise NotFoundError(NOT_FOUND_MESSAGE)
            self.db.commit()

        logger.info(f"User {user.id} updated dividend {dividend_id}: {sorted(values)}")
        return {"ok": True}

    def delete_dividend(self, user: User, dividend_id: int) -> dict[str, Any]:
        """Permanently delete one of the user's dividends."""
        self._get_owned_dividend(user, dividend_id, FORBIDDEN_DELETE_MESSAGE)

        result = self.db.execute(
            delete(Dividend)
            .where(Dividend.id == dividend_id, Dividend.user_id == user.id)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            self.db.rollback()
            raise NotFoundError(NOT_FOUND_MESSAGE)
        self.db.commit()

        logger.info(f"User {user.id} deleted dividend {dividend_id}")
        return {"ok": True}

    def get_dividends_statistics(self, user: User) -> dict[str, Any]:
        """Sum the user's dividends and taxes per month and unit.

        Grouping and summing run in the database. Months are UTC calendar
        months of ``dividend_at``.
        """
        month = year_month(Dividend.dividend_at)
        dividend_sum = func.sum(Dividend.dividend)
        tax_sum = func.sum(Dividend.tax)

        rows = (
            self.db.query(
                month.label("date"),
                Dividend.unit.label("unit"),
                dividend_sum.label("dividend"),
                tax_sum.label("tax"),
                (dividend_sum - tax_sum).label("total"),
            )
            .filter(Dividend.user_id == user.id)
            .group_by(month, Dividend.unit)
            .order_by(month, Dividend.unit)
            .all()
        )

        data = [
            {
                "date": row.date,
                "unit": row.unit,
                "dividend": float(row.dividend or 0),
                "tax": float(row.tax or 0),
                "total": float(row.total or 0),
            }
            for row in rows
        ]
        return {"ok": True, "data": data}

    def _get_owned_dividend(self, user: User, dividend_id: int, forbidden_message: str) -> Dividend:
        # Looked up by id alone so that "missing" and "not yours" stay distinct.
        dividend = self.db.query(Dividend).filter(Dividend.id == dividend_id).first()
        if not dividend:
            raise NotFoundError(NOT_FOUND_MESSAGE)

        if not is_own_dividend(user, dividend):
            logger.warning(f"User {user.id} denied access to dividend {dividend_id}")
            raise ForbiddenError(forbidden_message)

        return dividend
