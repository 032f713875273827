"""Utility functions for the amortization calculator.

This module turns raw user input (form fields, command-line options) into
validated ``LoanParameters`` and provides the calendar arithmetic used to
date the schedule rows.
"""

from __future__ import annotations

import calendar
import logging
import math
import re
from datetime import date
from typing import Optional

from .data_models import LoanParameters, RateMode

logger = logging.getLogger(__name__)

_GROUPED = re.compile(r"[-+]?\d{1,3}(,\d{3})+")


def parse_number(value: object) -> float:
    """Convert a numeric string into a ``float``.

    Surrounding whitespace and spaces used as thousands separators are
    removed. When both a dot and a comma appear, the one that comes last is
    the decimal separator, so ``"1,000.50"`` and ``"1.000,50"`` are both
    1000.5. A lone comma is a thousands separator when it groups digits in
    threes (``"1,000"`` is 1000) and a decimal separator otherwise
    (``"4,5"`` is 4.5). Raises ``ValueError`` if conversion fails.
    """
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    if value is None:
        raise ValueError("Missing numeric value")
    cleaned = str(value).strip().replace(" ", "").replace("\u00a0", "")
    if "," in cleaned and "." in cleaned:
        if cleaned.rfind(",") > cleaned.rfind("."):
            cleaned = cleaned.replace(".", "").replace(",", ".")
        else:
            cleaned = cleaned.replace(",", "")
    elif "," in cleaned:
        if _GROUPED.fullmatch(cleaned):
            cleaned = cleaned.replace(",", "")
        else:
            cleaned = cleaned.replace(",", ".")
    try:
        return float(cleaned)
    except ValueError as exc:
        raise ValueError(f"Invalid numeric value: {value}") from exc


def _parse_periods(value: object) -> int:
    number = parse_number(value)
    if not math.isfinite(number):
        raise ValueError(f"Invalid period: {value}")
    # A form field holding "12.7" is read as 12, as integer parsing would.
    return int(number)


def parse_loan_parameters(
    principal: object,
    annual_rate: object,
    periods: object,
    rate_mode: object = RateMode.NOMINAL,
) -> Optional[LoanParameters]:
    """Validate raw inputs and build ``LoanParameters``.

    Returns ``None`` when the inputs cannot produce a result: a value is
    missing or not a number, a value is not finite, the period is not a
    positive whole number of months, the principal is not positive or the
    rate is negative. Callers present an empty output in that case.
    """
    try:
        principal_value = parse_number(principal)
        rate_value = parse_number(annual_rate)
        periods_value = _parse_periods(periods)
        mode = RateMode.parse(rate_mode)
    except ValueError as exc:
        logger.debug("Rejected loan input: %s", exc)
        return None

    if not (math.isfinite(principal_value) and math.isfinite(rate_value)):
        logger.debug("Rejected loan input: non-finite value")
        return None
    if periods_value <= 0 or principal_value <= 0 or rate_value < 0:
        logger.debug(
            "Rejected loan input: principal=%s rate=%s periods=%s",
            principal_value,
            rate_value,
            periods_value,
        )
        return None

    return LoanParameters(
        principal=principal_value,
        annual_rate_percent=rate_value,
        rate_mode=mode,
        periods=periods_value,
    )


def parse_date(value: Optional[str]) -> Optional[date]:
    """Parse a ``YYYY-MM-DD`` string into a ``date``.

    Returns ``None`` for an empty value so that callers fall back to the
    current date. Raises ``ValueError`` if the string is not a valid date.
    """
    if value is None or not value.strip():
        return None
    try:
        return date.fromisoformat(value.strip())
    except ValueError as exc:
        raise ValueError(f"Invalid date string: {value}") from exc


def add_months(dt: date, months: int) -> date:
    """Return a new date a number of months after ``dt``.

    The day of the month is clamped to the last valid day if needed (e.g.,
    adding one month to Jan 31 yields Feb 28 or 29).
    """
    year = dt.year + (dt.month - 1 + months) // 12
    month = (dt.month - 1 + months) % 12 + 1
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)
