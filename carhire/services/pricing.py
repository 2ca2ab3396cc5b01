"""Reservation pricing."""

import math
from datetime import date, datetime, time
from decimal import ROUND_HALF_UP, Decimal

from carhire.exceptions import InvalidDateRangeError

MINOR_UNIT = Decimal("0.01")
SECONDS_PER_DAY = 86400


def _as_datetime(x) -> datetime:
    if isinstance(x, datetime):
        return x
    if isinstance(x, date):
        return datetime.combine(x, time.min)
    raise InvalidDateRangeError(f"Error: unsupported date {x!r}")


def billable_days(start, end) -> int:
    """Started days between start and end, never less than one."""
    d1, d2 = _as_datetime(start), _as_datetime(end)
    if (d1.tzinfo is None) != (d2.tzinfo is None):
        raise InvalidDateRangeError("Error: cannot mix naive and timezone-aware dates")
    if d2 <= d1:
        raise InvalidDateRangeError("Error: end date must be after start date")
    seconds = (d2 - d1).total_seconds()
    return max(1, math.ceil(seconds / SECONDS_PER_DAY))


def price(day_rate, start, end) -> Decimal:
    """
    Charge for renting at ``day_rate`` from ``start`` to ``end``.

    Rounded half-up to the currency minor unit so a half paisa is never
    dropped in the customer's favour.
    """
    rate = Decimal(str(day_rate))
    if rate < 0:
        raise ValueError("day rate cannot be negative")
    days = billable_days(start, end)
    return (rate * days).quantize(MINOR_UNIT, rounding=ROUND_HALF_UP)
