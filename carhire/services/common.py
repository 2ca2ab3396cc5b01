"""Shared service helpers."""

from datetime import date, datetime, timezone
from typing import Callable

from carhire.exceptions import InvalidDateRangeError, ValidationError
from carhire.utils.constants import DATE_FMT

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Default clock; services take any zero-arg callable so tests can pin time."""
    return datetime.now(timezone.utc)


def iso(dt: datetime) -> str:
    return dt.isoformat(timespec="seconds")


# -------- date helpers --------
def as_date(x) -> date:
    """Coerce any date-like to a naive date (supports 'YYYY-MM-DD' or ISO with T)."""
    if isinstance(x, datetime):
        return x.date()
    if isinstance(x, date):
        return x
    if isinstance(x, str):
        base = x.split("T", 1)[0].strip()
        try:
            return datetime.strptime(base, DATE_FMT).date()
        except ValueError:
            raise InvalidDateRangeError(f"Error: invalid date {x!r} (expected YYYY-MM-DD)") from None
    raise InvalidDateRangeError(f"Error: unsupported date {x!r}")


def overlap(a_start: date, a_end: date, b_start: date, b_end: date) -> bool:
    """
    Check overlap between [a_start, a_end) and [b_start, b_end).
    End date is exclusive: booking 2025-10-22 -> 2025-10-23 occupies the night of 22 only.
    """
    return a_start < b_end and b_start < a_end


def as_int_id(value, what: str = "id") -> int:
    """Parse an identifier coming from a form, JSON body or URL."""
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise ValidationError(f"Error: invalid {what} {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Error: invalid {what} {value!r}") from None
