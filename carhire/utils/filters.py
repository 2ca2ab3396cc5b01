"""Date formatting helpers for operator-facing output."""
from datetime import datetime, timezone

import pytz


def fmt_iso_local(value: str, tz_name: str = "Asia/Kolkata", use_12h: bool = False) -> str:
    """
    Format an ISO date/datetime string into local time of ``tz_name``.
    Supports:
      - 'YYYY-MM-DD'
      - 'YYYY-MM-DDTHH:MM:SS' (or with a space)
      - Above with 'Z' or timezone offsets like '+00:00'
    On parse error, returns the original value (so the UI never goes blank).
    """
    if value is None:
        return ""

    s = str(value).strip()
    if not s:
        return ""

    s_norm = s.replace("T", " ")
    if s_norm.endswith("Z"):
        s_norm = s_norm[:-1] + "+00:00"

    try:
        dt = datetime.fromisoformat(s_norm)
    except ValueError:
        return s

    if ":" not in s_norm:
        # Date-only, nothing to convert
        return dt.strftime("%d/%m/%Y")

    # If naive datetime, assume UTC
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)

    try:
        tz = pytz.timezone(tz_name)
    except pytz.UnknownTimeZoneError:
        tz = pytz.utc
    dt_local = dt.astimezone(tz)

    if use_12h:
        # Avoid %-I (not portable on Windows). Strip any leading zero manually.
        hh = dt_local.strftime("%I").lstrip("0") or "0"
        return f"{dt_local.strftime('%d %b %Y')}, {hh}:{dt_local.strftime('%M %p')}"
    return dt_local.strftime("%d/%m/%Y %H:%M")
