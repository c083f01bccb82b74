"""Time formatting for request signing.

All formatters accept naive (assumed UTC) or aware datetimes.
"""

from datetime import datetime, timedelta, timezone

_WEEK_DAYS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
_MONTHS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct",
           "Nov", "Dec"]


def _to_utc(value: datetime) -> datetime:
    """Convert to UTC time if value is not naive."""
    if value.tzinfo:
        return value.astimezone(timezone.utc)
    return value.replace(tzinfo=timezone.utc)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_amz_date(value: datetime) -> str:
    """Format datetime as ``YYYYMMDDTHHMMSSZ``."""
    return _to_utc(value).strftime("%Y%m%dT%H%M%SZ")


def to_signer_date(value: datetime) -> str:
    """Format datetime as ``YYYYMMDD``."""
    return _to_utc(value).strftime("%Y%m%d")


def to_rfc1123(value: datetime) -> str:
    """Format datetime as ``Mon, 02 Jan 2006 15:04:05 UTC``.

    Day and month names are fixed English abbreviations regardless of locale.
    """
    value = _to_utc(value)
    weekday = _WEEK_DAYS[value.weekday()]
    month = _MONTHS[value.month - 1]
    return (
        f"{weekday}, {value.day:02d} {month} {value.year:04d} "
        f"{value.strftime('%H:%M:%S')} UTC"
    )


def to_unix_expiry(value: datetime, seconds: int) -> int:
    """Unix time ``seconds`` after ``value``."""
    return int((_to_utc(value) + timedelta(seconds=seconds)).timestamp())
