"""Clock helpers; every timestamp in the store is timezone-aware UTC."""

from datetime import date, datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def today() -> date:
    return utc_now().date()
