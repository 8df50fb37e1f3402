from __future__ import annotations

from datetime import date, datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def truncate_to_millis(dt: datetime) -> datetime:
    """Return `dt` in UTC with sub-millisecond precision dropped.

    Persisted timestamps carry milliseconds only, so values handed back to
    callers must be truncated the same way to compare equal after a re-read.
    Naive values are assumed to already be UTC.
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt = dt.astimezone(timezone.utc)
    return dt.replace(microsecond=(dt.microsecond // 1000) * 1000)


def format_timestamp(dt: datetime) -> str:
    """Fixed-width ISO 8601 UTC timestamp, e.g. 2025-09-04T12:34:56.789Z."""
    dt = truncate_to_millis(dt)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def parse_timestamp(value: str) -> datetime:
    s = value.strip()
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    dt = datetime.fromisoformat(s)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_date(value: date | str | None) -> date | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    s = value.strip()
    if not s:
        return None
    try:
        return date.fromisoformat(s)
    except ValueError:
        # Older clients stored full ISO timestamps; anything else is rejected
        if "T" not in s:
            raise
        return datetime.fromisoformat(s).date()


def format_day_date(d: date | None) -> str:
    """Return 'dd/mm/yyyy', or '-' when there is no date."""
    if d is None:
        return "-"
    return f"{d.day:02d}/{d.month:02d}/{d.year:04d}"


def age_label(birth: date | None, today: date | None = None) -> str:
    """Age as '{years}a {months}m', '{months}m' under a year, '0m' for newborns."""
    if birth is None:
        return "-"
    today = today or utc_now().date()
    years = today.year - birth.year
    months = today.month - birth.month
    if months < 0:
        years -= 1
        months += 12
    if years <= 0 and months <= 0:
        return "0m"
    return f"{years}a {months}m" if years > 0 else f"{months}m"
