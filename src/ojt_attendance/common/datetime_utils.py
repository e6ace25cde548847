from __future__ import annotations

from datetime import date, datetime, time, timedelta


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_datetime(value: str) -> datetime:
    """Parse 'YYYY-MM-DD HH:MM:SS' (or ISO 'T' separated) into datetime."""
    return datetime.fromisoformat(value.strip().replace("T", " "))


def parse_clock_time(value: str) -> time:
    """Parse HH:MM or HH:MM:SS."""
    v = value.strip()
    fmt = "%H:%M:%S" if v.count(":") == 2 else "%H:%M"
    return datetime.strptime(v, fmt).time()


def minutes_of_day(value: datetime | time) -> int:
    """Whole minutes since midnight (seconds are ignored)."""
    return value.hour * 60 + value.minute


def week_bounds(day: date) -> tuple[date, date]:
    """Monday..Sunday week containing `day`."""
    start = day - timedelta(days=day.weekday())
    return start, start + timedelta(days=6)


def month_bounds(day: date) -> tuple[date, date]:
    start = day.replace(day=1)
    next_month = (start + timedelta(days=32)).replace(day=1)
    return start, next_month - timedelta(days=1)
