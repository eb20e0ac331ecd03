from __future__ import annotations

from datetime import date, datetime, time


def start_of_day(value: date) -> datetime:
    return datetime.combine(value, time.min)


def month_key(value: date) -> str:
    return value.strftime("%Y-%m")


def month_label(key: str) -> str:
    """'2026-03' -> 'Mar 2026'."""
    return datetime.strptime(key, "%Y-%m").strftime("%b %Y")


def now_local() -> datetime:
    """Current local time.

    Services take an optional ``now`` and fall back to this.
    """
    return datetime.now()
