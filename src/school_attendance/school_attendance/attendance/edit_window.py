from __future__ import annotations

from datetime import date, datetime, timedelta

from ..common.datetime_utils import start_of_day


def can_edit(record_date: date, now: datetime, window_hours: int, is_admin: bool) -> bool:
    """Whether a record dated ``record_date`` may still be amended at ``now``.

    The distance is measured from midnight of the record's date, not from when
    the row was written, so a record for today is always editable and one from
    yesterday may already be closed. The boundary is inclusive.
    """

    if is_admin:
        return True
    return now - start_of_day(record_date) <= timedelta(hours=int(window_hours))
