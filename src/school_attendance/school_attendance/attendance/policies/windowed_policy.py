from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime

from ..edit_window import can_edit
from .base import EditPolicy


@dataclass(frozen=True)
class WindowedEditPolicy(EditPolicy):
    window_hours: int

    def allows(self, *, record_date: date, now: datetime) -> bool:
        return can_edit(record_date, now, self.window_hours, is_admin=False)
