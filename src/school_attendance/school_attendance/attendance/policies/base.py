from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date, datetime


class EditPolicy(ABC):
    """Strategy Pattern: decide whether an attendance record may be amended."""

    @abstractmethod
    def allows(self, *, record_date: date, now: datetime) -> bool:
        raise NotImplementedError
