from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Subject:
    subject_id: int
    code: str
    name: str
    description: Optional[str] = None
    class_count: int = 0
    teacher_count: int = 0
