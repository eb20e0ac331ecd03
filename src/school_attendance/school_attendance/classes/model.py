from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class SchoolClass:
    """Domain entity: a class (section) that students belong to."""

    class_id: int
    name: str
    description: Optional[str] = None
    student_count: int = 0
    subject_count: int = 0
