from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Assignment:
    """A teacher teaching one subject to one class."""

    assignment_id: int
    class_id: int
    subject_id: int
    teacher_id: int


@dataclass(frozen=True)
class AssignmentView:
    """Assignment joined with display names (admin listing)."""

    assignment_id: int
    class_id: int
    class_name: str
    subject_id: int
    subject_code: str
    subject_name: str
    teacher_id: int
    teacher_name: str
