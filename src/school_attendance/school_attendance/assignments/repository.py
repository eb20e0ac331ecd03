from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..classes.model import SchoolClass
from ..subjects.model import Subject
from .model import Assignment, AssignmentView


class AssignmentRepository(Protocol):
    def create(self, *, class_id: int, subject_id: int, teacher_id: int) -> int:
        raise NotImplementedError

    def get_by_id(self, assignment_id: int) -> Optional[Assignment]:
        raise NotImplementedError

    def exists(self, *, class_id: int, subject_id: int, teacher_id: int) -> bool:
        raise NotImplementedError

    def delete(self, *, assignment_id: int) -> bool:
        raise NotImplementedError

    def list_all(self, *, teacher_id: Optional[int] = None) -> Sequence[AssignmentView]:
        raise NotImplementedError

    def classes_for_teacher(self, teacher_id: int) -> Sequence[SchoolClass]:
        raise NotImplementedError

    def subjects_for_teacher(self, teacher_id: int, *, class_id: Optional[int] = None) -> Sequence[Subject]:
        raise NotImplementedError

    def subjects_for_class(self, class_id: int) -> Sequence[Subject]:
        raise NotImplementedError

    def count_for_subject(self, subject_id: int) -> int:
        raise NotImplementedError
