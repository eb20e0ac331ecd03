from __future__ import annotations

from typing import Optional, Sequence

from ..classes.model import SchoolClass
from ..classes.repository import ClassRepository
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..subjects.model import Subject
from ..subjects.repository import SubjectRepository
from ..users.repository import UserRepository
from .model import AssignmentView
from .repository import AssignmentRepository


class AssignmentService:
    def __init__(
        self,
        assignments: AssignmentRepository,
        users: UserRepository,
        classes: ClassRepository,
        subjects: SubjectRepository,
    ):
        self._assignments = assignments
        self._users = users
        self._classes = classes
        self._subjects = subjects

    def assign(self, *, current_role: Role, teacher_id: int, class_id: int, subject_id: int) -> int:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")

        if int(teacher_id) <= 0 or int(class_id) <= 0 or int(subject_id) <= 0:
            raise ValidationError("Teacher, class and subject are required")

        teacher = self._users.get_by_id(int(teacher_id))
        if not teacher or teacher.role != Role.TEACHER or not teacher.is_active:
            raise ValidationError("Selected teacher is not an active teacher")
        if not self._classes.get_by_id(int(class_id)):
            raise ValidationError("Selected class does not exist")
        if not self._subjects.get_by_id(int(subject_id)):
            raise ValidationError("Selected subject does not exist")

        if self._assignments.exists(class_id=int(class_id), subject_id=int(subject_id), teacher_id=int(teacher_id)):
            raise ValidationError("This assignment already exists")

        return self._assignments.create(class_id=int(class_id), subject_id=int(subject_id), teacher_id=int(teacher_id))

    def unassign(self, *, current_role: Role, assignment_id: int) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")

        found = self._assignments.get_by_id(int(assignment_id))
        if not found:
            raise NotFoundError("Assignment not found")

        if not self._assignments.delete(assignment_id=found.assignment_id):
            raise ValidationError("Failed to remove assignment")

    def list_assignments(self, *, teacher_id: Optional[int] = None) -> Sequence[AssignmentView]:
        return self._assignments.list_all(teacher_id=teacher_id)

    def classes_for_teacher(self, teacher_id: int) -> Sequence[SchoolClass]:
        return self._assignments.classes_for_teacher(int(teacher_id))

    def subjects_for_teacher(self, teacher_id: int, *, class_id: Optional[int] = None) -> Sequence[Subject]:
        return self._assignments.subjects_for_teacher(int(teacher_id), class_id=class_id)

    def is_assigned(self, *, teacher_id: int, class_id: int, subject_id: int) -> bool:
        return self._assignments.exists(class_id=int(class_id), subject_id=int(subject_id), teacher_id=int(teacher_id))
