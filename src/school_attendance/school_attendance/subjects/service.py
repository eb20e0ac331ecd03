from __future__ import annotations

from typing import Optional, Sequence

from ..assignments.repository import AssignmentRepository
from ..common.validators import optional_text, require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from .model import Subject
from .repository import SubjectRepository


class SubjectService:
    def __init__(self, subjects: SubjectRepository, assignments: AssignmentRepository):
        self._subjects = subjects
        self._assignments = assignments

    def list_subjects(self) -> Sequence[Subject]:
        return self._subjects.list_all()

    def get_subject(self, subject_id: int) -> Subject:
        found = self._subjects.get_by_id(int(subject_id))
        if not found:
            raise NotFoundError("Subject not found")
        return found

    def save(
        self,
        *,
        current_role: Role,
        code: str,
        name: str,
        description: Optional[str] = None,
        subject_id: Optional[int] = None,
    ) -> int:
        """Create a subject, or update it when ``subject_id`` is given."""

        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")

        subject_id = int(subject_id) if subject_id else None
        code = require_non_empty(code, "Subject code").upper()
        name = require_non_empty(name, "Subject name")
        description = optional_text(description)

        existing = self._subjects.get_by_code(code)
        if existing and existing.subject_id != subject_id:
            raise ValidationError("A subject with this code already exists")

        if subject_id:
            self.get_subject(subject_id)
            self._subjects.update(subject_id=subject_id, code=code, name=name, description=description)
            return subject_id
        return self._subjects.create(code=code, name=name, description=description)

    def delete(self, *, current_role: Role, subject_id: int) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")

        self.get_subject(subject_id)
        if self._assignments.count_for_subject(int(subject_id)) > 0:
            raise ValidationError("Cannot delete a subject that is assigned to classes")

        if not self._subjects.delete(subject_id=int(subject_id)):
            raise ValidationError("Failed to delete subject")
