from __future__ import annotations

from typing import Optional, Sequence

from ..common.validators import optional_text, require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..users.repository import UserRepository
from .model import SchoolClass
from .repository import ClassRepository


class ClassService:
    def __init__(self, classes: ClassRepository, users: UserRepository):
        self._classes = classes
        self._users = users

    def list_classes(self) -> Sequence[SchoolClass]:
        return self._classes.list_all()

    def get_class(self, class_id: int) -> SchoolClass:
        found = self._classes.get_by_id(int(class_id))
        if not found:
            raise NotFoundError("Class not found")
        return found

    def save(
        self,
        *,
        current_role: Role,
        name: str,
        description: Optional[str] = None,
        class_id: Optional[int] = None,
    ) -> int:
        """Create a class, or update it when ``class_id`` is given."""

        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")

        class_id = int(class_id) if class_id else None
        name = require_non_empty(name, "Class name")
        description = optional_text(description)

        existing = self._classes.get_by_name(name)
        if existing and existing.class_id != class_id:
            raise ValidationError("A class with this name already exists")

        if class_id:
            self.get_class(class_id)
            self._classes.update(class_id=class_id, name=name, description=description)
            return class_id
        return self._classes.create(name=name, description=description)

    def delete(self, *, current_role: Role, class_id: int) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")

        self.get_class(class_id)
        if self._users.count_in_class(int(class_id)) > 0:
            raise ValidationError("Cannot delete a class that still has students")

        if not self._classes.delete(class_id=int(class_id)):
            raise ValidationError("Failed to delete class")
