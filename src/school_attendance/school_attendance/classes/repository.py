from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import SchoolClass


class ClassRepository(Protocol):
    def get_by_id(self, class_id: int) -> Optional[SchoolClass]:
        raise NotImplementedError

    def get_by_name(self, name: str) -> Optional[SchoolClass]:
        raise NotImplementedError

    def list_all(self) -> Sequence[SchoolClass]:
        """All classes with student/subject counts."""

        raise NotImplementedError

    def create(self, *, name: str, description: Optional[str] = None) -> int:
        raise NotImplementedError

    def update(self, *, class_id: int, name: str, description: Optional[str] = None) -> bool:
        raise NotImplementedError

    def delete(self, *, class_id: int) -> bool:
        """Delete the class; its subject assignments cascade."""

        raise NotImplementedError
