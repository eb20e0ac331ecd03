from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Subject


class SubjectRepository(Protocol):
    def get_by_id(self, subject_id: int) -> Optional[Subject]:
        raise NotImplementedError

    def get_by_code(self, code: str) -> Optional[Subject]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Subject]:
        """All subjects with class/teacher counts."""

        raise NotImplementedError

    def create(self, *, code: str, name: str, description: Optional[str] = None) -> int:
        raise NotImplementedError

    def update(self, *, subject_id: int, code: str, name: str, description: Optional[str] = None) -> bool:
        raise NotImplementedError

    def delete(self, *, subject_id: int) -> bool:
        raise NotImplementedError
