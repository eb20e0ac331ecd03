from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import AccountStatus, Role
from .model import StudentProfile, User


class UserRepository(Protocol):
    """Repository interface for User.

    Note (DIP): services depend on this interface, not on a concrete DB.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def create_user(
        self,
        *,
        name: str,
        email: str,
        password_hash: str,
        role: Role,
        status: AccountStatus,
        profile: StudentProfile,
    ) -> int:
        raise NotImplementedError

    def update_user(
        self,
        *,
        user_id: int,
        name: str,
        email: str,
        role: Role,
        status: AccountStatus,
        profile: StudentProfile,
    ) -> bool:
        raise NotImplementedError

    def update_password(self, *, user_id: int, password_hash: str) -> bool:
        raise NotImplementedError

    def set_status(self, *, user_id: int, status: AccountStatus) -> bool:
        raise NotImplementedError

    def delete_by_id(self, user_id: int) -> bool:
        """Delete the account; attendance rows cascade at the storage level."""

        raise NotImplementedError

    def list_users(self, *, role: Optional[Role] = None) -> Sequence[User]:
        raise NotImplementedError

    def list_students(self, *, class_id: Optional[int] = None, active_only: bool = True) -> Sequence[User]:
        raise NotImplementedError

    def count_in_class(self, class_id: int) -> int:
        raise NotImplementedError
