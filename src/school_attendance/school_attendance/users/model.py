from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import AccountStatus, Role


@dataclass(frozen=True)
class User:
    """Domain entity: an admin, teacher or student account.

    Note: Plain data object (no DB access code). Student-only fields are None
    for other roles.
    """

    user_id: int
    name: str
    email: str
    password_hash: str
    role: Role
    status: AccountStatus = AccountStatus.ACTIVE
    class_id: Optional[int] = None
    roll_number: Optional[str] = None
    parent_name: Optional[str] = None
    parent_phone: Optional[str] = None
    parent_email: Optional[str] = None

    @property
    def is_active(self) -> bool:
        return self.status == AccountStatus.ACTIVE


@dataclass(frozen=True)
class StudentProfile:
    """Student-only fields accepted when creating or updating an account."""

    class_id: Optional[int] = None
    roll_number: Optional[str] = None
    parent_name: Optional[str] = None
    parent_phone: Optional[str] = None
    parent_email: Optional[str] = None
