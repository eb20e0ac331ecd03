from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..classes.repository import ClassRepository
from ..common.validators import optional_text, require_email, require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import AccountStatus, Role
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from .model import StudentProfile, User
from .repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """What the front-end keeps in its session after login."""

    user_id: int
    name: str
    email: str
    role: Role
    class_id: Optional[int]


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, email: str, password: str) -> SessionUser:
        email = (email or "").strip().lower()
        if not email or not password:
            raise AuthenticationError("Email and password are required")

        user = self._users.get_by_email(email)
        if not user:
            raise AuthenticationError("Invalid email or password")

        if not user.is_active:
            raise AuthenticationError("Your account is inactive. Please contact the administrator.")

        try:
            ok = check_password_hash(user.password_hash, password)
        except ValueError:
            # e.g. placeholder hashes or corrupted values
            ok = False

        if not ok:
            logger.info("failed login for %s", email)
            raise AuthenticationError("Invalid email or password")

        return SessionUser(
            user_id=user.user_id,
            name=user.name,
            email=user.email,
            role=user.role,
            class_id=user.class_id,
        )


class UserService:
    """Use case: manage accounts (admin) and own password (everyone)."""

    def __init__(self, users: UserRepository, classes: Optional[ClassRepository] = None):
        self._users = users
        self._classes = classes

    def _clean_profile(self, role: Role, profile: Optional[StudentProfile]) -> StudentProfile:
        if role != Role.STUDENT or profile is None:
            return StudentProfile()

        class_id = int(profile.class_id) if profile.class_id else None
        if class_id is not None and self._classes is not None and not self._classes.get_by_id(class_id):
            raise ValidationError("Selected class does not exist")

        parent_email = optional_text(profile.parent_email)
        if parent_email:
            parent_email = require_email(parent_email, "Parent email")

        return StudentProfile(
            class_id=class_id,
            roll_number=optional_text(profile.roll_number),
            parent_name=optional_text(profile.parent_name),
            parent_phone=optional_text(profile.parent_phone),
            parent_email=parent_email,
        )

    def create_account(
        self,
        *,
        current_role: Role,
        name: str,
        email: str,
        password: str,
        role: Role,
        status: AccountStatus = AccountStatus.ACTIVE,
        profile: Optional[StudentProfile] = None,
    ) -> int:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")

        name = require_non_empty(name, "Name")
        email = require_email(email)
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)

        if self._users.get_by_email(email):
            raise ValidationError("Email already exists")

        user_id = self._users.create_user(
            name=name,
            email=email,
            password_hash=generate_password_hash(password),
            role=role,
            status=status,
            profile=self._clean_profile(role, profile),
        )
        logger.info("created %s account %s (id=%s)", role.value, email, user_id)
        return user_id

    def update_account(
        self,
        *,
        current_role: Role,
        user_id: int,
        name: str,
        email: str,
        role: Role,
        status: AccountStatus,
        profile: Optional[StudentProfile] = None,
        new_password: str = "",
    ) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")

        user = self.get_user(user_id)
        name = require_non_empty(name, "Name")
        email = require_email(email)

        other = self._users.get_by_email(email)
        if other and other.user_id != user.user_id:
            raise ValidationError("Email already exists")

        self._users.update_user(
            user_id=user.user_id,
            name=name,
            email=email,
            role=role,
            status=status,
            profile=self._clean_profile(role, profile),
        )

        if new_password:
            require_min_length(new_password, "Password", MIN_PASSWORD_LENGTH)
            self._users.update_password(user_id=user.user_id, password_hash=generate_password_hash(new_password))

    def get_user(self, user_id: int) -> User:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User not found")
        return user

    def list_users(self, *, role: Optional[Role] = None) -> Sequence[User]:
        return self._users.list_users(role=role)

    def list_students(self, *, class_id: Optional[int] = None) -> Sequence[User]:
        return self._users.list_students(class_id=class_id)

    def set_status(self, *, current_role: Role, current_user_id: int, user_id: int, status: AccountStatus) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")
        if int(user_id) == int(current_user_id):
            raise ValidationError("You cannot change your own status")

        self.get_user(user_id)
        self._users.set_status(user_id=int(user_id), status=status)

    def delete_user(self, *, current_role: Role, current_user_id: int, user_id: int) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")
        if int(user_id) == int(current_user_id):
            raise ValidationError("You cannot delete your own account")

        user = self.get_user(user_id)
        if user.role == Role.ADMIN:
            raise ValidationError("Admin accounts cannot be deleted")

        if not self._users.delete_by_id(user.user_id):
            raise ValidationError("Failed to delete user")
        logger.info("deleted %s account %s (id=%s)", user.role.value, user.email, user.user_id)

    def change_password(
        self,
        *,
        user_id: int,
        current_password: str,
        new_password: str,
        confirm_password: str,
    ) -> None:
        user = self.get_user(user_id)

        if not check_password_hash(user.password_hash, current_password or ""):
            raise ValidationError("Current password is incorrect")
        require_min_length(new_password, "New password", MIN_PASSWORD_LENGTH)
        if new_password != confirm_password:
            raise ValidationError("New password and confirmation do not match")

        self._users.update_password(user_id=user.user_id, password_hash=generate_password_hash(new_password))
