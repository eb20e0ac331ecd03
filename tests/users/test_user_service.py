from __future__ import annotations

from dataclasses import replace
from typing import Optional

import pytest
from werkzeug.security import check_password_hash, generate_password_hash

from school_attendance.core.enums import AccountStatus, Role
from school_attendance.core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from school_attendance.users.model import StudentProfile, User
from school_attendance.users.service import AuthService, UserService


class InMemoryUsers:
    def __init__(self, users=()):
        self.by_id: dict[int, User] = {u.user_id: u for u in users}
        self._next_id = max(self.by_id, default=0) + 1

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.by_id.get(user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self.by_id.values() if u.email == email), None)

    def create_user(self, *, name, email, password_hash, role, status, profile):
        user_id = self._next_id
        self._next_id += 1
        self.by_id[user_id] = User(
            user_id=user_id,
            name=name,
            email=email,
            password_hash=password_hash,
            role=role,
            status=status,
            class_id=profile.class_id,
            roll_number=profile.roll_number,
            parent_name=profile.parent_name,
            parent_phone=profile.parent_phone,
            parent_email=profile.parent_email,
        )
        return user_id

    def update_user(self, *, user_id, name, email, role, status, profile):
        self.by_id[user_id] = replace(
            self.by_id[user_id], name=name, email=email, role=role, status=status, class_id=profile.class_id
        )
        return True

    def update_password(self, *, user_id, password_hash):
        self.by_id[user_id] = replace(self.by_id[user_id], password_hash=password_hash)
        return True

    def set_status(self, *, user_id, status):
        self.by_id[user_id] = replace(self.by_id[user_id], status=status)
        return True

    def delete_by_id(self, user_id):
        return self.by_id.pop(user_id, None) is not None

    def list_users(self, *, role=None):
        return [u for u in self.by_id.values() if role is None or u.role == role]


class InMemoryClasses:
    def get_by_id(self, class_id):
        return object() if class_id == 1 else None


def account(user_id, email, password, role, status=AccountStatus.ACTIVE):
    return User(
        user_id=user_id,
        name=email.split("@")[0].title(),
        email=email,
        password_hash=generate_password_hash(password),
        role=role,
        status=status,
    )


@pytest.fixture
def users():
    return InMemoryUsers(
        [
            account(1, "admin@school.test", "admin123", Role.ADMIN),
            account(2, "teacher@school.test", "teacher123", Role.TEACHER),
            account(3, "gone@school.test", "gone123", Role.STUDENT, AccountStatus.INACTIVE),
        ]
    )


def test_authenticate_success_normalizes_email(users):
    session = AuthService(users).authenticate("  Teacher@School.test ", "teacher123")
    assert session.user_id == 2
    assert session.role == Role.TEACHER


def test_authenticate_failures(users):
    auth = AuthService(users)

    with pytest.raises(AuthenticationError, match="required"):
        auth.authenticate("", "x")
    with pytest.raises(AuthenticationError, match="Invalid email or password"):
        auth.authenticate("nobody@school.test", "x")
    with pytest.raises(AuthenticationError, match="Invalid email or password"):
        auth.authenticate("teacher@school.test", "wrong")
    with pytest.raises(AuthenticationError, match="inactive"):
        auth.authenticate("gone@school.test", "gone123")


def test_authenticate_tolerates_malformed_hash():
    broken = replace(account(5, "x@school.test", "pw1234", Role.STUDENT), password_hash="not-a-hash")
    with pytest.raises(AuthenticationError):
        AuthService(InMemoryUsers([broken])).authenticate("x@school.test", "pw1234")


def test_create_student_account(users):
    svc = UserService(users, InMemoryClasses())

    user_id = svc.create_account(
        current_role=Role.ADMIN,
        name="  Asha ",
        email="ASHA@school.test",
        password="secret1",
        role=Role.STUDENT,
        profile=StudentProfile(class_id=1, roll_number="10A-02", parent_email="Parent@Mail.test"),
    )

    created = users.get_by_id(user_id)
    assert created.name == "Asha"
    assert created.email == "asha@school.test"
    assert created.class_id == 1
    assert created.parent_email == "parent@mail.test"
    assert check_password_hash(created.password_hash, "secret1")


def test_create_account_validation(users):
    svc = UserService(users, InMemoryClasses())

    with pytest.raises(AuthorizationError):
        svc.create_account(current_role=Role.TEACHER, name="A", email="a@school.test", password="secret1", role=Role.STUDENT)
    with pytest.raises(ValidationError, match="Email already exists"):
        svc.create_account(current_role=Role.ADMIN, name="A", email="teacher@school.test", password="secret1", role=Role.TEACHER)
    with pytest.raises(ValidationError, match="at least 6"):
        svc.create_account(current_role=Role.ADMIN, name="A", email="a@school.test", password="123", role=Role.TEACHER)
    with pytest.raises(ValidationError, match="format"):
        svc.create_account(current_role=Role.ADMIN, name="A", email="not-an-email", password="secret1", role=Role.TEACHER)
    with pytest.raises(ValidationError, match="class"):
        svc.create_account(
            current_role=Role.ADMIN,
            name="A",
            email="a@school.test",
            password="secret1",
            role=Role.STUDENT,
            profile=StudentProfile(class_id=7),
        )


def test_non_students_drop_profile_fields(users):
    svc = UserService(users, InMemoryClasses())
    user_id = svc.create_account(
        current_role=Role.ADMIN,
        name="T",
        email="t2@school.test",
        password="secret1",
        role=Role.TEACHER,
        profile=StudentProfile(class_id=1, roll_number="X"),
    )
    assert users.get_by_id(user_id).class_id is None


def test_update_account_resets_password_only_when_given(users):
    svc = UserService(users)
    before = users.get_by_id(2).password_hash

    svc.update_account(
        current_role=Role.ADMIN, user_id=2, name="T", email="teacher@school.test", role=Role.TEACHER, status=AccountStatus.ACTIVE
    )
    assert users.get_by_id(2).password_hash == before

    svc.update_account(
        current_role=Role.ADMIN,
        user_id=2,
        name="T",
        email="teacher@school.test",
        role=Role.TEACHER,
        status=AccountStatus.ACTIVE,
        new_password="newpass1",
    )
    assert check_password_hash(users.get_by_id(2).password_hash, "newpass1")

    with pytest.raises(ValidationError, match="Email already exists"):
        svc.update_account(
            current_role=Role.ADMIN, user_id=2, name="T", email="admin@school.test", role=Role.TEACHER, status=AccountStatus.ACTIVE
        )


def test_delete_rules(users):
    svc = UserService(users)

    with pytest.raises(AuthorizationError):
        svc.delete_user(current_role=Role.TEACHER, current_user_id=2, user_id=3)
    with pytest.raises(ValidationError, match="own account"):
        svc.delete_user(current_role=Role.ADMIN, current_user_id=1, user_id=1)
    users.create_user(
        name="Second Admin",
        email="admin2@school.test",
        password_hash="x",
        role=Role.ADMIN,
        status=AccountStatus.ACTIVE,
        profile=StudentProfile(),
    )
    with pytest.raises(ValidationError, match="Admin accounts"):
        svc.delete_user(current_role=Role.ADMIN, current_user_id=1, user_id=4)
    with pytest.raises(NotFoundError):
        svc.delete_user(current_role=Role.ADMIN, current_user_id=1, user_id=404)

    svc.delete_user(current_role=Role.ADMIN, current_user_id=1, user_id=3)
    assert users.get_by_id(3) is None


def test_set_status(users):
    svc = UserService(users)

    svc.set_status(current_role=Role.ADMIN, current_user_id=1, user_id=2, status=AccountStatus.INACTIVE)
    assert users.get_by_id(2).is_active is False

    with pytest.raises(ValidationError):
        svc.set_status(current_role=Role.ADMIN, current_user_id=1, user_id=1, status=AccountStatus.INACTIVE)


def test_list_users_by_role(users):
    svc = UserService(users)
    assert [u.user_id for u in svc.list_users(role=Role.TEACHER)] == [2]
    assert len(svc.list_users()) == 3


def test_change_password(users):
    svc = UserService(users)

    with pytest.raises(ValidationError, match="incorrect"):
        svc.change_password(user_id=2, current_password="nope", new_password="abcdef", confirm_password="abcdef")
    with pytest.raises(ValidationError, match="do not match"):
        svc.change_password(user_id=2, current_password="teacher123", new_password="abcdef", confirm_password="abcdeg")
    with pytest.raises(ValidationError, match="at least 6"):
        svc.change_password(user_id=2, current_password="teacher123", new_password="abc", confirm_password="abc")

    svc.change_password(user_id=2, current_password="teacher123", new_password="abcdef", confirm_password="abcdef")
    assert AuthService(users).authenticate("teacher@school.test", "abcdef").user_id == 2
