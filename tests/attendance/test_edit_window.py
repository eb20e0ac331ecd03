from datetime import date, datetime

from school_attendance.attendance.edit_window import can_edit
from school_attendance.attendance.factory import EditPolicyFactory
from school_attendance.attendance.policies.admin_policy import AdminEditPolicy
from school_attendance.attendance.policies.windowed_policy import WindowedEditPolicy
from school_attendance.core.enums import Role


def test_admin_can_always_edit():
    assert can_edit(date(2020, 1, 1), datetime(2026, 3, 10, 12, 0), 24, is_admin=True) is True


def test_window_boundary_is_inclusive():
    record_date = date(2026, 3, 9)
    assert can_edit(record_date, datetime(2026, 3, 10, 0, 0), 24, is_admin=False) is True
    assert can_edit(record_date, datetime(2026, 3, 10, 1, 0), 24, is_admin=False) is False


def test_same_day_record_is_editable():
    assert can_edit(date(2026, 3, 10), datetime(2026, 3, 10, 23, 59), 24, is_admin=False) is True


def test_future_record_is_editable():
    assert can_edit(date(2026, 3, 12), datetime(2026, 3, 10, 9, 0), 24, is_admin=False) is True


def test_custom_window():
    record_date = date(2026, 3, 8)
    assert can_edit(record_date, datetime(2026, 3, 10, 0, 0), 48, is_admin=False) is True
    assert can_edit(record_date, datetime(2026, 3, 10, 0, 0), 24, is_admin=False) is False


def test_factory_picks_policy_by_role():
    factory = EditPolicyFactory(window_hours=24)

    assert isinstance(factory.for_role(Role.ADMIN), AdminEditPolicy)
    teacher_policy = factory.for_role(Role.TEACHER)
    assert isinstance(teacher_policy, WindowedEditPolicy)
    assert teacher_policy.window_hours == 24


def test_policies_agree_with_can_edit():
    factory = EditPolicyFactory(window_hours=24)
    old = date(2026, 3, 1)
    now = datetime(2026, 3, 10, 9, 0)

    assert factory.for_role(Role.ADMIN).allows(record_date=old, now=now) is True
    assert factory.for_role(Role.TEACHER).allows(record_date=old, now=now) is False
    assert factory.for_role(Role.TEACHER).allows(record_date=now.date(), now=now) is True
