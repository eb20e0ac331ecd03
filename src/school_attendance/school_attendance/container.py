from __future__ import annotations

from dataclasses import dataclass

from .assignments.mysql_assignment_repository import MySQLAssignmentRepository
from .assignments.service import AssignmentService
from .attendance.factory import EditPolicyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .classes.mysql_class_repository import MySQLClassRepository
from .classes.service import ClassService
from .core.constants import DEFAULT_EDIT_WINDOW_HOURS, DEFAULT_MIN_ATTENDANCE_PERCENTAGE
from .database.connection import DBConfig, DatabaseConnection
from .reports.service import ReportService
from .subjects.mysql_subject_repository import MySQLSubjectRepository
from .subjects.service import SubjectService
from .users.mysql_user_repository import MySQLUserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    users_repo: MySQLUserRepository
    classes_repo: MySQLClassRepository
    subjects_repo: MySQLSubjectRepository
    assignments_repo: MySQLAssignmentRepository
    attendance_repo: MySQLAttendanceRepository

    auth_service: AuthService
    user_service: UserService
    class_service: ClassService
    subject_service: SubjectService
    assignment_service: AssignmentService
    attendance_service: AttendanceService
    report_service: ReportService


def build_container(
    *,
    db_config: dict,
    min_attendance_percentage: float = DEFAULT_MIN_ATTENDANCE_PERCENTAGE,
    edit_window_hours: int = DEFAULT_EDIT_WINDOW_HOURS,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    users_repo = MySQLUserRepository(conn)
    classes_repo = MySQLClassRepository(conn)
    subjects_repo = MySQLSubjectRepository(conn)
    assignments_repo = MySQLAssignmentRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)

    auth_service = AuthService(users_repo)
    user_service = UserService(users_repo, classes_repo)
    class_service = ClassService(classes_repo, users_repo)
    subject_service = SubjectService(subjects_repo, assignments_repo)
    assignment_service = AssignmentService(assignments_repo, users_repo, classes_repo, subjects_repo)
    attendance_service = AttendanceService(
        attendance_repo,
        users_repo,
        assignments_repo,
        policy_factory=EditPolicyFactory(window_hours=int(edit_window_hours)),
    )
    report_service = ReportService(
        attendance_repo,
        users_repo,
        assignments_repo,
        classes_repo,
        min_percentage=float(min_attendance_percentage),
    )

    return Container(
        conn=conn,
        users_repo=users_repo,
        classes_repo=classes_repo,
        subjects_repo=subjects_repo,
        assignments_repo=assignments_repo,
        attendance_repo=attendance_repo,
        auth_service=auth_service,
        user_service=user_service,
        class_service=class_service,
        subject_service=subject_service,
        assignment_service=assignment_service,
        attendance_service=attendance_service,
        report_service=report_service,
    )
