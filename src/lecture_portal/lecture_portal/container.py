from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceAggregator
from .branches.repository import BranchRepository
from .branches.service import BranchService
from .core.constants import DEFAULT_HISTORY_LIMIT, ROOMS_PER_BLOCK
from .database.connection import DBConfig, DatabaseConnection
from .database.store import MySQLRemoteStore, RemoteStore
from .lectures.conflicts import RoomConflictChecker
from .lectures.repository import LectureRepository
from .lectures.service import LectureQueries, LectureScheduler
from .notifications.repository import NotificationRepository
from .notifications.service import NotificationService
from .reports.repository import LectureReportRepository
from .reports.service import ReportQueries, ReportSubmissionWorkflow
from .subjects.repository import SubjectRepository
from .subjects.service import SubjectService
from .users.repository import ProfileRepository
from .users.service import AuthService, FacultyService


@dataclass(frozen=True)
class Container:
    store: RemoteStore

    profiles_repo: ProfileRepository
    branches_repo: BranchRepository
    subjects_repo: SubjectRepository
    lectures_repo: LectureRepository
    reports_repo: LectureReportRepository
    attendance_repo: AttendanceRepository
    notifications_repo: NotificationRepository

    auth_service: AuthService
    faculty_service: FacultyService
    branch_service: BranchService
    subject_service: SubjectService
    notification_service: NotificationService
    room_checker: RoomConflictChecker
    lecture_scheduler: LectureScheduler
    lecture_queries: LectureQueries
    report_workflow: ReportSubmissionWorkflow
    report_queries: ReportQueries
    attendance_aggregator: AttendanceAggregator


def build_container(
    *,
    db_config: Optional[dict] = None,
    store: Optional[RemoteStore] = None,
    rooms_per_block: int = ROOMS_PER_BLOCK,
    history_limit: int = DEFAULT_HISTORY_LIMIT,
) -> Container:
    if store is None:
        if db_config is None:
            raise ValueError("build_container needs either db_config or store")
        conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))
        store = MySQLRemoteStore(conn)

    profiles_repo = ProfileRepository(store)
    branches_repo = BranchRepository(store)
    subjects_repo = SubjectRepository(store)
    lectures_repo = LectureRepository(store)
    reports_repo = LectureReportRepository(store)
    attendance_repo = AttendanceRepository(store)
    notifications_repo = NotificationRepository(store)

    notification_service = NotificationService(notifications_repo)
    room_checker = RoomConflictChecker(lectures_repo, rooms_per_block=rooms_per_block)
    lecture_scheduler = LectureScheduler(lectures_repo, room_checker, profiles_repo, notification_service)

    return Container(
        store=store,
        profiles_repo=profiles_repo,
        branches_repo=branches_repo,
        subjects_repo=subjects_repo,
        lectures_repo=lectures_repo,
        reports_repo=reports_repo,
        attendance_repo=attendance_repo,
        notifications_repo=notifications_repo,
        auth_service=AuthService(profiles_repo),
        faculty_service=FacultyService(profiles_repo),
        branch_service=BranchService(branches_repo, profiles_repo),
        subject_service=SubjectService(subjects_repo),
        notification_service=notification_service,
        room_checker=room_checker,
        lecture_scheduler=lecture_scheduler,
        lecture_queries=LectureQueries(lectures_repo, profiles_repo),
        report_workflow=ReportSubmissionWorkflow(
            reports_repo, lectures_repo, lecture_scheduler, profiles_repo, notification_service
        ),
        report_queries=ReportQueries(reports_repo, profiles_repo),
        attendance_aggregator=AttendanceAggregator(
            attendance_repo, profiles_repo, branches_repo, history_limit=history_limit
        ),
    )
