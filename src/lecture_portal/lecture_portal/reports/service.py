from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.validators import require_choice, require_non_empty
from ..core.constants import REPORT_DURATIONS
from ..core.enums import LectureStatus, NotificationType, Role
from ..core.exceptions import AuthorizationError, RemoteFailure, ValidationError
from ..lectures.repository import LectureRepository
from ..lectures.service import LectureScheduler
from ..notifications.service import NotificationService
from ..users.repository import ProfileRepository
from ..users.session import SessionUser
from .model import DepartmentStats, LectureReport
from .repository import LectureReportRepository

logger = logging.getLogger(__name__)

# Outcomes a faculty member can report; "scheduled" is not one of them.
REPORT_STATUSES = (LectureStatus.COMPLETED, LectureStatus.CANCELLED, LectureStatus.RESCHEDULED)


class ReportSubmissionWorkflow:
    """Use case: faculty reports on one of their scheduled lectures.

    Steps run in order: store the report, set the lecture status, notify the
    branch HOD. Only the notification is best-effort; a failing status
    update leaves the stored report in place.
    """

    def __init__(
        self,
        reports: LectureReportRepository,
        lectures: LectureRepository,
        scheduler: LectureScheduler,
        profiles: ProfileRepository,
        notifications: NotificationService,
    ):
        self._reports = reports
        self._lectures = lectures
        self._scheduler = scheduler
        self._profiles = profiles
        self._notifications = notifications

    def submit(
        self,
        *,
        current: SessionUser,
        lecture_id: str,
        topic: str,
        duration,
        status,
        remarks: Optional[str] = None,
    ) -> LectureReport:
        if current.role != Role.FACULTY:
            raise AuthorizationError("Only faculty can submit lecture reports")

        topic = require_non_empty(topic, "Topic covered")
        try:
            duration = int(duration)
        except (TypeError, ValueError):
            raise ValidationError("Duration must be a number of minutes")
        require_choice(duration, REPORT_DURATIONS, "Duration")
        try:
            outcome = LectureStatus(status)
        except ValueError:
            raise ValidationError("Unknown report status")
        require_choice(outcome, REPORT_STATUSES, "Status")
        remarks = (remarks or "").strip() or None

        pending = self._lectures.list_for_faculty(current.id, status=LectureStatus.SCHEDULED)
        if not pending:
            raise ValidationError("No scheduled lectures found. Please contact your HOD to assign lectures.")
        lecture = next((l for l in pending if l.id == lecture_id), None)
        if not lecture:
            raise ValidationError("Please select one of your scheduled lectures")

        report = self._reports.create(
            faculty_id=current.id,
            lecture_id=lecture.id,
            subject=lecture.subject,
            report_date=lecture.date,
            topic_covered=topic,
            duration=duration,
            status=outcome.value,
            remarks=remarks,
        )

        self._scheduler.set_status(lecture.id, outcome)

        self._notify_hod(current, subject=lecture.subject, topic=topic, outcome=outcome)
        return report

    def _notify_hod(self, current: SessionUser, *, subject: str, topic: str, outcome: LectureStatus) -> None:
        if not current.branch_id:
            return
        try:
            hod = self._profiles.find_hod(current.branch_id)
        except RemoteFailure:
            logger.warning("HOD lookup failed for branch %s", current.branch_id, exc_info=True)
            return
        if not hod:
            return

        self._notifications.notify(
            user_id=hod.id,
            title="New Lecture Report Submitted",
            message=f"{current.name} has submitted a report for {subject} - {topic} ({outcome.value})",
            kind=NotificationType.REPORT,
        )


class ReportQueries:
    def __init__(self, reports: LectureReportRepository, profiles: ProfileRepository):
        self._reports = reports
        self._profiles = profiles

    def list(
        self,
        *,
        faculty_id: Optional[str] = None,
        branch_id: Optional[str] = None,
        department: Optional[str] = None,
    ) -> Sequence[LectureReport]:
        """Reports newest first.

        ``branch_id`` takes precedence over ``department``.
        """
        reports = self._reports.list(faculty_id=faculty_id)
        if not (branch_id or department):
            return reports

        authors = {p.id: p for p in self._profiles.list_by_ids(r.faculty_id for r in reports)}
        if branch_id:
            return [r for r in reports if r.faculty_id in authors and authors[r.faculty_id].branch_id == branch_id]
        return [r for r in reports if r.faculty_id in authors and authors[r.faculty_id].department == department]

    def department_stats(self) -> Sequence[DepartmentStats]:
        reports = self._reports.list()
        authors = {p.id: p for p in self._profiles.list_by_ids(r.faculty_id for r in reports)}

        stats: dict[str, DepartmentStats] = {}
        for report in reports:
            author = authors.get(report.faculty_id)
            department = author.department if author and author.department else "Unknown"
            entry = stats.setdefault(department, DepartmentStats(department=department))
            entry.total_lectures += 1
            if report.status == LectureStatus.COMPLETED.value:
                entry.completed += 1
            elif report.status == LectureStatus.CANCELLED.value:
                entry.cancelled += 1
            elif report.status == LectureStatus.RESCHEDULED.value:
                entry.rescheduled += 1
        return list(stats.values())
