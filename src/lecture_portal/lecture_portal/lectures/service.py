from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Optional, Sequence

from ..common.datetime_utils import as_date, today_local, week_bounds
from ..common.validators import require_choice, require_non_empty
from ..core.constants import BLOCKS, TIME_SLOTS, YEARS
from ..core.enums import LectureStatus, NotificationType, Role
from ..core.exceptions import (
    AuthorizationError,
    IntegrityViolation,
    NotFoundError,
    RoomConflictError,
    ValidationError,
)
from ..notifications.service import NotificationService
from ..users.repository import ProfileRepository
from ..users.session import SessionUser
from .conflicts import RoomConflictChecker
from .model import Lecture, LectureInput
from .repository import LectureRepository

logger = logging.getLogger(__name__)


def parse_lecture_status(value) -> LectureStatus:
    try:
        return LectureStatus(value)
    except ValueError:
        raise ValidationError("Unknown lecture status")


class LectureScheduler:
    """Use case: HOD creates, edits and removes timetable entries."""

    def __init__(
        self,
        lectures: LectureRepository,
        checker: RoomConflictChecker,
        profiles: ProfileRepository,
        notifications: NotificationService,
    ):
        self._lectures = lectures
        self._checker = checker
        self._profiles = profiles
        self._notifications = notifications

    @staticmethod
    def _require_hod(current: SessionUser) -> None:
        if current.role != Role.HOD:
            raise AuthorizationError("Only an HOD can change the timetable")
        if not current.branch_id:
            raise AuthorizationError("Your profile is not attached to a branch")

    def _require_branch_faculty(self, current: SessionUser, faculty_id: str) -> None:
        """The assignee must be a faculty member of the HOD's own branch."""
        profile = self._profiles.get_by_id(faculty_id)
        if not profile:
            raise NotFoundError("Faculty member not found")
        if profile.branch_id != current.branch_id or not self._profiles.has_role(profile.id, Role.FACULTY):
            raise AuthorizationError("Lectures can only be assigned to faculty of your branch")

    def _owned_lecture(self, current: SessionUser, lecture_id: str) -> Lecture:
        lecture = self._lectures.get_by_id(lecture_id)
        if not lecture:
            raise NotFoundError("Lecture not found")
        owner = self._profiles.get_by_id(lecture.faculty_id)
        if not owner or owner.branch_id != current.branch_id:
            raise AuthorizationError("This lecture belongs to another branch")
        return lecture

    def _validate(
        self,
        *,
        faculty_id: str,
        subject: str,
        lecture_date,
        time_slot: str,
        block: str,
        room,
        year,
    ) -> LectureInput:
        faculty_id = require_non_empty(faculty_id, "Faculty")
        subject = require_non_empty(subject, "Subject")
        if not lecture_date:
            raise ValidationError("Date is required")
        time_slot = require_choice(require_non_empty(time_slot, "Time"), TIME_SLOTS, "Time")
        block = require_choice(require_non_empty(block, "Block").upper(), BLOCKS, "Block")

        try:
            room_no = int(room)
            year_no = int(year)
        except (TypeError, ValueError):
            raise ValidationError("Room and year must be numbers")
        if not 1 <= room_no <= self._checker.rooms_per_block:
            raise ValidationError(f"Room must be between 1 and {self._checker.rooms_per_block}")
        require_choice(year_no, YEARS, "Year")

        return LectureInput(
            faculty_id=faculty_id,
            subject=subject,
            date=as_date(lecture_date),
            time=time_slot,
            block=block,
            room=room_no,
            year=year_no,
        )

    def _ensure_room_free(self, data: LectureInput, *, exclude_lecture_id: Optional[str] = None) -> None:
        conflict = self._checker.find_conflict(
            data.date, data.time, data.block, data.room, exclude_lecture_id=exclude_lecture_id
        )
        if conflict:
            raise RoomConflictError(
                f"Block {data.block}, Room {data.room} is already booked on "
                f"{data.date:%Y-%m-%d} at {data.time}",
                lecture_id=conflict.id,
            )

    def create(
        self,
        *,
        current: SessionUser,
        faculty_id: str,
        subject: str,
        lecture_date,
        time_slot: str,
        block: str,
        room,
        year,
    ) -> Lecture:
        self._require_hod(current)
        data = self._validate(
            faculty_id=faculty_id,
            subject=subject,
            lecture_date=lecture_date,
            time_slot=time_slot,
            block=block,
            room=room,
            year=year,
        )
        self._require_branch_faculty(current, data.faculty_id)

        self._ensure_room_free(data)
        try:
            lecture = self._lectures.create(data)
        except IntegrityViolation as e:
            # Lost the race against another writer for the same slot.
            raise RoomConflictError(f"Block {data.block}, Room {data.room} was just booked") from e

        self._notifications.notify(
            user_id=lecture.faculty_id,
            title="New Lecture Scheduled",
            message=(
                f"You have been assigned to teach {lecture.subject} on {lecture.date:%b %d, %Y} "
                f"at {lecture.time} in Block {lecture.block}, Room {lecture.room}."
            ),
            kind=NotificationType.LECTURE,
        )
        return lecture

    def update(
        self,
        *,
        current: SessionUser,
        lecture_id: str,
        faculty_id: str,
        subject: str,
        lecture_date,
        time_slot: str,
        block: str,
        room,
        year,
    ) -> Lecture:
        self._require_hod(current)
        lecture_id = require_non_empty(lecture_id, "Lecture")
        data = self._validate(
            faculty_id=faculty_id,
            subject=subject,
            lecture_date=lecture_date,
            time_slot=time_slot,
            block=block,
            room=room,
            year=year,
        )
        self._owned_lecture(current, lecture_id)
        self._require_branch_faculty(current, data.faculty_id)

        self._ensure_room_free(data, exclude_lecture_id=lecture_id)
        try:
            return self._lectures.update(lecture_id, data)
        except IntegrityViolation as e:
            raise RoomConflictError(f"Block {data.block}, Room {data.room} was just booked") from e

    def delete(self, *, current: SessionUser, lecture_id: str) -> None:
        """Remove the lecture; its reports and notifications stay."""
        self._require_hod(current)
        lecture = self._owned_lecture(current, require_non_empty(lecture_id, "Lecture"))
        self._lectures.delete(lecture.id)

    def set_status(self, lecture_id: str, status, *, current: Optional[SessionUser] = None) -> Lecture:
        """Overwrite the status. Any status may follow any other.

        With ``current`` set the change is made by an HOD and is limited to
        lectures of their branch; without it the caller has already checked
        ownership (report submission).
        """
        lecture_id = require_non_empty(lecture_id, "Lecture")
        status = parse_lecture_status(status)
        if current is not None:
            self._require_hod(current)
            self._owned_lecture(current, lecture_id)
        return self._lectures.set_status(lecture_id, status)


class LectureQueries:
    """Read side of the timetable."""

    def __init__(self, lectures: LectureRepository, profiles: ProfileRepository):
        self._lectures = lectures
        self._profiles = profiles

    def get(self, lecture_id: str) -> Lecture:
        lecture = self._lectures.get_by_id(lecture_id)
        if not lecture:
            raise NotFoundError("Lecture not found")
        return lecture

    def today(self, *, faculty_id: Optional[str] = None, today: Optional[date] = None) -> Sequence[Lecture]:
        return self._lectures.list_for_date(today or today_local(), faculty_id=faculty_id)

    def pending_for_faculty(self, faculty_id: Optional[str]) -> Sequence[Lecture]:
        """Lectures still waiting for a report, soonest first."""
        if not faculty_id:
            return []
        return self._lectures.list_for_faculty(faculty_id, status=LectureStatus.SCHEDULED)

    def for_branch_between(self, branch_id: Optional[str], start: Optional[date], end: Optional[date]) -> Sequence[Lecture]:
        if not (branch_id and start and end):
            return []
        faculty_ids = [p.id for p in self._profiles.list_by_branch(branch_id)]
        if not faculty_ids:
            return []
        return self._lectures.list_between(start=start, end=end, faculty_ids=faculty_ids)

    def weekly_count(self, *, faculty_id: Optional[str] = None, today: Optional[date] = None) -> int:
        # Sunday-start week
        start, end = week_bounds(today or today_local(), week_starts_on=6)
        lectures = self._lectures.list_between(start=start, end=end)
        if faculty_id:
            lectures = [l for l in lectures if l.faculty_id == faculty_id]
        return len(lectures)

    def week_grid(self, branch_id: Optional[str], day: date) -> dict[date, list[Lecture]]:
        """Monday-start week around ``day``, one entry per day (possibly empty)."""
        start, end = week_bounds(day, week_starts_on=0)
        grid: dict[date, list[Lecture]] = {start + timedelta(days=i): [] for i in range(7)}
        for lecture in self.for_branch_between(branch_id, start, end):
            grid[lecture.date].append(lecture)
        return grid

    def describe(self, lectures: Sequence[Lecture]) -> list[dict]:
        """Lecture dicts with the assigned faculty's name and department."""
        faculty = {p.id: p for p in self._profiles.list_by_ids(l.faculty_id for l in lectures)}
        out = []
        for lecture in lectures:
            data = lecture.to_dict()
            profile = faculty.get(lecture.faculty_id)
            data["faculty"] = (
                {"id": profile.id, "name": profile.name, "department": profile.department} if profile else None
            )
            out.append(data)
        return out
