from __future__ import annotations

from datetime import date
from typing import Iterable, Mapping, Optional, Sequence

from ..branches.repository import BranchRepository
from ..common.datetime_utils import as_date, today_local
from ..common.validators import require_non_empty
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import AttendanceStatus, Role
from ..core.exceptions import ValidationError
from ..users.model import Profile
from ..users.repository import ProfileRepository
from ..users.service import parse_role
from .model import AttendanceEntry, AttendancePartition, AttendanceRecord, BranchAttendance
from .repository import AttendanceRepository


def parse_attendance_status(value) -> AttendanceStatus:
    try:
        return AttendanceStatus(value)
    except ValueError:
        raise ValidationError("Attendance status must be 'present' or 'leave'")


def partition_roster(
    roster: Iterable[tuple[Profile, Role]],
    records: Iterable[AttendanceRecord],
    *,
    on_date: date,
) -> AttendancePartition:
    """Split ``roster`` by the status each member marked on ``on_date``.

    Records of people outside the roster are ignored. When a member has
    several records the last one wins.
    """
    latest: dict[str, AttendanceRecord] = {}
    for record in records:
        latest[record.user_id] = record

    partition = AttendancePartition(date=on_date)
    for profile, role in roster:
        record = latest.get(profile.id)
        if record is None:
            partition.not_marked.append(AttendanceEntry(profile=profile, role=role))
        elif record.status == AttendanceStatus.PRESENT:
            partition.present.append(AttendanceEntry(profile=profile, role=role, record=record))
        else:
            partition.leave.append(AttendanceEntry(profile=profile, role=role, record=record))
    return partition


class AttendanceAggregator:
    """Use cases: staff mark their own day; HOD / registrar read the split."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        profiles: ProfileRepository,
        branches: BranchRepository,
        *,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
    ):
        self._attendance = attendance
        self._profiles = profiles
        self._branches = branches
        self._history_limit = int(history_limit)

    def mark_self(
        self,
        *,
        user_id: str,
        role,
        branch_id: Optional[str],
        status,
        target_date=None,
    ) -> AttendanceRecord:
        """Record today's (or ``target_date``'s) status, overwriting an earlier mark.

        Past days are closed. A future day can only be booked as leave.
        """
        user_id = require_non_empty(user_id, "User")
        role = parse_role(role).value if role else Role.FACULTY.value
        status = parse_attendance_status(status)
        today = today_local()
        work_date = as_date(target_date) if target_date else today
        if work_date < today:
            raise ValidationError("Attendance cannot be marked for a past date")
        if work_date > today and status != AttendanceStatus.LEAVE:
            raise ValidationError("Only leave can be marked for a future date")

        existing = self._attendance.get_for_user_and_date(user_id, work_date)
        if existing:
            return self._attendance.update_status(existing.id, status)

        return self._attendance.create(
            user_id=user_id,
            role=role,
            branch_id=branch_id,
            work_date=work_date,
            status=status,
        )

    def today(self, user_id: Optional[str], *, today: Optional[date] = None) -> Optional[AttendanceRecord]:
        if not user_id:
            return None
        return self._attendance.get_for_user_and_date(user_id, today or today_local())

    def history(self, user_id: Optional[str], *, limit: Optional[int] = None) -> Sequence[AttendanceRecord]:
        if not user_id:
            return []
        return self._attendance.get_recent_for_user(user_id, limit or self._history_limit)

    def by_branch(self, branch_id: str, target_date=None) -> AttendancePartition:
        """Faculty roster of one branch split for one date."""
        work_date = as_date(target_date) if target_date else today_local()

        records = self._attendance.list_for_date(work_date, branch_id=branch_id)
        marked_profiles = {p.id: p for p in self._profiles.list_by_ids(r.user_id for r in records)}

        faculty = self._profiles.list_by_role(Role.FACULTY, branch_id=branch_id)
        roster = [(marked_profiles.get(p.id, p), Role.FACULTY) for p in faculty]
        return partition_roster(roster, records, on_date=work_date)

    def all_branches(self, target_date=None) -> Mapping[str, BranchAttendance]:
        """Every branch keyed by id, each split over all of its profiles.

        HODs count here, unlike :meth:`by_branch`. Branches without
        profiles get three empty lists.
        """
        work_date = as_date(target_date) if target_date else today_local()

        records = self._attendance.list_for_date(work_date)
        profiles = self._profiles.list_all()
        roles = self._profiles.roles_by_profile()
        branches = self._branches.list_all()

        out: dict[str, BranchAttendance] = {}
        for branch in branches:
            roster = [
                (p, roles.get(p.id, Role.FACULTY)) for p in profiles if p.branch_id == branch.id
            ]
            branch_records = [r for r in records if r.branch_id == branch.id]
            out[branch.id] = BranchAttendance(
                branch=branch,
                partition=partition_roster(roster, branch_records, on_date=work_date),
            )
        return out
