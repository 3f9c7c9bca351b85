from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..branches.model import Branch
from ..core.enums import AttendanceStatus, Role
from ..users.model import Profile


@dataclass(frozen=True)
class AttendanceRecord:
    """One row per (profile, date)."""

    id: str
    user_id: str
    role: str
    branch_id: Optional[str]
    date: date
    status: AttendanceStatus
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "role": self.role,
            "branch_id": self.branch_id,
            "date": self.date.strftime("%Y-%m-%d"),
            "status": self.status.value,
        }


@dataclass(frozen=True)
class AttendanceEntry:
    profile: Profile
    role: Role
    record: Optional[AttendanceRecord] = None

    def to_dict(self) -> dict:
        return {
            "profile": self.profile.to_dict(),
            "role": self.role.value,
            "attendance": self.record.to_dict() if self.record else None,
        }


@dataclass
class AttendancePartition:
    """Present / on-leave / not-marked split of a roster for one date.

    The three lists are disjoint and together hold the whole roster.
    """

    date: date
    present: list[AttendanceEntry] = field(default_factory=list)
    leave: list[AttendanceEntry] = field(default_factory=list)
    not_marked: list[AttendanceEntry] = field(default_factory=list)

    def counts(self) -> dict[str, int]:
        return {"present": len(self.present), "leave": len(self.leave), "not_marked": len(self.not_marked)}

    def to_dict(self) -> dict:
        return {
            "date": self.date.strftime("%Y-%m-%d"),
            "present": [e.to_dict() for e in self.present],
            "leave": [e.to_dict() for e in self.leave],
            "not_marked": [e.to_dict() for e in self.not_marked],
            "counts": self.counts(),
        }


@dataclass
class BranchAttendance:
    branch: Branch
    partition: AttendancePartition

    def to_dict(self) -> dict:
        return {"branch": self.branch.to_dict(), **self.partition.to_dict()}
