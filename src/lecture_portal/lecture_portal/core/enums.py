from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Role assigned to a profile (one per profile)."""

    FACULTY = "faculty"
    HOD = "hod"
    REGISTRAR = "registrar"


class LectureStatus(str, Enum):
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    RESCHEDULED = "rescheduled"


class AttendanceStatus(str, Enum):
    PRESENT = "present"
    LEAVE = "leave"


class NotificationType(str, Enum):
    LECTURE = "lecture"
    REPORT = "report"
    SYSTEM = "system"
