from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional


@dataclass(frozen=True)
class LectureReport:
    """Faculty's record of what happened in a lecture slot.

    Subject and date are copied from the lecture; ``lecture_id`` links the
    report to it directly.
    """

    id: str
    faculty_id: str
    lecture_id: Optional[str]
    subject: str
    date: date
    topic_covered: str
    duration: int
    status: str
    remarks: Optional[str] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "faculty_id": self.faculty_id,
            "lecture_id": self.lecture_id,
            "subject": self.subject,
            "date": self.date.strftime("%Y-%m-%d"),
            "topic_covered": self.topic_covered,
            "duration": self.duration,
            "status": self.status,
            "remarks": self.remarks,
        }


@dataclass
class DepartmentStats:
    department: str
    total_lectures: int = 0
    completed: int = 0
    cancelled: int = 0
    rescheduled: int = 0
