from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.constants import TIME_SLOTS
from ..core.enums import LectureStatus


@dataclass(frozen=True)
class Lecture:
    """A scheduled teaching slot.

    ``subject`` is free text copied from the subject picker. At most one
    lecture may hold a given (date, time, block, room).
    """

    id: str
    subject: str
    date: date
    time: str
    block: str
    room: int
    year: int
    faculty_id: str
    status: LectureStatus
    created_at: Optional[datetime] = None

    @property
    def slot(self) -> tuple[date, str, str, int]:
        return (self.date, self.time, self.block, self.room)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "subject": self.subject,
            "date": self.date.strftime("%Y-%m-%d"),
            "time": self.time,
            "block": self.block,
            "room": self.room,
            "year": self.year,
            "faculty_id": self.faculty_id,
            "status": self.status.value,
        }


@dataclass(frozen=True)
class LectureInput:
    """Validated fields of a create / update request."""

    faculty_id: str
    subject: str
    date: date
    time: str
    block: str
    room: int
    year: int


def slot_order(lecture: Lecture) -> tuple:
    """Sort key: date, then the position of the time slot in the day."""
    try:
        index = TIME_SLOTS.index(lecture.time)
    except ValueError:
        index = len(TIME_SLOTS)
    return (lecture.date, index, lecture.time, lecture.block, lecture.room)
