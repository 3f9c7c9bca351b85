"""Room double-booking checks.

Results are advisory: nothing here locks the slot, and a concurrent writer
can still take the room between the check and the insert.
"""
from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.constants import ROOMS_PER_BLOCK
from .model import Lecture
from .repository import LectureRepository


def _room_number(room) -> Optional[int]:
    if room is None or room == "":
        return None
    try:
        return int(room)
    except (TypeError, ValueError):
        return None


class RoomConflictChecker:
    def __init__(self, lectures: LectureRepository, *, rooms_per_block: int = ROOMS_PER_BLOCK):
        self._lectures = lectures
        self._rooms_per_block = int(rooms_per_block)

    @property
    def rooms_per_block(self) -> int:
        return self._rooms_per_block

    def _booked(
        self,
        lecture_date: date,
        time_slot: str,
        exclude_lecture_id: Optional[str],
    ) -> Sequence[Lecture]:
        rows = self._lectures.list_for_slot(lecture_date=lecture_date, time_slot=time_slot)
        return [r for r in rows if not (exclude_lecture_id and r.id == exclude_lecture_id)]

    def find_conflict(
        self,
        lecture_date: Optional[date],
        time_slot: Optional[str],
        block: Optional[str],
        room,
        *,
        exclude_lecture_id: Optional[str] = None,
    ) -> Optional[Lecture]:
        """The lecture already holding the room, if any.

        Also None when some input is missing; use :meth:`is_room_booked` to
        tell the two apart.
        """
        room_no = _room_number(room)
        if not (lecture_date and time_slot and block and room_no):
            return None

        block = block.upper()
        for lecture in self._booked(lecture_date, time_slot, exclude_lecture_id):
            if lecture.block == block and lecture.room == room_no:
                return lecture
        return None

    def is_room_booked(
        self,
        lecture_date: Optional[date],
        time_slot: Optional[str],
        block: Optional[str],
        room,
        *,
        exclude_lecture_id: Optional[str] = None,
    ) -> Optional[bool]:
        """True / False, or None when the slot is not fully specified yet."""
        if not (lecture_date and time_slot and block and _room_number(room)):
            return None
        conflict = self.find_conflict(
            lecture_date, time_slot, block, room, exclude_lecture_id=exclude_lecture_id
        )
        return conflict is not None

    def booked_rooms(self, lecture_date: Optional[date], time_slot: Optional[str]) -> list[tuple[str, int]]:
        if not (lecture_date and time_slot):
            return []
        return [(r.block, r.room) for r in self._booked(lecture_date, time_slot, None)]

    def available_rooms(
        self,
        lecture_date: Optional[date],
        time_slot: Optional[str],
        block: Optional[str],
        *,
        exclude_lecture_id: Optional[str] = None,
    ) -> list[int]:
        """Room numbers 1..N of ``block`` that are free at (date, time)."""
        if not block:
            return []
        block = block.upper()

        taken: set[int] = set()
        if lecture_date and time_slot:
            taken = {
                r.room for r in self._booked(lecture_date, time_slot, exclude_lecture_id) if r.block == block
            }
        return [room for room in range(1, self._rooms_per_block + 1) if room not in taken]
