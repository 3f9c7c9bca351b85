from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, Sequence

from ..common.datetime_utils import as_date
from ..core.enums import LectureStatus
from ..database.store import Between, RemoteStore
from .model import Lecture, LectureInput, slot_order


def _to_lecture(r: dict) -> Lecture:
    return Lecture(
        id=str(r["id"]),
        subject=r["subject"],
        date=as_date(r["date"]),
        time=r["time"],
        block=r["block"],
        room=int(r["room"]),
        year=int(r["year"]),
        faculty_id=str(r["faculty_id"]),
        status=LectureStatus(r["status"]),
        created_at=r.get("created_at"),
    )


def _sorted(rows: Iterable[dict]) -> list[Lecture]:
    return sorted((_to_lecture(r) for r in rows), key=slot_order)


class LectureRepository:
    def __init__(self, store: RemoteStore):
        self._store = store

    def get_by_id(self, lecture_id: str) -> Optional[Lecture]:
        rows = self._store.select("lectures", {"id": lecture_id}, limit=1)
        return _to_lecture(rows[0]) if rows else None

    def list_for_slot(self, *, lecture_date: date, time_slot: str) -> Sequence[Lecture]:
        """Every lecture at (date, time), all blocks and rooms."""
        return _sorted(self._store.select("lectures", {"date": lecture_date, "time": time_slot}))

    def list_for_date(self, lecture_date: date, *, faculty_id: Optional[str] = None) -> Sequence[Lecture]:
        filters: dict = {"date": lecture_date}
        if faculty_id:
            filters["faculty_id"] = faculty_id
        return _sorted(self._store.select("lectures", filters))

    def list_for_faculty(self, faculty_id: str, *, status: Optional[LectureStatus] = None) -> Sequence[Lecture]:
        filters: dict = {"faculty_id": faculty_id}
        if status is not None:
            filters["status"] = status.value
        return _sorted(self._store.select("lectures", filters))

    def list_between(
        self,
        *,
        start: date,
        end: date,
        faculty_ids: Optional[Sequence[str]] = None,
    ) -> Sequence[Lecture]:
        filters: dict = {"date": Between(start, end)}
        if faculty_ids is not None:
            filters["faculty_id"] = list(faculty_ids)
        return _sorted(self._store.select("lectures", filters))

    def create(self, data: LectureInput, *, status: LectureStatus = LectureStatus.SCHEDULED) -> Lecture:
        row = self._store.insert(
            "lectures",
            {
                "faculty_id": data.faculty_id,
                "subject": data.subject,
                "date": data.date,
                "time": data.time,
                "block": data.block,
                "room": data.room,
                "year": data.year,
                "status": status.value,
            },
        )
        return _to_lecture(row)

    def update(self, lecture_id: str, data: LectureInput) -> Lecture:
        row = self._store.update(
            "lectures",
            lecture_id,
            {
                "faculty_id": data.faculty_id,
                "subject": data.subject,
                "date": data.date,
                "time": data.time,
                "block": data.block,
                "room": data.room,
                "year": data.year,
            },
        )
        return _to_lecture(row)

    def set_status(self, lecture_id: str, status: LectureStatus) -> Lecture:
        return _to_lecture(self._store.update("lectures", lecture_id, {"status": status.value}))

    def delete(self, lecture_id: str) -> None:
        self._store.delete("lectures", lecture_id)
