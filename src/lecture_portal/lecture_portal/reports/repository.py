from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..common.datetime_utils import as_date
from ..database.store import RemoteStore
from .model import LectureReport


def _to_report(r: dict) -> LectureReport:
    return LectureReport(
        id=str(r["id"]),
        faculty_id=str(r["faculty_id"]),
        lecture_id=r.get("lecture_id"),
        subject=r["subject"],
        date=as_date(r["date"]),
        topic_covered=r["topic_covered"],
        duration=int(r["duration"]),
        status=r["status"],
        remarks=r.get("remarks"),
        created_at=r.get("created_at"),
    )


class LectureReportRepository:
    def __init__(self, store: RemoteStore):
        self._store = store

    def create(
        self,
        *,
        faculty_id: str,
        lecture_id: Optional[str],
        subject: str,
        report_date: date,
        topic_covered: str,
        duration: int,
        status: str,
        remarks: Optional[str] = None,
    ) -> LectureReport:
        row = self._store.insert(
            "lecture_reports",
            {
                "faculty_id": faculty_id,
                "lecture_id": lecture_id,
                "subject": subject,
                "date": report_date,
                "topic_covered": topic_covered,
                "duration": int(duration),
                "status": status,
                "remarks": remarks,
            },
        )
        return _to_report(row)

    def list(self, *, faculty_id: Optional[str] = None) -> Sequence[LectureReport]:
        filters = {"faculty_id": faculty_id} if faculty_id else None
        rows = self._store.select("lecture_reports", filters, order_by=("-date", "-created_at"))
        return [_to_report(r) for r in rows]
