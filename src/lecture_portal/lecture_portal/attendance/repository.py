from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..common.datetime_utils import as_date
from ..core.enums import AttendanceStatus
from ..database.store import RemoteStore
from .model import AttendanceRecord


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        id=str(r["id"]),
        user_id=str(r["user_id"]),
        role=r["role"],
        branch_id=r.get("branch_id"),
        date=as_date(r["date"]),
        status=AttendanceStatus(r["status"]),
        created_at=r.get("created_at"),
    )


class AttendanceRepository:
    def __init__(self, store: RemoteStore):
        self._store = store

    def get_for_user_and_date(self, user_id: str, work_date: date) -> Optional[AttendanceRecord]:
        rows = self._store.select("attendance", {"user_id": user_id, "date": work_date}, limit=1)
        return _to_record(rows[0]) if rows else None

    def create(
        self,
        *,
        user_id: str,
        role: str,
        branch_id: Optional[str],
        work_date: date,
        status: AttendanceStatus,
    ) -> AttendanceRecord:
        row = self._store.insert(
            "attendance",
            {"user_id": user_id, "role": role, "branch_id": branch_id, "date": work_date, "status": status.value},
        )
        return _to_record(row)

    def update_status(self, attendance_id: str, status: AttendanceStatus) -> AttendanceRecord:
        return _to_record(self._store.update("attendance", attendance_id, {"status": status.value}))

    def get_recent_for_user(self, user_id: str, limit: int) -> Sequence[AttendanceRecord]:
        rows = self._store.select("attendance", {"user_id": user_id}, order_by=("-date",), limit=int(limit))
        return [_to_record(r) for r in rows]

    def list_for_date(self, work_date: date, *, branch_id: Optional[str] = None) -> Sequence[AttendanceRecord]:
        filters: dict = {"date": work_date}
        if branch_id is not None:
            filters["branch_id"] = branch_id
        rows = self._store.select("attendance", filters, order_by=("created_at",))
        return [_to_record(r) for r in rows]
