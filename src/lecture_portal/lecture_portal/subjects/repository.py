from __future__ import annotations

from typing import Optional, Sequence

from ..database.store import RemoteStore
from .model import Subject


def _to_subject(r: dict) -> Subject:
    return Subject(
        id=str(r["id"]),
        name=r["name"],
        code=r["code"],
        year=int(r["year"]),
        branch_id=str(r["branch_id"]),
        created_at=r.get("created_at"),
    )


class SubjectRepository:
    def __init__(self, store: RemoteStore):
        self._store = store

    def list_for_branch(self, branch_id: str, *, year: Optional[int] = None) -> Sequence[Subject]:
        filters: dict = {"branch_id": branch_id}
        if year:
            filters["year"] = int(year)
        return [_to_subject(r) for r in self._store.select("subjects", filters, order_by=("name",))]

    def create(self, *, name: str, code: str, branch_id: str, year: int) -> Subject:
        row = self._store.insert("subjects", {"name": name, "code": code, "branch_id": branch_id, "year": int(year)})
        return _to_subject(row)

    def update(self, subject_id: str, *, name: str, code: str, year: int) -> Subject:
        row = self._store.update("subjects", subject_id, {"name": name, "code": code, "year": int(year)})
        return _to_subject(row)

    def delete(self, subject_id: str) -> None:
        self._store.delete("subjects", subject_id)
