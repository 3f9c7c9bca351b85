from __future__ import annotations

from typing import Optional, Sequence

from ..database.store import RemoteStore
from .model import Branch


def _to_branch(r: dict) -> Branch:
    return Branch(id=str(r["id"]), name=r["name"], code=r["code"], created_at=r.get("created_at"))


class BranchRepository:
    def __init__(self, store: RemoteStore):
        self._store = store

    def get_by_id(self, branch_id: str) -> Optional[Branch]:
        rows = self._store.select("branches", {"id": branch_id}, limit=1)
        return _to_branch(rows[0]) if rows else None

    def list_all(self) -> Sequence[Branch]:
        return [_to_branch(r) for r in self._store.select("branches", order_by=("name",))]

    def create(self, *, name: str, code: str) -> Branch:
        return _to_branch(self._store.insert("branches", {"name": name, "code": code}))

    def update(self, branch_id: str, *, name: str, code: str) -> Branch:
        return _to_branch(self._store.update("branches", branch_id, {"name": name, "code": code}))

    def delete(self, branch_id: str) -> None:
        self._store.delete("branches", branch_id)
