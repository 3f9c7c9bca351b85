from __future__ import annotations

from typing import Iterable, Optional, Sequence

from ..core.enums import Role
from ..database.store import RemoteStore
from .model import Profile, RoleAssignment


def _to_profile(r: dict) -> Profile:
    return Profile(
        id=str(r["id"]),
        name=r["name"],
        email=r["email"],
        department=r.get("department") or "",
        branch_id=r.get("branch_id"),
        created_at=r.get("created_at"),
        password_hash=r.get("password_hash"),
    )


def _to_role(r: dict) -> RoleAssignment:
    return RoleAssignment(id=str(r["id"]), profile_id=str(r["profile_id"]), role=Role(r["role"]))


class ProfileRepository:
    """Profiles and their role assignments (``profiles`` + ``user_roles``)."""

    def __init__(self, store: RemoteStore):
        self._store = store

    def get_by_id(self, profile_id: str) -> Optional[Profile]:
        rows = self._store.select("profiles", {"id": profile_id}, limit=1)
        return _to_profile(rows[0]) if rows else None

    def get_by_email(self, email: str) -> Optional[Profile]:
        rows = self._store.select("profiles", {"email": email}, limit=1)
        return _to_profile(rows[0]) if rows else None

    def list_by_ids(self, profile_ids: Iterable[str]) -> Sequence[Profile]:
        ids = sorted(set(profile_ids))
        if not ids:
            return []
        return [_to_profile(r) for r in self._store.select("profiles", {"id": ids})]

    def list_by_branch(self, branch_id: str) -> Sequence[Profile]:
        rows = self._store.select("profiles", {"branch_id": branch_id}, order_by=("name",))
        return [_to_profile(r) for r in rows]

    def list_all(self) -> Sequence[Profile]:
        return [_to_profile(r) for r in self._store.select("profiles", order_by=("name",))]

    def create(
        self,
        *,
        name: str,
        email: str,
        department: str,
        branch_id: Optional[str],
        password_hash: Optional[str] = None,
    ) -> Profile:
        row = self._store.insert(
            "profiles",
            {
                "name": name,
                "email": email,
                "department": department,
                "branch_id": branch_id,
                "password_hash": password_hash,
            },
        )
        return _to_profile(row)

    def delete(self, profile_id: str) -> None:
        self._store.delete("profiles", profile_id)

    # -- roles --------------------------------------------------------------

    def assign_role(self, profile_id: str, role: Role) -> RoleAssignment:
        return _to_role(self._store.insert("user_roles", {"profile_id": profile_id, "role": role.value}))

    def has_role(self, profile_id: str, role: Role) -> bool:
        return bool(self._store.select("user_roles", {"profile_id": profile_id, "role": role.value}, limit=1))

    def roles_by_profile(self, profile_ids: Optional[Iterable[str]] = None) -> dict[str, Role]:
        """Map profile id -> role.

        A profile is expected to hold a single role; if the table holds
        several rows for one profile the first one returned wins.
        """
        filters = None
        if profile_ids is not None:
            filters = {"profile_id": sorted(set(profile_ids))}
        out: dict[str, Role] = {}
        for r in self._store.select("user_roles", filters):
            out.setdefault(str(r["profile_id"]), Role(r["role"]))
        return out

    def list_by_role(self, role: Role, *, branch_id: Optional[str] = None) -> Sequence[Profile]:
        assignments = self._store.select("user_roles", {"role": role.value})
        profiles = self.list_by_ids(str(a["profile_id"]) for a in assignments)
        if branch_id is not None:
            profiles = [p for p in profiles if p.branch_id == branch_id]
        return sorted(profiles, key=lambda p: p.name.lower())

    def find_hod(self, branch_id: str) -> Optional[Profile]:
        hods = self.list_by_role(Role.HOD, branch_id=branch_id)
        return hods[0] if hods else None
