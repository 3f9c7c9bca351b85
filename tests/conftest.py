from __future__ import annotations

import copy
from datetime import date, datetime, timedelta
from typing import Any, Mapping, Optional

import pytest

from lecture_portal.container import build_container
from lecture_portal.core.enums import Role
from lecture_portal.core.exceptions import IntegrityViolation, NotFoundError, RemoteFailure
from lecture_portal.database.store import Between, check_columns, columns_for, new_row_defaults
from lecture_portal.users.session import SessionUser


UNIQUE_KEYS: dict[str, tuple[tuple[str, ...], ...]] = {
    "branches": (("code",),),
    "profiles": (("email",),),
    "user_roles": (("profile_id",),),
    "lectures": (("date", "time", "block", "room"),),
    "attendance": (("user_id", "date"),),
}

# (child table, column, parent table): parent deletes are restricted
FOREIGN_KEYS = (("profiles", "branch_id", "branches"),)


def _matches(value: Any, wanted: Any) -> bool:
    if wanted is None:
        return value is None
    if isinstance(wanted, Between):
        return value is not None and wanted.low <= value <= wanted.high
    if isinstance(wanted, (list, tuple, set, frozenset)):
        return value in wanted
    return value == wanted


class InMemoryStore:
    """Dict-backed store with the same filter semantics and constraints as the MySQL schema.

    ``fail_on`` holds (operation, table) pairs that raise RemoteFailure, to
    exercise failure paths.
    """

    def __init__(self):
        self.tables: dict[str, dict[str, dict]] = {}
        self.fail_on: set[tuple[str, str]] = set()
        self.calls: list[tuple[str, str]] = []
        self._clock = datetime(2025, 1, 1, 8, 0, 0)

    def _rows(self, table: str) -> dict[str, dict]:
        columns_for(table)
        return self.tables.setdefault(table, {})

    def _record(self, op: str, table: str) -> None:
        self.calls.append((op, table))
        if (op, table) in self.fail_on:
            raise RemoteFailure(f"{op} {table}: simulated outage")

    def _tick(self) -> datetime:
        self._clock += timedelta(seconds=1)
        return self._clock

    def _check_unique(self, table: str, row: dict, *, skip_id: Optional[str] = None) -> None:
        for key in UNIQUE_KEYS.get(table, ()):
            wanted = tuple(row.get(c) for c in key)
            for other in self._rows(table).values():
                if other["id"] == skip_id:
                    continue
                if tuple(other.get(c) for c in key) == wanted:
                    raise IntegrityViolation(f"Duplicate entry for {table}({', '.join(key)})")

    def select(self, table, filters=None, *, order_by=(), limit=None):
        self._record("select", table)
        filters = dict(filters or {})
        check_columns(table, filters.keys())

        rows = [r for r in self._rows(table).values() if all(_matches(r.get(k), v) for k, v in filters.items())]
        for entry in reversed(list(order_by)):
            desc = entry.startswith("-")
            name = entry[1:] if desc else entry
            check_columns(table, [name])
            rows.sort(key=lambda r: (r.get(name) is None, r.get(name)), reverse=desc)
        if limit is not None:
            rows = rows[: int(limit)]
        return [copy.deepcopy(r) for r in rows]

    def insert(self, table, row):
        self._record("insert", table)
        data = new_row_defaults(table, row)
        if "created_at" in columns_for(table) and "created_at" not in row:
            data["created_at"] = self._tick()
        check_columns(table, data.keys())
        stored = {c: data.get(c) for c in columns_for(table)}
        self._check_unique(table, stored)
        self._rows(table)[stored["id"]] = stored
        return copy.deepcopy(stored)

    def update(self, table, row_id, patch):
        self._record("update", table)
        data = {k: v for k, v in dict(patch).items() if k != "id"}
        check_columns(table, data.keys())
        current = self._rows(table).get(row_id)
        if current is None:
            raise NotFoundError(f"{table} row {row_id} not found")
        merged = {**current, **data}
        self._check_unique(table, merged, skip_id=row_id)
        self._rows(table)[row_id] = merged
        return copy.deepcopy(merged)

    def delete(self, table, row_id):
        self._record("delete", table)
        for child, column, parent in FOREIGN_KEYS:
            if parent == table and any(r.get(column) == row_id for r in self._rows(child).values()):
                raise IntegrityViolation(f"Cannot delete {table} row: referenced by {child}.{column}")
        self._rows(table).pop(row_id, None)

    def count(self, table: str) -> int:
        return len(self._rows(table))


class Seeder:
    """Shortcuts for writing fixtures straight into the store."""

    def __init__(self, store: InMemoryStore):
        self.store = store

    def branch(self, name: str = "Computer Science", code: str = "CS") -> dict:
        return self.store.insert("branches", {"name": name, "code": code})

    def profile(
        self,
        name: str,
        *,
        role: Role = Role.FACULTY,
        branch: Optional[Mapping] = None,
        email: Optional[str] = None,
        department: Optional[str] = None,
        password_hash: Optional[str] = None,
    ) -> dict:
        profile = self.store.insert(
            "profiles",
            {
                "name": name,
                "email": email or f"{name.lower().replace(' ', '.')}@uni.edu",
                "department": department if department is not None else (branch["name"] if branch else "Administration"),
                "branch_id": branch["id"] if branch else None,
                "password_hash": password_hash,
            },
        )
        self.store.insert("user_roles", {"profile_id": profile["id"], "role": role.value})
        return profile

    def lecture(
        self,
        *,
        faculty: Mapping,
        lecture_date: date,
        time: str = "09:00 AM",
        block: str = "A",
        room: int = 1,
        subject: str = "Data Structures",
        year: int = 2,
        status: str = "scheduled",
    ) -> dict:
        return self.store.insert(
            "lectures",
            {
                "subject": subject,
                "date": lecture_date,
                "time": time,
                "block": block,
                "room": room,
                "year": year,
                "faculty_id": faculty["id"],
                "status": status,
            },
        )

    def attendance(self, profile: Mapping, *, on: date, status: str, role: str = "faculty") -> dict:
        return self.store.insert(
            "attendance",
            {"user_id": profile["id"], "role": role, "branch_id": profile.get("branch_id"), "date": on, "status": status},
        )


def session_user(profile: Mapping, role: Role) -> SessionUser:
    return SessionUser(
        id=profile["id"],
        name=profile["name"],
        email=profile["email"],
        role=role,
        department=profile.get("department") or "",
        branch_id=profile.get("branch_id"),
    )


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def seed(store) -> Seeder:
    return Seeder(store)


@pytest.fixture
def container(store):
    return build_container(store=store)


@pytest.fixture
def app(container, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    from lecture_portal.main import create_app

    return create_app(container)


@pytest.fixture
def client(app):
    return app.test_client()
