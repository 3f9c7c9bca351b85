"""Generic table store.

Services never issue SQL themselves. Every repository goes through the four
primitives of :class:`RemoteStore` (select / insert / update / delete) and
resolves relations by issuing a second ``select`` keyed on the ids returned
by the first one.

Filter values:

- a scalar matches by equality,
- ``None`` matches NULL,
- a list / tuple / set matches any of its members (an empty one matches nothing),
- :class:`Between` matches an inclusive range.
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional, Protocol, Sequence

from ..core.exceptions import NotFoundError, RemoteFailure
from .connection import DatabaseConnection
from .mysql_base import db_cursor, fetchall, fetchone, translate_errors

Row = dict

TABLE_COLUMNS: dict[str, tuple[str, ...]] = {
    "profiles": ("id", "name", "email", "department", "branch_id", "password_hash", "created_at"),
    "user_roles": ("id", "profile_id", "role"),
    "branches": ("id", "name", "code", "created_at"),
    "subjects": ("id", "name", "code", "year", "branch_id", "created_at"),
    "lectures": ("id", "subject", "date", "time", "block", "room", "year", "faculty_id", "status", "created_at"),
    "lecture_reports": (
        "id",
        "faculty_id",
        "lecture_id",
        "subject",
        "date",
        "topic_covered",
        "duration",
        "status",
        "remarks",
        "created_at",
    ),
    "attendance": ("id", "user_id", "role", "branch_id", "date", "status", "created_at"),
    "notifications": ("id", "user_id", "title", "message", "type", "is_read", "created_at"),
}


@dataclass(frozen=True)
class Between:
    """Inclusive range filter."""

    low: Any
    high: Any


class RemoteStore(Protocol):
    def select(
        self,
        table: str,
        filters: Optional[Mapping[str, Any]] = None,
        *,
        order_by: Sequence[str] = (),
        limit: Optional[int] = None,
    ) -> list[Row]:
        """Rows of ``table`` matching every filter.

        ``order_by`` entries are column names, prefixed with ``-`` for
        descending order.
        """

        raise NotImplementedError

    def insert(self, table: str, row: Mapping[str, Any]) -> Row:
        """Insert and return the stored row (with ``id`` and ``created_at``)."""

        raise NotImplementedError

    def update(self, table: str, row_id: str, patch: Mapping[str, Any]) -> Row:
        """Apply ``patch`` and return the stored row; NotFoundError if missing."""

        raise NotImplementedError

    def delete(self, table: str, row_id: str) -> None:
        raise NotImplementedError


def columns_for(table: str) -> tuple[str, ...]:
    try:
        return TABLE_COLUMNS[table]
    except KeyError:
        raise RemoteFailure(f"Unknown table {table!r}")


def check_columns(table: str, names) -> None:
    known = columns_for(table)
    for name in names:
        if name not in known:
            raise RemoteFailure(f"Unknown column {table}.{name}")


def new_row_defaults(table: str, row: Mapping[str, Any]) -> dict:
    """Fill the generated columns of a new row."""
    out = dict(row)
    out.setdefault("id", str(uuid.uuid4()))
    if "created_at" in columns_for(table):
        out.setdefault("created_at", datetime.now())
    return out


class MySQLRemoteStore(RemoteStore):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _where(table: str, filters: Optional[Mapping[str, Any]]) -> tuple[str, list]:
        clauses: list[str] = []
        params: list[Any] = []

        for name, value in (filters or {}).items():
            check_columns(table, [name])
            column = f"`{name}`"
            if value is None:
                clauses.append(f"{column} IS NULL")
            elif isinstance(value, Between):
                clauses.append(f"{column} BETWEEN %s AND %s")
                params.extend([value.low, value.high])
            elif isinstance(value, (list, tuple, set, frozenset)):
                values = list(value)
                if not values:
                    clauses.append("1=0")
                    continue
                clauses.append(f"{column} IN ({', '.join(['%s'] * len(values))})")
                params.extend(values)
            else:
                clauses.append(f"{column}=%s")
                params.append(value)

        where = f" WHERE {' AND '.join(clauses)}" if clauses else ""
        return where, params

    @staticmethod
    def _order(table: str, order_by: Sequence[str]) -> str:
        parts = []
        for entry in order_by:
            desc = entry.startswith("-")
            name = entry[1:] if desc else entry
            check_columns(table, [name])
            parts.append(f"`{name}` {'DESC' if desc else 'ASC'}")
        return f" ORDER BY {', '.join(parts)}" if parts else ""

    def select(self, table, filters=None, *, order_by=(), limit=None):
        columns = columns_for(table)
        where, params = self._where(table, filters)
        sql = f"SELECT {', '.join(f'`{c}`' for c in columns)} FROM `{table}`{where}{self._order(table, order_by)}"
        if limit is not None:
            sql += " LIMIT %s"
            params.append(int(limit))

        with translate_errors(f"select {table}"):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(sql, tuple(params))
                return fetchall(cur)

    def _get(self, cur, table: str, row_id: str) -> Optional[Row]:
        columns = columns_for(table)
        cur.execute(
            f"SELECT {', '.join(f'`{c}`' for c in columns)} FROM `{table}` WHERE `id`=%s",
            (row_id,),
        )
        return fetchone(cur)

    def insert(self, table, row):
        data = new_row_defaults(table, row)
        check_columns(table, data.keys())
        names = list(data.keys())

        with translate_errors(f"insert {table}"):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"INSERT INTO `{table}`({', '.join(f'`{n}`' for n in names)}) "
                    f"VALUES({', '.join(['%s'] * len(names))})",
                    tuple(data[n] for n in names),
                )
                return self._get(cur, table, data["id"]) or data

    def update(self, table, row_id, patch):
        data = {k: v for k, v in dict(patch).items() if k != "id"}
        check_columns(table, data.keys())

        with translate_errors(f"update {table}"):
            with db_cursor(self._conn_factory) as (_, cur):
                if data:
                    assignments = ", ".join(f"`{n}`=%s" for n in data)
                    cur.execute(
                        f"UPDATE `{table}` SET {assignments} WHERE `id`=%s",
                        (*data.values(), row_id),
                    )
                stored = self._get(cur, table, row_id)

        if stored is None:
            raise NotFoundError(f"{table} row {row_id} not found")
        return stored

    def delete(self, table, row_id):
        columns_for(table)
        with translate_errors(f"delete {table}"):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(f"DELETE FROM `{table}` WHERE `id`=%s", (row_id,))
