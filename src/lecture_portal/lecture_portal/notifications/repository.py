from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import NotificationType
from ..database.store import RemoteStore
from .model import Notification


def _to_notification(r: dict) -> Notification:
    try:
        kind = NotificationType(r.get("type") or NotificationType.SYSTEM.value)
    except ValueError:
        kind = NotificationType.SYSTEM
    return Notification(
        id=str(r["id"]),
        user_id=str(r["user_id"]),
        title=r["title"],
        message=r["message"],
        type=kind,
        is_read=bool(r.get("is_read")),
        created_at=r.get("created_at"),
    )


class NotificationRepository:
    def __init__(self, store: RemoteStore):
        self._store = store

    def create(self, *, user_id: str, title: str, message: str, kind: NotificationType) -> Notification:
        row = self._store.insert(
            "notifications",
            {"user_id": user_id, "title": title, "message": message, "type": kind.value, "is_read": False},
        )
        return _to_notification(row)

    def get(self, notification_id: str) -> Optional[Notification]:
        rows = self._store.select("notifications", {"id": notification_id}, limit=1)
        return _to_notification(rows[0]) if rows else None

    def list_for_user(self, user_id: str, *, limit: Optional[int] = 50) -> Sequence[Notification]:
        rows = self._store.select("notifications", {"user_id": user_id}, order_by=("-created_at",), limit=limit)
        return [_to_notification(r) for r in rows]

    def list_unread(self, user_id: str) -> Sequence[Notification]:
        rows = self._store.select("notifications", {"user_id": user_id, "is_read": False})
        return [_to_notification(r) for r in rows]

    def mark_read(self, notification_id: str) -> Notification:
        return _to_notification(self._store.update("notifications", notification_id, {"is_read": True}))
