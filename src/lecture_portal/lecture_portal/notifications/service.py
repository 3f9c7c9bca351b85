from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..core.enums import NotificationType
from ..core.exceptions import AuthorizationError, NotFoundError
from .model import Notification
from .repository import NotificationRepository

logger = logging.getLogger(__name__)


class NotificationService:
    def __init__(self, notifications: NotificationRepository):
        self._notifications = notifications

    def notify(
        self,
        *,
        user_id: str,
        title: str,
        message: str,
        kind: NotificationType = NotificationType.SYSTEM,
    ) -> Optional[Notification]:
        """Append a message for ``user_id``.

        Delivery is best-effort: a store failure is logged and ``None`` is
        returned so the calling workflow carries on.
        """
        try:
            return self._notifications.create(user_id=user_id, title=title, message=message, kind=kind)
        except Exception:
            logger.warning("Unable to store notification %r for user %s", title, user_id, exc_info=True)
            return None

    def list_for_user(self, user_id: str) -> Sequence[Notification]:
        return self._notifications.list_for_user(user_id)

    def unread_count(self, user_id: str) -> int:
        return len(self._notifications.list_unread(user_id))

    def mark_read(self, *, user_id: str, notification_id: str) -> Notification:
        notification = self._notifications.get(notification_id)
        if not notification:
            raise NotFoundError("Notification not found")
        if notification.user_id != user_id:
            raise AuthorizationError("Notification belongs to another user")
        return self._notifications.mark_read(notification_id)

    def mark_all_read(self, user_id: str) -> int:
        unread = self._notifications.list_unread(user_id)
        for n in unread:
            self._notifications.mark_read(n.id)
        return len(unread)

