from __future__ import annotations

from flask import Flask

from ..common.web import current_user, login_required, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/notifications", endpoint="notifications_list")
    @login_required
    def notifications_list():
        items = container.notification_service.list_for_user(current_user().id)
        return ok({"notifications": [n.to_dict() for n in items]})

    @app.route("/api/notifications/unread-count", endpoint="notifications_unread")
    @login_required
    def notifications_unread():
        return ok({"count": container.notification_service.unread_count(current_user().id)})

    @app.route("/api/notifications/<notification_id>/read", methods=["POST"], endpoint="notification_read")
    @login_required
    def notification_read(notification_id: str):
        item = container.notification_service.mark_read(user_id=current_user().id, notification_id=notification_id)
        return ok({"notification": item.to_dict()})

    @app.route("/api/notifications/read-all", methods=["POST"], endpoint="notifications_read_all")
    @login_required
    def notifications_read_all():
        return ok({"updated": container.notification_service.mark_all_read(current_user().id)})
