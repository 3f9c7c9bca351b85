from __future__ import annotations

from flask import Flask, request

from ..common.web import current_user, date_arg, json_body, login_required, ok, role_required
from ..core.enums import Role
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance", methods=["POST"], endpoint="attendance_mark")
    @role_required(Role.FACULTY, Role.HOD)
    def attendance_mark():
        data = json_body()
        user = current_user()
        record = container.attendance_aggregator.mark_self(
            user_id=user.id,
            role=user.role,
            branch_id=user.branch_id,
            status=data.get("status"),
            target_date=data.get("date") or None,
        )
        return ok({"attendance": record.to_dict()})

    @app.route("/api/attendance/today", endpoint="attendance_today")
    @login_required
    def attendance_today():
        record = container.attendance_aggregator.today(current_user().id)
        return ok({"attendance": record.to_dict() if record else None})

    @app.route("/api/attendance/history", endpoint="attendance_history")
    @login_required
    def attendance_history():
        records = container.attendance_aggregator.history(current_user().id)
        return ok({"history": [r.to_dict() for r in records]})

    @app.route("/api/attendance/branch", endpoint="attendance_branch")
    @role_required(Role.HOD, Role.REGISTRAR)
    def attendance_branch():
        user = current_user()
        branch_id = user.branch_id if user.role == Role.HOD else request.args.get("branch_id")
        if not branch_id:
            return ok({"present": [], "leave": [], "not_marked": []})
        partition = container.attendance_aggregator.by_branch(branch_id, date_arg())
        return ok(partition.to_dict())

    @app.route("/api/attendance/branches", endpoint="attendance_branches")
    @role_required(Role.REGISTRAR)
    def attendance_branches():
        grouped = container.attendance_aggregator.all_branches(date_arg())
        return ok({branch_id: item.to_dict() for branch_id, item in grouped.items()})
