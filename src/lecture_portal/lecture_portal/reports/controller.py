from __future__ import annotations

from dataclasses import asdict

from flask import Flask, request

from ..common.web import current_user, json_body, login_required, ok, role_required
from ..core.enums import Role
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/reports", methods=["POST"], endpoint="report_submit")
    @role_required(Role.FACULTY)
    def report_submit():
        data = json_body()
        report = container.report_workflow.submit(
            current=current_user(),
            lecture_id=data.get("lecture_id", ""),
            topic=data.get("topic", ""),
            duration=data.get("duration"),
            status=data.get("status", ""),
            remarks=data.get("remarks"),
        )
        return ok({"report": report.to_dict()}, 201)

    @app.route("/api/reports", methods=["GET"], endpoint="reports_list")
    @login_required
    def reports_list():
        user = current_user()
        if user.role == Role.FACULTY:
            reports = container.report_queries.list(faculty_id=user.id)
        elif user.role == Role.HOD:
            reports = container.report_queries.list(branch_id=user.branch_id, department=user.department)
        else:
            reports = container.report_queries.list(
                branch_id=request.args.get("branch_id") or None,
                department=request.args.get("department") or None,
            )
        return ok({"reports": [r.to_dict() for r in reports]})

    @app.route("/api/reports/stats", endpoint="reports_stats")
    @role_required(Role.REGISTRAR)
    def reports_stats():
        return ok({"departments": [asdict(s) for s in container.report_queries.department_stats()]})
