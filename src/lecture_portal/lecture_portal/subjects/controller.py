from __future__ import annotations

from flask import Flask, request

from ..common.web import current_user, json_body, login_required, ok, role_required
from ..core.enums import Role
from ..container import Container


def register(app: Flask, container: Container) -> None:
    def _branch_id():
        user = current_user()
        return user.branch_id if user.role != Role.REGISTRAR else request.args.get("branch_id")

    @app.route("/api/subjects", methods=["GET"], endpoint="subjects_list")
    @login_required
    def subjects_list():
        year = request.args.get("year", type=int)
        subjects = container.subject_service.list_for_branch(_branch_id(), year=year)
        return ok({"subjects": [s.to_dict() for s in subjects]})

    @app.route("/api/subjects/by-year", endpoint="subjects_by_year")
    @login_required
    def subjects_by_year():
        grouped = container.subject_service.by_year(_branch_id())
        return ok({str(year): [s.to_dict() for s in items] for year, items in grouped.items()})

    @app.route("/api/subjects", methods=["POST"], endpoint="subject_create")
    @role_required(Role.HOD)
    def subject_create():
        data = json_body()
        user = current_user()
        subject = container.subject_service.create(
            current_role=user.role,
            branch_id=user.branch_id,
            name=data.get("name", ""),
            code=data.get("code", ""),
            year=data.get("year"),
        )
        return ok({"subject": subject.to_dict()}, 201)

    @app.route("/api/subjects/<subject_id>", methods=["PUT"], endpoint="subject_update")
    @role_required(Role.HOD)
    def subject_update(subject_id: str):
        data = json_body()
        subject = container.subject_service.update(
            current_role=current_user().role,
            subject_id=subject_id,
            name=data.get("name", ""),
            code=data.get("code", ""),
            year=data.get("year"),
        )
        return ok({"subject": subject.to_dict()})

    @app.route("/api/subjects/<subject_id>", methods=["DELETE"], endpoint="subject_delete")
    @role_required(Role.HOD)
    def subject_delete(subject_id: str):
        container.subject_service.delete(current_role=current_user().role, subject_id=subject_id)
        return ok()
