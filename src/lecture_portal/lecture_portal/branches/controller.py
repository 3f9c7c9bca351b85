from __future__ import annotations

from flask import Flask

from ..common.web import current_user, error, json_body, login_required, ok, role_required
from ..core.enums import Role
from ..core.exceptions import IntegrityViolation
from ..container import Container


def register(app: Flask, container: Container) -> None:
    def _staff_dict(item) -> dict:
        return {
            **item.branch.to_dict(),
            "hod": {"id": item.hod.id, "name": item.hod.name, "email": item.hod.email} if item.hod else None,
            "faculty_count": item.faculty_count,
        }

    @app.route("/api/branches", methods=["GET"], endpoint="branches_list")
    @login_required
    def branches_list():
        return ok({"branches": [b.to_dict() for b in container.branch_service.list_all()]})

    @app.route("/api/branches/staff", endpoint="branches_staff")
    @role_required(Role.REGISTRAR)
    def branches_staff():
        return ok({"branches": [_staff_dict(b) for b in container.branch_service.list_with_staff()]})

    @app.route("/api/branches/<branch_id>", methods=["GET"], endpoint="branch_detail")
    @role_required(Role.REGISTRAR)
    def branch_detail(branch_id: str):
        detail = container.branch_service.details(branch_id)
        return ok(
            {
                "branch": detail.branch.to_dict(),
                "hod": detail.hod.to_dict() if detail.hod else None,
                "faculty": [p.to_dict() for p in detail.faculty],
            }
        )

    @app.route("/api/branches", methods=["POST"], endpoint="branch_create")
    @role_required(Role.REGISTRAR)
    def branch_create():
        data = json_body()
        branch = container.branch_service.create_with_hod(
            current_role=current_user().role,
            name=data.get("name", ""),
            code=data.get("code", ""),
            hod_name=data.get("hod_name", ""),
            hod_email=data.get("hod_email", ""),
            hod_password=data.get("hod_password") or None,
        )
        return ok({"branch": branch.to_dict()}, 201)

    @app.route("/api/branches/<branch_id>", methods=["PUT"], endpoint="branch_update")
    @role_required(Role.REGISTRAR)
    def branch_update(branch_id: str):
        data = json_body()
        branch = container.branch_service.update(
            current_role=current_user().role,
            branch_id=branch_id,
            name=data.get("name", ""),
            code=data.get("code", ""),
        )
        return ok({"branch": branch.to_dict()})

    @app.route("/api/branches/<branch_id>", methods=["DELETE"], endpoint="branch_delete")
    @role_required(Role.REGISTRAR)
    def branch_delete(branch_id: str):
        try:
            container.branch_service.delete(current_role=current_user().role, branch_id=branch_id)
        except IntegrityViolation:
            return error("Failed to delete department. Make sure no faculty are assigned.", 409)
        return ok()
