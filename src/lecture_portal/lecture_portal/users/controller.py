from __future__ import annotations

from flask import Flask, request

from ..common.web import current_user, json_body, login_required, ok, role_required, session_context
from ..core.enums import Role
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/login", methods=["POST"], endpoint="login")
    def login():
        data = json_body()
        user = session_context().login(
            container.auth_service,
            email=data.get("email", ""),
            password=data.get("password", ""),
            role=data.get("role", ""),
        )
        return ok({"user": user.to_dict()})

    @app.route("/api/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        session_context().logout()
        return ok()

    @app.route("/api/auth/me", endpoint="me")
    @login_required
    def me():
        return ok({"user": current_user().to_dict()})

    @app.route("/api/faculty", methods=["GET"], endpoint="faculty_list")
    @role_required(Role.HOD, Role.REGISTRAR)
    def faculty_list():
        user = current_user()
        branch_id = user.branch_id if user.role == Role.HOD else request.args.get("branch_id")
        if not branch_id:
            return ok({"faculty": []})
        faculty = container.faculty_service.list_branch_faculty(branch_id)
        return ok({"faculty": [p.to_dict() for p in faculty]})

    @app.route("/api/faculty", methods=["POST"], endpoint="faculty_add")
    @role_required(Role.HOD)
    def faculty_add():
        data = json_body()
        profile = container.faculty_service.add_faculty(
            current=current_user(),
            name=data.get("name", ""),
            email=data.get("email", ""),
            password=data.get("password") or None,
        )
        return ok({"profile": profile.to_dict()}, 201)

    @app.route("/api/faculty/count", endpoint="faculty_count")
    @login_required
    def faculty_count():
        count = container.faculty_service.faculty_count(
            branch_id=request.args.get("branch_id") or None,
            department=request.args.get("department") or None,
        )
        return ok({"count": count})
