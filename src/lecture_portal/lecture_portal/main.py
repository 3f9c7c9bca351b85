from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .branches.controller import register as register_branches
from .common.web import error
from .container import Container, build_container
from .core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    IntegrityViolation,
    NotFoundError,
    RemoteFailure,
    RoomConflictError,
    ValidationError,
)
from .database.bootstrap import apply_schema, list_tables
from .lectures.controller import register as register_lectures
from .notifications.controller import register as register_notifications
from .reports.controller import register as register_reports
from .subjects.controller import register as register_subjects
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (RoomConflictError, 409),
)


def status_for(exc: DomainError) -> int:
    for kind, status in STATUS_BY_ERROR:
        if isinstance(exc, kind):
            return status
    return 400


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(exc: DomainError):
        payload = {"error": str(exc)}
        if isinstance(exc, RoomConflictError) and exc.lecture_id:
            payload["conflicting_lecture_id"] = exc.lecture_id
        return jsonify(payload), status_for(exc)

    @app.errorhandler(IntegrityViolation)
    def handle_integrity_violation(exc: IntegrityViolation):
        logger.warning("Store rejected write: %s", exc)
        return error("The change conflicts with existing data", 409)

    @app.errorhandler(RemoteFailure)
    def handle_remote_failure(exc: RemoteFailure):
        logger.error("Store call failed", exc_info=exc)
        return error("The data service is unavailable, please try again", 502)


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if container is None:
        app.logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            apply_schema(db_config, schema_path=schema_path)
            app.logger.info("schema ready (tables=%d)", len(list_tables(db_config)))

        container = build_container(
            db_config=db_config,
            rooms_per_block=int(getattr(settings, "ROOMS_PER_BLOCK", 15)),
        )

    app.extensions["lecture_portal"] = container

    register_users(app, container)
    register_branches(app, container)
    register_subjects(app, container)
    register_lectures(app, container)
    register_reports(app, container)
    register_attendance(app, container)
    register_notifications(app, container)
    register_error_handlers(app)

    return app
