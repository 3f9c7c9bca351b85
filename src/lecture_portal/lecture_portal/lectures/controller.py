from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import today_local
from ..common.web import current_user, date_arg, json_body, login_required, ok, role_required
from ..core.constants import BLOCKS, TIME_SLOTS, YEARS
from ..core.enums import Role
from ..container import Container


def register(app: Flask, container: Container) -> None:
    def _fields(data: dict) -> dict:
        return dict(
            faculty_id=data.get("faculty_id", ""),
            subject=data.get("subject", ""),
            lecture_date=data.get("date"),
            time_slot=data.get("time", ""),
            block=data.get("block", ""),
            room=data.get("room"),
            year=data.get("year"),
        )

    @app.route("/api/lectures/options", endpoint="lecture_options")
    @login_required
    def lecture_options():
        return ok(
            {
                "time_slots": list(TIME_SLOTS),
                "blocks": list(BLOCKS),
                "years": list(YEARS),
                "rooms_per_block": container.room_checker.rooms_per_block,
            }
        )

    @app.route("/api/lectures/today", endpoint="lectures_today")
    @login_required
    def lectures_today():
        user = current_user()
        faculty_id = user.id if user.role == Role.FACULTY else None
        lectures = container.lecture_queries.today(faculty_id=faculty_id)
        return ok({"lectures": container.lecture_queries.describe(lectures)})

    @app.route("/api/lectures/pending", endpoint="lectures_pending")
    @role_required(Role.FACULTY)
    def lectures_pending():
        lectures = container.lecture_queries.pending_for_faculty(current_user().id)
        return ok({"lectures": [l.to_dict() for l in lectures]})

    @app.route("/api/lectures/week", endpoint="lectures_week")
    @role_required(Role.HOD)
    def lectures_week():
        grid = container.lecture_queries.week_grid(current_user().branch_id, date_arg() or today_local())
        return ok(
            {day.strftime("%Y-%m-%d"): container.lecture_queries.describe(items) for day, items in grid.items()}
        )

    @app.route("/api/lectures/weekly-count", endpoint="lectures_weekly_count")
    @login_required
    def lectures_weekly_count():
        user = current_user()
        faculty_id = user.id if user.role == Role.FACULTY else None
        return ok({"count": container.lecture_queries.weekly_count(faculty_id=faculty_id)})

    @app.route("/api/lectures/rooms", endpoint="lecture_rooms")
    @role_required(Role.HOD)
    def lecture_rooms():
        lecture_date = date_arg()
        time_slot = request.args.get("time") or None
        checker = container.room_checker
        return ok(
            {
                "booked": [{"block": b, "room": r} for b, r in checker.booked_rooms(lecture_date, time_slot)],
                "available": checker.available_rooms(
                    lecture_date,
                    time_slot,
                    request.args.get("block") or None,
                    exclude_lecture_id=request.args.get("exclude") or None,
                ),
            }
        )

    @app.route("/api/lectures/conflict", endpoint="lecture_conflict")
    @role_required(Role.HOD)
    def lecture_conflict():
        args = dict(
            lecture_date=date_arg(),
            time_slot=request.args.get("time") or None,
            block=request.args.get("block") or None,
            room=request.args.get("room") or None,
        )
        exclude = request.args.get("exclude") or None
        booked = container.room_checker.is_room_booked(**args, exclude_lecture_id=exclude)
        conflict = container.room_checker.find_conflict(**args, exclude_lecture_id=exclude) if booked else None
        return ok(
            {
                "booked": booked,
                "conflict": container.lecture_queries.describe([conflict])[0] if conflict else None,
            }
        )

    @app.route("/api/lectures/<lecture_id>", methods=["GET"], endpoint="lecture_detail")
    @login_required
    def lecture_detail(lecture_id: str):
        lecture = container.lecture_queries.get(lecture_id)
        return ok({"lecture": container.lecture_queries.describe([lecture])[0]})

    @app.route("/api/lectures", methods=["POST"], endpoint="lecture_create")
    @role_required(Role.HOD)
    def lecture_create():
        lecture = container.lecture_scheduler.create(current=current_user(), **_fields(json_body()))
        return ok({"lecture": lecture.to_dict()}, 201)

    @app.route("/api/lectures/<lecture_id>", methods=["PUT"], endpoint="lecture_update")
    @role_required(Role.HOD)
    def lecture_update(lecture_id: str):
        lecture = container.lecture_scheduler.update(
            current=current_user(),
            lecture_id=lecture_id,
            **_fields(json_body()),
        )
        return ok({"lecture": lecture.to_dict()})

    @app.route("/api/lectures/<lecture_id>", methods=["DELETE"], endpoint="lecture_delete")
    @role_required(Role.HOD)
    def lecture_delete(lecture_id: str):
        container.lecture_scheduler.delete(current=current_user(), lecture_id=lecture_id)
        return ok()

    @app.route("/api/lectures/<lecture_id>/status", methods=["PATCH"], endpoint="lecture_status")
    @role_required(Role.HOD)
    def lecture_status(lecture_id: str):
        lecture = container.lecture_scheduler.set_status(lecture_id, json_body().get("status"), current=current_user())
        return ok({"lecture": lecture.to_dict()})
