from datetime import date

from lecture_portal.core.enums import LectureStatus

WED = date(2025, 3, 12)


def test_pending_lectures_are_ordered_by_date_then_slot(container, seed):
    faculty = seed.profile("Asha", branch=seed.branch())
    seed.lecture(faculty=faculty, lecture_date=date(2025, 3, 13), time="09:00 AM")
    seed.lecture(faculty=faculty, lecture_date=WED, time="02:00 PM")
    seed.lecture(faculty=faculty, lecture_date=WED, time="10:00 AM")
    seed.lecture(faculty=faculty, lecture_date=WED, time="11:00 AM", status="completed")

    pending = container.lecture_queries.pending_for_faculty(faculty["id"])

    assert [(l.date, l.time) for l in pending] == [
        (WED, "10:00 AM"),
        (WED, "02:00 PM"),
        (date(2025, 3, 13), "09:00 AM"),
    ]
    assert all(l.status == LectureStatus.SCHEDULED for l in pending)


def test_today_can_be_narrowed_to_one_faculty(container, seed):
    branch = seed.branch()
    asha = seed.profile("Asha", branch=branch)
    ravi = seed.profile("Ravi", branch=branch)
    seed.lecture(faculty=asha, lecture_date=WED, room=1)
    seed.lecture(faculty=ravi, lecture_date=WED, room=2)

    assert len(container.lecture_queries.today(today=WED)) == 2
    assert [l.faculty_id for l in container.lecture_queries.today(faculty_id=ravi["id"], today=WED)] == [ravi["id"]]


def test_weekly_count_uses_sunday_start_week(container, seed):
    faculty = seed.profile("Asha", branch=seed.branch())
    seed.lecture(faculty=faculty, lecture_date=date(2025, 3, 9))  # Sunday
    seed.lecture(faculty=faculty, lecture_date=date(2025, 3, 15))  # Saturday
    seed.lecture(faculty=faculty, lecture_date=date(2025, 3, 16))  # next Sunday

    assert container.lecture_queries.weekly_count(today=WED) == 2
    assert container.lecture_queries.weekly_count(faculty_id="someone-else", today=WED) == 0


def test_week_grid_is_monday_start_and_limited_to_branch(container, seed):
    cs = seed.branch()
    ee = seed.branch("Electrical", "EE")
    asha = seed.profile("Asha", branch=cs)
    vik = seed.profile("Vik", branch=ee)
    seed.lecture(faculty=asha, lecture_date=date(2025, 3, 10))  # Monday
    seed.lecture(faculty=asha, lecture_date=date(2025, 3, 16), room=2)  # Sunday
    seed.lecture(faculty=vik, lecture_date=WED, room=3)

    grid = container.lecture_queries.week_grid(cs["id"], WED)

    assert list(grid)[0] == date(2025, 3, 10)
    assert list(grid)[-1] == date(2025, 3, 16)
    assert sum(len(v) for v in grid.values()) == 2
    assert grid[WED] == []


def test_describe_attaches_faculty(container, seed):
    faculty = seed.profile("Asha", branch=seed.branch())
    seed.lecture(faculty=faculty, lecture_date=WED)

    described = container.lecture_queries.describe(container.lecture_queries.today(today=WED))

    assert described[0]["faculty"]["name"] == "Asha"
    assert described[0]["date"] == "2025-03-12"
