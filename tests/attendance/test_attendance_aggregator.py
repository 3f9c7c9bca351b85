from datetime import date

import pytest

from lecture_portal.core.enums import AttendanceStatus, Role
from lecture_portal.core.exceptions import ValidationError

DAY = date(2025, 3, 12)


@pytest.fixture(autouse=True)
def frozen_today(monkeypatch):
    monkeypatch.setattr("lecture_portal.attendance.service.today_local", lambda: DAY)


def _names(entries):
    return sorted(e.profile.name for e in entries)


@pytest.fixture
def cs(seed):
    branch = seed.branch()
    staff = {
        "hod": seed.profile("Hema", role=Role.HOD, branch=branch),
        "a": seed.profile("Asha", branch=branch),
        "b": seed.profile("Bala", branch=branch),
        "c": seed.profile("Chitra", branch=branch),
    }
    return branch, staff


def test_mark_twice_keeps_one_row_with_latest_status(container, store, cs):
    branch, staff = cs
    agg = container.attendance_aggregator

    agg.mark_self(user_id=staff["a"]["id"], role="faculty", branch_id=branch["id"], status="present", target_date=DAY)
    record = agg.mark_self(
        user_id=staff["a"]["id"], role="faculty", branch_id=branch["id"], status="leave", target_date=DAY
    )

    assert store.count("attendance") == 1
    assert record.status == AttendanceStatus.LEAVE
    assert agg.today(staff["a"]["id"], today=DAY).status == AttendanceStatus.LEAVE


def test_mark_defaults_to_today(container, cs):
    branch, staff = cs

    record = container.attendance_aggregator.mark_self(
        user_id=staff["b"]["id"], role=Role.FACULTY, branch_id=branch["id"], status=AttendanceStatus.PRESENT
    )

    assert record.date == DAY
    assert record.role == "faculty"


def test_past_dates_are_closed(container, store, cs):
    branch, staff = cs
    store.calls.clear()

    for status in ("present", "leave"):
        with pytest.raises(ValidationError, match="past date"):
            container.attendance_aggregator.mark_self(
                user_id=staff["a"]["id"], role="faculty", branch_id=branch["id"], status=status, target_date="2025-03-11"
            )
    assert store.calls == []


def test_future_dates_accept_only_leave(container, store, cs):
    branch, staff = cs
    agg = container.attendance_aggregator

    with pytest.raises(ValidationError, match="future date"):
        agg.mark_self(
            user_id=staff["a"]["id"], role="faculty", branch_id=branch["id"], status="present", target_date="2025-03-20"
        )
    assert store.count("attendance") == 0

    record = agg.mark_self(
        user_id=staff["a"]["id"], role="faculty", branch_id=branch["id"], status="leave", target_date="2025-03-20"
    )
    assert record.date == date(2025, 3, 20)
    assert record.status == AttendanceStatus.LEAVE


def test_mark_rejects_unknown_status(container, store, cs):
    branch, staff = cs
    store.calls.clear()

    with pytest.raises(ValidationError):
        container.attendance_aggregator.mark_self(
            user_id=staff["a"]["id"], role="faculty", branch_id=branch["id"], status="absent", target_date=DAY
        )
    assert store.calls == []


def test_branch_split_covers_faculty_roster(container, seed, cs):
    branch, staff = cs
    seed.attendance(staff["a"], on=DAY, status="present")
    seed.attendance(staff["b"], on=DAY, status="leave")
    seed.attendance(staff["hod"], on=DAY, status="present", role="hod")

    split = container.attendance_aggregator.by_branch(branch["id"], DAY)

    assert _names(split.present) == ["Asha"]
    assert _names(split.leave) == ["Bala"]
    assert _names(split.not_marked) == ["Chitra"]
    assert split.counts() == {"present": 1, "leave": 1, "not_marked": 1}


def test_branch_split_ignores_other_days_and_branches(container, seed, cs):
    branch, staff = cs
    other = seed.branch("Mechanical", "ME")
    outsider = seed.profile("Mohan", branch=other)
    seed.attendance(staff["a"], on=date(2025, 3, 11), status="present")
    seed.attendance(outsider, on=DAY, status="present")

    split = container.attendance_aggregator.by_branch(branch["id"], DAY)

    assert split.present == []
    assert _names(split.not_marked) == ["Asha", "Bala", "Chitra"]


def test_all_branches_includes_hod_and_empty_branches(container, seed, cs):
    branch, staff = cs
    empty = seed.branch("Civil", "CE")
    seed.attendance(staff["hod"], on=DAY, status="present", role="hod")
    seed.attendance(staff["c"], on=DAY, status="leave")

    grouped = container.attendance_aggregator.all_branches(DAY)

    cs_split = grouped[branch["id"]].partition
    assert _names(cs_split.present) == ["Hema"]
    assert _names(cs_split.leave) == ["Chitra"]
    assert _names(cs_split.not_marked) == ["Asha", "Bala"]
    assert grouped[empty["id"]].partition.counts() == {"present": 0, "leave": 0, "not_marked": 0}


def test_history_is_newest_first_and_limited(container, seed, cs):
    _, staff = cs
    for day in (8, 10, 9, 11):
        seed.attendance(staff["a"], on=date(2025, 3, day), status="present")

    history = container.attendance_aggregator.history(staff["a"]["id"], limit=3)

    assert [r.date.day for r in history] == [11, 10, 9]
    assert container.attendance_aggregator.history(None) == []
