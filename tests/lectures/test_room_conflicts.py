from datetime import date

from lecture_portal.lectures.conflicts import RoomConflictChecker
from lecture_portal.lectures.repository import LectureRepository

DAY = date(2025, 3, 12)


def _checker(store, rooms_per_block: int = 15) -> RoomConflictChecker:
    return RoomConflictChecker(LectureRepository(store), rooms_per_block=rooms_per_block)


def test_incomplete_slot_is_not_checkable(store):
    checker = _checker(store)

    assert checker.is_room_booked(None, "09:00 AM", "A", 3) is None
    assert checker.is_room_booked(DAY, "", "A", 3) is None
    assert checker.is_room_booked(DAY, "09:00 AM", None, 3) is None
    assert checker.is_room_booked(DAY, "09:00 AM", "A", None) is None
    # nothing was fetched for an incomplete slot
    assert ("select", "lectures") not in store.calls


def test_booked_room_is_reported_and_neighbour_is_free(store, seed):
    branch = seed.branch()
    faculty = seed.profile("Asha", branch=branch)
    seed.lecture(faculty=faculty, lecture_date=DAY, time="09:00 AM", block="A", room=3)
    checker = _checker(store)

    assert checker.is_room_booked(DAY, "09:00 AM", "A", 3) is True
    assert checker.is_room_booked(DAY, "09:00 AM", "A", 4) is False
    assert checker.is_room_booked(DAY, "10:00 AM", "A", 3) is False
    assert checker.is_room_booked(DAY, "09:00 AM", "B", 3) is False


def test_lecture_does_not_conflict_with_itself(store, seed):
    faculty = seed.profile("Asha", branch=seed.branch())
    row = seed.lecture(faculty=faculty, lecture_date=DAY, block="A", room=3)
    checker = _checker(store)

    assert checker.is_room_booked(DAY, "09:00 AM", "A", 3, exclude_lecture_id=row["id"]) is False
    assert checker.find_conflict(DAY, "09:00 AM", "A", 3).id == row["id"]


def test_available_rooms_skip_booked_rooms_of_the_block(store, seed):
    faculty = seed.profile("Asha", branch=seed.branch())
    seed.lecture(faculty=faculty, lecture_date=DAY, block="A", room=3)
    seed.lecture(faculty=faculty, lecture_date=DAY, block="B", room=5)
    checker = _checker(store)

    rooms = checker.available_rooms(DAY, "09:00 AM", "A")

    assert 3 not in rooms
    assert 5 in rooms
    assert len(rooms) == 14


def test_available_rooms_respects_exclusion_and_room_count(store, seed):
    faculty = seed.profile("Asha", branch=seed.branch())
    row = seed.lecture(faculty=faculty, lecture_date=DAY, block="C", room=2)
    checker = _checker(store, rooms_per_block=4)

    assert checker.available_rooms(DAY, "09:00 AM", "C") == [1, 3, 4]
    assert checker.available_rooms(DAY, "09:00 AM", "C", exclude_lecture_id=row["id"]) == [1, 2, 3, 4]
    assert checker.available_rooms(DAY, "09:00 AM", None) == []


def test_booked_rooms_lists_every_block(store, seed):
    faculty = seed.profile("Asha", branch=seed.branch())
    seed.lecture(faculty=faculty, lecture_date=DAY, block="B", room=7)
    seed.lecture(faculty=faculty, lecture_date=DAY, block="A", room=1)

    assert _checker(store).booked_rooms(DAY, "09:00 AM") == [("A", 1), ("B", 7)]
