import pytest

from lecture_portal.core.enums import Role
from lecture_portal.core.exceptions import AuthorizationError, ValidationError


def test_hod_manages_subjects_of_own_branch(container, seed):
    branch = seed.branch()
    other = seed.branch("Electrical", "EE")
    service = container.subject_service
    service.create(current_role=Role.HOD, branch_id=branch["id"], name="Operating Systems", code="cs301", year=3)
    algo = service.create(current_role=Role.HOD, branch_id=branch["id"], name="Algorithms", code="cs201", year="2")
    service.create(current_role=Role.HOD, branch_id=other["id"], name="Circuits", code="ee101", year=1)

    assert [s.name for s in service.list_for_branch(branch["id"])] == ["Algorithms", "Operating Systems"]
    assert [s.name for s in service.list_for_branch(branch["id"], year=3)] == ["Operating Systems"]
    assert algo.code == "CS201"

    grouped = service.by_year(branch["id"])
    assert sorted(grouped) == [1, 2, 3, 4]
    assert [s.name for s in grouped[2]] == ["Algorithms"]
    assert grouped[1] == []

    service.update(current_role=Role.HOD, subject_id=algo.id, name="Advanced Algorithms", code="cs202", year=4)
    assert [s.name for s in service.by_year(branch["id"])[4]] == ["Advanced Algorithms"]

    service.delete(current_role=Role.HOD, subject_id=algo.id)
    assert [s.name for s in service.list_for_branch(branch["id"])] == ["Operating Systems"]


def test_subject_rules(container, seed):
    branch = seed.branch()
    service = container.subject_service

    with pytest.raises(ValidationError):
        service.create(current_role=Role.HOD, branch_id=branch["id"], name="X", code="X1", year=5)
    with pytest.raises(ValidationError):
        service.create(current_role=Role.HOD, branch_id=None, name="X", code="X1", year=1)
    with pytest.raises(AuthorizationError):
        service.create(current_role=Role.FACULTY, branch_id=branch["id"], name="X", code="X1", year=1)
    assert service.list_for_branch(None) == []
