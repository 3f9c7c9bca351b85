import pytest

from lecture_portal.core.enums import Role
from lecture_portal.core.exceptions import (
    AuthorizationError,
    IntegrityViolation,
    NotFoundError,
    RemoteFailure,
    ValidationError,
)


def _create(container, **overrides):
    data = dict(
        current_role=Role.REGISTRAR,
        name="Computer Science",
        code="cs",
        hod_name="Hema",
        hod_email="Hema@Uni.edu",
        hod_password="s3cret",
    )
    data.update(overrides)
    return container.branch_service.create_with_hod(**data)


def test_create_branch_with_hod(container, store):
    branch = _create(container)

    assert branch.code == "CS"
    hod = container.profiles_repo.find_hod(branch.id)
    assert hod.email == "hema@uni.edu"
    assert hod.department == "Computer Science"
    assert hod.password_hash and hod.password_hash != "s3cret"
    assert store.count("user_roles") == 1


def test_role_failure_compensates_profile_and_branch(container, store, caplog):
    store.fail_on.add(("insert", "user_roles"))

    with pytest.raises(RemoteFailure):
        _create(container)

    assert store.count("branches") == 0
    assert store.count("profiles") == 0
    assert "compensating 2 step(s)" in caplog.text


def test_profile_failure_compensates_branch(container, store):
    store.fail_on.add(("insert", "profiles"))

    with pytest.raises(RemoteFailure):
        _create(container)

    assert store.count("branches") == 0


def test_duplicate_code_is_reported_by_store(container, store):
    _create(container)

    with pytest.raises(IntegrityViolation):
        _create(container, hod_email="other@uni.edu", name="Computing")
    assert store.count("branches") == 1


def test_existing_email_is_rejected_before_writing(container, store, seed):
    seed.profile("Hema", email="hema@uni.edu")

    with pytest.raises(ValidationError):
        _create(container)
    assert store.count("branches") == 0


def test_only_registrar_manages_branches(container):
    with pytest.raises(AuthorizationError):
        _create(container, current_role=Role.HOD)


def test_delete_is_rejected_while_profiles_reference_branch(container, store, seed):
    branch = _create(container)

    with pytest.raises(IntegrityViolation):
        container.branch_service.delete(current_role=Role.REGISTRAR, branch_id=branch.id)

    empty = seed.branch("Civil", "CE")
    container.branch_service.delete(current_role=Role.REGISTRAR, branch_id=empty["id"])
    assert [b.code for b in container.branch_service.list_all()] == ["CS"]


def test_update_and_details(container, seed):
    branch = _create(container)
    seed.profile("Asha", branch={"id": branch.id, "name": branch.name})

    updated = container.branch_service.update(
        current_role=Role.REGISTRAR, branch_id=branch.id, name="Computer Engineering", code="ce"
    )
    detail = container.branch_service.details(branch.id)
    staff = container.branch_service.list_with_staff()

    assert updated.code == "CE"
    assert detail.hod.name == "Hema"
    assert [p.name for p in detail.faculty] == ["Asha"]
    assert staff[0].faculty_count == 1
    with pytest.raises(NotFoundError):
        container.branch_service.get("missing")
