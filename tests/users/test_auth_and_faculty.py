import json

import pytest
from werkzeug.security import generate_password_hash

from lecture_portal.core.constants import USER_STORAGE_KEY
from lecture_portal.core.enums import Role
from lecture_portal.core.exceptions import AuthenticationError, AuthorizationError, RemoteFailure, ValidationError
from lecture_portal.users.session import SessionContext

from conftest import session_user


@pytest.fixture
def hod(seed):
    branch = seed.branch()
    return seed.profile("Hema", role=Role.HOD, branch=branch, password_hash=generate_password_hash("pw"))


def test_login_requires_matching_role_and_password(container, hod):
    auth = container.auth_service

    user = auth.authenticate("HEMA@uni.edu", "pw", "hod")
    assert user.role == Role.HOD
    assert user.branch_id == hod["branch_id"]

    for email, password, role in (
        ("hema@uni.edu", "pw", "faculty"),
        ("hema@uni.edu", "wrong", "hod"),
        ("nobody@uni.edu", "pw", "hod"),
    ):
        with pytest.raises(AuthenticationError, match="^Invalid credentials$"):
            auth.authenticate(email, password, role)
    with pytest.raises(ValidationError):
        auth.authenticate("hema@uni.edu", "pw", "dean")


def test_profile_without_password_logs_in_by_email_and_role(container, seed, caplog):
    seed.profile("Asha", branch=seed.branch("Civil", "CE"))

    user = container.auth_service.authenticate("asha@uni.edu", "", "faculty")

    assert user.name == "Asha"
    assert "no stored password" in caplog.text


def test_session_context_persists_under_single_key(container, hod):
    storage = {}
    ctx = SessionContext.restore(storage)
    assert not ctx.is_authenticated

    ctx.login(container.auth_service, email="hema@uni.edu", password="pw", role="hod")
    assert json.loads(storage[USER_STORAGE_KEY])["role"] == "hod"

    restored = SessionContext.restore(storage)
    assert restored.user == ctx.user

    restored.logout()
    assert USER_STORAGE_KEY not in storage
    assert restored.user is None


def test_unreadable_snapshot_is_discarded():
    storage = {USER_STORAGE_KEY: "{not json"}

    ctx = SessionContext.restore(storage)

    assert ctx.user is None
    assert storage == {}


def test_failed_login_leaves_session_untouched(container, hod):
    storage = {}
    ctx = SessionContext.restore(storage)

    with pytest.raises(AuthenticationError):
        ctx.login(container.auth_service, email="hema@uni.edu", password="bad", role="hod")
    assert storage == {}


def test_hod_adds_faculty_to_own_branch(container, hod):
    current = session_user(hod, Role.HOD)

    profile = container.faculty_service.add_faculty(current=current, name="Asha", email="asha@uni.edu")

    assert profile.branch_id == hod["branch_id"]
    assert [p.id for p in container.faculty_service.list_branch_faculty(hod["branch_id"])] == [profile.id]
    assert container.faculty_service.faculty_count(branch_id=hod["branch_id"]) == 1
    assert container.faculty_service.faculty_count(department="Computer Science") == 1
    assert container.faculty_service.faculty_count(branch_id="other") == 0

    with pytest.raises(ValidationError):
        container.faculty_service.add_faculty(current=current, name="Asha", email="asha@uni.edu")


def test_add_faculty_rolls_back_profile_when_role_insert_fails(container, store, hod):
    store.fail_on.add(("insert", "user_roles"))

    with pytest.raises(RemoteFailure):
        container.faculty_service.add_faculty(current=session_user(hod, Role.HOD), name="Asha", email="asha@uni.edu")

    assert container.profiles_repo.get_by_email("asha@uni.edu") is None


def test_faculty_cannot_add_faculty(container, seed, hod):
    faculty = seed.profile("Asha", branch={"id": hod["branch_id"], "name": "Computer Science"})

    with pytest.raises(AuthorizationError):
        container.faculty_service.add_faculty(current=session_user(faculty, Role.FACULTY), name="X", email="x@uni.edu")
