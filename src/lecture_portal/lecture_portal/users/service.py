from __future__ import annotations

import logging
from typing import Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.saga import Saga
from ..common.validators import require_email, require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, ValidationError
from .model import Profile
from .repository import ProfileRepository
from .session import SessionUser

logger = logging.getLogger(__name__)


def parse_role(value) -> Role:
    try:
        return Role(value)
    except ValueError:
        raise ValidationError("Unknown role")


class AuthService:
    """Use case: log in with (email, password, claimed role)."""

    def __init__(self, profiles: ProfileRepository):
        self._profiles = profiles

    def authenticate(self, email: str, password: str, role) -> SessionUser:
        email = require_email(email)
        role = parse_role(role)

        profile = self._profiles.get_by_email(email)
        if not profile:
            raise AuthenticationError("Invalid credentials")

        if not self._profiles.has_role(profile.id, role):
            raise AuthenticationError("Invalid credentials")

        if profile.password_hash:
            try:
                ok = check_password_hash(profile.password_hash, password or "")
            except ValueError:
                # e.g. placeholder or corrupted hash values
                ok = False
            if not ok:
                raise AuthenticationError("Invalid credentials")
        else:
            logger.warning("Profile %s has no stored password; login checked email and role only", profile.id)

        return SessionUser(
            id=profile.id,
            name=profile.name,
            email=profile.email,
            role=role,
            department=profile.department,
            branch_id=profile.branch_id,
        )


class FacultyService:
    """Use case: HOD manages the faculty roster of their own branch."""

    def __init__(self, profiles: ProfileRepository):
        self._profiles = profiles

    def add_faculty(
        self,
        *,
        current: SessionUser,
        name: str,
        email: str,
        password: Optional[str] = None,
    ) -> Profile:
        if current.role != Role.HOD:
            raise AuthorizationError("Only an HOD can add faculty")
        if not current.branch_id:
            raise ValidationError("Your profile is not attached to a branch")

        name = require_non_empty(name, "Name")
        email = require_email(email)
        if self._profiles.get_by_email(email):
            raise ValidationError("A profile with this email already exists")

        saga = Saga("add-faculty")
        saga.step(
            "profile",
            lambda _: self._profiles.create(
                name=name,
                email=email,
                department=current.department,
                branch_id=current.branch_id,
                password_hash=generate_password_hash(password) if password else None,
            ),
            lambda _, profile: self._profiles.delete(profile.id),
        )
        saga.step("role", lambda done: self._profiles.assign_role(done["profile"].id, Role.FACULTY))
        return saga.run()["profile"]

    def list_branch_faculty(self, branch_id: str) -> Sequence[Profile]:
        return self._profiles.list_by_role(Role.FACULTY, branch_id=branch_id)

    def faculty_count(self, *, branch_id: Optional[str] = None, department: Optional[str] = None) -> int:
        faculty = self._profiles.list_by_role(Role.FACULTY)
        if branch_id:
            return sum(1 for p in faculty if p.branch_id == branch_id)
        if department:
            return sum(1 for p in faculty if p.department == department)
        return len(faculty)
