from __future__ import annotations

from typing import Optional, Sequence

from werkzeug.security import generate_password_hash

from ..common.saga import Saga
from ..common.validators import require_email, require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..users.repository import ProfileRepository
from .model import Branch, BranchDetail, BranchWithStaff
from .repository import BranchRepository


class BranchService:
    """Registrar-side management of branches and their HODs."""

    def __init__(self, branches: BranchRepository, profiles: ProfileRepository):
        self._branches = branches
        self._profiles = profiles

    @staticmethod
    def _require_registrar(current_role: Role) -> None:
        if current_role != Role.REGISTRAR:
            raise AuthorizationError("Only the registrar can manage branches")

    def list_all(self) -> Sequence[Branch]:
        return self._branches.list_all()

    def get(self, branch_id: str) -> Branch:
        branch = self._branches.get_by_id(branch_id)
        if not branch:
            raise NotFoundError("Branch not found")
        return branch

    def create_with_hod(
        self,
        *,
        current_role: Role,
        name: str,
        code: str,
        hod_name: str,
        hod_email: str,
        hod_password: Optional[str] = None,
    ) -> Branch:
        """Create a branch together with its HOD profile and role.

        The three inserts run as a saga: if the profile or the role insert
        fails, the rows written so far are deleted again.
        """
        self._require_registrar(current_role)

        name = require_non_empty(name, "Branch name")
        code = require_non_empty(code, "Branch code").upper()
        hod_name = require_non_empty(hod_name, "HOD name")
        hod_email = require_email(hod_email, "HOD email")

        if self._profiles.get_by_email(hod_email):
            raise ValidationError("A profile with this email already exists")

        saga = Saga("create-branch")
        saga.step(
            "branch",
            lambda _: self._branches.create(name=name, code=code),
            lambda _, branch: self._branches.delete(branch.id),
        )
        saga.step(
            "hod",
            lambda done: self._profiles.create(
                name=hod_name,
                email=hod_email,
                department=name,
                branch_id=done["branch"].id,
                password_hash=generate_password_hash(hod_password) if hod_password else None,
            ),
            lambda _, profile: self._profiles.delete(profile.id),
        )
        saga.step("role", lambda done: self._profiles.assign_role(done["hod"].id, Role.HOD))
        return saga.run()["branch"]

    def update(self, *, current_role: Role, branch_id: str, name: str, code: str) -> Branch:
        self._require_registrar(current_role)
        name = require_non_empty(name, "Branch name")
        code = require_non_empty(code, "Branch code").upper()
        return self._branches.update(branch_id, name=name, code=code)

    def delete(self, *, current_role: Role, branch_id: str) -> None:
        """Delete a branch.

        Profiles still pointing at the branch make the store reject the
        delete (IntegrityViolation); no pre-check happens here.
        """
        self._require_registrar(current_role)
        self._branches.delete(branch_id)

    def list_with_staff(self) -> Sequence[BranchWithStaff]:
        branches = self._branches.list_all()
        hods = self._profiles.list_by_role(Role.HOD)
        faculty = self._profiles.list_by_role(Role.FACULTY)

        out: list[BranchWithStaff] = []
        for branch in branches:
            hod = next((h for h in hods if h.branch_id == branch.id), None)
            count = sum(1 for f in faculty if f.branch_id == branch.id)
            out.append(BranchWithStaff(branch=branch, hod=hod, faculty_count=count))
        return out

    def details(self, branch_id: str) -> BranchDetail:
        branch = self.get(branch_id)
        return BranchDetail(
            branch=branch,
            hod=self._profiles.find_hod(branch_id),
            faculty=self._profiles.list_by_role(Role.FACULTY, branch_id=branch_id),
        )
