from __future__ import annotations

from typing import Optional, Sequence

from ..common.validators import require_choice, require_non_empty
from ..core.constants import YEARS
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ValidationError
from .model import Subject
from .repository import SubjectRepository


def _parse_year(value) -> int:
    try:
        year = int(value)
    except (TypeError, ValueError):
        raise ValidationError("Year must be a number")
    return require_choice(year, YEARS, "Year")


class SubjectService:
    def __init__(self, subjects: SubjectRepository):
        self._subjects = subjects

    def list_for_branch(self, branch_id: Optional[str], *, year: Optional[int] = None) -> Sequence[Subject]:
        if not branch_id:
            return []
        return self._subjects.list_for_branch(branch_id, year=year)

    def by_year(self, branch_id: Optional[str]) -> dict[int, list[Subject]]:
        grouped: dict[int, list[Subject]] = {y: [] for y in YEARS}
        if not branch_id:
            return grouped
        for subject in self._subjects.list_for_branch(branch_id):
            if subject.year in grouped:
                grouped[subject.year].append(subject)
        return grouped

    def create(self, *, current_role: Role, branch_id: Optional[str], name: str, code: str, year) -> Subject:
        if current_role != Role.HOD:
            raise AuthorizationError("Only an HOD can manage subjects")
        if not branch_id:
            raise ValidationError("Your profile is not attached to a branch")
        return self._subjects.create(
            name=require_non_empty(name, "Subject name"),
            code=require_non_empty(code, "Subject code").upper(),
            branch_id=branch_id,
            year=_parse_year(year),
        )

    def update(self, *, current_role: Role, subject_id: str, name: str, code: str, year) -> Subject:
        if current_role != Role.HOD:
            raise AuthorizationError("Only an HOD can manage subjects")
        return self._subjects.update(
            subject_id,
            name=require_non_empty(name, "Subject name"),
            code=require_non_empty(code, "Subject code").upper(),
            year=_parse_year(year),
        )

    def delete(self, *, current_role: Role, subject_id: str) -> None:
        if current_role != Role.HOD:
            raise AuthorizationError("Only an HOD can manage subjects")
        self._subjects.delete(subject_id)
