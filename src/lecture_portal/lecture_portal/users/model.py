from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Profile:
    """A person known to the institution.

    Profiles are created by administrative action only (registrar creating
    an HOD, HOD creating faculty); there is no self-registration.
    """

    id: str
    name: str
    email: str
    department: str
    branch_id: Optional[str] = None
    created_at: Optional[datetime] = None
    password_hash: Optional[str] = field(default=None, repr=False, compare=False)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "department": self.department,
            "branch_id": self.branch_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass(frozen=True)
class RoleAssignment:
    id: str
    profile_id: str
    role: Role
