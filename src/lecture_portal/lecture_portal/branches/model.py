from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence

from ..users.model import Profile


@dataclass(frozen=True)
class Branch:
    """An academic department."""

    id: str
    name: str
    code: str
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "code": self.code,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass(frozen=True)
class BranchWithStaff:
    branch: Branch
    hod: Optional[Profile]
    faculty_count: int


@dataclass(frozen=True)
class BranchDetail:
    branch: Branch
    hod: Optional[Profile]
    faculty: Sequence[Profile]
