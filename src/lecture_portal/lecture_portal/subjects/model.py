from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Subject:
    """Catalog entry shown in the lecture subject picker.

    Lectures copy the subject name as free text; there is no reference back.
    """

    id: str
    name: str
    code: str
    year: int
    branch_id: str
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "code": self.code, "year": self.year, "branch_id": self.branch_id}
