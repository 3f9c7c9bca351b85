from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, MutableMapping, Optional

from ..core.constants import USER_STORAGE_KEY
from ..core.enums import Role

if TYPE_CHECKING:
    from .service import AuthService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """Profile snapshot kept for the logged-in user."""

    id: str
    name: str
    email: str
    role: Role
    department: str
    branch_id: Optional[str]

    def to_dict(self) -> dict:
        data = asdict(self)
        data["role"] = self.role.value
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "SessionUser":
        return cls(
            id=str(data["id"]),
            name=data["name"],
            email=data["email"],
            role=Role(data["role"]),
            department=data.get("department") or "",
            branch_id=data.get("branch_id"),
        )


class SessionContext:
    """Current-user state bound to a persistent mapping (Flask ``session``).

    The snapshot lives under a single key. It is read once by
    :meth:`restore` and changed only by :meth:`login` and :meth:`logout`.
    """

    def __init__(self, storage: MutableMapping, *, key: str = USER_STORAGE_KEY):
        self._storage = storage
        self._key = key
        self._user: Optional[SessionUser] = None

    @classmethod
    def restore(cls, storage: MutableMapping, *, key: str = USER_STORAGE_KEY) -> "SessionContext":
        ctx = cls(storage, key=key)
        raw = storage.get(key)
        if raw:
            try:
                ctx._user = SessionUser.from_dict(json.loads(raw))
            except (TypeError, ValueError, KeyError):
                logger.warning("Discarding unreadable session snapshot under %r", key)
                storage.pop(key, None)
        return ctx

    @property
    def user(self) -> Optional[SessionUser]:
        return self._user

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None

    def login(self, auth: "AuthService", *, email: str, password: str, role) -> SessionUser:
        user = auth.authenticate(email, password, role)
        self._user = user
        self._storage[self._key] = json.dumps(user.to_dict())
        return user

    def logout(self) -> None:
        self._user = None
        self._storage.pop(self._key, None)
