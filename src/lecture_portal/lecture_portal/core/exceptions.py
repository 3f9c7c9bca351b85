class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a profile, branch, lecture or other row does not exist."""


class RoomConflictError(DomainError):
    """Raised when a (date, time, block, room) slot is already taken."""

    def __init__(self, message: str, *, lecture_id: str | None = None):
        super().__init__(message)
        self.lecture_id = lecture_id


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class RemoteFailure(Exception):
    """Raised when a call to the backing store fails for any reason."""


class IntegrityViolation(RemoteFailure):
    """The store rejected a write because of a unique or foreign key constraint."""
