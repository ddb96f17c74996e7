class DomainError(Exception):
    """Base exception for business rule violations."""

    http_status = 400


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a referenced entity does not exist."""

    http_status = 404


class NoCheckInFound(NotFoundError):
    """Check-out requested but there is no attendance record for today."""


class ConflictError(DomainError):
    """Raised when the request collides with the current state of an entity."""

    http_status = 409


class DuplicateRecordError(ConflictError):
    """Raised by repositories when a unique key rejects an insert."""


class AlreadyCheckedIn(ConflictError):
    http_status = 400


class AlreadyCheckedOut(ConflictError):
    http_status = 400


class MissingCheckIn(ConflictError):
    """Today's record exists but carries no check-in time."""

    http_status = 400


class DuplicatePeriod(ConflictError):
    """A payslip already exists for the (employee, month, year) period."""


class InvalidTransition(ConflictError):
    """The requested status change is not allowed from the current status."""


class AuthenticationError(DomainError):
    """Raised when the bearer token is missing or invalid."""

    http_status = 401


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    http_status = 403


class DependencyFailure(DomainError):
    """A best-effort collaborator (notification, dispatch) failed.

    Never surfaced to the client; callers log it and carry on.
    """

    http_status = 502
