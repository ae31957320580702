class DomainError(Exception):
    """Base exception for business rule violations."""

    status_code = 400


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid or the session is no longer valid."""

    status_code = 401


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    status_code = 403


class NotFoundError(DomainError):
    """Raised when a referenced row does not exist."""

    status_code = 404


class ConflictError(DomainError):
    """Raised when an action collides with existing data (duplicates, open shifts)."""

    status_code = 409


class StorageError(DomainError):
    """Raised when the file storage bucket rejects an operation."""

    status_code = 500
