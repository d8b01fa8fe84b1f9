class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a referenced record does not exist."""


class PersistenceError(DomainError):
    """Raised when the backing store rejects or cannot take a write.

    The in-memory record set keeps the optimistic change.
    """
