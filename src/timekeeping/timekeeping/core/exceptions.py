class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a referenced record does not exist."""


class PostedRecordError(DomainError):
    """Raised when a posted (payroll-locked) record would be mutated."""


class AuthorizationError(DomainError):
    """Raised when a caller lacks permission for an action."""
