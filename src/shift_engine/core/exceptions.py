class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when no shift source applies to an (employee, date)."""


class ConflictError(DomainError):
    """Raised when source records contradict each other for the same key."""
