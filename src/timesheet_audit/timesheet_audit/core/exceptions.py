class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is malformed or violates a precondition."""


class StorageError(DomainError):
    """Raised when the database could not complete a read or write."""
