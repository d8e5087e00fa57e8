"""Domain-specific exceptions for the expense tracker core services."""

class ValidationError(ValueError):
    """Raised when client-supplied data fails a validation rule."""


class RecordNotFoundError(LookupError):
    """Raised when the referenced expense does not exist at operation time."""


class PersistenceError(IOError):
    """Raised when the database is unreachable or a statement fails."""
