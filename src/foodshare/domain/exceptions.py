"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the inbound layers (CLI, HTTP handlers) can catch them uniformly and map
each ``category`` to a stable user-facing message or status code.

Semantic errors are never retried.  ``StorageError`` is the only transient
failure and deliberately sits outside the DomainException hierarchy.
"""


class DomainException(Exception):
    """Base class for all domain errors."""

    category = "domain"


class ValidationError(DomainException):
    """Malformed input: negative quantity, missing required field, ..."""

    category = "validation"


class InsufficientStockError(DomainException):
    """A requested quantity exceeds what is currently available."""

    category = "insufficient_stock"


class InvalidTransitionError(DomainException):
    """A reservation state change is not allowed from its current status."""

    category = "invalid_transition"


class AuthorizationError(DomainException):
    """The acting user does not own the resource."""

    category = "forbidden"


class ConflictError(DomainException):
    """A destructive operation is blocked by dependent data."""

    category = "conflict"


class NotFoundError(DomainException):
    """A requested entity does not exist."""

    category = "not_found"


class StorageError(Exception):
    """The persistence layer failed (I/O, corrupt document, ...).

    Safe for the caller to retry: the unit of work has been rolled back.
    """

    category = "storage"
    retryable = True


class WriteConflictError(StorageError):
    """Another writer changed a row this unit of work based its changes on.

    Nothing was written; rerunning the whole operation reads fresh state.
    """
