"""Storage error taxonomy."""


class StorageError(RuntimeError):
    """Base error for storage failures."""


class StorageUnavailable(StorageError):
    """Raised when no usable persistent storage can be opened."""


class ConstraintViolation(StorageError):
    """Raised when a write would duplicate a unique index value or key.

    This is an expected outcome (e.g. a journal title that already exists),
    not a device problem.
    """


class KeyRequired(ConstraintViolation):
    """Raised when a record lacks a key and its collection does not assign one."""


class DeviceFailure(StorageError):
    """Raised for any other storage I/O failure."""


class UnknownCollection(KeyError):
    """Raised when an operation names a collection the schema lacks."""


class UnknownIndex(KeyError):
    """Raised when a lookup names an index the collection lacks."""
