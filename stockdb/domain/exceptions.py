"""Domain-specific exceptions: framework-independent."""


class StockDBError(Exception):
    """Base class for every error raised by the store."""


class EntityNotFoundError(StockDBError):
    """Raised when a requested entity does not exist."""

    def __init__(self, entity_type: str, entity_id: int | str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with id '{entity_id}' not found")


class DuplicateEntityError(StockDBError):
    """Raised when attempting to create or rename into a duplicate key."""

    def __init__(self, entity_type: str, field: str, value: str):
        self.entity_type = entity_type
        self.field = field
        self.value = value
        super().__init__(f"{entity_type} with {field}='{value}' already exists")


class InvalidParameterError(StockDBError):
    """Raised when editing an unrecognised field or assigning an invalid value."""

    def __init__(self, parameter: object, reason: str = "unknown parameter"):
        self.parameter = parameter
        self.reason = reason
        super().__init__(f"Invalid parameter '{parameter}': {reason}")


class NoOpenStoreError(StockDBError):
    """Raised when an operation is attempted without an open store."""

    def __init__(self, message: str = "No store is open: call DataStore.open() first"):
        super().__init__(message)


class PersistenceError(StockDBError):
    """Raised when reading or writing a backing file fails.

    The previously persisted file is left intact.
    """

    def __init__(self, path: object, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Persistence failure for '{path}': {reason}")
