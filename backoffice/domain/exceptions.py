"""Domain-specific exceptions, framework-independent."""


class EntityNotFoundError(Exception):
    """Raised when a requested entity does not exist."""

    def __init__(self, entity_type: str, entity_id: int | str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with id '{entity_id}' not found")


class DuplicateEntityError(Exception):
    """Raised when a candidate value collides with an existing record."""

    def __init__(self, entity_type: str, field: str, value: str):
        self.entity_type = entity_type
        self.field = field
        self.value = value
        super().__init__(f"{entity_type} with {field}='{value}' already exists")


class RecordValidationError(Exception):
    """Raised when a record (raw or local) fails validation.

    Covers malformed backend payloads rejected at the ingestion boundary
    and local writes that would break collection invariants (missing id,
    id change on replace).
    """

    def __init__(self, entity_type: str, message: str):
        self.entity_type = entity_type
        self.message = message
        super().__init__(f"{entity_type}: {message}")


class BackendError(Exception):
    """Raised when the remote data backend fails.

    ``status_code`` is ``None`` for transport failures (connection refused,
    timeout) where no HTTP response was received.
    """

    def __init__(self, operation: str, status_code: int | None, message: str):
        self.operation = operation
        self.status_code = status_code
        self.message = message
        code = status_code if status_code is not None else "network"
        super().__init__(f"[{operation}] {code}: {message}")
