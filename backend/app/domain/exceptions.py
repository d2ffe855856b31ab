"""Domain-specific exceptions, framework-independent."""


class EntityNotFoundError(Exception):
    """Raised when a requested entity does not exist."""

    def __init__(self, entity_type: str, entity_id: int | str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with id '{entity_id}' not found")


class DuplicateEntityError(Exception):
    """Raised when a write would violate a uniqueness constraint."""

    def __init__(self, entity_type: str, field: str, value: str):
        self.entity_type = entity_type
        self.field = field
        self.value = value
        super().__init__(f"{entity_type} with {field}='{value}' already exists")


class RecordValidationError(Exception):
    """Raised when required fields are missing/empty or input has the wrong shape."""

    def __init__(self, entity_type: str, message: str, fields: list[str] | None = None):
        self.entity_type = entity_type
        self.fields = fields or []
        super().__init__(f"{entity_type}: {message}")


class StoreNotInitializedError(Exception):
    """Raised when a record store is used before initialize() completed."""

    def __init__(self, store_name: str):
        self.store_name = store_name
        super().__init__(f"Record store '{store_name}' is not initialized")


class InvalidCredentialsError(Exception):
    """Raised when a login attempt names an unknown user or a wrong password."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)
