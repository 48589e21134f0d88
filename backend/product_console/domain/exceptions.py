"""Domain-specific exceptions — framework-independent."""


class EntityNotFoundError(Exception):
    """Raised when a requested entity does not exist."""

    def __init__(self, entity_type: str, entity_id: int | str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with id '{entity_id}' not found")


class ChildIndexError(Exception):
    """Raised when a child collection index does not address an existing record."""

    def __init__(self, collection: str, index: int, size: int):
        self.collection = collection
        self.index = index
        self.size = size
        super().__init__(
            f"No {collection} record at index {index} (collection has {size})"
        )


class EditorNotOpenError(Exception):
    """Raised when a commit is attempted without an open editing session."""

    def __init__(self, collection: str):
        self.collection = collection
        super().__init__(f"No {collection} editor session is open")


class EditorBusyError(Exception):
    """Raised when a collection is modified directly while its editor is open."""

    def __init__(self, collection: str):
        self.collection = collection
        super().__init__(f"The {collection} editor is open; commit or discard it first")


class AttachmentUploadError(Exception):
    """Raised by attachment storage when a single file could not be stored.

    Covers transport failures, non-success statuses and success responses
    that do not carry a usable URL.
    """

    def __init__(self, filename: str, reason: str, status_code: int | None = None):
        self.filename = filename
        self.reason = reason
        self.status_code = status_code
        super().__init__(f"Upload failed for {filename}: {reason}")


class PersistenceError(Exception):
    """Raised when the persistence API rejects a request without field detail."""

    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class PersistenceFieldError(PersistenceError):
    """Raised when the persistence API rejects specific fields.

    ``field_errors`` maps the API's field name to its list of messages.
    """

    def __init__(
        self,
        field_errors: dict[str, list[str]],
        message: str = "Validation failed",
        status_code: int | None = None,
    ):
        self.field_errors = field_errors
        super().__init__(message, status_code)


class ReferenceDataError(Exception):
    """Raised when categories, locations or suppliers cannot be loaded."""

    def __init__(self, resource: str, message: str):
        self.resource = resource
        self.message = message
        super().__init__(f"Failed to load {resource}: {message}")
