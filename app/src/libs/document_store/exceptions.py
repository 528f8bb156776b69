class DocumentStoreError(Exception):
    """Base exception for document store operations."""

    def __init__(self, message: str = "Document store operation failed") -> None:
        super().__init__(message)
        self.message = message


class DocumentStoreConnectionError(DocumentStoreError):
    """Raised when the backing store cannot be reached."""

    def __init__(self, message: str = "Failed to connect to document store") -> None:
        super().__init__(message)


class DocumentSerializationError(DocumentStoreError):
    """Raised when a document cannot be serialized or deserialized."""

    def __init__(self, message: str = "Document serialization failed") -> None:
        super().__init__(message)


class DocumentKeyError(DocumentStoreError):
    """Raised when a collection name or document key is invalid."""

    def __init__(self, message: str = "Invalid document key") -> None:
        super().__init__(message)


class DocumentNotFoundError(DocumentStoreError):
    """Raised when a field-level update targets a document that does not exist."""

    def __init__(self, message: str = "Document not found") -> None:
        super().__init__(message)


class DocumentConflictError(DocumentStoreError):
    """Raised when an optimistic transaction keeps losing to concurrent writers."""

    def __init__(self, message: str = "Document changed concurrently") -> None:
        super().__init__(message)


class DocumentStoreConfigurationError(DocumentStoreError):
    """Raised when document store configuration is invalid."""

    def __init__(self, message: str = "Invalid document store configuration") -> None:
        super().__init__(message)
