"""
Error taxonomy for document operations.
Each error carries the HTTP status it is answered with.
"""


class DocumentStoreError(Exception):
    """Base class for errors surfaced to the caller."""

    status_code: int = 500

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class InvalidRequestError(DocumentStoreError):
    """Raised when a request header or option cannot be used."""

    status_code = 400


class EmptyDocumentError(InvalidRequestError):
    """Raised when an upload carries no bytes."""

    def __init__(self):
        super().__init__("Document is empty")


class CapacityExceededError(DocumentStoreError):
    """Raised when the store already holds the maximum number of documents."""

    status_code = 507

    def __init__(self, count: int, limit: int):
        super().__init__(f"Document store is full ({count}/{limit})")
        self.count = count
        self.limit = limit


class NameSpaceExhaustedError(DocumentStoreError):
    """Raised when no free name could be found for the alphabet and length."""

    status_code = 507

    def __init__(self, alphabet: str, length: int, attempts: int):
        super().__init__(
            f"No free document name after {attempts} candidates "
            f"(alphabet of {len(alphabet)}, length {length})"
        )
        self.alphabet = alphabet
        self.length = length
        self.attempts = attempts


class DocumentNotFoundError(DocumentStoreError):
    """Raised when a document does not exist or has expired."""

    status_code = 404

    def __init__(self, name: str):
        super().__init__("Document not found. It may have expired.")
        self.name = name


class StorageError(DocumentStoreError):
    """Raised on I/O failures while reserving, writing or reading a document."""

    status_code = 500


__all__ = [
    "DocumentStoreError",
    "InvalidRequestError",
    "EmptyDocumentError",
    "CapacityExceededError",
    "NameSpaceExhaustedError",
    "DocumentNotFoundError",
    "StorageError",
]
