from __future__ import annotations


class DocumentStoreError(Exception):
    """Base error for the document store; carries the HTTP status it maps to."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInputError(DocumentStoreError):
    status_code = 400
    default_message = "Invalid input"


class UnauthorizedError(DocumentStoreError):
    status_code = 401
    default_message = "Invalid access code"


class NotFoundError(DocumentStoreError):
    status_code = 404
    default_message = "File not found"


class MethodNotSupportedError(DocumentStoreError):
    status_code = 405
    default_message = "Method not allowed"


class StoreUnavailableError(DocumentStoreError):
    """The backing store failed or returned data that cannot be decoded."""

    status_code = 500
    default_message = "Internal server error"


__all__ = [
    "DocumentStoreError",
    "InvalidInputError",
    "UnauthorizedError",
    "NotFoundError",
    "MethodNotSupportedError",
    "StoreUnavailableError",
]
