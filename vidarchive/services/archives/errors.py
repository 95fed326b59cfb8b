"""Exceptions raised by the archive client.

Three kinds reach callers:

- InvalidArgumentError: bad input, detected before any request is sent
- AuthenticationError: the service rejected the credentials
- ArchiveOperationError: the service rejected the request for any other reason
"""

from typing import Optional


class ArchiveClientError(Exception):
    """Base class for all archive client errors."""


class InvalidArgumentError(ArchiveClientError, ValueError):
    """A required argument was empty or out of range."""


class ArchiveServiceError(ArchiveClientError):
    """An error reported by (or while talking to) the remote service.

    Attributes:
        operation: start, retrieve, list, stop or delete
        status_code: HTTP status, or None when no response was received
    """

    def __init__(
        self,
        message: str,
        operation: str,
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.status_code = status_code

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(message={self.message!r}, "
            f"operation={self.operation!r}, status_code={self.status_code!r})"
        )


class AuthenticationError(ArchiveServiceError):
    """Credentials were rejected (invalid API key or secret)."""


class ArchiveOperationError(ArchiveServiceError):
    """The service refused to perform the archive operation."""
