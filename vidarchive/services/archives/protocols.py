"""Protocol definitions for the archive service.

The manager only needs something that speaks to the recording service's
archive endpoints. Protocols keep that contract explicit, enabling:
- In-memory fakes for tests
- Alternative transports (signed requests, proxies, recorded fixtures)
"""

from typing import Any, Optional, Protocol


class StatusResponse(Protocol):
    """Minimal response shape returned by delete requests."""

    status_code: int


class ArchiveTransport(Protocol):
    """HTTP client collaborator used by ``Archives``.

    Implementations raise ``AuthenticationError`` or ``ArchiveOperationError``
    for non-success responses; successful calls return the decoded JSON body.
    """

    def start_archive(self, session_id: str, options: dict[str, Any]) -> dict[str, Any]:
        """Start recording ``session_id``.

        Args:
            session_id: Session to record
            options: Request options, currently ``{"name": str}``

        Returns:
            Archive JSON
        """
        ...

    def get_archive(self, archive_id: str) -> dict[str, Any]:
        """Fetch one archive's JSON."""
        ...

    def list_archives(
        self, offset: Optional[int] = None, count: Optional[int] = None
    ) -> dict[str, Any]:
        """Fetch a page of archives.

        Returns:
            JSON with ``count`` (total) and ``items`` (archive JSON list)
        """
        ...

    def stop_archive(self, archive_id: str) -> dict[str, Any]:
        """Stop a recording and return the archive's updated JSON."""
        ...

    def delete_archive(self, archive_id: str) -> StatusResponse:
        """Delete an archive, returning the raw response."""
        ...
