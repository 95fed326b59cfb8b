"""Archive manager: the public entry point for working with archives.

Example usage:
    >>> from vidarchive.services.archives import create_archive_manager
    >>>
    >>> archives = create_archive_manager()
    >>> archive = archives.create(session_id, {"name": "Weekly sync"})
    >>> archives.stop_by_id(archive.id)
    >>> for archive in archives.all(count=10):
    ...     print(archive.id, archive.status)
"""

import logging
from collections.abc import Mapping
from typing import Any, Optional, Union

from .client import ArchiveApiClient
from .config import ArchiveClientConfig
from .errors import InvalidArgumentError
from .models import Archive, ArchiveList, ArchiveOptions
from .protocols import ArchiveTransport

logger = logging.getLogger(__name__)

# The service documents up to 1000 archives per page, but requests are
# limited to this range locally.
MIN_LIST_COUNT = 0
MAX_LIST_COUNT = 100


def _require_id(value: Any, name: str) -> str:
    if value is None or str(value) == "":
        raise InvalidArgumentError(f"{name} not provided")
    return str(value)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class Archives:
    """Start, inspect, list, stop and delete archives.

    The manager holds no state besides the client it was given; every call
    is a single round-trip and nothing is cached.

    Args:
        client: HTTP client collaborator. Shared, never closed here.
    """

    def __init__(self, client: ArchiveTransport):
        self.client = client

    def create(
        self,
        session_id: str,
        options: Union[ArchiveOptions, Mapping[str, Any], None] = None,
    ) -> Archive:
        """Start archiving a session.

        Clients must be connected to the session, only one archive may be
        recording per session, and peer-to-peer sessions cannot be archived.
        The service enforces all three; its rejection is raised as-is.

        Args:
            session_id: Session to record
            options: ``ArchiveOptions`` or a mapping with a ``"name"`` key

        Returns:
            The new archive

        Raises:
            InvalidArgumentError: session_id is empty
            AuthenticationError: Invalid API key
            ArchiveOperationError: Session missing, has no clients, is
                peer-to-peer, or is already being recorded
        """
        session_id = _require_id(session_id, "session_id")
        opts = ArchiveOptions.coerce(options)
        logger.debug(f"Starting archive for session {session_id}")
        archive_json = self.client.start_archive(session_id, {"name": opts.name})
        return Archive.from_json(archive_json, self, "start")

    def find(self, archive_id: str) -> Archive:
        """Get an archive by ID.

        Raises:
            InvalidArgumentError: archive_id is empty
            AuthenticationError: Invalid API key
            ArchiveOperationError: The archive ID is invalid
        """
        archive_id = _require_id(archive_id, "archive_id")
        archive_json = self.client.get_archive(archive_id)
        return Archive.from_json(archive_json, self, "retrieve")

    def all(self, offset: Optional[int] = None, count: Optional[int] = None) -> ArchiveList:
        """List completed and in-progress archives for the API key.

        Args:
            offset: How many of the most recent archives to skip. 0 (the
                service default) starts at the most recently started archive.
            count: Number of archives to return, 0 to 100

        Returns:
            ArchiveList whose ``total`` counts every archive on the service

        Raises:
            InvalidArgumentError: offset is negative or count is out of range
        """
        if count is not None and not (
            _is_int(count) and MIN_LIST_COUNT <= count <= MAX_LIST_COUNT
        ):
            raise InvalidArgumentError("Limit is invalid")
        if offset is not None and not (_is_int(offset) and offset >= 0):
            raise InvalidArgumentError("Offset is invalid")

        archive_list_json = self.client.list_archives(offset, count)
        return ArchiveList.from_json(archive_list_json, self)

    def stop_by_id(self, archive_id: str) -> Archive:
        """Stop an archive that is recording.

        Archives also stop on their own after 90 minutes or once every
        client has left the session.

        Returns:
            The archive as reported after stopping

        Raises:
            InvalidArgumentError: archive_id is empty
            AuthenticationError: Invalid API key
            ArchiveOperationError: The archive does not exist or is not
                currently recording
        """
        archive_id = _require_id(archive_id, "archive_id")
        logger.debug(f"Stopping archive {archive_id}")
        archive_json = self.client.stop_archive(archive_id)
        return Archive.from_json(archive_json, self, "stop")

    def delete_by_id(self, archive_id: str) -> bool:
        """Delete an archive.

        Only archives whose status is "available", "uploaded" or "deleted"
        can be deleted. Deleting an available archive also removes its file.

        Returns:
            True when the service answered with a 2xx status

        Raises:
            InvalidArgumentError: archive_id is empty
            AuthenticationError: Invalid API key or archive ID
            ArchiveOperationError: The archive has the wrong status
        """
        archive_id = _require_id(archive_id, "archive_id")
        logger.debug(f"Deleting archive {archive_id}")
        response = self.client.delete_archive(archive_id)
        return 200 <= response.status_code < 300


def create_archive_manager(
    config: Optional[ArchiveClientConfig] = None,
    client: Optional[ArchiveTransport] = None,
) -> Archives:
    """Create an archive manager.

    Args:
        config: Connection settings (loaded from the environment if omitted).
            Ignored when ``client`` is given.
        client: Existing HTTP client collaborator to share

    Returns:
        Configured Archives instance
    """
    if client is None:
        client = ArchiveApiClient(config or ArchiveClientConfig.from_env())
    return Archives(client)
