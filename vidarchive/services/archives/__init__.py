"""Client for the recording service's archive REST API.

Example usage:
    >>> from vidarchive.services.archives import create_archive_manager
    >>>
    >>> # Settings from ARCHIVE_API_KEY / ARCHIVE_API_SECRET / ARCHIVE_API_URL
    >>> archives = create_archive_manager()
    >>> archive = archives.create("2_MX40NzIwMzJ-fg", {"name": "Weekly sync"})
    >>>
    >>> # Explicit configuration
    >>> from vidarchive.services.archives import ArchiveClientConfig, ArchiveApiClient, Archives
    >>> config = ArchiveClientConfig(api_key="1234", api_secret="secret")
    >>> with ArchiveApiClient(config) as client:
    ...     archives = Archives(client)
    ...     page = archives.all(offset=0, count=50)
"""

from .models import Archive, ArchiveList, ArchiveOptions
from .errors import (
    ArchiveClientError,
    ArchiveOperationError,
    ArchiveServiceError,
    AuthenticationError,
    InvalidArgumentError,
)
from .protocols import ArchiveTransport
from .config import ArchiveClientConfig
from .client import ArchiveApiClient
from .manager import Archives, create_archive_manager

__all__ = [
    # Models
    "Archive",
    "ArchiveList",
    "ArchiveOptions",
    # Errors
    "ArchiveClientError",
    "ArchiveOperationError",
    "ArchiveServiceError",
    "AuthenticationError",
    "InvalidArgumentError",
    # Protocols
    "ArchiveTransport",
    # Configuration
    "ArchiveClientConfig",
    # Implementations
    "ArchiveApiClient",
    "Archives",
    # Factories
    "create_archive_manager",
]
