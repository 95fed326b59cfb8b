"""HTTP client for the recording service's archive endpoints.

Every method issues exactly one request and either returns the decoded
JSON body or raises. Non-success statuses are translated into
``AuthenticationError`` (403) or ``ArchiveOperationError`` (everything
else) using a per-operation message table; no request is retried.
"""

import logging
from importlib.metadata import PackageNotFoundError, version
from typing import Any, Optional
from urllib.parse import quote

import httpx

from vidarchive.lib.logging_config import log_with_context

from .config import ArchiveClientConfig
from .errors import ArchiveOperationError, AuthenticationError

logger = logging.getLogger(__name__)

try:
    USER_AGENT = f"vidarchive/{version('vidarchive')}"
except PackageNotFoundError:
    # Running from a source checkout that was never installed
    USER_AGENT = "vidarchive/unknown"

# operation -> {status: message}; None is the fallback for unlisted statuses
ERROR_MESSAGES: dict[str, dict[Optional[int], str]] = {
    "start": {
        400: "The archive could not be started. The request was invalid or the session has no connected clients.",
        403: "Authentication failed while starting an archive. API key: {api_key}",
        404: "The archive could not be started. The session ID does not exist: {session_id}",
        409: "The archive could not be started. The session could be peer-to-peer or the session is already being recorded.",
        None: "The archive could not be started.",
    },
    "retrieve": {
        400: "The archive could not be retrieved. The archive ID was invalid: {archive_id}",
        403: "Authentication failed while retrieving an archive. API key: {api_key}",
        None: "The archive could not be retrieved.",
    },
    "list": {
        403: "Authentication failed while retrieving archives. API key: {api_key}",
        None: "The archives could not be retrieved.",
    },
    "stop": {
        400: "The archive could not be stopped. The request was invalid.",
        403: "Authentication failed while stopping an archive. API key: {api_key}",
        404: "The archive could not be stopped. The archive ID does not exist: {archive_id}",
        409: "The archive could not be stopped. The archive is not currently recording.",
        None: "The archive could not be stopped.",
    },
    "delete": {
        403: "Authentication failed or an invalid archive ID was given. Archive ID: {archive_id}",
        409: "The archive could not be deleted. The status must be 'available', 'deleted', or 'uploaded'. Archive ID: {archive_id}",
        None: "The archive could not be deleted.",
    },
}


def _service_message(response: httpx.Response) -> Optional[str]:
    """Pull the service's own error message out of a response body, if any."""
    try:
        body = response.json()
    except ValueError:
        return response.text.strip() or None
    if isinstance(body, dict):
        return body.get("message")
    return None


class ArchiveApiClient:
    """Synchronous client for the archive REST API.

    Args:
        config: Connection settings
        http_client: Optional shared ``httpx.Client``. When supplied it is
            used as-is and never closed by this object.
    """

    def __init__(
        self,
        config: ArchiveClientConfig,
        http_client: Optional[httpx.Client] = None,
    ):
        self.config = config
        self._owns_client = http_client is None
        self.http = http_client or httpx.Client(timeout=config.timeout)

    def close(self) -> None:
        """Close the underlying HTTP client if this object created it."""
        if self._owns_client:
            self.http.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    @property
    def archive_url(self) -> str:
        """Base URL of the archive collection for this API key."""
        return f"{self.config.api_url}/v2/partner/{self.config.api_key}/archive"

    def _headers(self) -> dict[str, str]:
        return {
            "X-TB-PARTNER-AUTH": f"{self.config.api_key}:{self.config.api_secret}",
            "User-Agent": USER_AGENT,
            "Accept": "application/json",
        }

    def _request(self, operation: str, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Send one request and translate failures for ``operation``.

        Keyword arguments other than httpx's ``json``/``params`` are used
        only to fill in error messages.
        """
        request_kwargs = {k: kwargs.pop(k) for k in ("json", "params") if k in kwargs}
        log_with_context(logger, "debug", f"{method} {url}", operation=operation)

        try:
            response = self.http.request(method, url, headers=self._headers(), **request_kwargs)
        except httpx.RequestError as e:
            log_with_context(
                logger, "warning", f"Archive {operation} request failed: {e}", operation=operation
            )
            raise ArchiveOperationError(
                f"Failed to connect to the archive service: {e}", operation
            ) from e

        if response.is_success:
            return response

        self._raise_for_status(response, operation, **kwargs)
        return response  # unreachable, _raise_for_status always raises

    def _raise_for_status(self, response: httpx.Response, operation: str, **context: Any) -> None:
        status = response.status_code
        messages = ERROR_MESSAGES[operation]
        template = messages.get(status, messages[None])
        message = template.format(api_key=self.config.api_key, **context)

        detail = _service_message(response)
        if detail:
            message = f"{message} ({detail})"

        log_with_context(
            logger,
            "warning",
            f"Archive {operation} failed with HTTP {status}",
            operation=operation,
            status_code=status,
        )

        if status == 403:
            raise AuthenticationError(message, operation, status)
        raise ArchiveOperationError(message, operation, status)

    def _request_json(self, operation: str, method: str, url: str, **kwargs: Any) -> dict[str, Any]:
        """Send one request and decode its JSON body.

        Raises:
            ArchiveOperationError: A 2xx response did not carry a JSON object
        """
        response = self._request(operation, method, url, **kwargs)
        try:
            body = response.json()
        except ValueError as e:
            raise self._unreadable(response, operation) from e
        if not isinstance(body, dict):
            raise self._unreadable(response, operation)
        return body

    def _unreadable(self, response: httpx.Response, operation: str) -> ArchiveOperationError:
        log_with_context(
            logger,
            "warning",
            f"Archive {operation} returned a body that is not a JSON object",
            operation=operation,
            status_code=response.status_code,
        )
        return ArchiveOperationError(
            f"The archive service returned an unreadable response (HTTP {response.status_code}).",
            operation,
            response.status_code,
        )

    def _archive_item_url(self, archive_id: str) -> str:
        # One escaped path segment; dots too, so "." and ".." are not collapsed
        segment = quote(archive_id, safe="").replace(".", "%2E")
        return f"{self.archive_url}/{segment}"

    def start_archive(self, session_id: str, options: dict[str, Any]) -> dict[str, Any]:
        """POST a start request for ``session_id``."""
        body = {"sessionId": session_id, "name": options.get("name", "")}
        return self._request_json(
            "start", "POST", self.archive_url, json=body, session_id=session_id
        )

    def get_archive(self, archive_id: str) -> dict[str, Any]:
        """GET one archive."""
        return self._request_json(
            "retrieve", "GET", self._archive_item_url(archive_id), archive_id=archive_id
        )

    def list_archives(
        self, offset: Optional[int] = None, count: Optional[int] = None
    ) -> dict[str, Any]:
        """GET a page of archives; unset paging parameters are omitted."""
        params = {}
        if offset is not None:
            params["offset"] = offset
        if count is not None:
            params["count"] = count
        return self._request_json("list", "GET", self.archive_url, params=params or None)

    def stop_archive(self, archive_id: str) -> dict[str, Any]:
        """POST a stop request for a recording archive."""
        return self._request_json(
            "stop",
            "POST",
            f"{self._archive_item_url(archive_id)}/stop",
            json={"action": "stop"},
            archive_id=archive_id,
        )

    def delete_archive(self, archive_id: str) -> httpx.Response:
        """DELETE an archive and return the raw response."""
        return self._request(
            "delete", "DELETE", self._archive_item_url(archive_id), archive_id=archive_id
        )
