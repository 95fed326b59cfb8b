"""Tests for ArchiveApiClient against httpx.MockTransport.

Run with: pytest vidarchive/services/tests/unit/test_archive_client.py -v
"""

import json
from importlib.metadata import PackageNotFoundError, version

import httpx
import pytest

from vidarchive.services.archives import (
    ArchiveApiClient,
    ArchiveClientConfig,
    ArchiveOperationError,
    Archives,
    AuthenticationError,
)
from vidarchive.services.archives.client import USER_AGENT
from vidarchive.services.tests.fakes import make_archive_json

BASE = "https://archives.test/v2/partner/123456/archive"


class RecordingHandler:
    """MockTransport handler that returns a canned response and keeps requests."""

    def __init__(self, status_code: int = 200, json_body=None, text: str | None = None):
        self.status_code = status_code
        self.json_body = json_body
        self.text = text
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.json_body is not None:
            return httpx.Response(self.status_code, json=self.json_body)
        return httpx.Response(self.status_code, text=self.text or "")

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


# =============================================================================
# Requests
# =============================================================================


class TestRequests:
    """URL, verb, headers and body for each operation."""

    @pytest.mark.unit
    def test_start_archive(self, mock_api):
        handler = RecordingHandler(json_body=make_archive_json())
        api = mock_api(handler)

        result = api.start_archive("sess1", {"name": "mtg"})

        assert result["id"] == "a1"
        assert handler.last.method == "POST"
        assert str(handler.last.url) == BASE
        assert json.loads(handler.last.content) == {"sessionId": "sess1", "name": "mtg"}

    @pytest.mark.unit
    def test_auth_and_agent_headers(self, mock_api):
        handler = RecordingHandler(json_body=make_archive_json())
        api = mock_api(handler)

        api.get_archive("a1")

        headers = handler.last.headers
        assert headers["X-TB-PARTNER-AUTH"] == "123456:secret"
        assert headers["User-Agent"].startswith("vidarchive/")
        assert headers["Accept"] == "application/json"

    @pytest.mark.unit
    def test_agent_version_comes_from_package_metadata(self):
        try:
            expected = version("vidarchive")
        except PackageNotFoundError:
            expected = "unknown"
        assert USER_AGENT == f"vidarchive/{expected}"

    @pytest.mark.unit
    def test_get_archive(self, mock_api):
        handler = RecordingHandler(json_body=make_archive_json())
        api = mock_api(handler)

        api.get_archive("a1")

        assert handler.last.method == "GET"
        assert str(handler.last.url) == f"{BASE}/a1"

    @pytest.mark.unit
    def test_archive_id_is_one_escaped_path_segment(self, mock_api):
        handler = RecordingHandler(json_body=make_archive_json())
        api = mock_api(handler)

        api.get_archive("a1/stop?x=1")

        assert handler.last.url.raw_path == b"/v2/partner/123456/archive/a1%2Fstop%3Fx%3D1"
        assert handler.last.url.query == b""

    @pytest.mark.unit
    def test_dot_segments_in_archive_id_are_kept(self, mock_api):
        handler = RecordingHandler(status_code=204)
        api = mock_api(handler)

        api.delete_archive("x/../y")

        assert handler.last.url.raw_path == b"/v2/partner/123456/archive/x%2F%2E%2E%2Fy"

    @pytest.mark.unit
    def test_stop_escapes_archive_id(self, mock_api):
        handler = RecordingHandler(json_body=make_archive_json(status="stopped"))
        api = mock_api(handler)

        api.stop_archive("a 1")

        assert handler.last.url.raw_path == b"/v2/partner/123456/archive/a%201/stop"

    @pytest.mark.unit
    def test_list_archives_with_paging(self, mock_api):
        handler = RecordingHandler(json_body={"count": 0, "items": []})
        api = mock_api(handler)

        api.list_archives(offset=10, count=5)

        assert handler.last.method == "GET"
        assert handler.last.url.params["offset"] == "10"
        assert handler.last.url.params["count"] == "5"

    @pytest.mark.unit
    def test_list_archives_omits_unset_paging(self, mock_api):
        handler = RecordingHandler(json_body={"count": 0, "items": []})
        api = mock_api(handler)

        api.list_archives()

        assert str(handler.last.url) == BASE

    @pytest.mark.unit
    def test_stop_archive(self, mock_api):
        handler = RecordingHandler(json_body=make_archive_json(status="stopped"))
        api = mock_api(handler)

        result = api.stop_archive("a1")

        assert result["status"] == "stopped"
        assert handler.last.method == "POST"
        assert str(handler.last.url) == f"{BASE}/a1/stop"
        assert json.loads(handler.last.content) == {"action": "stop"}

    @pytest.mark.unit
    def test_delete_archive_returns_response(self, mock_api):
        handler = RecordingHandler(status_code=204)
        api = mock_api(handler)

        response = api.delete_archive("a1")

        assert response.status_code == 204
        assert handler.last.method == "DELETE"
        assert str(handler.last.url) == f"{BASE}/a1"


# =============================================================================
# Error Translation
# =============================================================================


class TestErrorTranslation:
    """Non-success statuses become AuthenticationError or ArchiveOperationError."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "status_code, message",
        [
            (400, "no connected clients"),
            (404, "session ID does not exist: sess1"),
            (409, "peer-to-peer"),
            (500, "could not be started"),
        ],
    )
    def test_start_errors(self, mock_api, status_code, message):
        api = mock_api(RecordingHandler(status_code=status_code))

        with pytest.raises(ArchiveOperationError, match=message) as exc_info:
            api.start_archive("sess1", {"name": ""})

        assert exc_info.value.operation == "start"
        assert exc_info.value.status_code == status_code

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "call",
        [
            lambda api: api.start_archive("sess1", {}),
            lambda api: api.get_archive("a1"),
            lambda api: api.list_archives(),
            lambda api: api.stop_archive("a1"),
            lambda api: api.delete_archive("a1"),
        ],
    )
    def test_403_is_authentication_error(self, mock_api, call):
        api = mock_api(RecordingHandler(status_code=403))

        with pytest.raises(AuthenticationError) as exc_info:
            call(api)

        assert exc_info.value.status_code == 403

    @pytest.mark.unit
    def test_get_invalid_id(self, mock_api):
        api = mock_api(RecordingHandler(status_code=400))

        with pytest.raises(ArchiveOperationError, match="archive ID was invalid: bogus"):
            api.get_archive("bogus")

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "status_code, message",
        [
            (400, "request was invalid"),
            (404, "does not exist: a1"),
            (409, "not currently recording"),
        ],
    )
    def test_stop_errors(self, mock_api, status_code, message):
        api = mock_api(RecordingHandler(status_code=status_code))

        with pytest.raises(ArchiveOperationError, match=message):
            api.stop_archive("a1")

    @pytest.mark.unit
    def test_delete_wrong_status(self, mock_api):
        api = mock_api(RecordingHandler(status_code=409))

        with pytest.raises(ArchiveOperationError, match="'available', 'deleted', or 'uploaded'") as exc_info:
            api.delete_archive("a1")

        assert exc_info.value.operation == "delete"

    @pytest.mark.unit
    def test_list_generic_error(self, mock_api):
        api = mock_api(RecordingHandler(status_code=502))

        with pytest.raises(ArchiveOperationError, match="archives could not be retrieved"):
            api.list_archives()

    @pytest.mark.unit
    def test_service_message_is_included(self, mock_api):
        api = mock_api(RecordingHandler(status_code=409, json_body={"message": "Recording already in progress"}))

        with pytest.raises(ArchiveOperationError, match="Recording already in progress"):
            api.start_archive("sess1", {})

    @pytest.mark.unit
    def test_transport_failure(self, mock_api):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        api = mock_api(handler)

        with pytest.raises(ArchiveOperationError, match="Failed to connect") as exc_info:
            api.get_archive("a1")

        assert exc_info.value.status_code is None
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    @pytest.mark.unit
    def test_success_with_non_json_body(self, mock_api):
        api = mock_api(RecordingHandler(status_code=200, text="<html>ok</html>"))

        with pytest.raises(ArchiveOperationError, match="unreadable response") as exc_info:
            api.get_archive("a1")

        assert exc_info.value.operation == "retrieve"
        assert exc_info.value.status_code == 200
        assert isinstance(exc_info.value.__cause__, ValueError)

    @pytest.mark.unit
    def test_success_with_json_array_body(self, mock_api):
        api = mock_api(RecordingHandler(json_body=[make_archive_json()]))

        with pytest.raises(ArchiveOperationError) as exc_info:
            api.list_archives()

        assert exc_info.value.operation == "list"


# =============================================================================
# Manager Over HTTP
# =============================================================================


class TestManagerOverHttp:
    """Archives wired to a real ArchiveApiClient."""

    @pytest.mark.unit
    def test_find_then_forbidden(self, mock_api):
        api = mock_api(RecordingHandler(json_body=make_archive_json()))
        assert Archives(api).find("a1").id == "a1"

        forbidden = mock_api(RecordingHandler(status_code=403))
        with pytest.raises(AuthenticationError):
            Archives(forbidden).find("a1")

    @pytest.mark.unit
    def test_delete_204_is_true(self, mock_api):
        api = mock_api(RecordingHandler(status_code=204))
        assert Archives(api).delete_by_id("a1") is True

    @pytest.mark.unit
    def test_delete_409_raises(self, mock_api):
        api = mock_api(RecordingHandler(status_code=409))
        with pytest.raises(ArchiveOperationError):
            Archives(api).delete_by_id("a1")

    @pytest.mark.unit
    def test_find_html_body_raises_service_error(self, mock_api):
        api = mock_api(RecordingHandler(status_code=200, text="<html>ok</html>"))

        with pytest.raises(ArchiveOperationError) as exc_info:
            Archives(api).find("a1")

        assert exc_info.value.status_code == 200

    @pytest.mark.unit
    def test_create_record_without_id_raises_service_error(self, mock_api):
        api = mock_api(RecordingHandler(json_body={"status": "started"}))

        with pytest.raises(ArchiveOperationError) as exc_info:
            Archives(api).create("sess1")

        assert exc_info.value.operation == "start"


# =============================================================================
# Lifecycle
# =============================================================================


class TestLifecycle:
    """Ownership of the underlying httpx.Client."""

    @pytest.mark.unit
    def test_owned_client_closed(self, client_config):
        with ArchiveApiClient(client_config) as api:
            http = api.http
        assert http.is_closed

    @pytest.mark.unit
    def test_shared_client_left_open(self, client_config):
        http = httpx.Client()
        try:
            with ArchiveApiClient(client_config, http_client=http):
                pass
            assert not http.is_closed
        finally:
            http.close()

    @pytest.mark.unit
    def test_archive_url_strips_trailing_slash(self):
        config = ArchiveClientConfig(api_key="k", api_secret="s", api_url="https://host.test/")
        api = ArchiveApiClient(config)
        try:
            assert api.archive_url == "https://host.test/v2/partner/k/archive"
        finally:
            api.close()
