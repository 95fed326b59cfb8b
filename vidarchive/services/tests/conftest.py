"""Shared pytest fixtures for archive service tests."""

from typing import Any, Callable

import httpx
import pytest

from vidarchive.services.archives import (
    ArchiveApiClient,
    ArchiveClientConfig,
    Archives,
)
from vidarchive.services.tests.fakes import FakeArchiveClient, make_archive_json


# =============================================================================
# Sample Payloads
# =============================================================================


@pytest.fixture
def archive_json() -> dict[str, Any]:
    """A single archive payload."""
    return make_archive_json()


# =============================================================================
# Manager Fixtures
# =============================================================================


@pytest.fixture
def fake_client() -> FakeArchiveClient:
    """In-memory HTTP client collaborator."""
    return FakeArchiveClient()


@pytest.fixture
def archives(fake_client) -> Archives:
    """Manager wired to the fake client."""
    return Archives(fake_client)


# =============================================================================
# HTTP Client Fixtures
# =============================================================================


@pytest.fixture
def client_config() -> ArchiveClientConfig:
    """Config pointing at a fake host."""
    return ArchiveClientConfig(
        api_key="123456",
        api_secret="secret",
        api_url="https://archives.test",
        timeout=5.0,
    )


@pytest.fixture
def mock_api(client_config):
    """Factory for an ArchiveApiClient backed by ``httpx.MockTransport``.

    Usage:
        def handler(request):
            return httpx.Response(200, json={...})

        api = mock_api(handler)
    """
    created: list[httpx.Client] = []

    def factory(handler: Callable[[httpx.Request], httpx.Response]) -> ArchiveApiClient:
        http = httpx.Client(transport=httpx.MockTransport(handler))
        created.append(http)
        return ArchiveApiClient(client_config, http_client=http)

    yield factory

    for http in created:
        http.close()
