# kriedko/modules/feedback/tests/test_forwarding_service.py

import json
from unittest.mock import patch

import httpx
import pytest

from kriedko.modules.feedback.services.forwarding_service import RemoteAggregatorForwarder

AGGREGATOR_URL = "http://aggregator.test/api/feedback"

RealAsyncClient = httpx.AsyncClient


def mock_client_factory(handler):
    """Patch target: AsyncClient that routes every request to ``handler``."""

    def factory(*args, **kwargs):
        return RealAsyncClient(*args, transport=httpx.MockTransport(handler), **kwargs)

    return factory


@pytest.fixture
def record(record_factory):
    return record_factory("1714566645123_abcde", "2024-05-01T12:30:45.123Z", {"taste": 5})


class TestRemoteAggregatorForwarder:
    """Test cases for best-effort forwarding"""

    def test_from_settings(self, settings):
        settings.remote_aggregator_url = AGGREGATOR_URL
        settings.remote_aggregator_key = "key-123"

        forwarder = RemoteAggregatorForwarder.from_settings(settings)

        assert forwarder.enabled is True
        assert forwarder.url == AGGREGATOR_URL
        assert forwarder.api_key == "key-123"
        assert forwarder.timeout_seconds == settings.remote_aggregator_timeout_seconds

    @pytest.mark.asyncio
    async def test_disabled_without_url(self, record):
        forwarder = RemoteAggregatorForwarder(url=None)

        assert forwarder.enabled is False
        assert await forwarder.forward(record) is False

    @pytest.mark.asyncio
    async def test_posts_record_with_bearer_key(self, record):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(202, json={"accepted": True})

        forwarder = RemoteAggregatorForwarder(AGGREGATOR_URL, api_key="key-123")

        with patch(
            "kriedko.modules.feedback.services.forwarding_service.httpx.AsyncClient",
            mock_client_factory(handler),
        ):
            assert await forwarder.forward(record) is True

        assert len(seen) == 1
        assert seen[0].method == "POST"
        assert str(seen[0].url) == AGGREGATOR_URL
        assert seen[0].headers["Authorization"] == "Bearer key-123"
        assert json.loads(seen[0].content) == record

    @pytest.mark.asyncio
    async def test_no_authorization_header_without_key(self, record):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200)

        forwarder = RemoteAggregatorForwarder(AGGREGATOR_URL)

        with patch(
            "kriedko.modules.feedback.services.forwarding_service.httpx.AsyncClient",
            mock_client_factory(handler),
        ):
            await forwarder.forward(record)

        assert "Authorization" not in seen[0].headers

    @pytest.mark.asyncio
    async def test_error_status_is_swallowed(self, record):
        forwarder = RemoteAggregatorForwarder(AGGREGATOR_URL)

        with patch(
            "kriedko.modules.feedback.services.forwarding_service.httpx.AsyncClient",
            mock_client_factory(lambda request: httpx.Response(500)),
        ):
            assert await forwarder.forward(record) is False

    @pytest.mark.asyncio
    async def test_transport_error_is_swallowed(self, record):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        forwarder = RemoteAggregatorForwarder(AGGREGATOR_URL)

        with patch(
            "kriedko.modules.feedback.services.forwarding_service.httpx.AsyncClient",
            mock_client_factory(handler),
        ):
            assert await forwarder.forward(record) is False
