"""
End-to-end tests against a real HTTP collector on localhost.

The collector runs in a background thread (see mock_collector_server.py),
so these tests exercise httpx's real transport.
"""

import logging
from datetime import datetime

import pytest

from httphook import (
    ALL_LEVELS,
    AsyncHTTPHook,
    BadStatusError,
    HTTPHook,
    LogEntry,
    MarshalError,
    TransportError,
    add_hook,
)


class TestCollectorDelivery:
    """Tests posting to the mock collector."""

    @pytest.mark.parametrize("path", ["/logs", "/created"])
    def test_delivered(self, collector, sample_entry, path):
        """Test the collector receives the entry and headers."""
        with HTTPHook("test-service", collector.base_url + path, ALL_LEVELS) as hook:
            hook.fire(sample_entry)

        assert len(collector.received) == 1
        received = collector.received[0]
        assert received["path"] == path
        assert received["headers"]["service-name"] == "test-service"
        assert received["headers"]["content-type"] == "application/json"
        assert received["body"]["message"] == sample_entry.message
        assert received["body"]["fields"] == sample_entry.fields
        assert datetime.fromisoformat(received["body"]["timestamp"]) == sample_entry.timestamp

    @pytest.mark.parametrize("path,status", [("/no-content", 204), ("/error", 500), ("/invalid", 404)])
    def test_rejected(self, collector, sample_entry, path, status):
        """Test non-200/201 statuses from a real server are failures."""
        with HTTPHook("test-service", collector.base_url + path, ALL_LEVELS) as hook:
            with pytest.raises(BadStatusError) as exc_info:
                hook.fire(sample_entry)

        assert exc_info.value.status_code == status
        assert len(collector.received) == 1

    def test_before_post_failure_sends_nothing(self, collector, sample_entry):
        def before(request):
            raise RuntimeError("before-error")

        with HTTPHook("svc", collector.base_url + "/logs", ALL_LEVELS, before_post=before) as hook:
            with pytest.raises(RuntimeError, match="before-error"):
                hook.fire(sample_entry)

        assert collector.received == []

    def test_marshal_error_sends_nothing(self, collector, sample_timestamp):
        entry = LogEntry("m", {"k": lambda: None}, sample_timestamp)

        with HTTPHook("svc", collector.base_url + "/logs", ALL_LEVELS) as hook:
            with pytest.raises(MarshalError):
                hook.fire(entry)

        assert collector.received == []

    @pytest.mark.asyncio
    async def test_async_delivered(self, collector, sample_entry):
        async with AsyncHTTPHook("svc", collector.base_url + "/logs", ALL_LEVELS) as hook:
            await hook.fire(sample_entry)

        assert len(collector.received) == 1

    def test_via_logging(self, collector):
        """Test records logged through the stdlib reach the collector."""
        logger = logging.getLogger("tests.integration.shipping")
        logger.propagate = False
        logger.setLevel(logging.DEBUG)

        with HTTPHook("svc", collector.base_url + "/logs", ALL_LEVELS) as hook:
            handler = add_hook(hook, logger)
            try:
                logger.info("Service started", extra={"port": 4000})
            finally:
                logger.removeHandler(handler)

        assert collector.received[0]["body"]["message"] == "Service started"
        assert collector.received[0]["body"]["fields"] == {"port": 4000}


class TestUnreachable:
    """Tests for endpoints nobody is listening on."""

    def test_connection_refused(self, unused_port, sample_entry):
        """Test a refused connection is a TransportError with the cause's text."""
        endpoint = f"http://127.0.0.1:{unused_port}/invalid"

        with HTTPHook("svc", endpoint, ALL_LEVELS) as hook:
            with pytest.raises(TransportError) as exc_info:
                hook.fire(sample_entry)

        message = str(exc_info.value)
        assert message.startswith("failed to perform request due to error ")
        assert str(exc_info.value.__cause__) in message
