"""
Pytest fixtures for httphook tests.
"""

import os
import socket
from datetime import datetime, timezone

import pytest

from httphook import ALL_LEVELS, LogEntry
from mock_collector_server import MockCollector

# Clear hook configuration so from_env tests start from a known state
for _var in ("HTTPHOOK_SERVICE_NAME", "HTTPHOOK_ENDPOINT", "HTTPHOOK_LEVELS"):
    os.environ.pop(_var, None)


@pytest.fixture
def endpoint():
    """Mocked collector endpoint for respx tests."""
    return "https://logs.test.example/ingest"


@pytest.fixture
def service_name():
    return "test-service"


@pytest.fixture
def levels():
    return ALL_LEVELS


@pytest.fixture
def sample_timestamp():
    return datetime(2024, 5, 1, 12, 30, 45, 123456, tzinfo=timezone.utc)


@pytest.fixture
def sample_entry(sample_timestamp):
    """A log entry with a few typical fields."""
    return LogEntry(
        message="test-message",
        fields={"test-key": "test-value", "count": 3, "nested": {"ok": True}},
        timestamp=sample_timestamp,
    )


@pytest.fixture
def collector():
    """Real HTTP collector on an ephemeral localhost port."""
    server = MockCollector().start()
    yield server
    server.stop()


@pytest.fixture
def unused_port():
    """A localhost port with nothing listening on it."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]
