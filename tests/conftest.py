"""
Pytest configuration and fixtures for request-shaper tests.
"""

from typing import List, Tuple

import pytest
import responses as responses_lib

from request_shaper.core.config import ClientConfig
from request_shaper.core.http_client import APIClient
from request_shaper.core.logging.config import LoggingConfig


class RecordingRequest:
    """
    ModifiableRequest, который записывает все вызовы.

    ``calls`` - список ("set_header", name, values) и
    ("set_warning_handler", handler) в порядке вызовов.
    """

    def __init__(self):
        self.calls: List[Tuple] = []

    def set_header(self, name: str, *values: str) -> None:
        self.calls.append(("set_header", name, values))

    def set_warning_handler(self, handler) -> None:
        self.calls.append(("set_warning_handler", handler))

    def headers(self) -> dict:
        """Последние значения каждого заголовка."""
        return {call[1]: call[2] for call in self.calls if call[0] == "set_header"}


class CollectingWarningHandler:
    """WarningHandler, который собирает предупреждения в список."""

    def __init__(self):
        self.warnings = []

    def handle_warning_header(self, code: int, agent: str, text: str) -> None:
        self.warnings.append((code, agent, text))


@pytest.fixture
def base_url():
    """Base URL for testing."""
    return "https://api.example.com"


@pytest.fixture
def recording_request():
    return RecordingRequest()


@pytest.fixture
def collecting_handler():
    return CollectingWarningHandler()


@pytest.fixture
def mock_responses():
    """Mock HTTP responses using responses library."""
    with responses_lib.RequestsMock() as rsps:
        yield rsps


@pytest.fixture
def client(base_url):
    """API client instance for testing."""
    client = APIClient(base_url=base_url, timeout=10)
    yield client
    client.close()


@pytest.fixture
def logging_config_with_file(tmp_path):
    """LoggingConfig with file logging into a temporary directory."""
    return LoggingConfig.create(
        level="DEBUG",
        format="json",
        console=False,
        file_path=str(tmp_path / "client.log"),
        log_headers=True,
        log_modifiers=True,
    )


@pytest.fixture
def logged_client(base_url, logging_config_with_file):
    client = APIClient(config=ClientConfig.create(base_url=base_url, logging=logging_config_with_file))
    yield client
    client.close()
