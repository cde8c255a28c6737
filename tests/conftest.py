"""Shared test fixtures for the chrome-mcp-client test suite."""

import json
from typing import Any, Callable
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from chrome_mcp_client import ChromeMCPClient

SAMPLE_BASE_URL = "http://127.0.0.1:12306/mcp"
SAMPLE_TAB_ID = 12345


# ============================================================================
# Mock Response Data
# ============================================================================

MOCK_WINDOWS_AND_TABS = {
    "windowCount": 1,
    "tabCount": 2,
    "windows": [
        {
            "windowId": 1,
            "tabs": [
                {"tabId": 101, "url": "https://example.com/", "title": "Example Domain", "active": True},
                {"tabId": 102, "url": "https://docs.python.org/3/", "title": "Python docs", "active": False},
            ],
        }
    ],
}

MOCK_SEARCH_RESULTS = [
    {"title": f"Result {i}", "content": f"{i}" * 250, "url": f"https://example.com/{i}"}
    for i in range(1, 6)
]

MOCK_NETWORK_REQUESTS = [
    {"method": "GET", "url": "https://httpbin.org/json", "status": 200},
    {"method": "GET", "url": "https://httpbin.org/favicon.ico", "status": 404},
]


# ============================================================================
# Fake Server
# ============================================================================


class FakeServer:
    """Records requests and answers them from a per-endpoint table.

    Endpoints are keyed by tool name, or "health" for the health check.
    """

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self._routes: dict[str, Callable[[httpx.Request], httpx.Response]] = {}

    def respond(self, endpoint: str, status_code: int = 200, json_body: Any = None, text: str | None = None):
        def _build(request: httpx.Request) -> httpx.Response:
            if text is not None:
                return httpx.Response(status_code, text=text)
            return httpx.Response(status_code, json=json_body if json_body is not None else {})

        self._routes[endpoint] = _build

    def fail(self, endpoint: str, exc: Exception):
        def _raise(request: httpx.Request) -> httpx.Response:
            raise exc

        self._routes[endpoint] = _raise

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        endpoint = request.url.path.rsplit("/", 1)[-1]
        route = self._routes.get(endpoint)
        if route is None:
            return httpx.Response(200, json={})
        return route(request)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    @property
    def last_body(self) -> Any:
        return json.loads(self.last_request.content)


@pytest.fixture
def fake_server():
    return FakeServer()


@pytest.fixture
def client(fake_server):
    """ChromeMCPClient wired to the fake server."""
    return ChromeMCPClient(
        base_url=SAMPLE_BASE_URL,
        transport=httpx.MockTransport(fake_server.handler),
    )


@pytest.fixture
def mock_client():
    """ChromeMCPClient stand-in with every tool method mocked."""
    client = MagicMock(spec=ChromeMCPClient)
    client.base_url = SAMPLE_BASE_URL
    client.is_server_running = AsyncMock(return_value=True)
    client.execute_tool = AsyncMock()
    client.get_windows_and_tabs = AsyncMock(return_value=MOCK_WINDOWS_AND_TABS)
    client.navigate = AsyncMock(return_value=True)
    client.close_tabs = AsyncMock(return_value=True)
    client.search_tabs_content = AsyncMock(return_value=MOCK_SEARCH_RESULTS)
    client.get_web_content = AsyncMock(return_value="Example Domain\nThis domain is for examples.")
    client.get_interactive_elements = AsyncMock(return_value=[{"tagName": "A", "text": "More information"}])
    client.take_screenshot = AsyncMock(return_value="iVBORw0KGgo=")
    client.click_element = AsyncMock(return_value=True)
    client.fill_or_select = AsyncMock(return_value=True)
    client.send_keyboard = AsyncMock(return_value=True)
    client.start_network_capture = AsyncMock(return_value=True)
    client.stop_network_capture = AsyncMock(return_value=MOCK_NETWORK_REQUESTS)
    client.search_history = AsyncMock(return_value=[{"title": "GitHub", "url": "https://github.com/"}])
    client.search_bookmarks = AsyncMock(return_value=[{"title": "MDN", "url": "https://developer.mozilla.org/"}])
    client.add_bookmark = AsyncMock(return_value=True)
    return client


# ============================================================================
# CLI Testing Fixtures
# ============================================================================


@pytest.fixture
def cli_runner():
    """Create a Typer CLI test runner."""
    from typer.testing import CliRunner
    return CliRunner()
