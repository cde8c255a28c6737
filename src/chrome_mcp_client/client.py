"""Chrome MCP Client - Wrapper for the Chrome MCP Server HTTP API.

The Chrome MCP Server extension exposes every browser tool as
``POST {base_url}/tools/{tool_name}`` with a JSON body of parameters, plus a
``GET {base_url}/health`` liveness endpoint.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from .constants import DEFAULT_BASE_URL, DEFAULT_TIMEOUT_MS, HEALTH_TIMEOUT_MS
from .models import ContentFormat, ScreenshotOptions
from .results import JSONValue, ToolFailure, ToolResult, ToolSuccess

logger = logging.getLogger(__name__)


def _compact(params: dict[str, Any] | None) -> dict[str, Any]:
    """Drop unset parameters; the server treats absent keys as defaults."""
    if not params:
        return {}
    return {k: v for k, v in params.items() if v is not None}


def _describe_error(exc: Exception) -> str:
    return str(exc) or exc.__class__.__name__


class ChromeMCPClient:
    """Chrome MCP Server client.

    Expected failures (server down, non-2xx responses) never raise: tool calls
    return a :class:`ToolFailure`, and the typed helpers collapse that to
    ``None`` or ``False``.

    Usage:
        client = ChromeMCPClient()

        if await client.is_server_running():
            state = await client.get_windows_and_tabs()
            await client.navigate("https://example.com")
            shot = await client.take_screenshot(ScreenshotOptions(full_page=True))
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize client.

        Args:
            base_url: Server root, e.g. ``http://127.0.0.1:12306/mcp``
            timeout_ms: Per-request timeout for tool calls
            transport: Optional httpx transport (tests pass a MockTransport)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout_ms = timeout_ms
        self._transport = transport

    def _http(self, timeout_ms: int) -> httpx.AsyncClient:
        # One short-lived client per request; nothing is pooled across calls.
        return httpx.AsyncClient(
            transport=self._transport,
            timeout=httpx.Timeout(timeout_ms / 1000),
        )

    async def is_server_running(self) -> bool:
        """Check whether the server answers its health endpoint with 2xx."""
        url = f"{self.base_url}/health"
        try:
            async with self._http(HEALTH_TIMEOUT_MS) as http:
                response = await http.get(url)
        except (httpx.HTTPError, httpx.InvalidURL):
            logger.debug("Health check to %s failed", url, exc_info=True)
            return False
        return response.is_success

    async def execute_tool(self, tool_name: str, params: dict[str, Any] | None = None) -> ToolResult:
        """Invoke a remote tool by name.

        Returns:
            ToolSuccess with the decoded JSON body, or ToolFailure with
            ``"HTTP {status}: {reason}"`` / the transport error message.

        Raises:
            json.JSONDecodeError: If a 2xx response body is not JSON.
        """
        url = f"{self.base_url}/tools/{tool_name}"
        body = _compact(params)
        logger.debug("POST %s %s", url, body)

        try:
            async with self._http(self.timeout_ms) as http:
                response = await http.post(
                    url,
                    json=body,
                    headers={"Content-Type": "application/json"},
                )
        except httpx.RequestError as e:
            logger.warning("Tool %s unreachable: %s", tool_name, _describe_error(e), exc_info=True)
            return ToolFailure(_describe_error(e))

        if not response.is_success:
            message = f"HTTP {response.status_code}: {response.reason_phrase}"
            logger.warning("Tool %s rejected: %s", tool_name, message)
            return ToolFailure(message)

        return ToolSuccess(response.json())

    # =========================================================================
    # Browser Management
    # =========================================================================

    async def get_windows_and_tabs(self) -> JSONValue | None:
        """Get all open windows and tabs.

        Returns:
            {"windowCount": ..., "tabCount": ..., "windows": [...]} or None
        """
        result = await self.execute_tool("get_windows_and_tabs")
        return result.unwrap()

    async def navigate(
        self,
        url: str,
        new_window: bool = False,
        width: int = 1280,
        height: int = 720,
    ) -> bool:
        """Navigate to a URL, optionally in a new window of the given size."""
        result = await self.execute_tool(
            "chrome_navigate",
            {"url": url, "newWindow": new_window, "width": width, "height": height},
        )
        return result.ok

    async def close_tabs(
        self,
        tab_ids: list[int] | None = None,
        window_ids: list[int] | None = None,
    ) -> bool:
        """Close tabs or whole windows."""
        result = await self.execute_tool(
            "chrome_close_tabs",
            {"tabIds": tab_ids, "windowIds": window_ids},
        )
        return result.ok

    # =========================================================================
    # Content Analysis
    # =========================================================================

    async def search_tabs_content(self, query: str, limit: int = 10) -> JSONValue | None:
        """Semantic search over the content of open tabs."""
        result = await self.execute_tool("search_tabs_content", {"query": query, "limit": limit})
        return result.unwrap()

    async def get_web_content(
        self,
        tab_id: int | None = None,
        format: ContentFormat = "text",
    ) -> JSONValue | None:
        """Get the content of the active (or given) tab as text, html or markdown."""
        result = await self.execute_tool(
            "chrome_get_web_content",
            {"tabId": tab_id, "format": format},
        )
        return result.unwrap()

    async def get_interactive_elements(
        self,
        tab_id: int | None = None,
        selector: str | None = None,
    ) -> JSONValue | None:
        """List clickable/fillable elements on the page."""
        result = await self.execute_tool(
            "chrome_get_interactive_elements",
            {"tabId": tab_id, "selector": selector},
        )
        return result.unwrap()

    # =========================================================================
    # Screenshots
    # =========================================================================

    async def take_screenshot(self, options: ScreenshotOptions | None = None) -> JSONValue | None:
        """Screenshot the page or a single element.

        Returns:
            Image data as returned by the server, or None
        """
        options = options or ScreenshotOptions()
        result = await self.execute_tool("chrome_screenshot", options.to_params())
        return result.unwrap()

    # =========================================================================
    # Interaction
    # =========================================================================

    async def click_element(self, selector: str, tab_id: int | None = None) -> bool:
        result = await self.execute_tool(
            "chrome_click_element",
            {"selector": selector, "tabId": tab_id},
        )
        return result.ok

    async def fill_or_select(self, selector: str, value: str, tab_id: int | None = None) -> bool:
        """Fill an input or select an option."""
        result = await self.execute_tool(
            "chrome_fill_or_select",
            {"selector": selector, "value": value, "tabId": tab_id},
        )
        return result.ok

    async def send_keyboard(self, keys: str, tab_id: int | None = None) -> bool:
        """Send keyboard input, e.g. ``"Enter"`` or ``"Ctrl+A"``."""
        result = await self.execute_tool("chrome_keyboard", {"keys": keys, "tabId": tab_id})
        return result.ok

    # =========================================================================
    # Network Monitoring
    # =========================================================================

    async def start_network_capture(self, tab_id: int | None = None) -> bool:
        result = await self.execute_tool("chrome_network_capture_start", {"tabId": tab_id})
        return result.ok

    async def stop_network_capture(self, tab_id: int | None = None) -> JSONValue | None:
        """Stop network capture and return the captured requests."""
        result = await self.execute_tool("chrome_network_capture_stop", {"tabId": tab_id})
        return result.unwrap()

    # =========================================================================
    # Data Management
    # =========================================================================

    async def search_history(self, query: str, max_results: int = 100) -> JSONValue | None:
        result = await self.execute_tool(
            "chrome_history",
            {"query": query, "maxResults": max_results},
        )
        return result.unwrap()

    async def search_bookmarks(self, query: str) -> JSONValue | None:
        result = await self.execute_tool("chrome_bookmark_search", {"query": query})
        return result.unwrap()

    async def add_bookmark(self, url: str, title: str, folder: str | None = None) -> bool:
        """Add a bookmark, optionally inside ``folder``."""
        result = await self.execute_tool(
            "chrome_bookmark_add",
            {"url": url, "title": title, "folder": folder},
        )
        return result.ok
