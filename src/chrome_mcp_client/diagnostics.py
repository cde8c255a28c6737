"""Troubleshooting aids: port scanning, connection test, static advice."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Iterable, TYPE_CHECKING

import httpx

from .models import WindowsAndTabs

if TYPE_CHECKING:
    from .client import ChromeMCPClient

logger = logging.getLogger(__name__)

DEFAULT_PROBE_PORTS = (12306, 3000, 8080, 8000, 9000, 3001, 8081, 12307, 12308)


@dataclass
class PortProbe:
    """Outcome of probing one port's health endpoint."""

    port: int
    success: bool
    status: int | None = None
    body: str = ""


async def probe_port(
    port: int,
    host: str = "127.0.0.1",
    timeout_ms: int = 3000,
    transport: httpx.AsyncBaseTransport | None = None,
) -> PortProbe:
    """GET ``http://{host}:{port}/mcp/health``.

    Any HTTP response counts as a hit (the status is recorded); only request
    errors count as a miss.
    """
    url = f"http://{host}:{port}/mcp/health"
    try:
        async with httpx.AsyncClient(
            transport=transport, timeout=httpx.Timeout(timeout_ms / 1000)
        ) as http:
            response = await http.get(url)
    except httpx.HTTPError:
        logger.debug("No answer on port %d", port)
        return PortProbe(port=port, success=False)
    return PortProbe(port=port, success=True, status=response.status_code, body=response.text)


async def scan_ports(
    ports: Iterable[int] = DEFAULT_PROBE_PORTS,
    host: str = "127.0.0.1",
    timeout_ms: int = 3000,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[PortProbe]:
    """Probe all ports concurrently. Results keep the order of ``ports``."""
    return list(
        await asyncio.gather(
            *(probe_port(p, host=host, timeout_ms=timeout_ms, transport=transport) for p in ports)
        )
    )


@dataclass
class ConnectionReport:
    """Result of :func:`check_connection`."""

    server_running: bool
    tools_ok: bool = False
    window_count: int | None = None
    tab_count: int | None = None
    sample_titles: list[str] = field(default_factory=list)
    error: str | None = None

    @property
    def healthy(self) -> bool:
        return self.server_running and self.tools_ok


async def check_connection(client: "ChromeMCPClient", sample_size: int = 3) -> ConnectionReport:
    """Check the health endpoint, then make one real tool call."""
    if not await client.is_server_running():
        return ConnectionReport(
            server_running=False,
            error=f"No healthy server at {client.base_url}/health",
        )

    result = await client.execute_tool("get_windows_and_tabs")
    if not result.ok:
        return ConnectionReport(server_running=True, error=result.message)

    state = WindowsAndTabs.from_payload(result.payload)
    titles: list[str] = []
    if state.windows:
        titles = [(tab.title or "No title")[:50] for tab in state.windows[0].tabs[:sample_size]]

    return ConnectionReport(
        server_running=True,
        tools_ok=True,
        window_count=state.window_count,
        tab_count=state.tab_count,
        sample_titles=titles,
    )


# Static advice printed by `chrome-mcp debug` and after a failed `test`.
TROUBLESHOOTING_SECTIONS: list[tuple[str, list[str]]] = [
    (
        "Extension status",
        [
            "Open chrome://extensions/ and make sure Developer mode is enabled",
            'Find the "Chrome MCP Server" extension and check it shows no errors',
            "Click the extension icon in the toolbar",
        ],
    ),
    (
        "Extension popup",
        [
            'Connection status should read "Connected"',
            "Server URL should show http://127.0.0.1:12306/mcp",
            'If disconnected, click "Connect"',
        ],
    ),
    (
        "Extension console",
        [
            'Right-click the extension icon and choose "Inspect popup"',
            'Or open chrome://extensions/ and click the "background page" link',
            "Look for error messages in the console",
        ],
    ),
    (
        "Extension shows Disconnected",
        [
            "Reload the extension",
            "Check the native messaging host is registered (npm install -g mcp-chrome-bridge)",
            "Restart Chrome",
        ],
    ),
    (
        "HTTP server not starting",
        [
            "The background script may not have started",
            "Check extension permissions",
            "Look for JavaScript errors in the extension console",
        ],
    ),
    (
        "Port 12306 is not listening",
        [
            "The background script may have crashed",
            "Try a different port in the extension settings (then run `chrome-mcp scan`)",
            "Check whether another process is using the port",
        ],
    ),
    (
        "Popup says connected but HTTP calls fail",
        [
            "Open the URL shown in the popup directly in the browser",
            "Check whether it responds with any content",
        ],
    ),
]
