"""Async client for the Chrome MCP Server HTTP API.

Usage:
    from chrome_mcp_client import ChromeMCPClient, summarize_content_search

    client = ChromeMCPClient()
    if await client.is_server_running():
        print(await summarize_content_search(client, "python asyncio"))
"""

from .client import ChromeMCPClient
from .exceptions import ChromeMCPError, ScreenshotCaptureError
from .helpers import (
    NO_RESULTS_MESSAGE,
    capture_full_page_image,
    run_automation_sequence,
    summarize_content_search,
)
from .models import ScreenshotOptions, TabInfo, WindowInfo, WindowsAndTabs
from .results import ToolFailure, ToolResult, ToolSuccess
from .steps import AutomationStep, ClickStep, FillStep, NavigateStep, WaitStep, parse_steps
from .waits import FixedDelayWait, NoWait, WaitStrategy

__all__ = [
    "ChromeMCPClient",
    "ChromeMCPError",
    "ScreenshotCaptureError",
    "NO_RESULTS_MESSAGE",
    "capture_full_page_image",
    "run_automation_sequence",
    "summarize_content_search",
    "ScreenshotOptions",
    "TabInfo",
    "WindowInfo",
    "WindowsAndTabs",
    "ToolFailure",
    "ToolResult",
    "ToolSuccess",
    "AutomationStep",
    "ClickStep",
    "FillStep",
    "NavigateStep",
    "WaitStep",
    "parse_steps",
    "FixedDelayWait",
    "NoWait",
    "WaitStrategy",
]
