"""Convenience helpers built on ChromeMCPClient."""

from __future__ import annotations

import logging
from typing import Iterable, TYPE_CHECKING

from .exceptions import ScreenshotCaptureError
from .models import ScreenshotOptions, SearchHit, parse_list
from .steps import AutomationStep, ClickStep, FillStep, NavigateStep
from .waits import FixedDelayWait, WaitStrategy

if TYPE_CHECKING:
    from .client import ChromeMCPClient

logger = logging.getLogger(__name__)

NO_RESULTS_MESSAGE = "No relevant content found in open browser tabs."
SUMMARY_MAX_RESULTS = 3
SUMMARY_CONTENT_CHARS = 200


async def summarize_content_search(client: "ChromeMCPClient", query: str) -> str:
    """Search open tabs and format the top hits as a numbered text block.

    Returns:
        Up to three ``"{n}. {title}\\n   {content}..."`` entries separated by a
        blank line, or NO_RESULTS_MESSAGE when nothing matched.
    """
    payload = await client.search_tabs_content(query)
    hits = parse_list(payload, SearchHit)
    if not hits:
        return NO_RESULTS_MESSAGE

    lines = []
    for i, hit in enumerate(hits[:SUMMARY_MAX_RESULTS], 1):
        content = (hit.content or "")[:SUMMARY_CONTENT_CHARS]
        lines.append(f"{i}. {hit.title or 'Untitled'}\n   {content}...")
    return "\n\n".join(lines)


async def capture_full_page_image(client: "ChromeMCPClient") -> str:
    """Take a full-page screenshot of the active tab.

    Raises:
        ScreenshotCaptureError: If the server returned no image data.
    """
    screenshot = await client.take_screenshot(ScreenshotOptions(full_page=True))
    if not screenshot:
        raise ScreenshotCaptureError("Failed to capture screenshot", tool="chrome_screenshot")
    return screenshot


async def run_automation_sequence(
    client: "ChromeMCPClient",
    steps: Iterable[AutomationStep],
    wait: WaitStrategy | None = None,
) -> int:
    """Run automation steps strictly in order.

    Steps missing their required fields are skipped; the rest of the sequence
    still runs. ``wait.after(action)`` is awaited after every performed step.

    Returns:
        Number of steps performed
    """
    wait = wait or FixedDelayWait()
    performed = 0

    for index, step in enumerate(steps):
        if not step.is_complete():
            logger.debug("Skipping incomplete %s step at index %d", step.action, index)
            continue

        if isinstance(step, NavigateStep):
            await client.navigate(step.url)
        elif isinstance(step, ClickStep):
            await client.click_element(step.target)
        elif isinstance(step, FillStep):
            await client.fill_or_select(step.target, step.value)

        await wait.after(step.action)
        performed += 1

    return performed
