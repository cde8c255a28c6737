"""chrome-mcp CLI - Main entry point."""

import asyncio
import base64
import binascii
import json
import logging
from pathlib import Path
from typing import Any, Coroutine, Optional, TypeVar

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .client import ChromeMCPClient
from .config import ClientSettings
from .constants import DEFAULT_BASE_URL
from .diagnostics import TROUBLESHOOTING_SECTIONS, check_connection, scan_ports
from .exceptions import ChromeMCPError
from .helpers import capture_full_page_image, run_automation_sequence, summarize_content_search
from .models import (
    Bookmark,
    HistoryEntry,
    InteractiveElement,
    NetworkRequest,
    ScreenshotOptions,
    WindowsAndTabs,
    parse_list,
)
from .steps import parse_steps
from .waits import FixedDelayWait, NoWait

app = typer.Typer(
    name="chrome-mcp",
    help="Chrome MCP Server client - browser automation over the extension's HTTP API",
    no_args_is_help=True,
)
console = Console()
err_console = Console(stderr=True)

T = TypeVar("T")

_options: dict[str, Any] = {}


@app.callback()
def main(
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url", "-u",
        help=f"Server root URL [default: $CHROME_MCP_BASE_URL or {DEFAULT_BASE_URL}]",
    ),
    timeout: Optional[int] = typer.Option(
        None,
        "--timeout", "-t",
        help="Tool call timeout in milliseconds [default: $CHROME_MCP_TIMEOUT_MS or 30000]",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every request"),
):
    """Global options."""
    try:
        settings = ClientSettings()
    except ValidationError as e:
        _fail(f"Invalid CHROME_MCP_* configuration:\n{e}")
    _options["settings"] = settings
    _options["base_url"] = base_url or settings.base_url
    _options["timeout_ms"] = timeout if timeout is not None else settings.timeout_ms
    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.log_level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _client() -> ChromeMCPClient:
    return ChromeMCPClient(base_url=_options["base_url"], timeout_ms=_options["timeout_ms"])


def _run(coro: Coroutine[Any, Any, T]) -> T:
    """Run a client coroutine, reporting a non-JSON server reply as a failure."""
    try:
        return asyncio.run(coro)
    except json.JSONDecodeError:
        _fail("Server did not return JSON (check --base-url)")


def _output_result(result: Any) -> None:
    """Print a raw payload as JSON."""
    console.print_json(json.dumps(result, default=str))


def _fail(message: str) -> None:
    console.print(f"[red]{escape(message)}[/red]")
    raise typer.Exit(1)


def _preview(text: str | None, length: int) -> str:
    text = text or ""
    return escape(text[:length] + "..." if len(text) > length else text)


def _print_tabs(state: WindowsAndTabs) -> None:
    console.print(
        f"Found [bold]{state.window_count}[/bold] windows with "
        f"[bold]{state.tab_count}[/bold] tabs total"
    )
    table = Table(show_header=True, header_style="bold")
    table.add_column("Window", style="dim")
    table.add_column("Tab ID", style="dim")
    table.add_column("", width=2)
    table.add_column("Title", style="cyan")
    table.add_column("URL", style="white")
    for window in state.windows:
        for tab in window.tabs:
            table.add_row(
                str(window.window_id),
                str(tab.tab_id),
                "*" if tab.active else "",
                _preview(tab.title, 50),
                _preview(tab.url, 60),
            )
    console.print(table)


# ============================================================================
# Server Commands
# ============================================================================


@app.command("status")
def status():
    """Check whether the Chrome MCP Server is running."""
    client = _client()
    if _run(client.is_server_running()):
        console.print(f"[green]Chrome MCP Server is running[/green] at {client.base_url}")
        return
    console.print(f"[red]Chrome MCP Server is not running[/red] at {client.base_url}")
    console.print("[dim]Install the bridge: npm install -g mcp-chrome-bridge[/dim]")
    console.print("[dim]Load the Chrome extension from releases, then run 'chrome-mcp debug'[/dim]")
    raise typer.Exit(1)


@app.command("tabs")
def tabs(
    json_output: bool = typer.Option(False, "--json", help="Print the raw response"),
):
    """List open windows and tabs."""
    payload = _run(_client().get_windows_and_tabs())
    if payload is None:
        _fail("Failed to get windows and tabs")
    if json_output:
        _output_result(payload)
        return
    _print_tabs(WindowsAndTabs.from_payload(payload))


@app.command("close")
def close(
    tab_id: Optional[list[int]] = typer.Option(None, "--tab-id", help="Tab to close (repeatable)"),
    window_id: Optional[list[int]] = typer.Option(None, "--window-id", help="Window to close (repeatable)"),
):
    """Close tabs or windows."""
    if not tab_id and not window_id:
        _fail("Pass at least one --tab-id or --window-id")
    if not _run(_client().close_tabs(tab_ids=tab_id or None, window_ids=window_id or None)):
        _fail("Close failed")
    console.print("[green]Closed[/green]")


# ============================================================================
# Content Commands
# ============================================================================


@app.command("search")
def search(
    query: str = typer.Argument(..., help="What to look for in open tabs"),
    limit: int = typer.Option(10, "--limit", "-n", help="Max results (with --json)"),
    json_output: bool = typer.Option(False, "--json", help="Print the raw response"),
):
    """Semantic search across the content of open tabs."""
    client = _client()
    if json_output:
        payload = _run(client.search_tabs_content(query, limit=limit))
        if payload is None:
            _fail("Search failed")
        _output_result(payload)
        return
    console.print(_run(summarize_content_search(client, query)), markup=False)


@app.command("content")
def content(
    tab_id: Optional[int] = typer.Option(None, "--tab-id", help="Tab (default: active tab)"),
    fmt: str = typer.Option("text", "--format", "-f", help="text, html or markdown"),
    chars: int = typer.Option(0, "--chars", help="Only print the first N characters"),
):
    """Extract content from the active (or given) tab."""
    if fmt not in ("text", "html", "markdown"):
        _fail(f"Unknown format: {fmt}")
    payload = _run(_client().get_web_content(tab_id=tab_id, format=fmt))
    if payload is None:
        _fail("Failed to get page content")
    if not isinstance(payload, str):
        _output_result(payload)
        return
    console.print(_preview(payload, chars) if chars else escape(payload))


@app.command("elements")
def elements(
    tab_id: Optional[int] = typer.Option(None, "--tab-id"),
    selector: Optional[str] = typer.Option(None, "--selector", "-s", help="Restrict to a CSS selector"),
    limit: int = typer.Option(20, "--limit", "-n"),
):
    """List interactive elements on the page."""
    payload = _run(_client().get_interactive_elements(tab_id=tab_id, selector=selector))
    if payload is None:
        _fail("Failed to get interactive elements")
    items = parse_list(payload, InteractiveElement)
    console.print(f"Found [bold]{len(items)}[/bold] interactive elements")
    table = Table(show_header=True, header_style="bold")
    table.add_column("#", style="dim", width=4)
    table.add_column("Tag", style="cyan")
    table.add_column("Text", style="white")
    for i, element in enumerate(items[:limit], 1):
        table.add_row(str(i), escape(element.tag_name or ""), _preview(element.text, 30) or "No text")
    console.print(table)


@app.command("screenshot")
def screenshot(
    tab_id: Optional[int] = typer.Option(None, "--tab-id"),
    selector: Optional[str] = typer.Option(None, "--selector", "-s", help="Capture a single element"),
    full_page: bool = typer.Option(False, "--full-page", help="Capture the whole scrollable page"),
    fmt: Optional[str] = typer.Option(None, "--format", "-f", help="png or jpeg"),
    quality: Optional[int] = typer.Option(None, "--quality", "-q", help="JPEG quality"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the decoded image here"),
):
    """Take a screenshot of the page or an element."""
    client = _client()
    if full_page and not (tab_id or selector or fmt or quality):
        try:
            data: Any = _run(capture_full_page_image(client))
        except ChromeMCPError as e:
            _fail(e.message)
    else:
        options = ScreenshotOptions(
            tab_id=tab_id,
            selector=selector,
            full_page=full_page or None,
            format=fmt,
            quality=quality,
        )
        data = _run(client.take_screenshot(options))
        if not data:
            _fail("Failed to capture screenshot")

    if not isinstance(data, str):
        _output_result(data)
        return

    if output:
        encoded = data.split(",", 1)[1] if data.startswith("data:") else data
        try:
            image = base64.b64decode(encoded, validate=True)
        except binascii.Error:
            _fail("Screenshot data is not base64")
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_bytes(image)
        console.print(f"[green]Screenshot saved[/green] to {output}")
    else:
        console.print(f"[green]Screenshot captured[/green] ({len(data)} characters)")


# ============================================================================
# Interaction Commands
# ============================================================================


@app.command("navigate")
def navigate(
    url: str = typer.Argument(...),
    new_window: bool = typer.Option(False, "--new-window"),
    width: int = typer.Option(1280, "--width"),
    height: int = typer.Option(720, "--height"),
):
    """Navigate to a URL."""
    if not _run(_client().navigate(url, new_window=new_window, width=width, height=height)):
        _fail(f"Navigation to {url} failed")
    console.print(f"[green]Navigated[/green] to {escape(url)}")


@app.command("click")
def click(
    selector: str = typer.Argument(..., help="CSS selector"),
    tab_id: Optional[int] = typer.Option(None, "--tab-id"),
):
    """Click an element."""
    if not _run(_client().click_element(selector, tab_id=tab_id)):
        _fail(f"Click on {selector} failed")
    console.print(f"[green]Clicked[/green] {escape(selector)}")


@app.command("fill")
def fill(
    selector: str = typer.Argument(..., help="CSS selector"),
    value: str = typer.Argument(...),
    tab_id: Optional[int] = typer.Option(None, "--tab-id"),
):
    """Fill an input or select an option."""
    if not _run(_client().fill_or_select(selector, value, tab_id=tab_id)):
        _fail(f"Fill on {selector} failed")
    console.print(f"[green]Filled[/green] {escape(selector)}")


@app.command("keys")
def keys(
    keys: str = typer.Argument(..., help='Keys to send, e.g. "Enter" or "Ctrl+A"'),
    tab_id: Optional[int] = typer.Option(None, "--tab-id"),
):
    """Send keyboard input."""
    if not _run(_client().send_keyboard(keys, tab_id=tab_id)):
        _fail("Keyboard input failed")
    console.print(f"[green]Sent[/green] {escape(keys)}")


@app.command("run")
def run(
    steps_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON list of steps"),
    no_delay: bool = typer.Option(False, "--no-delay", help="Skip the post-action pauses"),
):
    """Run a scripted sequence of navigate/click/fill/wait steps.

    Example steps file:
        [{"action": "navigate", "url": "https://github.com"},
         {"action": "wait"},
         {"action": "fill", "target": "input[name=q]", "value": "chrome extension"}]
    """
    try:
        steps = parse_steps(json.loads(steps_file.read_text(encoding="utf-8")))
    except (ValueError, json.JSONDecodeError) as e:
        _fail(f"Invalid steps file: {e}")

    wait = NoWait() if no_delay else FixedDelayWait()
    performed = _run(run_automation_sequence(_client(), steps, wait=wait))
    skipped = len(steps) - performed
    console.print(f"[green]Automation completed[/green]: {performed} steps run, {skipped} skipped")


@app.command("network")
def network(
    url: str = typer.Argument(..., help="Page to load while capturing"),
    seconds: float = typer.Option(3.0, "--seconds", "-s", help="How long to capture after navigating"),
    limit: int = typer.Option(20, "--limit", "-n"),
):
    """Capture network requests made while loading a page."""
    client = _client()

    async def _capture() -> Any:
        if not await client.start_network_capture():
            return None
        await client.navigate(url)
        await asyncio.sleep(seconds)
        return await client.stop_network_capture()

    payload = _run(_capture())
    if payload is None:
        _fail("Network capture failed")

    requests = parse_list(payload, NetworkRequest)
    console.print(f"Captured [bold]{len(requests)}[/bold] network requests")
    table = Table(show_header=True, header_style="bold")
    table.add_column("Method", style="cyan")
    table.add_column("URL", style="white")
    table.add_column("Status", style="dim")
    for req in requests[:limit]:
        table.add_row(req.method or "", _preview(req.url, 80), str(req.status or ""))
    console.print(table)


# ============================================================================
# Data Commands
# ============================================================================


@app.command("history")
def history(
    query: str = typer.Argument(...),
    max_results: int = typer.Option(100, "--max-results", "-n"),
):
    """Search browser history."""
    payload = _run(_client().search_history(query, max_results=max_results))
    if payload is None:
        _fail("History search failed")
    entries = parse_list(payload, HistoryEntry)
    console.print(f"Found [bold]{len(entries)}[/bold] history entries")
    for i, entry in enumerate(entries, 1):
        console.print(f"  {i}. {_preview(entry.title, 40)} - [dim]{escape(str(entry.url))}[/dim]")


@app.command("bookmarks")
def bookmarks(query: str = typer.Argument(...)):
    """Search bookmarks."""
    payload = _run(_client().search_bookmarks(query))
    if payload is None:
        _fail("Bookmark search failed")
    items = parse_list(payload, Bookmark)
    console.print(f"Found [bold]{len(items)}[/bold] bookmarks")
    for i, bookmark in enumerate(items, 1):
        console.print(f"  {i}. {escape(str(bookmark.title))} - [dim]{escape(str(bookmark.url))}[/dim]")


@app.command("bookmark-add")
def bookmark_add(
    url: str = typer.Argument(...),
    title: str = typer.Argument(...),
    folder: Optional[str] = typer.Option(None, "--folder"),
):
    """Add a bookmark."""
    if not _run(_client().add_bookmark(url, title, folder=folder)):
        _fail("Adding bookmark failed")
    console.print(f"[green]Bookmarked[/green] {escape(title)}")


# ============================================================================
# Diagnostics
# ============================================================================


def _print_troubleshooting() -> None:
    for i, (title, lines) in enumerate(TROUBLESHOOTING_SECTIONS, 1):
        console.print(
            Panel("\n".join(f"- {line}" for line in lines), title=f"{i}. {title}", title_align="left")
        )


@app.command("debug")
def debug():
    """Print troubleshooting steps for the extension."""
    console.print("[bold cyan]Chrome MCP Server Debug Information[/bold cyan]\n")
    console.print(f"Expected server URL: {_options['base_url']}\n")
    _print_troubleshooting()
    console.print(
        "\n[bold]Next steps:[/bold] check the extension popup and note the connection status, "
        "the server URL shown and any console errors."
    )


@app.command("test")
def connection_test():
    """Test the health endpoint and one real tool call."""
    console.print("[bold cyan]Chrome MCP Server Connection Test[/bold cyan]\n")
    report = _run(check_connection(_client()))

    if report.healthy:
        console.print("[green]HTTP server is running[/green]")
        console.print("[green]Successfully got browser data[/green]")
        console.print(f"  Windows: {report.window_count if report.window_count is not None else 'N/A'}")
        console.print(f"  Tabs: {report.tab_count if report.tab_count is not None else 'N/A'}")
        for i, title in enumerate(report.sample_titles, 1):
            console.print(f"    {i}. {escape(title)}")
        console.print("\n[bold green]Chrome MCP Server is working correctly![/bold green]")
        return

    if report.server_running:
        console.print("[green]HTTP server is running[/green]")
        console.print(f"[red]Tools endpoint failed:[/red] {escape(str(report.error))}")
    else:
        console.print(f"[red]HTTP server connection failed:[/red] {escape(str(report.error))}")
    console.print()
    _print_troubleshooting()
    raise typer.Exit(1)


@app.command("scan")
def scan(
    port: Optional[list[int]] = typer.Option(None, "--port", "-p", help="Port to probe (repeatable)"),
):
    """Scan common ports for a Chrome MCP Server health endpoint."""
    kwargs: dict[str, Any] = {
        "host": _options["settings"].probe_host,
        "timeout_ms": _options["settings"].probe_timeout_ms,
    }
    if port:
        kwargs["ports"] = port

    console.print("[dim]Scanning for Chrome MCP Server...[/dim]")
    results = _run(scan_ports(**kwargs))
    working = [r for r in results if r.success]

    if working:
        table = Table(show_header=True, header_style="bold", title="Responding ports")
        table.add_column("Port", style="cyan")
        table.add_column("Status", style="white")
        table.add_column("Response", style="dim")
        for probe in working:
            table.add_row(str(probe.port), str(probe.status), _preview(probe.body, 100))
        console.print(table)
    else:
        console.print("[red]No working ports found[/red]")

    console.print(
        f"\nTested {len(results)} ports: {len(working)} working, {len(results) - len(working)} failed"
    )


@app.command("demo")
def demo():
    """Walk through the main tools against the running server."""
    client = _client()

    async def _demo() -> bool:
        console.print("[bold cyan]1. Checking server status...[/bold cyan]")
        if not await client.is_server_running():
            console.print("[red]Chrome MCP Server is not running![/red]")
            console.print("  npm install -g mcp-chrome-bridge")
            console.print("  Load the Chrome extension from releases")
            return False
        console.print("[green]Chrome MCP Server is running![/green]\n")

        console.print("[bold cyan]2. Getting windows and tabs...[/bold cyan]")
        payload = await client.get_windows_and_tabs()
        if payload is not None:
            _print_tabs(WindowsAndTabs.from_payload(payload))
        console.print()

        search_query = "JavaScript tutorial"
        console.print(f'[bold cyan]3. Searching tabs for "{search_query}"...[/bold cyan]')
        console.print(await summarize_content_search(client, search_query), markup=False)
        console.print()

        console.print("[bold cyan]4. Extracting content from the active tab...[/bold cyan]")
        page = await client.get_web_content()
        if isinstance(page, str):
            console.print(_preview(page, 200))
        console.print()

        console.print("[bold cyan]5. Finding interactive elements...[/bold cyan]")
        found = parse_list(await client.get_interactive_elements(), InteractiveElement)
        for i, element in enumerate(found[:5], 1):
            console.print(f"  {i}. {escape(str(element.tag_name))} - {_preview(element.text, 30) or 'No text'}")
        console.print()

        console.print("[bold cyan]6. Taking a screenshot...[/bold cyan]")
        shot = await client.take_screenshot(ScreenshotOptions(format="png"))
        if shot:
            console.print(f"  Screenshot captured ({len(str(shot))} characters)")
        else:
            console.print("[red]  Screenshot failed[/red]")
        console.print()

        console.print("[bold cyan]7. Searching history for 'github'...[/bold cyan]")
        for i, entry in enumerate(parse_list(await client.search_history("github", 10), HistoryEntry)[:3], 1):
            console.print(f"  {i}. {_preview(entry.title, 40)} - {escape(str(entry.url))}")
        console.print()

        console.print("[bold cyan]8. Searching bookmarks for 'development'...[/bold cyan]")
        for i, bookmark in enumerate(parse_list(await client.search_bookmarks("development"), Bookmark)[:3], 1):
            console.print(f"  {i}. {escape(str(bookmark.title))} - {escape(str(bookmark.url))}")
        return True

    if not _run(_demo()):
        raise typer.Exit(1)
    console.print("\n[bold green]Demo completed![/bold green]")


if __name__ == "__main__":
    app()
