"""Result shapes reported by the Chrome MCP server.

The server owns these payloads; parsing here is lenient and only used for
display. Missing keys become ``None`` and non-object list entries are dropped.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

ContentFormat = Literal["text", "html", "markdown"]
ImageFormat = Literal["png", "jpeg"]


def _str_or_none(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _int_or_none(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    return value if isinstance(value, int) else None


def _dict_items(value: Any) -> list[dict[str, Any]]:
    if isinstance(value, list):
        return [item for item in value if isinstance(item, dict)]
    return []


@dataclass
class TabInfo:
    """One browser tab as reported by get_windows_and_tabs."""

    tab_id: int | None
    url: str | None
    title: str | None
    active: bool = False

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "TabInfo":
        return cls(
            tab_id=_int_or_none(data.get("tabId")),
            url=_str_or_none(data.get("url")),
            title=_str_or_none(data.get("title")),
            active=bool(data.get("active", False)),
        )


@dataclass
class WindowInfo:
    """A browser window and its tabs, in server order."""

    window_id: int | None
    tabs: list[TabInfo] = field(default_factory=list)

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "WindowInfo":
        return cls(
            window_id=_int_or_none(data.get("windowId")),
            tabs=[TabInfo.from_payload(t) for t in _dict_items(data.get("tabs"))],
        )


@dataclass
class WindowsAndTabs:
    """Full browser state snapshot."""

    windows: list[WindowInfo] = field(default_factory=list)
    window_count: int | None = None
    tab_count: int | None = None

    @classmethod
    def from_payload(cls, data: Any) -> "WindowsAndTabs":
        if not isinstance(data, dict):
            return cls()
        return cls(
            windows=[WindowInfo.from_payload(w) for w in _dict_items(data.get("windows"))],
            window_count=_int_or_none(data.get("windowCount")),
            tab_count=_int_or_none(data.get("tabCount")),
        )


@dataclass
class SearchHit:
    """A search_tabs_content match."""

    title: str | None
    content: str | None
    url: str | None = None

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "SearchHit":
        return cls(
            title=_str_or_none(data.get("title")),
            content=_str_or_none(data.get("content")),
            url=_str_or_none(data.get("url")),
        )


@dataclass
class HistoryEntry:
    title: str | None
    url: str | None

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "HistoryEntry":
        return cls(title=_str_or_none(data.get("title")), url=_str_or_none(data.get("url")))


@dataclass
class Bookmark:
    title: str | None
    url: str | None

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "Bookmark":
        return cls(title=_str_or_none(data.get("title")), url=_str_or_none(data.get("url")))


@dataclass
class NetworkRequest:
    """A request recorded between network capture start and stop."""

    method: str | None
    url: str | None
    status: int | None = None

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "NetworkRequest":
        return cls(
            method=_str_or_none(data.get("method")),
            url=_str_or_none(data.get("url")),
            status=_int_or_none(data.get("status")),
        )


@dataclass
class InteractiveElement:
    tag_name: str | None
    text: str | None = None

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "InteractiveElement":
        return cls(
            tag_name=_str_or_none(data.get("tagName")),
            text=_str_or_none(data.get("text")),
        )


def parse_list(payload: Any, model: type) -> list[Any]:
    """Parse a list payload into ``model`` instances, skipping non-objects."""
    return [model.from_payload(item) for item in _dict_items(payload)]


@dataclass
class ScreenshotOptions:
    """Options for chrome_screenshot. Unset options are not sent."""

    tab_id: int | None = None
    selector: str | None = None
    full_page: bool | None = None
    format: ImageFormat | None = None
    quality: int | None = None

    def to_params(self) -> dict[str, Any]:
        params = {
            "tabId": self.tab_id,
            "selector": self.selector,
            "fullPage": self.full_page,
            "format": self.format,
            "quality": self.quality,
        }
        return {k: v for k, v in params.items() if v is not None}
