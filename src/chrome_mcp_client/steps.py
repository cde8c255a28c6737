"""Automation steps consumed by run_automation_sequence."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Union


@dataclass(frozen=True)
class NavigateStep:
    """Load ``url`` in the current tab."""

    url: str | None = None
    action: ClassVar[str] = "navigate"

    def is_complete(self) -> bool:
        return bool(self.url)


@dataclass(frozen=True)
class ClickStep:
    """Click the element matching the ``target`` CSS selector."""

    target: str | None = None
    action: ClassVar[str] = "click"

    def is_complete(self) -> bool:
        return bool(self.target)


@dataclass(frozen=True)
class FillStep:
    """Fill an input (or pick an option) matching ``target`` with ``value``."""

    target: str | None = None
    value: str | None = None
    action: ClassVar[str] = "fill"

    def is_complete(self) -> bool:
        return bool(self.target and self.value)


@dataclass(frozen=True)
class WaitStep:
    """Pause to let the page settle."""

    action: ClassVar[str] = "wait"

    def is_complete(self) -> bool:
        return True


AutomationStep = Union[NavigateStep, ClickStep, FillStep, WaitStep]


def parse_step(data: dict[str, Any]) -> AutomationStep:
    """Build a step from ``{"action": ..., "url"/"target"/"value": ...}``.

    Missing fields are kept as ``None``; the runner skips incomplete steps.

    Raises:
        ValueError: If ``data`` is not an object or has an unknown action.
    """
    if not isinstance(data, dict):
        raise ValueError(f"Step must be an object, got {type(data).__name__}")

    action = data.get("action")
    if action == "navigate":
        return NavigateStep(url=data.get("url"))
    if action == "click":
        return ClickStep(target=data.get("target"))
    if action == "fill":
        return FillStep(target=data.get("target"), value=data.get("value"))
    if action == "wait":
        return WaitStep()
    raise ValueError(f"Unknown step action: {action!r}")


def parse_steps(items: list[dict[str, Any]]) -> list[AutomationStep]:
    """Parse a JSON list of steps, preserving order."""
    if not isinstance(items, list):
        raise ValueError("Steps must be a JSON list")
    return [parse_step(item) for item in items]
