"""Tagged outcome of a remote tool invocation.

Every call to :meth:`ChromeMCPClient.execute_tool` produces exactly one of
:class:`ToolSuccess` (carrying the decoded JSON body) or :class:`ToolFailure`
(carrying a human-readable diagnostic).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

JSONValue = Union[dict[str, Any], list[Any], str, int, float, bool, None]


@dataclass(frozen=True)
class ToolSuccess:
    """Tool call completed with a 2xx response."""

    payload: JSONValue

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> JSONValue:
        return self.payload


@dataclass(frozen=True)
class ToolFailure:
    """Tool call was rejected or the server could not be reached."""

    message: str

    @property
    def ok(self) -> bool:
        return False

    def unwrap(self) -> None:
        return None


ToolResult = Union[ToolSuccess, ToolFailure]
