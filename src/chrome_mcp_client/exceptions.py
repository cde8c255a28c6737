"""Exceptions raised by the Chrome MCP client helpers."""


class ChromeMCPError(Exception):
    """Base exception for Chrome MCP client errors."""

    def __init__(self, message: str, tool: str | None = None):
        self.message = message
        self.tool = tool
        super().__init__(self.message)


class ScreenshotCaptureError(ChromeMCPError):
    """The server returned no image data for a screenshot request."""

    pass
