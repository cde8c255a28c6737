"""Server defaults shared by the client and the CLI."""

DEFAULT_BASE_URL = "http://127.0.0.1:12306/mcp"
DEFAULT_TIMEOUT_MS = 30000
HEALTH_TIMEOUT_MS = 5000
