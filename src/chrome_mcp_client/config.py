"""CLI configuration via pydantic-settings.

Only the command line reads these; the client itself takes its base URL and
timeout as constructor arguments.
"""

from __future__ import annotations

from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings

from .constants import DEFAULT_BASE_URL, DEFAULT_TIMEOUT_MS

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class ClientSettings(BaseSettings):
    base_url: str = DEFAULT_BASE_URL
    timeout_ms: int = DEFAULT_TIMEOUT_MS

    # Port scan (`chrome-mcp scan`)
    probe_host: str = "127.0.0.1"
    probe_timeout_ms: int = 3000

    log_level: LogLevel = "WARNING"

    model_config = {"env_prefix": "CHROME_MCP_", "env_file": ".env", "extra": "ignore"}

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v
