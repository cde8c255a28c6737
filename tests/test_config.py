"""Tests for environment-driven settings."""

import os
import subprocess
import sys

import pytest
from pydantic import ValidationError

from chrome_mcp_client.config import ClientSettings
from chrome_mcp_client.constants import DEFAULT_BASE_URL


def test_defaults(monkeypatch):
    monkeypatch.delenv("CHROME_MCP_BASE_URL", raising=False)
    monkeypatch.delenv("CHROME_MCP_TIMEOUT_MS", raising=False)
    monkeypatch.delenv("CHROME_MCP_LOG_LEVEL", raising=False)

    settings = ClientSettings(_env_file=None)

    assert settings.base_url == DEFAULT_BASE_URL == "http://127.0.0.1:12306/mcp"
    assert settings.timeout_ms == 30000
    assert settings.log_level == "WARNING"


def test_env_prefix(monkeypatch):
    monkeypatch.setenv("CHROME_MCP_BASE_URL", "http://127.0.0.1:3000/mcp/")
    monkeypatch.setenv("CHROME_MCP_TIMEOUT_MS", "5000")

    settings = ClientSettings(_env_file=None)

    assert settings.base_url == "http://127.0.0.1:3000/mcp/"
    assert settings.timeout_ms == 5000


def test_log_level_case_insensitive(monkeypatch):
    monkeypatch.setenv("CHROME_MCP_LOG_LEVEL", "info")

    assert ClientSettings(_env_file=None).log_level == "INFO"


def test_unknown_log_level_rejected(monkeypatch):
    monkeypatch.setenv("CHROME_MCP_LOG_LEVEL", "verbose")

    with pytest.raises(ValidationError):
        ClientSettings(_env_file=None)


def test_library_import_ignores_environment():
    """Importing the client never reads CHROME_MCP_* settings."""
    env = {
        **os.environ,
        "CHROME_MCP_TIMEOUT_MS": "thirty-seconds",
        "PYTHONPATH": os.pathsep.join(sys.path),
    }
    code = (
        "import sys\n"
        "from chrome_mcp_client import ChromeMCPClient\n"
        "client = ChromeMCPClient()\n"
        "assert client.timeout_ms == 30000\n"
        "assert 'pydantic_settings' not in sys.modules\n"
    )

    result = subprocess.run([sys.executable, "-c", code], env=env, capture_output=True, text=True)

    assert result.returncode == 0, result.stderr
