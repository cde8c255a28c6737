"""Tests for ChromeMCPClient transport behavior."""

import json

import httpx
import pytest

from chrome_mcp_client import ChromeMCPClient, ToolFailure, ToolSuccess

from tests.conftest import MOCK_WINDOWS_AND_TABS, SAMPLE_BASE_URL


class TestIsServerRunning:
    """Tests for the health check."""

    @pytest.mark.asyncio
    async def test_healthy_server(self, client, fake_server):
        fake_server.respond("health", json_body={"status": "ok"})

        assert await client.is_server_running() is True
        assert fake_server.last_request.method == "GET"
        assert str(fake_server.last_request.url) == f"{SAMPLE_BASE_URL}/health"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status_code", [404, 500, 503])
    async def test_non_success_status(self, client, fake_server, status_code):
        fake_server.respond("health", status_code=status_code)

        assert await client.is_server_running() is False

    @pytest.mark.asyncio
    async def test_connection_refused(self, client, fake_server):
        fake_server.fail("health", httpx.ConnectError("Connection refused"))

        assert await client.is_server_running() is False

    @pytest.mark.asyncio
    async def test_timeout(self, client, fake_server):
        fake_server.fail("health", httpx.ReadTimeout("timed out"))

        assert await client.is_server_running() is False

    @pytest.mark.asyncio
    async def test_unreachable_host(self):
        """Nothing listens on port 1; the check must absorb the error."""
        client = ChromeMCPClient(base_url="http://127.0.0.1:1/mcp", timeout_ms=1000)

        assert await client.is_server_running() is False


class TestExecuteTool:
    """Tests for the generic tool invocation."""

    @pytest.mark.asyncio
    async def test_success_returns_payload(self, client, fake_server):
        fake_server.respond("get_windows_and_tabs", json_body=MOCK_WINDOWS_AND_TABS)

        result = await client.execute_tool("get_windows_and_tabs")

        assert result == ToolSuccess(MOCK_WINDOWS_AND_TABS)
        assert result.ok is True

    @pytest.mark.asyncio
    async def test_posts_json_to_tool_path(self, client, fake_server):
        await client.execute_tool("chrome_click_element", {"selector": "#go"})

        request = fake_server.last_request
        assert request.method == "POST"
        assert str(request.url) == f"{SAMPLE_BASE_URL}/tools/chrome_click_element"
        assert request.headers["content-type"] == "application/json"
        assert fake_server.last_body == {"selector": "#go"}

    @pytest.mark.asyncio
    async def test_no_params_sends_empty_object(self, client, fake_server):
        await client.execute_tool("get_windows_and_tabs")

        assert fake_server.last_body == {}

    @pytest.mark.asyncio
    async def test_none_params_are_omitted(self, client, fake_server):
        await client.execute_tool("chrome_keyboard", {"keys": "Enter", "tabId": None})

        assert fake_server.last_body == {"keys": "Enter"}

    @pytest.mark.asyncio
    async def test_trailing_slash_in_base_url(self, fake_server):
        client = ChromeMCPClient(
            base_url=f"{SAMPLE_BASE_URL}/",
            transport=httpx.MockTransport(fake_server.handler),
        )

        await client.execute_tool("chrome_history", {"query": "x"})

        assert str(fake_server.last_request.url) == f"{SAMPLE_BASE_URL}/tools/chrome_history"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status_code", [400, 401, 404, 429, 500, 502])
    async def test_non_success_status_is_failure(self, client, fake_server, status_code):
        fake_server.respond("chrome_navigate", status_code=status_code, json_body={"error": "nope"})

        result = await client.execute_tool("chrome_navigate", {"url": "https://example.com"})

        assert isinstance(result, ToolFailure)
        assert str(status_code) in result.message
        assert result.unwrap() is None

    @pytest.mark.asyncio
    async def test_failure_message_includes_reason(self, client, fake_server):
        fake_server.respond("chrome_navigate", status_code=404)

        result = await client.execute_tool("chrome_navigate")

        assert result.message == "HTTP 404: Not Found"

    @pytest.mark.asyncio
    async def test_connection_error_is_failure(self, client, fake_server):
        fake_server.fail("chrome_navigate", httpx.ConnectError("Connection refused"))

        result = await client.execute_tool("chrome_navigate")

        assert result == ToolFailure("Connection refused")

    @pytest.mark.asyncio
    async def test_timeout_is_failure(self, client, fake_server):
        fake_server.fail("chrome_screenshot", httpx.ReadTimeout("timed out"))

        result = await client.execute_tool("chrome_screenshot")

        assert isinstance(result, ToolFailure)
        assert "timed out" in result.message

    @pytest.mark.asyncio
    async def test_empty_error_message_uses_class_name(self, client, fake_server):
        fake_server.fail("chrome_screenshot", httpx.ConnectTimeout(""))

        result = await client.execute_tool("chrome_screenshot")

        assert result == ToolFailure("ConnectTimeout")

    @pytest.mark.asyncio
    async def test_unreachable_host_is_failure(self):
        client = ChromeMCPClient(base_url="http://127.0.0.1:1/mcp", timeout_ms=1000)

        result = await client.execute_tool("get_windows_and_tabs")

        assert isinstance(result, ToolFailure)
        assert result.message

    @pytest.mark.asyncio
    async def test_non_json_success_body_raises(self, client, fake_server):
        fake_server.respond("chrome_get_web_content", text="<html>not json</html>")

        with pytest.raises(json.JSONDecodeError):
            await client.execute_tool("chrome_get_web_content")
