# tests/unit/test_anthropic_client.py
"""Unit tests for AnthropicGenerator."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import anthropic
import httpx
import pytest

from devscript.llm.anthropic_client import AnthropicGenerator
from devscript.llm.base import ProviderError, is_error_response

_REQUEST = httpx.Request("POST", "https://api.anthropic.com/v1/messages")


def _make_generator(response=None, side_effect=None):
    gen = AnthropicGenerator(api_key="sk-ant-test", model="claude-test", max_tokens=1024)
    gen._client = MagicMock()
    gen._client.messages.create = AsyncMock(return_value=response, side_effect=side_effect)
    return gen


def _make_message(*texts, stop_reason="end_turn"):
    return SimpleNamespace(
        content=[SimpleNamespace(type="text", text=t) for t in texts],
        stop_reason=stop_reason,
        usage=SimpleNamespace(input_tokens=10, output_tokens=20),
    )


class TestAnthropicGenerator:
    def test_client_created_lazily(self):
        gen = AnthropicGenerator(api_key="sk-ant-test", timeout=42)
        assert gen._client is None

        with patch("anthropic.AsyncAnthropic") as mock_cls:
            client = gen.client
            assert gen.client is client

        mock_cls.assert_called_once_with(api_key="sk-ant-test", timeout=42)

    @pytest.mark.asyncio
    async def test_joins_text_blocks(self):
        message = _make_message("part one, ", "part two")
        message.content.insert(1, SimpleNamespace(type="thinking", thinking="..."))
        gen = _make_generator(message)

        result = await gen.generate_response("PROMPT")

        assert result == "part one, part two"
        kwargs = gen._client.messages.create.call_args.kwargs
        assert kwargs["model"] == "claude-test"
        assert kwargs["max_tokens"] == 1024
        assert kwargs["messages"] == [{"role": "user", "content": "PROMPT"}]

    @pytest.mark.asyncio
    async def test_refusal_is_marker(self):
        gen = _make_generator(_make_message("", stop_reason="refusal"))
        assert is_error_response(await gen.generate_response("p"))

    @pytest.mark.asyncio
    async def test_empty_is_marker(self):
        gen = _make_generator(_make_message("   "))
        assert is_error_response(await gen.generate_response("p"))

    @pytest.mark.asyncio
    async def test_auth_error_raises(self):
        gen = _make_generator(
            side_effect=anthropic.AuthenticationError(
                "invalid x-api-key", response=httpx.Response(401, request=_REQUEST), body=None
            )
        )

        with pytest.raises(ProviderError, match="Authentication failed") as exc_info:
            await gen.generate_response("p")
        assert exc_info.value.provider == "anthropic"

    @pytest.mark.asyncio
    async def test_connection_error_raises(self):
        gen = _make_generator(side_effect=anthropic.APIConnectionError(request=_REQUEST))

        with pytest.raises(ProviderError):
            await gen.generate_response("p")

    @pytest.mark.asyncio
    async def test_close_resets_client(self):
        gen = _make_generator()
        gen._client.close = AsyncMock()
        client = gen._client

        await gen.close()

        client.close.assert_awaited_once()
        assert gen._client is None
