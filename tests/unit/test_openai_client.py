# tests/unit/test_openai_client.py
"""Unit tests for the OpenAI and LM Studio backends."""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import openai
import pytest

from devscript.llm.base import ProviderError, is_error_response
from devscript.llm.lm_studio import LMStudioGenerator
from devscript.llm.openai_client import OpenAIGenerator


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

_REQUEST = httpx.Request("POST", "http://localhost/v1/chat/completions")


def _make_openai(**kwargs):
    """Create OpenAIGenerator with the SDK client patched out."""
    with patch("devscript.llm.openai_client.AsyncOpenAI"):
        gen = OpenAIGenerator(api_key="sk-test", **kwargs)
    return gen


def _make_lm_studio(**kwargs):
    with patch("devscript.llm.openai_client.AsyncOpenAI"):
        gen = LMStudioGenerator(**kwargs)
    return gen


def _make_completion(content="done", finish_reason="stop"):
    """Build a mock ChatCompletion response."""
    choice = MagicMock()
    choice.message.content = content
    choice.finish_reason = finish_reason

    response = MagicMock()
    response.choices = [choice]
    return response


# ---------------------------------------------------------------------------
# OpenAIGenerator
# ---------------------------------------------------------------------------

class TestOpenAIGenerator:
    @pytest.mark.asyncio
    async def test_returns_content(self):
        gen = _make_openai(model="gpt-test")
        gen._client.chat.completions.create = AsyncMock(return_value=_make_completion("hi"))

        result = await gen.generate_response("PROMPT")

        assert result == "hi"
        kwargs = gen._client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-test"
        assert kwargs["messages"] == [{"role": "user", "content": "PROMPT"}]

    @pytest.mark.asyncio
    async def test_empty_content_is_marker(self):
        gen = _make_openai()
        gen._client.chat.completions.create = AsyncMock(return_value=_make_completion(None))

        assert is_error_response(await gen.generate_response("p"))

    @pytest.mark.asyncio
    async def test_content_filter_is_marker(self):
        gen = _make_openai()
        gen._client.chat.completions.create = AsyncMock(
            return_value=_make_completion("", finish_reason="content_filter")
        )

        result = await gen.generate_response("p")

        assert is_error_response(result)
        assert "content filter" in result

    @pytest.mark.asyncio
    async def test_no_choices_is_marker(self):
        gen = _make_openai()
        response = MagicMock()
        response.choices = []
        gen._client.chat.completions.create = AsyncMock(return_value=response)

        assert is_error_response(await gen.generate_response("p"))

    @pytest.mark.asyncio
    async def test_connection_error_raises(self):
        gen = _make_openai()
        gen._client.chat.completions.create = AsyncMock(
            side_effect=openai.APIConnectionError(request=_REQUEST)
        )

        with pytest.raises(ProviderError, match="Connection failed") as exc_info:
            await gen.generate_response("p")
        assert exc_info.value.provider == "openai"

    @pytest.mark.asyncio
    async def test_auth_error_raises(self):
        gen = _make_openai()
        gen._client.chat.completions.create = AsyncMock(
            side_effect=openai.AuthenticationError(
                "Incorrect API key", response=httpx.Response(401, request=_REQUEST), body=None
            )
        )

        with pytest.raises(ProviderError, match="Authentication failed"):
            await gen.generate_response("p")

    @pytest.mark.asyncio
    async def test_api_error_raises(self):
        gen = _make_openai()
        gen._client.chat.completions.create = AsyncMock(
            side_effect=openai.APIError("server exploded", request=_REQUEST, body=None)
        )

        with pytest.raises(ProviderError, match="server exploded"):
            await gen.generate_response("p")


# ---------------------------------------------------------------------------
# LMStudioGenerator
# ---------------------------------------------------------------------------

class TestLMStudioGenerator:
    def test_defaults(self):
        with patch("devscript.llm.openai_client.AsyncOpenAI") as mock_cls:
            gen = LMStudioGenerator()

        assert gen.provider_name == "lm_studio"
        assert mock_cls.call_args.kwargs["base_url"] == "http://localhost:1234/v1"
        assert mock_cls.call_args.kwargs["api_key"] == "lm-studio"

    @pytest.mark.asyncio
    async def test_unreachable_server_is_marker(self):
        gen = _make_lm_studio(base_url="http://localhost:9999/v1")
        gen._client.chat.completions.create = AsyncMock(
            side_effect=openai.APIConnectionError(request=_REQUEST)
        )

        result = await gen.generate_response("p")

        assert is_error_response(result)
        assert "Is LM Studio running on http://localhost:9999/v1?" in result

    @pytest.mark.asyncio
    async def test_returns_content(self):
        gen = _make_lm_studio()
        gen._client.chat.completions.create = AsyncMock(return_value=_make_completion("local"))

        assert await gen.generate_response("p") == "local"
