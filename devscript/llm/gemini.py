# devscript/llm/gemini.py
"""
Gemini backends over the Generative Language REST API.

GeminiKeyGenerator authenticates with an API key. GeminiOAuthGenerator
uses a stored OAuth token set, refreshes it with google-auth when it has
expired, and hands refreshed tokens back to the config store without
waiting for the write.
"""

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

import google.auth.exceptions
import httpx
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials

from devscript.config.schema import OAuthTokens

from .base import ConfigurationError, ProviderError, error_marker
from .retry import transient_retry

logger = logging.getLogger(__name__)

_AUTH_STATUSES = {401, 403}


def extract_text(data: dict[str, Any]) -> str:
    """
    Pull the response text out of a generateContent payload.

    Returns an error marker when the payload carries no usable text
    (prompt blocked, candidate stopped for safety, empty parts).
    """
    candidates = data.get("candidates") or []
    if not candidates:
        block_reason = (data.get("promptFeedback") or {}).get("blockReason")
        if block_reason:
            return error_marker(f"Prompt blocked by Gemini ({block_reason})")
        return error_marker("No response from Gemini")

    candidate = candidates[0]
    parts = (candidate.get("content") or {}).get("parts") or []
    text = "".join(part.get("text", "") for part in parts)
    if text.strip():
        return text

    finish_reason = candidate.get("finishReason", "UNKNOWN")
    return error_marker(f"Empty response from Gemini (finishReason={finish_reason})")


def _error_detail(response: httpx.Response) -> str:
    try:
        return response.json().get("error", {}).get("message") or response.text
    except ValueError:
        return response.text or f"HTTP {response.status_code}"


class _GeminiRestClient:
    """Shared generateContent call for both Gemini variants."""

    provider_name = "gemini"

    def __init__(
        self,
        model: str,
        base_url: str,
        timeout: int = 300,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.model = model
        self.base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    @property
    def url(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    @transient_retry
    async def _post(self, prompt: str, headers: dict[str, str]) -> dict[str, Any]:
        payload = {"contents": [{"parts": [{"text": prompt}]}]}
        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as http:
            response = await http.post(self.url, headers=headers, json=payload)
        response.raise_for_status()
        return response.json()

    async def _generate(self, prompt: str, headers: dict[str, str]) -> str:
        logger.info(f"{self.provider_name}: model={self.model}, prompt={len(prompt)} chars")
        try:
            data = await self._post(prompt, headers)
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            detail = _error_detail(e.response)
            if status in _AUTH_STATUSES:
                raise ProviderError(
                    f"Authentication failed ({status}): {detail}", self.provider_name, e
                ) from e
            raise ProviderError(f"HTTP {status}: {detail}", self.provider_name, e) from e
        except httpx.HTTPError as e:
            raise ProviderError(f"Request failed: {e}", self.provider_name, e) from e

        text = extract_text(data)
        logger.info(f"{self.provider_name}: received {len(text)} chars")
        return text


class GeminiKeyGenerator(_GeminiRestClient):
    """Gemini backend authenticated with an API key."""

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.5-flash",
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout: int = 300,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        if not api_key:
            raise ConfigurationError("Gemini API key is empty", "gemini")
        super().__init__(model, base_url, timeout, transport)
        self._api_key = api_key

    async def generate_response(self, prompt: str) -> str:
        return await self._generate(prompt, {"x-goog-api-key": self._api_key})


def _parse_expiry(value: str | None) -> datetime | None:
    # google-auth compares expiry against naive UTC timestamps
    if not value:
        return None
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def _format_expiry(value: datetime | None) -> str | None:
    if value is None:
        return None
    return value.replace(tzinfo=timezone.utc).isoformat()


class GeminiOAuthGenerator(_GeminiRestClient):
    """
    Gemini backend authenticated with a stored OAuth token set.

    The token is refreshed in a worker thread when missing or expired. The
    refreshed token set is passed to on_tokens_refreshed in a background
    task; a failing callback is logged and never affects the response.
    """

    provider_name = "gemini_oauth"

    def __init__(
        self,
        tokens: OAuthTokens | None,
        client_id: str | None = None,
        client_secret: str | None = None,
        token_uri: str = "https://oauth2.googleapis.com/token",
        model: str = "gemini-2.5-flash",
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout: int = 300,
        on_tokens_refreshed: Callable[[OAuthTokens], None] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        if tokens is None or not (tokens.access_token or tokens.refresh_token):
            raise ConfigurationError(
                "Not logged in with Google. Import a token set with "
                "'devscript config set-tokens <tokens.json>'.",
                self.provider_name,
            )
        super().__init__(model, base_url, timeout, transport)
        self._credentials = Credentials(
            token=tokens.access_token,
            refresh_token=tokens.refresh_token,
            token_uri=token_uri,
            client_id=client_id,
            client_secret=client_secret,
            expiry=_parse_expiry(tokens.expiry),
        )
        self._on_tokens_refreshed = on_tokens_refreshed
        self._pending_persists: set[asyncio.Task] = set()

    async def _access_token(self) -> str:
        creds = self._credentials
        if creds.valid:
            return creds.token

        if not creds.refresh_token:
            raise ConfigurationError(
                "Access token expired and no refresh token is stored", self.provider_name
            )

        logger.info("gemini_oauth: refreshing access token")
        try:
            await asyncio.to_thread(creds.refresh, Request())
        except google.auth.exceptions.RefreshError as e:
            raise ProviderError(f"Token refresh rejected: {e}", self.provider_name, e) from e
        except google.auth.exceptions.TransportError as e:
            raise ProviderError(f"Token refresh failed: {e}", self.provider_name, e) from e

        self._persist(
            OAuthTokens(
                access_token=creds.token,
                refresh_token=creds.refresh_token,
                expiry=_format_expiry(creds.expiry),
            )
        )
        return creds.token

    def _persist(self, tokens: OAuthTokens) -> None:
        if self._on_tokens_refreshed is None:
            return
        task = asyncio.create_task(asyncio.to_thread(self._on_tokens_refreshed, tokens))
        self._pending_persists.add(task)
        task.add_done_callback(self._persist_done)

    def _persist_done(self, task: asyncio.Task) -> None:
        self._pending_persists.discard(task)
        if task.cancelled():
            return
        if (exc := task.exception()) is not None:
            logger.warning(f"gemini_oauth: failed to persist refreshed tokens: {exc}")

    async def generate_response(self, prompt: str) -> str:
        token = await self._access_token()
        return await self._generate(prompt, {"Authorization": f"Bearer {token}"})
