# devscript/config/schema.py
"""
Pydantic configuration models for devscript.

All models use extra="ignore" to allow unknown YAML keys without crashing.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class GeminiConfig(BaseModel):
    """Gemini API-key backend configuration."""

    model_config = ConfigDict(extra="ignore")

    api_key: str | None = Field(
        default=None, description="Gemini API key (None = read GEMINI_API_KEY)"
    )
    model: str = Field(default="gemini-2.5-flash", description="Gemini model name")
    base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        description="Generative Language API base URL",
    )
    timeout: int = Field(default=300, description="Request timeout in seconds")


class OAuthTokens(BaseModel):
    """Stored OAuth token set (as returned by the Google token endpoint)."""

    model_config = ConfigDict(extra="ignore")

    access_token: str | None = Field(default=None, description="Current access token")
    refresh_token: str | None = Field(default=None, description="Long-lived refresh token")
    expiry: str | None = Field(
        default=None, description="Access token expiry, ISO-8601 UTC"
    )


class GeminiOAuthConfig(BaseModel):
    """Gemini OAuth backend configuration."""

    model_config = ConfigDict(extra="ignore")

    tokens: OAuthTokens | None = Field(
        default=None, description="Token set from a previous login (None = not logged in)"
    )
    client_id: str | None = Field(
        default=None, description="OAuth client id (None = read GOOGLE_CLIENT_ID)"
    )
    client_secret: str | None = Field(
        default=None, description="OAuth client secret (None = read GOOGLE_CLIENT_SECRET)"
    )
    token_uri: str = Field(
        default="https://oauth2.googleapis.com/token", description="Token refresh endpoint"
    )
    model: str = Field(default="gemini-2.5-flash", description="Gemini model name")
    base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        description="Generative Language API base URL",
    )
    timeout: int = Field(default=300, description="Request timeout in seconds")


class OpenAIConfig(BaseModel):
    """OpenAI API-key backend configuration."""

    model_config = ConfigDict(extra="ignore")

    api_key: str | None = Field(
        default=None, description="OpenAI API key (None = read OPENAI_API_KEY)"
    )
    model: str = Field(default="gpt-4o", description="Chat model name")
    base_url: str | None = Field(
        default=None, description="API base URL override (None = SDK default)"
    )
    timeout: int = Field(default=300, description="Request timeout in seconds")


class AnthropicConfig(BaseModel):
    """Anthropic API-key backend configuration."""

    model_config = ConfigDict(extra="ignore")

    api_key: str | None = Field(
        default=None, description="Anthropic API key (None = read ANTHROPIC_API_KEY)"
    )
    model: str = Field(default="claude-sonnet-4-5-20250929", description="Model name")
    max_tokens: int = Field(
        default=8192, ge=1, le=64000, description="Maximum tokens in the response"
    )
    timeout: int = Field(default=300, description="Request timeout in seconds")


class OllamaConfig(BaseModel):
    """Ollama server configuration."""

    model_config = ConfigDict(extra="ignore")

    base_url: str = Field(
        default="http://localhost:11434", description="Ollama API base URL"
    )
    model: str = Field(default="llama3", description="Ollama model to use")
    timeout: int = Field(
        default=300, description="Request timeout in seconds (generous for model loading)"
    )


class LMStudioConfig(BaseModel):
    """LM Studio server configuration."""

    model_config = ConfigDict(extra="ignore")

    base_url: str = Field(
        default="http://localhost:1234/v1", description="LM Studio API base URL"
    )
    model: str = Field(default="local-model", description="LM Studio model to use")
    timeout: int = Field(default=300, description="Request timeout in seconds")


class WatchConfig(BaseModel):
    """Watch mode configuration."""

    model_config = ConfigDict(extra="ignore")

    debounce_seconds: float = Field(
        default=0.5, gt=0.0, le=60.0, description="Quiet period before a change triggers a run"
    )
    extension: str = Field(default=".dev", description="Script file extension to watch")


class HydrationConfig(BaseModel):
    """Context hydration configuration."""

    model_config = ConfigDict(extra="ignore")

    extra_extensions: list[str] = Field(
        default_factory=list, description="Extra file extensions included from directories"
    )
    extra_ignored_dirs: list[str] = Field(
        default_factory=list, description="Extra directory names skipped during walks"
    )


class OutputConfig(BaseModel):
    """Output and logging configuration."""

    model_config = ConfigDict(extra="ignore")

    verbosity: Literal["quiet", "normal", "verbose"] = Field(
        default="normal", description="Logging verbosity level"
    )
    json_logs: bool = Field(default=False, description="Emit JSON log lines on stderr")
    save_responses: bool = Field(
        default=False, description="Save every raw response as dev-output-<timestamp>.md"
    )


class DevScriptConfig(BaseModel):
    """Root configuration for devscript."""

    model_config = ConfigDict(extra="ignore")

    active_provider: str = Field(
        default="gemini", description="Provider used for runs (see `devscript config show`)"
    )
    gemini: GeminiConfig = Field(default_factory=GeminiConfig)
    gemini_oauth: GeminiOAuthConfig = Field(default_factory=GeminiOAuthConfig)
    openai: OpenAIConfig = Field(default_factory=OpenAIConfig)
    anthropic: AnthropicConfig = Field(default_factory=AnthropicConfig)
    ollama: OllamaConfig = Field(default_factory=OllamaConfig)
    lm_studio: LMStudioConfig = Field(default_factory=LMStudioConfig)
    watch: WatchConfig = Field(default_factory=WatchConfig)
    hydration: HydrationConfig = Field(default_factory=HydrationConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
