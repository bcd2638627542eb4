# devscript/config/__init__.py
"""Configuration system for devscript."""

from .loader import get_config_path, load_config, save_config
from .schema import (
    AnthropicConfig,
    DevScriptConfig,
    GeminiConfig,
    GeminiOAuthConfig,
    HydrationConfig,
    LMStudioConfig,
    OAuthTokens,
    OllamaConfig,
    OpenAIConfig,
    OutputConfig,
    WatchConfig,
)

__all__ = [
    "DevScriptConfig",
    "GeminiConfig",
    "GeminiOAuthConfig",
    "OAuthTokens",
    "OpenAIConfig",
    "AnthropicConfig",
    "OllamaConfig",
    "LMStudioConfig",
    "WatchConfig",
    "HydrationConfig",
    "OutputConfig",
    "load_config",
    "save_config",
    "get_config_path",
]
