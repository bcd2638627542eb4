# tests/unit/test_config.py
"""Unit tests for config schema and YAML loading."""

import pytest
import yaml
from pydantic import ValidationError

from devscript.config.loader import load_config, save_config
from devscript.config.schema import DevScriptConfig, OAuthTokens


class TestSchema:
    def test_defaults(self):
        config = DevScriptConfig()
        assert config.active_provider == "gemini"
        assert config.ollama.base_url == "http://localhost:11434"
        assert config.lm_studio.base_url == "http://localhost:1234/v1"
        assert config.watch.debounce_seconds == 0.5
        assert config.watch.extension == ".dev"
        assert config.gemini_oauth.tokens is None

    def test_unknown_keys_ignored(self):
        config = DevScriptConfig(**{"active_provider": "ollama", "legacy_option": True})
        assert config.active_provider == "ollama"

    def test_invalid_debounce_rejected(self):
        with pytest.raises(ValidationError):
            DevScriptConfig(watch={"debounce_seconds": 0})

    def test_invalid_verbosity_rejected(self):
        with pytest.raises(ValidationError):
            DevScriptConfig(output={"verbosity": "loud"})


class TestLoader:
    def test_missing_file_creates_defaults(self, tmp_path):
        path = tmp_path / "config.yaml"

        config = load_config(path)

        assert config == DevScriptConfig()
        assert path.exists()
        assert yaml.safe_load(path.read_text(encoding="utf-8"))["active_provider"] == "gemini"

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("", encoding="utf-8")

        assert load_config(path) == DevScriptConfig()

    def test_partial_file_merges_with_defaults(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("active_provider: openai\nopenai:\n  model: gpt-test\n", encoding="utf-8")

        config = load_config(path)

        assert config.active_provider == "openai"
        assert config.openai.model == "gpt-test"
        assert config.openai.timeout == 300

    def test_save_then_load(self, tmp_path):
        path = tmp_path / "config.yaml"
        config = DevScriptConfig(active_provider="gemini_oauth")
        config.gemini.api_key = "g-key"
        config.gemini_oauth.tokens = OAuthTokens(access_token="a", refresh_token="r")

        save_config(config, path)

        assert load_config(path) == config

    def test_default_path_uses_platformdirs(self, tmp_path, monkeypatch):
        monkeypatch.setattr(
            "devscript.config.loader.user_config_path",
            lambda appname, ensure_exists: tmp_path / appname,
        )
        (tmp_path / "devscript").mkdir()

        load_config()

        assert (tmp_path / "devscript" / "config.yaml").exists()
