# devscript/config/loader.py
"""
Configuration loading with auto-creation of defaults.

Uses platformdirs for cross-platform config directory management.
"""

import logging
from pathlib import Path

import yaml
from platformdirs import user_config_path

from .schema import DevScriptConfig

logger = logging.getLogger(__name__)


def get_config_path() -> Path:
    """Get path to config file, ensuring config directory exists."""
    config_dir = user_config_path("devscript", ensure_exists=True)
    return config_dir / "config.yaml"


def save_config(config: DevScriptConfig, config_path: Path | None = None) -> Path:
    """
    Write configuration to YAML.

    Args:
        config: Configuration to persist
        config_path: Target file (default: get_config_path())

    Returns:
        Path written
    """
    config_path = config_path or get_config_path()
    config_dict = config.model_dump(mode="json")

    with config_path.open("w", encoding="utf-8") as f:
        yaml.safe_dump(config_dict, f, default_flow_style=False, sort_keys=False)

    logger.debug(f"Saved config to {config_path}")
    return config_path


def load_config(config_path: Path | None = None) -> DevScriptConfig:
    """
    Load configuration from YAML file.

    If config file doesn't exist, creates it with defaults.
    Returns validated Pydantic model.
    """
    config_path = config_path or get_config_path()

    if not config_path.exists():
        default_config = DevScriptConfig()
        save_config(default_config, config_path)
        logger.info(f"Created default config at {config_path}")
        return default_config

    with config_path.open("r", encoding="utf-8") as f:
        config_data = yaml.safe_load(f) or {}

    config = DevScriptConfig(**config_data)
    logger.info(f"Loaded config from {config_path}")
    return config
