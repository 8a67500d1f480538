"""Configuration loader for the Cost Baseline Engine."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

import yaml

from cost_baseline_engine.config.schema import Config
from cost_baseline_engine.exceptions import ConfigurationError


def _deep_merge(base: dict, override: dict) -> dict:
    """Deep merge two dictionaries, with override taking precedence."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _find_config_dir() -> Path:
    """Find the config directory, searching up from current directory."""
    # CONFIG_DIR wins over the directory search
    if config_dir := os.environ.get("CONFIG_DIR"):
        return Path(config_dir)

    # Search up from current directory
    current = Path.cwd()
    while current != current.parent:
        config_path = current / "config"
        if config_path.is_dir():
            return config_path
        current = current.parent

    # Fall back to ./config
    return Path("config")


def _read_yaml(path: Path) -> dict:
    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Could not read {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"{path} must contain a mapping at the top level")
    return data


def load_config(
    config_path: str | Path | None = None,
    environment: str | None = None,
) -> Config:
    """
    Load configuration from YAML files.

    Loads config.yaml as base, then merges environment-specific overrides
    (e.g., config.dev.yaml, config.prod.yaml), then environment variables.

    Args:
        config_path: Path to config directory. If None, searches for config/ directory.
        environment: Environment name (dev, staging, prod). If None, uses CONFIG_ENV
                    environment variable or defaults to 'dev'.

    Returns:
        Config: Validated configuration object.
    """
    config_dir = Path(config_path) if config_path else _find_config_dir()
    environment = environment or os.environ.get("CONFIG_ENV", "dev")

    config_data: dict = {}

    # Load base config
    base_config_path = config_dir / "config.yaml"
    if base_config_path.exists():
        config_data = _read_yaml(base_config_path)

    # Load environment-specific overrides
    env_config_path = config_dir / f"config.{environment}.yaml"
    if env_config_path.exists():
        config_data = _deep_merge(config_data, _read_yaml(env_config_path))

    # Override with environment variables
    config_data = _apply_env_overrides(config_data)

    # Set environment in config
    config_data["environment"] = environment

    return Config(**config_data)


def _apply_env_overrides(config_data: dict) -> dict:
    """Apply environment variable overrides to configuration."""
    # Env var -> nested config path
    env_mappings = {
        "AWS_REGION": ("aws", "region"),
        "BASELINE_TABLE_NAME": ("storage", "table_name"),
        "LOOKBACK_DAYS": ("baselines", "lookback_days"),
        "SUBSCRIPTION_IDS": ("source", "subscription_ids"),
        "LOG_LEVEL": ("logging", "level"),
    }

    for env_var, path in env_mappings.items():
        if value := os.environ.get(env_var):
            # Navigate to the nested key and set the value
            current = config_data
            for key in path[:-1]:
                current = current.setdefault(key, {})

            # Convert types as needed
            final_key = path[-1]
            if final_key == "lookback_days":
                current[final_key] = int(value)
            elif final_key == "subscription_ids":
                current[final_key] = [s.strip() for s in value.split(",") if s.strip()]
            elif final_key == "level":
                current[final_key] = value.upper()
            else:
                current[final_key] = value

    return config_data


@lru_cache(maxsize=1)
def get_cached_config() -> Config:
    """
    Get cached configuration singleton.

    Useful for Lambda handlers to avoid re-loading config on warm starts.
    """
    return load_config()
