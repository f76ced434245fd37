"""
Settings loader for settings.yaml

Usage:
    from rating_gateway.settings import settings

    level = settings.logging.level
    file_name = settings.get_nested("cache.file_name")
"""

import os
import yaml
from pathlib import Path
from typing import List, Any


# Path to the bundled settings file (override with RATING_GATEWAY_SETTINGS)
SETTINGS_FILE = Path(__file__).parent / "settings.yaml"
SETTINGS_ENV_VAR = "RATING_GATEWAY_SETTINGS"

# Defaults used when a key is missing from the YAML file
DEFAULTS = {
    "logging": {
        "level": "INFO",
    },
    "cache": {
        "file_name": "RatingConditionCache",
        "directory": "~/.rating_gateway",
    },
    "view": {
        "store_url": None,
    },
    "tracing": {
        "log_traces": False,
    },
}

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class DotDict(dict):
    """Dictionary with attribute access: d.key instead of d['key']"""

    def __getattr__(self, key: str) -> Any:
        try:
            value = self[key]
            if isinstance(value, dict):
                return DotDict(value)
            return value
        except KeyError:
            raise AttributeError(f"Setting '{key}' not found")

    def __setattr__(self, key: str, value: Any) -> None:
        self[key] = value

    def get_nested(self, path: str, default: Any = None) -> Any:
        """Get a value by dotted path: 'cache.file_name'"""
        keys = path.split('.')
        value = self
        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default
        return value


def _deep_merge(base: dict, override: dict) -> dict:
    """Deep merge of dictionaries (override wins)"""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_settings(filepath: Path = None) -> DotDict:
    """
    Load settings from a YAML file.

    Priority order:
    1. Values from the YAML file (highest)
    2. DEFAULTS

    Args:
        filepath: Settings file (defaults to $RATING_GATEWAY_SETTINGS, then
            the bundled settings.yaml)

    Returns:
        DotDict with settings
    """
    if filepath is None:
        env_path = os.environ.get(SETTINGS_ENV_VAR)
        filepath = Path(env_path) if env_path else SETTINGS_FILE
    filepath = Path(filepath)

    # Start from defaults
    config = _deep_merge({}, DEFAULTS)

    if filepath.exists():
        with open(filepath, "r", encoding="utf-8") as f:
            yaml_config = yaml.safe_load(f) or {}

        config = _deep_merge(config, yaml_config)
    else:
        print(f"[settings] Settings file not found: {filepath}")
        print("[settings] Using default values")

    return DotDict(config)


def validate_settings(settings: DotDict) -> List[str]:
    """
    Validate settings.

    Returns:
        List of errors (empty if everything is OK)
    """
    errors = []

    level = settings.get_nested("logging.level", "INFO")
    if not isinstance(level, str) or level.upper() not in VALID_LOG_LEVELS:
        errors.append(f"logging.level must be one of {', '.join(VALID_LOG_LEVELS)}")

    file_name = settings.get_nested("cache.file_name")
    if not isinstance(file_name, str) or not file_name.strip():
        errors.append("cache.file_name must be a non-empty string")

    directory = settings.get_nested("cache.directory")
    if not isinstance(directory, str) or not directory.strip():
        errors.append("cache.directory must be a non-empty string")

    store_url = settings.get_nested("view.store_url")
    if store_url is not None and not isinstance(store_url, str):
        errors.append("view.store_url must be a string or null")

    if not isinstance(settings.get_nested("tracing.log_traces", False), bool):
        errors.append("tracing.log_traces must be a boolean")

    return errors


# Global settings instance (lazy)
_settings = None


def get_settings() -> DotDict:
    """Get global settings (singleton)"""
    global _settings
    if _settings is None:
        _settings = load_settings()
        errors = validate_settings(_settings)
        if errors:
            print("[settings] Invalid settings:")
            for err in errors:
                print(f"  - {err}")
    return _settings


def reload_settings() -> DotDict:
    """Reload settings from file"""
    global _settings
    _settings = None
    return get_settings()


# For convenient import: from rating_gateway.settings import settings
settings = get_settings()
