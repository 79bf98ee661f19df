"""
Settings loader for settings.yaml

Usage:
    from dress_checklist.settings import settings

    separator = settings.output.separator
    level = settings.get_nested("logging.level", "INFO")
"""

import yaml
from pathlib import Path
from typing import List, Any


# Path to the settings file
SETTINGS_FILE = Path(__file__).parent / "settings.yaml"

# Package directory; relative rule paths are resolved against it
PACKAGE_DIR = Path(__file__).parent

# Defaults (used when a key is missing from the YAML)
DEFAULTS = {
    "rules": {
        "path": "data/command_rules.yaml",
    },
    "logging": {
        "level": "INFO",
    },
    "output": {
        "separator": ",",
    },
    "validation": {
        # Legacy behavior: an item listing itself as prerequisite always passes
        "self_prerequisite_satisfied": True,
    },
}

LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


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
        """Get a value by dotted path: 'logging.level'"""
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

    Priority:
    1. Values from the YAML file
    2. DEFAULTS

    Args:
        filepath: Settings file (settings.yaml by default)

    Returns:
        DotDict with settings
    """
    filepath = Path(filepath) if filepath else SETTINGS_FILE

    config = _deep_merge({}, DEFAULTS)

    if filepath.exists():
        with open(filepath, "r", encoding="utf-8") as f:
            yaml_config = yaml.safe_load(f) or {}

        config = _deep_merge(config, yaml_config)

    return DotDict(config)


def validate_settings(settings: DotDict) -> List[str]:
    """
    Validate settings.

    Returns:
        List of errors (empty if everything is OK)
    """
    errors = []

    if not settings.get_nested("rules.path"):
        errors.append("rules.path is not set")

    level = str(settings.get_nested("logging.level", "")).upper()
    if level not in LOG_LEVELS:
        errors.append(f"logging.level must be one of {sorted(LOG_LEVELS)}")

    separator = settings.get_nested("output.separator")
    if not isinstance(separator, str) or not separator:
        errors.append("output.separator must be a non-empty string")

    flag = settings.get_nested("validation.self_prerequisite_satisfied")
    if not isinstance(flag, bool):
        errors.append("validation.self_prerequisite_satisfied must be true or false")

    return errors


def resolve_rules_path(settings: DotDict) -> Path:
    """Rule file path from settings; relative paths are package-relative."""
    path = Path(settings.get_nested("rules.path", DEFAULTS["rules"]["path"]))
    if not path.is_absolute():
        path = PACKAGE_DIR / path
    return path


# Global settings instance (lazy)
_settings = None


def get_settings() -> DotDict:
    """Get global settings (singleton)"""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def reload_settings() -> DotDict:
    """Reload settings from the file"""
    global _settings
    _settings = None
    return get_settings()


# For convenient import: from dress_checklist.settings import settings
settings = get_settings()
