"""Configuration management for Tax Curve.

Configuration lives in a single file:

settings.json - Machine-specific settings
   - rules_dir: directory with tax-rules YAML files to use instead of
     the bundled tables (optional)

Config directory resolution:
1. TAX_CURVE_CONFIG_PATH environment variable (if set)
2. ~/.config/tax-curve/ (XDG_CONFIG_HOME fallback)

Rules directory resolution:
1. settings.json "rules_dir" key (if set via CLI)
2. tax-rules/ directory bundled with the package
"""

import json
import os
from pathlib import Path
from typing import Any


APP_NAME = "tax-curve"
SETTINGS_FILENAME = "settings.json"
RULES_DIRNAME = "tax-rules"


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Resolution order:
    1. TAX_CURVE_CONFIG_PATH environment variable
    2. ~/.config/tax-curve/ (XDG_CONFIG_HOME)

    Returns:
        Path to the configuration directory
    """
    # 1. Check environment variable
    env_path = os.environ.get("TAX_CURVE_CONFIG_PATH")
    if env_path:
        return Path(env_path)

    # 2. Fall back to XDG config path
    xdg_config_home = os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")
    return Path(xdg_config_home) / APP_NAME


def get_settings_path() -> Path:
    """Get the path to settings.json.

    Returns:
        Path to settings.json (may not exist yet)
    """
    return get_config_dir() / SETTINGS_FILENAME


def load_settings() -> dict:
    """Load machine-specific settings from settings.json.

    Returns:
        Settings dictionary (empty dict if file doesn't exist)
    """
    settings_file = get_settings_path()

    if not settings_file.exists():
        return {}

    with open(settings_file, "r") as f:
        return json.load(f)


def save_settings(settings: dict) -> Path:
    """Save machine-specific settings to settings.json.

    Args:
        settings: Settings dictionary to save

    Returns:
        Path to the saved settings file
    """
    config_dir = get_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)

    settings_file = config_dir / SETTINGS_FILENAME

    with open(settings_file, "w") as f:
        json.dump(settings, f, indent=2)

    return settings_file


def get_setting(key: str, default: Any = None) -> Any:
    """Get a setting value from settings.json.

    Args:
        key: Setting key (e.g., "rules_dir")
        default: Default value if key not found

    Returns:
        Setting value or default
    """
    settings = load_settings()
    return settings.get(key, default)


def set_setting(key: str, value: Any) -> Path:
    """Set a setting value in settings.json.

    Args:
        key: Setting key
        value: Value to set

    Returns:
        Path to the saved settings file
    """
    settings = load_settings()
    settings[key] = value
    return save_settings(settings)


def get_bundled_rules_dir() -> Path:
    """Get the tax-rules directory shipped with the package."""
    return Path(__file__).parent.parent / RULES_DIRNAME  # sdk -> taxcurve


def get_rules_dir() -> Path:
    """Get the directory holding tax-rules/*.yaml and inflation.yaml.

    Uses the "rules_dir" setting when present, otherwise the bundled
    directory. The configured directory is not required to exist; loaders
    report missing files themselves.
    """
    custom = get_setting("rules_dir")
    if custom:
        return Path(custom).expanduser()
    return get_bundled_rules_dir()
