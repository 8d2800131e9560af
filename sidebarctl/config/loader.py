# Sidebarctl Configuration Loader
# Load and validate YAML configuration files

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from sidebarctl.config.defaults import generate_default_config, get_default_config
from sidebarctl.config.schema import SidebarConfig
from sidebarctl.errors import SidebarError
from sidebarctl.utils.paths import atomic_write


class ConfigError(SidebarError):
    """Configuration file could not be parsed or validated."""


def get_config_dir() -> Path:
    """Get the sidebarctl configuration directory."""
    return Path.home() / ".config" / "sidebarctl"


def get_config_path() -> Path:
    """Get the path to the configuration file."""
    # Allow override via environment variable
    env_path = os.environ.get("SIDEBARCTL_CONFIG")
    if env_path:
        return Path(env_path).expanduser()
    return get_config_dir() / "config.yaml"


def load_config(config_path: Optional[Path] = None) -> SidebarConfig:
    """
    Load configuration from YAML file.

    A missing file is not an error: the defaults apply.

    Args:
        config_path: Optional path to config file. Uses default if not provided.

    Returns:
        SidebarConfig: Validated configuration object.

    Raises:
        ConfigError: If the file is not valid YAML or fails validation.
    """
    if config_path is None:
        config_path = get_config_path()

    if not config_path.exists():
        return SidebarConfig.model_validate(get_default_config())

    try:
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML syntax in {config_path}: {e}", path=str(config_path)) from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration in {config_path} must be a mapping", path=str(config_path))

    merged = _merge_with_defaults(get_default_config(), data)

    try:
        return SidebarConfig.model_validate(merged)
    except ValidationError as e:
        raise ConfigError(
            f"Invalid configuration in {config_path}: {'; '.join(_format_errors(e))}", path=str(config_path)
        ) from e


def ensure_config_exists(config_path: Optional[Path] = None) -> tuple[Path, bool]:
    """
    Ensure configuration file exists, creating default if needed.

    Returns:
        Tuple of (config_path, was_created).
    """
    if config_path is None:
        config_path = get_config_path()

    if config_path.exists():
        return config_path, False

    atomic_write(config_path, generate_default_config())
    return config_path, True


def validate_config_file(config_path: Optional[Path] = None) -> tuple[bool, list[str]]:
    """
    Validate a configuration file without applying it.

    Args:
        config_path: Path to config file to validate.

    Returns:
        Tuple of (is_valid, error_messages).
    """
    if config_path is None:
        config_path = get_config_path()

    if not config_path.exists():
        return False, [f"Configuration file not found: {config_path}"]

    try:
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        return False, [f"Invalid YAML syntax: {e}"]

    if data is None:
        return False, ["Configuration file is empty"]
    if not isinstance(data, dict):
        return False, ["Configuration must be a mapping"]

    try:
        SidebarConfig.model_validate(data)
    except ValidationError as e:
        return False, _format_errors(e)

    return True, []


def _format_errors(error: ValidationError) -> list[str]:
    messages = []
    for item in error.errors():
        loc = " -> ".join(str(part) for part in item["loc"])
        messages.append(f"{loc}: {item['msg']}")
    return messages


def _merge_with_defaults(defaults: dict[str, Any], data: dict[str, Any]) -> dict[str, Any]:
    """Merge loaded data over defaults; nested sections merge key by key."""
    result = dict(defaults)
    for key, value in data.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = {**result[key], **value}
        else:
            result[key] = value
    return result
