# Sidebarctl Configuration Module
# Handles YAML-based configuration loading, validation, and defaults

from sidebarctl.config.defaults import DEFAULT_CONFIG, generate_default_config
from sidebarctl.config.loader import (
    ConfigError,
    ensure_config_exists,
    get_config_path,
    load_config,
    validate_config_file,
)
from sidebarctl.config.schema import (
    FavoritesProfile,
    OutputConfig,
    ReloadConfig,
    SidebarConfig,
)

__all__ = [
    # Schema
    "SidebarConfig",
    "FavoritesProfile",
    "ReloadConfig",
    "OutputConfig",
    # Loader
    "ConfigError",
    "load_config",
    "get_config_path",
    "ensure_config_exists",
    "validate_config_file",
    # Defaults
    "DEFAULT_CONFIG",
    "generate_default_config",
]
