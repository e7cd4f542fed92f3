"""sparkpods configuration module."""

from . import keys
from .loader import (
    ConfigError,
    ConfigFileNotFoundError,
    ConfigParseError,
    ConfigValidationError,
    load_config,
    parse_config,
    save_config,
)
from .schema import (
    ImagePullPolicy,
    InitContainerSettings,
    SessionConfig,
    flatten_settings,
    parse_label_selector,
    parse_time_seconds,
)
from .source import ConfigSource, ConfigValueError

__all__ = [
    # Source
    "ConfigSource",
    "keys",
    # Models
    "SessionConfig",
    "InitContainerSettings",
    "ImagePullPolicy",
    # Loader functions
    "load_config",
    "parse_config",
    "save_config",
    # Helpers
    "flatten_settings",
    "parse_label_selector",
    "parse_time_seconds",
    # Exceptions
    "ConfigError",
    "ConfigFileNotFoundError",
    "ConfigParseError",
    "ConfigValidationError",
    "ConfigValueError",
]
