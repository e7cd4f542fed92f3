"""Configuration loader for sparkpods."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .schema import SessionConfig
from .source import ConfigSource


class ConfigError(Exception):
    """Base exception for configuration errors."""

    pass


class ConfigFileNotFoundError(ConfigError):
    """Raised when configuration file is not found."""

    pass


class ConfigParseError(ConfigError):
    """Raised when configuration file cannot be parsed."""

    pass


class ConfigValidationError(ConfigError):
    """Raised when configuration validation fails."""

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None):
        super().__init__(message)
        self.errors = errors or []


def load_yaml(path: Path) -> dict[str, Any]:
    """Load YAML file and return as dictionary.

    Args:
        path: Path to YAML file

    Returns:
        Dictionary containing parsed YAML

    Raises:
        ConfigFileNotFoundError: If file doesn't exist
        ConfigParseError: If YAML parsing fails or the document is not a mapping
    """
    if not path.exists():
        raise ConfigFileNotFoundError(f"Configuration file not found: {path}")

    try:
        with open(path) as f:
            content = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigParseError(f"Failed to parse YAML: {e}")  # noqa: B904

    if content is None:
        return {}
    if not isinstance(content, dict):
        raise ConfigParseError(
            f"Expected a mapping of settings at top level, got {type(content).__name__}"
        )
    return content


def parse_config(data: dict[str, Any]) -> ConfigSource:
    """Validate raw settings data and build a ConfigSource.

    Raises:
        ConfigValidationError: If validation fails
    """
    try:
        return SessionConfig.model_validate(data).to_source()
    except ValidationError as e:
        errors = e.errors()
        error_messages = []
        for err in errors:
            loc = ".".join(str(x) for x in err["loc"])
            msg = err["msg"]
            error_messages.append(f"  - {loc}: {msg}")

        raise ConfigValidationError(  # noqa: B904
            "Configuration validation failed:\n" + "\n".join(error_messages),
            errors=[dict(e) for e in errors],  # type: ignore[call-overload]
        )


def load_config(path: str | Path, overrides: dict[str, Any] | None = None) -> ConfigSource:
    """Load and validate sparkpods configuration from file.

    Args:
        path: Path to configuration YAML file
        overrides: Settings layered on top of the file (e.g. ``--conf`` flags)

    Returns:
        Validated ConfigSource

    Raises:
        ConfigFileNotFoundError: If file doesn't exist
        ConfigParseError: If YAML parsing fails
        ConfigValidationError: If validation fails
    """
    source = parse_config(load_yaml(Path(path)))
    if overrides:
        source = source.with_overrides(overrides)
    return source


def save_config(config: ConfigSource, path: str | Path) -> None:
    """Save configuration to a flat YAML file.

    Args:
        config: ConfigSource to write
        path: Path to save YAML file
    """
    with open(Path(path), "w") as f:
        yaml.safe_dump(dict(config), f, default_flow_style=False, sort_keys=True, indent=2)
