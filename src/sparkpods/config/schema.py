"""Pydantic models for sparkpods configuration.

Two shapes live here: the on-disk config file (``SessionConfig``), which is
flattened into dotted keys, and typed views over groups of flat settings
(``InitContainerSettings``) used when a capability needs more than strings.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from . import keys
from .source import ConfigSource

# =============================================================================
# Helpers
# =============================================================================

_TIME_RE = re.compile(r"^(\d+)\s*(us|ms|s|m|min|h|d)?$", re.IGNORECASE)

_SECONDS_PER_UNIT = {
    "us": 1e-6,
    "ms": 1e-3,
    "s": 1,
    "m": 60,
    "min": 60,
    "h": 3600,
    "d": 86400,
}


def parse_time_seconds(value: str | int) -> int:
    """Parse a Spark time string (e.g. ``300s``, ``5m``, ``300``) to seconds.

    A bare number is taken as seconds. Sub-second values truncate.

    Raises:
        ValueError: If the string is not a recognised duration.
    """
    if isinstance(value, int):
        return value
    match = _TIME_RE.match(value.strip())
    if not match:
        raise ValueError(f"Invalid time duration: {value!r}")
    amount = int(match.group(1))
    unit = (match.group(2) or "s").lower()
    return int(amount * _SECONDS_PER_UNIT[unit])


def flatten_settings(data: dict[str, Any], prefix: str = "") -> dict[str, Any]:
    """Flatten nested mappings into dotted keys.

    ``{"spark": {"master": "k8s://x"}}`` becomes ``{"spark.master": "k8s://x"}``.
    Keys that are already dotted pass through unchanged.
    """
    flat: dict[str, Any] = {}
    for key, value in data.items():
        full_key = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, dict):
            flat.update(flatten_settings(value, full_key))
        else:
            flat[full_key] = value
    return flat


# =============================================================================
# Enums
# =============================================================================


class ImagePullPolicy(str, Enum):
    """Kubernetes image pull policy."""

    ALWAYS = "Always"
    IF_NOT_PRESENT = "IfNotPresent"
    NEVER = "Never"


# =============================================================================
# Config file
# =============================================================================


class SessionConfig(BaseModel):
    """Contents of a sparkpods YAML config file.

    The file may be a flat mapping of dotted keys, a nested mapping, or a
    mix of both. Scalars are kept as-is and stringified by ``ConfigSource``.
    """

    model_config = ConfigDict(extra="forbid")

    settings: dict[str, str | bool | int | float | None] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def flatten(cls, data: Any) -> Any:
        """Accept a raw YAML mapping and flatten it under ``settings``."""
        if data is None:
            return {"settings": {}}
        if isinstance(data, dict) and set(data) != {"settings"}:
            return {"settings": flatten_settings(data)}
        return data

    @field_validator("settings")
    @classmethod
    def validate_keys(cls, v: dict[str, Any]) -> dict[str, Any]:
        """Reject keys that cannot be setting names."""
        for key in v:
            if not key or any(ch.isspace() for ch in key):
                raise ValueError(f"Invalid setting name: {key!r}")
        return v

    def to_source(self) -> ConfigSource:
        """Build the flat configuration source for composition."""
        return ConfigSource(self.settings)


# =============================================================================
# Typed setting groups
# =============================================================================


class InitContainerSettings(BaseModel):
    """Settings the executor init-container bootstrap carries besides its config map."""

    model_config = ConfigDict(frozen=True)

    image: str = keys.DEFAULT_INIT_CONTAINER_DOCKER_IMAGE
    pull_policy: ImagePullPolicy = ImagePullPolicy.IF_NOT_PRESENT
    jars_download_dir: str = keys.DEFAULT_JARS_DOWNLOAD_LOCATION
    files_download_dir: str = keys.DEFAULT_FILES_DOWNLOAD_LOCATION
    mount_timeout_seconds: int = Field(default=300, gt=0)

    @field_validator("mount_timeout_seconds", mode="before")
    @classmethod
    def parse_timeout(cls, v: Any) -> Any:
        if isinstance(v, str):
            return parse_time_seconds(v)
        return v

    @classmethod
    def from_source(cls, config: ConfigSource) -> InitContainerSettings:
        """Read the init-container settings group from ``config``.

        Raises:
            pydantic.ValidationError: If a present setting is malformed.
        """
        return cls.model_validate(
            {
                "image": config.get(
                    keys.INIT_CONTAINER_DOCKER_IMAGE, keys.DEFAULT_INIT_CONTAINER_DOCKER_IMAGE
                ),
                "pull_policy": config.get(
                    keys.DOCKER_IMAGE_PULL_POLICY, keys.DEFAULT_DOCKER_IMAGE_PULL_POLICY
                ),
                "jars_download_dir": config.get(
                    keys.INIT_CONTAINER_JARS_DOWNLOAD_LOCATION, keys.DEFAULT_JARS_DOWNLOAD_LOCATION
                ),
                "files_download_dir": config.get(
                    keys.INIT_CONTAINER_FILES_DOWNLOAD_LOCATION,
                    keys.DEFAULT_FILES_DOWNLOAD_LOCATION,
                ),
                "mount_timeout_seconds": config.get(
                    keys.INIT_CONTAINER_MOUNT_TIMEOUT, keys.DEFAULT_MOUNT_TIMEOUT
                ),
            }
        )


def parse_label_selector(value: str) -> dict[str, str]:
    """Parse ``k1=v1,k2=v2`` into a label mapping.

    Raises:
        ValueError: If an entry is not a ``key=value`` pair.
    """
    labels: dict[str, str] = {}
    for entry in value.split(","):
        entry = entry.strip()
        if not entry:
            continue
        key, sep, val = entry.partition("=")
        if not sep or not key.strip():
            raise ValueError(f"Invalid label entry {entry!r} (expected key=value)")
        labels[key.strip()] = val.strip()
    return labels
