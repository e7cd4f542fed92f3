"""Capability kinds, descriptors and warnings."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any


class CapabilityKind(str, Enum):
    """Optional executor pod capabilities.

    Declaration order is evaluation order, and evaluation order is the
    order the pod factory applies capabilities in.
    """

    SECRET_MOUNT = "secret-mount"
    SMALL_FILES_MOUNT = "small-files-mount"
    INIT_CONTAINER_BOOTSTRAP = "init-container-bootstrap"
    INIT_CONTAINER_SECRET_MOUNT = "init-container-secret-mount"
    STAGING_SERVER_SECRET_MOUNT = "staging-server-secret-mount"
    HADOOP_CONF_BOOTSTRAP = "hadoop-conf-bootstrap"
    KERBEROS_BOOTSTRAP = "kerberos-bootstrap"
    HADOOP_USER_BOOTSTRAP = "hadoop-user-bootstrap"


class WarningCode(str, Enum):
    """Codes for non-fatal composition warnings."""

    INIT_CONTAINER_CONFIG_MAP_MISSING = "init-container-config-map-missing"
    INIT_CONTAINER_CONFIG_MAP_KEY_MISSING = "init-container-config-map-key-missing"
    HADOOP_CONFIG_MAP_MISSING = "hadoop-config-map-missing"
    MISSING_SETTING = "missing-setting"
    PREREQUISITE_MISSING = "prerequisite-missing"
    INVALID_SETTING = "invalid-setting"
    HADOOP_CONF_DIR_MISSING = "hadoop-conf-dir-missing"
    SHUFFLE_LABELS_MISSING = "shuffle-labels-missing"


def _freeze(value: Any) -> Any:
    """Convert containers to read-only equivalents."""
    if isinstance(value, Mapping):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    return value


def _thaw(value: Any) -> Any:
    """Convert frozen containers back to plain JSON-friendly ones."""
    if isinstance(value, Mapping):
        return {k: _thaw(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [_thaw(v) for v in value]
    if isinstance(value, Enum):
        return value.value
    return value


@dataclass(frozen=True)
class CapabilityDescriptor:
    """An activated capability and the parameters needed to materialize it."""

    kind: CapabilityKind
    params: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "params", _freeze(self.params))

    def __getitem__(self, name: str) -> Any:
        return self.params[name]

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind.value, "params": _thaw(self.params)}


@dataclass(frozen=True)
class CompositionWarning:
    """Non-fatal note about incomplete or unusable optional configuration."""

    code: WarningCode
    message: str
    capability: CapabilityKind | None = None
    setting: str | None = None

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code.value,
            "message": self.message,
            "capability": self.capability.value if self.capability else None,
            "setting": self.setting,
        }


class CapabilityLookup:
    """Lookups over an ordered ``capabilities`` tuple."""

    capabilities: tuple[CapabilityDescriptor, ...]

    @property
    def kinds(self) -> tuple[CapabilityKind, ...]:
        return tuple(c.kind for c in self.capabilities)

    def is_active(self, kind: CapabilityKind) -> bool:
        return kind in self.kinds

    def get(self, kind: CapabilityKind) -> CapabilityDescriptor | None:
        for descriptor in self.capabilities:
            if descriptor.kind is kind:
                return descriptor
        return None


@dataclass(frozen=True)
class ResolvedCapabilities(CapabilityLookup):
    """Ordered active capabilities plus the warnings raised resolving them."""

    capabilities: tuple[CapabilityDescriptor, ...] = ()
    warnings: tuple[CompositionWarning, ...] = ()
