"""External shuffle service integration decision.

Only decides whether executors should register with a node-local shuffle
service and bundles what the shuffle client needs. Connecting to the
service is the shuffle manager's job.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from sparkpods.capabilities import CompositionWarning, WarningCode
from sparkpods.config import ConfigSource, ConfigValueError, keys, parse_label_selector

logger = logging.getLogger(__name__)

SHUFFLE_TRANSPORT_MODULE = "shuffle"


@dataclass(frozen=True)
class TransportConfig:
    """Reference to the transport settings for one network module."""

    module: str
    settings: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "settings", MappingProxyType(dict(self.settings)))

    @classmethod
    def from_source(cls, config: ConfigSource, module: str) -> TransportConfig:
        return cls(module=module, settings=config.get_prefixed(f"spark.{module}.io."))


@dataclass(frozen=True)
class ShuffleClientHandle:
    """What the external shuffle client is constructed from."""

    transport: TransportConfig
    authentication_enabled: bool
    namespace: str
    labels: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "labels", MappingProxyType(dict(self.labels)))

    def to_dict(self) -> dict[str, Any]:
        return {
            "transport_module": self.transport.module,
            "transport_settings": dict(self.transport.settings),
            "authentication_enabled": self.authentication_enabled,
            "namespace": self.namespace,
            "labels": dict(self.labels),
        }


@dataclass(frozen=True)
class ShuffleDecision:
    """Whether shuffle-service integration is enabled, and its client handle."""

    enabled: bool
    handle: ShuffleClientHandle | None = None
    warnings: tuple[CompositionWarning, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "enabled": self.enabled,
            "handle": self.handle.to_dict() if self.handle else None,
        }


def _invalid(key: str, error: Exception) -> CompositionWarning:
    return CompositionWarning(
        WarningCode.INVALID_SETTING,
        f"Ignoring {key}: {error}",
        setting=key,
    )


def decide(config: ConfigSource) -> ShuffleDecision:
    """Decide shuffle-service integration for ``config``.

    Disabled unless ``spark.shuffle.service.enabled`` is true; other shuffle
    settings are not read when it is off.
    """
    try:
        enabled = config.get_boolean(keys.SHUFFLE_SERVICE_ENABLED)
    except ConfigValueError as e:
        return ShuffleDecision(enabled=False, warnings=(_invalid(keys.SHUFFLE_SERVICE_ENABLED, e),))

    if not enabled:
        return ShuffleDecision(enabled=False)

    warnings: list[CompositionWarning] = []

    try:
        authentication_enabled = config.get_boolean(keys.NETWORK_AUTHENTICATE)
    except ConfigValueError as e:
        warnings.append(_invalid(keys.NETWORK_AUTHENTICATE, e))
        authentication_enabled = False

    try:
        labels = parse_label_selector(config.get(keys.SHUFFLE_LABELS, ""))
    except ValueError as e:
        warnings.append(_invalid(keys.SHUFFLE_LABELS, e))
        labels = {}

    if not labels:
        warnings.append(
            CompositionWarning(
                WarningCode.SHUFFLE_LABELS_MISSING,
                f"The shuffle service is enabled but {keys.SHUFFLE_LABELS} is empty; "
                "executors cannot locate shuffle service pods without a label selector.",
                setting=keys.SHUFFLE_LABELS,
            )
        )

    handle = ShuffleClientHandle(
        transport=TransportConfig.from_source(config, SHUFFLE_TRANSPORT_MODULE),
        authentication_enabled=authentication_enabled,
        namespace=config.get(keys.SHUFFLE_NAMESPACE, keys.DEFAULT_NAMESPACE),
        labels=labels,
    )
    logger.debug("Shuffle service integration enabled (namespace %s)", handle.namespace)
    return ShuffleDecision(enabled=True, handle=handle, warnings=tuple(warnings))
