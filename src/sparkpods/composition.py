"""Executor composition for a cluster session.

Runs once at session startup: probe the environment, pick the control-plane
access strategy, resolve executor capabilities, decide shuffle-service
integration, and bundle the outcome into an immutable result for the pod
factory and scheduler backend.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from sparkpods.capabilities import (
    CapabilityDescriptor,
    CapabilityLookup,
    CapabilityResolver,
    CompositionWarning,
)
from sparkpods.config import ConfigSource
from sparkpods.k8s import ClientAccessDescriptor, EnvironmentProbe, select
from sparkpods.shuffle import ShuffleDecision, decide

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompositionResult(CapabilityLookup):
    """Resolved composition for one cluster session.

    Immutable once built; safe to share across the allocator and request
    threads of the scheduler backend.
    """

    access: ClientAccessDescriptor
    capabilities: tuple[CapabilityDescriptor, ...]
    shuffle: ShuffleDecision
    warnings: tuple[CompositionWarning, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "access": {
                "mode": self.access.mode.value,
                "endpoint": self.access.endpoint,
                "namespace": self.access.namespace,
                "token_file": self.access.token_file,
                "ca_cert_file": self.access.ca_cert_file,
                "auth_prefix": self.access.auth_prefix,
            },
            "capabilities": [c.to_dict() for c in self.capabilities],
            "shuffle": self.shuffle.to_dict(),
            "warnings": [w.to_dict() for w in self.warnings],
        }


def compose(
    config: ConfigSource,
    probe: EnvironmentProbe | None = None,
    in_cluster: bool | None = None,
    resolver: CapabilityResolver | None = None,
) -> CompositionResult:
    """Compose executor capabilities and control-plane access for ``config``.

    Args:
        config: Session configuration
        probe: Environment probe; defaults to the service-account token check
        in_cluster: Skip probing and use this answer instead
        resolver: Capability resolver; defaults to the standard rule table

    Returns:
        CompositionResult

    Raises:
        ConfigurationError: If no control-plane access strategy is viable.
    """
    if in_cluster is None:
        in_cluster = (probe or EnvironmentProbe()).probe()

    access = select(in_cluster, config)
    resolved = (resolver or CapabilityResolver()).resolve(config)
    shuffle = decide(config)

    result = CompositionResult(
        access=access,
        capabilities=resolved.capabilities,
        shuffle=shuffle,
        warnings=resolved.warnings + shuffle.warnings,
    )

    for warning in result.warnings:
        logger.warning("%s", warning.message)
    logger.info(
        "Composed executor pods: %d capabilities [%s], shuffle service %s, %s access to %s",
        len(result.capabilities),
        ", ".join(k.value for k in result.kinds) or "none",
        "enabled" if shuffle.enabled else "disabled",
        access.mode.value,
        access.endpoint,
    )
    return result
