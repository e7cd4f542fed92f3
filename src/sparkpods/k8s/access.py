"""Control-plane access strategy selection.

A session reaches the Kubernetes API server one of two ways: from inside
the cluster through the well-known service address, or from outside
through the master URL the user configured. The choice is made once from
the environment probe and the chosen strategy is passed around as a value.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum

from sparkpods._constants import (
    APISERVER_AUTH_DRIVER_MOUNTED_CONF_PREFIX,
    K8S_MASTER_PREFIX,
    KUBERNETES_MASTER_INTERNAL_URL,
    SERVICE_ACCOUNT_CA_CRT_PATH,
    SERVICE_ACCOUNT_TOKEN_PATH,
)
from sparkpods.config import ConfigSource, keys

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Raised when no viable control-plane access strategy can be determined."""

    pass


class AccessMode(str, Enum):
    """How the session reaches the API server."""

    IN_CLUSTER = "in-cluster"
    EXTERNAL = "external"


@dataclass(frozen=True)
class ClientAccessDescriptor:
    """Everything a client factory needs to connect to the API server.

    Credential paths are not checked for existence; a missing file surfaces
    when the connection is attempted.
    """

    mode: AccessMode
    endpoint: str
    namespace: str
    token_file: str
    ca_cert_file: str
    auth_prefix: str = APISERVER_AUTH_DRIVER_MOUNTED_CONF_PREFIX

    @property
    def in_cluster(self) -> bool:
        return self.mode is AccessMode.IN_CLUSTER


def can_create(master_url: str) -> bool:
    """Return True if ``master_url`` names a Kubernetes master."""
    return master_url.startswith("k8s")


def strip_master_prefix(master_url: str) -> str:
    """Strip the ``k8s://`` scheme prefix from a master URL."""
    if master_url.startswith(K8S_MASTER_PREFIX):
        return master_url[len(K8S_MASTER_PREFIX) :]
    return master_url


class ClientStrategy(ABC):
    """One way of reaching the control plane."""

    mode: AccessMode

    @abstractmethod
    def endpoint(self, config: ConfigSource) -> str:
        """Return the API server URL for this strategy."""

    def describe(self, config: ConfigSource) -> ClientAccessDescriptor:
        """Build the access descriptor for ``config``.

        Raises:
            ConfigurationError: If the strategy cannot determine an endpoint.
        """
        return ClientAccessDescriptor(
            mode=self.mode,
            endpoint=self.endpoint(config),
            namespace=config.get(keys.KUBERNETES_NAMESPACE, keys.DEFAULT_NAMESPACE),
            token_file=SERVICE_ACCOUNT_TOKEN_PATH,
            ca_cert_file=SERVICE_ACCOUNT_CA_CRT_PATH,
        )


class InClusterStrategy(ClientStrategy):
    """Connect through the cluster-internal service address.

    Any configured master URL is ignored.
    """

    mode = AccessMode.IN_CLUSTER

    def endpoint(self, config: ConfigSource) -> str:
        return KUBERNETES_MASTER_INTERNAL_URL


class ExternalStrategy(ClientStrategy):
    """Connect through the user-configured ``k8s://`` master URL."""

    mode = AccessMode.EXTERNAL

    def endpoint(self, config: ConfigSource) -> str:
        master = config.get(keys.MASTER)
        if not master:
            raise ConfigurationError(
                f"Not running inside a cluster and no master URL configured; "
                f"set {keys.MASTER} to k8s://<api-server-url>"
            )
        if not master.startswith(K8S_MASTER_PREFIX):
            raise ConfigurationError(
                f"Master URL {master!r} is not a Kubernetes master (expected {K8S_MASTER_PREFIX}...)"
            )
        endpoint = strip_master_prefix(master)
        if not endpoint:
            raise ConfigurationError(f"Master URL {master!r} names no API server")
        return endpoint


def select_strategy(in_cluster: bool) -> ClientStrategy:
    """Pick the access strategy for the probed environment."""
    return InClusterStrategy() if in_cluster else ExternalStrategy()


def select(in_cluster: bool, config: ConfigSource) -> ClientAccessDescriptor:
    """Select a strategy and resolve its access descriptor.

    Raises:
        ConfigurationError: If ``in_cluster`` is False and no usable master
            URL is configured.
    """
    descriptor = select_strategy(in_cluster).describe(config)
    logger.debug(
        "Selected %s control-plane access: %s (namespace %s)",
        descriptor.mode.value,
        descriptor.endpoint,
        descriptor.namespace,
    )
    return descriptor
