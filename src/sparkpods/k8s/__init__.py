"""Kubernetes control-plane access for sparkpods."""

from .access import (
    AccessMode,
    ClientAccessDescriptor,
    ClientStrategy,
    ConfigurationError,
    ExternalStrategy,
    InClusterStrategy,
    can_create,
    select,
    select_strategy,
    strip_master_prefix,
)
from .client import (
    ClientCredentials,
    build_configuration,
    create_api_client,
    resolve_credentials,
)
from .environment import EnvironmentProbe

__all__ = [
    # Environment
    "EnvironmentProbe",
    # Strategy
    "AccessMode",
    "ClientAccessDescriptor",
    "ClientStrategy",
    "InClusterStrategy",
    "ExternalStrategy",
    "can_create",
    "select",
    "select_strategy",
    "strip_master_prefix",
    # Client
    "ClientCredentials",
    "build_configuration",
    "create_api_client",
    "resolve_credentials",
    # Errors
    "ConfigurationError",
]
