"""Executor capability resolution for sparkpods."""

from .models import (
    CapabilityDescriptor,
    CapabilityKind,
    CapabilityLookup,
    CompositionWarning,
    ResolvedCapabilities,
    WarningCode,
)
from .resolver import CapabilityResolver, ResolutionContext, resolve_capabilities
from .rules import (
    CAPABILITY_RULES,
    CapabilityRule,
    Requirement,
    current_user_name,
    list_hadoop_conf_files,
)

__all__ = [
    # Models
    "CapabilityKind",
    "CapabilityDescriptor",
    "CompositionWarning",
    "CapabilityLookup",
    "ResolvedCapabilities",
    "WarningCode",
    # Rules
    "CAPABILITY_RULES",
    "CapabilityRule",
    "Requirement",
    "current_user_name",
    "list_hadoop_conf_files",
    # Engine
    "CapabilityResolver",
    "ResolutionContext",
    "resolve_capabilities",
]
