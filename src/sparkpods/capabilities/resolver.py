"""Capability resolution engine.

Evaluates the rule table against a configuration source and returns the
active capabilities in rule order, together with warnings for optional
features that are only partly configured. Resolution never raises for
incomplete optional configuration.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

from sparkpods.config import ConfigSource

from .models import (
    CapabilityDescriptor,
    CapabilityKind,
    CompositionWarning,
    ResolvedCapabilities,
    WarningCode,
)
from .rules import (
    CAPABILITY_RULES,
    CapabilityRule,
    current_user_name,
    list_hadoop_conf_files,
)

logger = logging.getLogger(__name__)


@dataclass
class ResolutionContext:
    """Per-resolution state handed to rule builders."""

    config: ConfigSource
    list_conf_files: Callable[[str], tuple[str, ...] | None]
    current_user: Callable[[], str]
    active: dict[CapabilityKind, CapabilityDescriptor] = field(default_factory=dict)
    warnings: list[CompositionWarning] = field(default_factory=list)

    def warn(
        self,
        code: WarningCode,
        message: str,
        capability: CapabilityKind | None = None,
        setting: str | None = None,
    ) -> None:
        self.warnings.append(CompositionWarning(code, message, capability, setting))


class CapabilityResolver:
    """Decides which executor capabilities to activate."""

    def __init__(
        self,
        rules: Sequence[CapabilityRule] = CAPABILITY_RULES,
        list_conf_files: Callable[[str], tuple[str, ...] | None] = list_hadoop_conf_files,
        current_user: Callable[[], str] = current_user_name,
    ):
        self.rules = tuple(rules)
        self._list_conf_files = list_conf_files
        self._current_user = current_user

    def resolve(self, config: ConfigSource) -> ResolvedCapabilities:
        """Resolve active capabilities for ``config``.

        Returns:
            ResolvedCapabilities in rule order, with accumulated warnings
        """
        ctx = ResolutionContext(
            config=config,
            list_conf_files=self._list_conf_files,
            current_user=self._current_user,
        )
        for rule in self.rules:
            descriptor = self._evaluate(rule, ctx)
            if descriptor is not None:
                ctx.active[rule.kind] = descriptor
                logger.debug("Activated %s", rule.label)

        return ResolvedCapabilities(
            capabilities=tuple(ctx.active.values()),
            warnings=tuple(ctx.warnings),
        )

    def _evaluate(self, rule: CapabilityRule, ctx: ResolutionContext) -> CapabilityDescriptor | None:
        values = self._collect_required(rule, ctx)
        if values is None:
            return None

        if rule.prefixed is not None:
            entries = ctx.config.get_prefixed(rule.prefixed)
            if not entries:
                return None
            values["secrets"] = entries

        if rule.requires_configured is not None and ctx.config.get(rule.requires_configured) is None:
            if rule.required:
                ctx.warn(
                    WarningCode.PREREQUISITE_MISSING,
                    f"The {rule.label} is configured but {rule.requires_configured} is not set; "
                    f"the {rule.label} will not be enabled.",
                    capability=rule.kind,
                    setting=rule.requires_configured,
                )
            return None

        if any(kind not in ctx.active for kind in rule.requires_active):
            return None

        excluded = [kind for kind in rule.excluded_by if kind in ctx.active]
        if excluded:
            logger.debug("Skipping %s: superseded by %s", rule.label, excluded[0].value)
            return None

        try:
            params = rule.build(ctx, values) if rule.build else values
        except ValueError as e:
            ctx.warn(
                WarningCode.INVALID_SETTING,
                f"The {rule.label} will not be enabled: {e}",
                capability=rule.kind,
            )
            return None

        return CapabilityDescriptor(rule.kind, params)

    def _collect_required(
        self, rule: CapabilityRule, ctx: ResolutionContext
    ) -> dict[str, Any] | None:
        """Gather the rule's required settings.

        Returns the collected values, or None if any are missing. Every
        missing setting gets exactly one warning: its own mandated warning
        if it has one, otherwise a counterpart warning when the rule is
        partly configured.
        """
        values: dict[str, Any] = {}
        missing = []
        for req in rule.required:
            value = ctx.config.get(req.key)
            if value is None:
                missing.append(req)
            else:
                values[req.param] = value

        if not missing:
            return values

        present_keys = [req.key for req in rule.required if req.param in values]
        for req in missing:
            if req.missing is not None:
                code, message = req.missing
                ctx.warn(code, message, capability=rule.kind, setting=req.key)
            elif present_keys:
                ctx.warn(
                    WarningCode.MISSING_SETTING,
                    f"The {rule.label} is partially configured: "
                    f"{', '.join(present_keys)} set but {req.key} is missing; "
                    f"the {rule.label} will not be enabled.",
                    capability=rule.kind,
                    setting=req.key,
                )
        return None


def resolve_capabilities(config: ConfigSource) -> ResolvedCapabilities:
    """Resolve capabilities with the default rule table."""
    return CapabilityResolver().resolve(config)
