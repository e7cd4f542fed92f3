"""Activation rules for executor capabilities.

Each capability is described by one ``CapabilityRule``: the settings it
needs, what must already be configured or active, what excludes it, and
how to turn the collected settings into descriptor parameters. The table
order is the evaluation order, so prerequisites come before the rules
that depend on them.
"""

from __future__ import annotations

import getpass
import logging
import os
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

from sparkpods._constants import SPARK_POD_EXECUTOR_ROLE
from sparkpods.config import InitContainerSettings, keys

from .models import CapabilityKind, WarningCode

if TYPE_CHECKING:
    from .resolver import ResolutionContext

    Builder = Callable[[ResolutionContext, dict[str, Any]], dict[str, Any]]

logger = logging.getLogger(__name__)

DEFAULT_SPARK_USER = "spark"


@dataclass(frozen=True)
class Requirement:
    """A setting a capability cannot activate without.

    ``missing`` is the warning raised whenever the setting is absent, even
    if none of the capability's other settings are present.
    """

    key: str
    param: str
    missing: tuple[WarningCode, str] | None = None


@dataclass(frozen=True)
class CapabilityRule:
    """Declarative activation rule for one capability kind."""

    kind: CapabilityKind
    label: str
    required: tuple[Requirement, ...] = ()
    # Activates only when this prefixed map is non-empty
    prefixed: str | None = None
    # Setting that must be present regardless of this rule's own settings
    requires_configured: str | None = None
    requires_active: tuple[CapabilityKind, ...] = ()
    excluded_by: tuple[CapabilityKind, ...] = ()
    build: Builder | None = None


# =============================================================================
# Environment helpers
# =============================================================================


def current_user_name() -> str:
    """Return the user Spark runs as: ``SPARK_USER`` or the login name."""
    user = os.environ.get("SPARK_USER")
    if user:
        return user
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        logger.debug("No login name available, using %s", DEFAULT_SPARK_USER)
        return DEFAULT_SPARK_USER


def list_hadoop_conf_files(conf_dir: str) -> tuple[str, ...] | None:
    """List regular files in a Hadoop conf directory, sorted by name.

    Returns None when ``conf_dir`` is not a readable directory.
    """
    path = Path(conf_dir)
    try:
        if not path.is_dir():
            return None
        return tuple(sorted(str(p) for p in path.iterdir() if p.is_file()))
    except OSError as e:
        logger.debug("Cannot list hadoop conf dir %s: %s", conf_dir, e)
        return None


# =============================================================================
# Builders
# =============================================================================


def _build_secret_mounts(ctx: ResolutionContext, values: dict[str, Any]) -> dict[str, Any]:
    return {"secret_names_to_mount_paths": values["secrets"]}


def _build_init_container(ctx: ResolutionContext, values: dict[str, Any]) -> dict[str, Any]:
    settings = InitContainerSettings.from_source(ctx.config)
    return {
        **values,
        "image": settings.image,
        "pull_policy": settings.pull_policy.value,
        "jars_download_dir": settings.jars_download_dir,
        "files_download_dir": settings.files_download_dir,
        "mount_timeout_seconds": settings.mount_timeout_seconds,
        "pod_role": SPARK_POD_EXECUTOR_ROLE,
    }


def _build_hadoop_conf(ctx: ResolutionContext, values: dict[str, Any]) -> dict[str, Any]:
    conf_dir = ctx.config.get(keys.HADOOP_CONF_DIR)
    conf_files: tuple[str, ...] = ()
    if conf_dir is not None:
        listed = ctx.list_conf_files(conf_dir)
        if listed is None:
            ctx.warn(
                WarningCode.HADOOP_CONF_DIR_MISSING,
                f"Hadoop conf dir {conf_dir} is not a readable directory; "
                "no hadoop configuration files will be mounted.",
                capability=CapabilityKind.HADOOP_CONF_BOOTSTRAP,
                setting=keys.HADOOP_CONF_DIR,
            )
        else:
            conf_files = listed
    return {**values, "conf_dir": conf_dir, "conf_files": conf_files}


def _build_with_user(ctx: ResolutionContext, values: dict[str, Any]) -> dict[str, Any]:
    return {**values, "spark_user": ctx.current_user()}


# =============================================================================
# Rule table
# =============================================================================

_INIT_CONTAINER_SKIPPED = (
    "Executors will therefore not attempt to fetch remote or submitted dependencies."
)

CAPABILITY_RULES: tuple[CapabilityRule, ...] = (
    CapabilityRule(
        kind=CapabilityKind.SECRET_MOUNT,
        label="executor secret mount",
        prefixed=keys.EXECUTOR_SECRETS_PREFIX,
        build=_build_secret_mounts,
    ),
    CapabilityRule(
        kind=CapabilityKind.SMALL_FILES_MOUNT,
        label="submitted small files mount",
        required=(
            Requirement(keys.EXECUTOR_SUBMITTED_SMALL_FILES_SECRET, "secret_name"),
            Requirement(keys.EXECUTOR_SUBMITTED_SMALL_FILES_SECRET_MOUNT_PATH, "mount_path"),
        ),
    ),
    CapabilityRule(
        kind=CapabilityKind.INIT_CONTAINER_BOOTSTRAP,
        label="init-container bootstrap",
        required=(
            Requirement(
                keys.EXECUTOR_INIT_CONTAINER_CONFIG_MAP,
                "config_map_name",
                missing=(
                    WarningCode.INIT_CONTAINER_CONFIG_MAP_MISSING,
                    "The executor's init-container config map was not specified. "
                    + _INIT_CONTAINER_SKIPPED,
                ),
            ),
            Requirement(
                keys.EXECUTOR_INIT_CONTAINER_CONFIG_MAP_KEY,
                "config_map_key",
                missing=(
                    WarningCode.INIT_CONTAINER_CONFIG_MAP_KEY_MISSING,
                    "The executor's init-container config map key was not specified. "
                    + _INIT_CONTAINER_SKIPPED,
                ),
            ),
        ),
        build=_build_init_container,
    ),
    # Shares the executor secrets map; evaluated independently of the
    # init-container bootstrap.
    CapabilityRule(
        kind=CapabilityKind.INIT_CONTAINER_SECRET_MOUNT,
        label="init-container secret mount",
        prefixed=keys.EXECUTOR_SECRETS_PREFIX,
        build=_build_secret_mounts,
    ),
    CapabilityRule(
        kind=CapabilityKind.STAGING_SERVER_SECRET_MOUNT,
        label="staging server secret mount",
        required=(
            Requirement(keys.EXECUTOR_INIT_CONTAINER_SECRET, "secret_name"),
            Requirement(keys.EXECUTOR_INIT_CONTAINER_SECRET_MOUNT_DIR, "mount_dir"),
        ),
    ),
    CapabilityRule(
        kind=CapabilityKind.HADOOP_CONF_BOOTSTRAP,
        label="hadoop conf bootstrap",
        required=(
            Requirement(
                keys.HADOOP_CONFIG_MAP,
                "config_map_name",
                missing=(
                    WarningCode.HADOOP_CONFIG_MAP_MISSING,
                    "The executor's hadoop config map was not specified. "
                    "Executors will therefore not attempt to mount hadoop configuration files.",
                ),
            ),
        ),
        build=_build_hadoop_conf,
    ),
    CapabilityRule(
        kind=CapabilityKind.KERBEROS_BOOTSTRAP,
        label="kerberos bootstrap",
        required=(
            Requirement(keys.KERBEROS_KEYTAB_SECRET_NAME, "secret_name"),
            Requirement(keys.KERBEROS_KEYTAB_SECRET_KEY, "secret_item_key"),
        ),
        requires_configured=keys.HADOOP_CONFIG_MAP,
        build=_build_with_user,
    ),
    CapabilityRule(
        kind=CapabilityKind.HADOOP_USER_BOOTSTRAP,
        label="hadoop user bootstrap",
        requires_active=(CapabilityKind.HADOOP_CONF_BOOTSTRAP,),
        excluded_by=(CapabilityKind.KERBEROS_BOOTSTRAP,),
        build=_build_with_user,
    ),
)
