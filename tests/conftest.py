"""Shared fixtures for sparkpods test suite."""

from __future__ import annotations

import pytest

from sparkpods.capabilities import CapabilityResolver
from sparkpods.config import ConfigSource, keys

EXTERNAL_MASTER = "k8s://https://1.2.3.4:6443"


def make_config(**settings: str) -> ConfigSource:
    """Create a ConfigSource with an external master plus ``settings``.

    Keyword names are config key constant names from ``sparkpods.config.keys``
    (e.g. ``HADOOP_CONFIG_MAP="hadoop-conf"``). Prefer this over hand-built
    dicts so that tests read in terms of settings rather than dotted strings.
    """
    base: dict[str, str] = {keys.MASTER: EXTERNAL_MASTER}
    for name, value in settings.items():
        base[getattr(keys, name)] = value
    return ConfigSource(base)


def make_resolver(conf_files: dict[str, tuple[str, ...]] | None = None) -> CapabilityResolver:
    """Create a resolver with a fixed user and fake hadoop conf directories."""
    listing = conf_files or {}
    return CapabilityResolver(
        list_conf_files=lambda conf_dir: listing.get(conf_dir),
        current_user=lambda: "alice",
    )


@pytest.fixture
def resolver() -> CapabilityResolver:
    """A resolver that never touches the filesystem or the login database."""
    return make_resolver({"/etc/hadoop/conf": ("/etc/hadoop/conf/core-site.xml",)})


@pytest.fixture
def full_init_container() -> dict[str, str]:
    """Settings that fully configure the executor init-container bootstrap."""
    return {
        "EXECUTOR_INIT_CONTAINER_CONFIG_MAP": "init-config",
        "EXECUTOR_INIT_CONTAINER_CONFIG_MAP_KEY": "download.properties",
    }
