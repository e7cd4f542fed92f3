"""Tests for session composition orchestration."""

from __future__ import annotations

import dataclasses
import logging
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from sparkpods._constants import KUBERNETES_MASTER_INTERNAL_URL
from sparkpods.capabilities import CapabilityKind, CapabilityResolver, WarningCode
from sparkpods.composition import CompositionResult, compose
from sparkpods.config import ConfigSource, keys
from sparkpods.k8s import AccessMode, ConfigurationError, EnvironmentProbe
from tests.conftest import make_config, make_resolver


class TestCompose:
    """Tests for compose()."""

    def test_probe_drives_strategy(self, tmp_path, resolver):
        token = tmp_path / "token"
        token.write_text("t")
        result = compose(make_config(), probe=EnvironmentProbe(token), resolver=resolver)
        assert result.access.mode is AccessMode.IN_CLUSTER
        assert result.access.endpoint == KUBERNETES_MASTER_INTERNAL_URL

    def test_absent_probe_uses_master(self, tmp_path, resolver):
        result = compose(
            make_config(), probe=EnvironmentProbe(tmp_path / "token"), resolver=resolver
        )
        assert result.access.mode is AccessMode.EXTERNAL
        assert result.access.endpoint == "https://1.2.3.4:6443"

    def test_probe_runs_once(self, resolver):
        probe = MagicMock(spec=EnvironmentProbe)
        probe.probe.return_value = False
        compose(make_config(), probe=probe, resolver=resolver)
        probe.probe.assert_called_once_with()

    def test_in_cluster_override_skips_probe(self, resolver):
        probe = MagicMock(spec=EnvironmentProbe)
        result = compose(make_config(), probe=probe, in_cluster=True, resolver=resolver)
        probe.probe.assert_not_called()
        assert result.access.in_cluster is True

    def test_no_strategy_is_fatal(self, resolver):
        with pytest.raises(ConfigurationError):
            compose(ConfigSource({}), in_cluster=False, resolver=resolver)

    def test_fatal_error_precedes_warnings(self, resolver, caplog):
        with caplog.at_level(logging.WARNING, logger="sparkpods"):
            with pytest.raises(ConfigurationError):
                compose(ConfigSource({}), in_cluster=False, resolver=resolver)
        assert caplog.records == []

    def test_bundles_capabilities_and_shuffle(self, resolver):
        config = make_config(
            HADOOP_CONFIG_MAP="hadoop-conf",
            SHUFFLE_SERVICE_ENABLED="true",
            SHUFFLE_LABELS="app=shuffle",
        )
        result = compose(config, in_cluster=False, resolver=resolver)
        assert result.kinds == (
            CapabilityKind.HADOOP_CONF_BOOTSTRAP,
            CapabilityKind.HADOOP_USER_BOOTSTRAP,
        )
        assert result.is_active(CapabilityKind.HADOOP_USER_BOOTSTRAP)
        assert result.get(CapabilityKind.KERBEROS_BOOTSTRAP) is None
        assert result.shuffle.enabled is True

    def test_warnings_collected(self, resolver):
        config = make_config(SHUFFLE_SERVICE_ENABLED="true")
        result = compose(config, in_cluster=False, resolver=resolver)
        codes = [w.code for w in result.warnings]
        assert codes == [
            WarningCode.INIT_CONTAINER_CONFIG_MAP_MISSING,
            WarningCode.INIT_CONTAINER_CONFIG_MAP_KEY_MISSING,
            WarningCode.HADOOP_CONFIG_MAP_MISSING,
            WarningCode.SHUFFLE_LABELS_MISSING,
        ]

    def test_warnings_logged_as_batch(self, resolver, caplog):
        with caplog.at_level(logging.WARNING, logger="sparkpods"):
            result = compose(make_config(), in_cluster=False, resolver=resolver)
        logged = [r.getMessage() for r in caplog.records if r.levelno == logging.WARNING]
        assert logged == [w.message for w in result.warnings]

    def test_unreadable_hadoop_conf_dir_is_not_fatal(self, tmp_path):
        config = make_config(HADOOP_CONFIG_MAP="hadoop-conf", HADOOP_CONF_DIR=str(tmp_path))
        with patch.object(Path, "iterdir", side_effect=PermissionError(13, "Permission denied")):
            result = compose(config, in_cluster=False, resolver=CapabilityResolver())
        hadoop = result.get(CapabilityKind.HADOOP_CONF_BOOTSTRAP)
        assert hadoop["conf_files"] == ()
        assert WarningCode.HADOOP_CONF_DIR_MISSING in [w.code for w in result.warnings]

    def test_deterministic(self):
        config = make_config(
            HADOOP_CONFIG_MAP="hadoop-conf",
            EXECUTOR_SUBMITTED_SMALL_FILES_SECRET="files",
        )
        first = compose(config, in_cluster=False, resolver=make_resolver())
        second = compose(config, in_cluster=False, resolver=make_resolver())
        assert first == second
        assert first.to_dict() == second.to_dict()


class TestCompositionResult:
    """Tests for CompositionResult."""

    def test_immutable(self, resolver):
        result = compose(make_config(), in_cluster=True, resolver=resolver)
        with pytest.raises(dataclasses.FrozenInstanceError):
            result.capabilities = ()  # type: ignore[misc]

    def test_to_dict(self, resolver):
        config = make_config(HADOOP_CONFIG_MAP="hadoop-conf")
        data = compose(config, in_cluster=False, resolver=resolver).to_dict()
        assert data["access"]["endpoint"] == "https://1.2.3.4:6443"
        assert data["access"]["mode"] == "external"
        assert [c["kind"] for c in data["capabilities"]] == [
            "hadoop-conf-bootstrap",
            "hadoop-user-bootstrap",
        ]
        assert data["shuffle"] == {"enabled": False, "handle": None}
        assert {w["code"] for w in data["warnings"]} == {
            "init-container-config-map-missing",
            "init-container-config-map-key-missing",
        }

    def test_namespace_threaded_through(self, resolver):
        config = make_config(KUBERNETES_NAMESPACE="analytics")
        result = compose(config, in_cluster=True, resolver=resolver)
        assert result.access.namespace == "analytics"
        assert config.get(keys.KUBERNETES_NAMESPACE) == "analytics"
