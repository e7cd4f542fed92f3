"""Tests for the external shuffle service decision."""

from __future__ import annotations

import pytest

from sparkpods.capabilities import WarningCode
from sparkpods.config import ConfigSource, keys
from sparkpods.shuffle import SHUFFLE_TRANSPORT_MODULE, decide


class TestShuffleDisabled:
    """Tests for the disabled path."""

    def test_default_disabled(self):
        decision = decide(ConfigSource({}))
        assert decision.enabled is False
        assert decision.handle is None
        assert decision.warnings == ()

    def test_disabled_ignores_other_settings(self):
        """Disabled yields no handle regardless of other settings."""
        decision = decide(
            ConfigSource(
                {
                    keys.SHUFFLE_SERVICE_ENABLED: "false",
                    keys.SHUFFLE_NAMESPACE: "shuffle",
                    keys.SHUFFLE_LABELS: "app=spark-shuffle",
                    keys.NETWORK_AUTHENTICATE: "not-a-bool",
                    "spark.shuffle.io.maxRetries": "5",
                }
            )
        )
        assert decision.enabled is False
        assert decision.handle is None
        assert decision.warnings == ()

    def test_invalid_flag_disables_with_warning(self):
        decision = decide(ConfigSource({keys.SHUFFLE_SERVICE_ENABLED: "yes"}))
        assert decision.enabled is False
        assert decision.handle is None
        assert [w.code for w in decision.warnings] == [WarningCode.INVALID_SETTING]
        assert decision.warnings[0].setting == keys.SHUFFLE_SERVICE_ENABLED


class TestShuffleEnabled:
    """Tests for the enabled path."""

    def _enabled(self, **extra: str):
        settings = {
            keys.SHUFFLE_SERVICE_ENABLED: "true",
            keys.SHUFFLE_LABELS: "app=spark-shuffle-service,spark-version=2.2.0",
        }
        settings.update(extra)
        return decide(ConfigSource(settings))

    def test_handle_built(self):
        decision = self._enabled()
        assert decision.enabled is True
        assert decision.handle is not None
        assert decision.handle.transport.module == SHUFFLE_TRANSPORT_MODULE
        assert decision.handle.namespace == "default"
        assert dict(decision.handle.labels) == {
            "app": "spark-shuffle-service",
            "spark-version": "2.2.0",
        }
        assert decision.warnings == ()

    def test_authentication_flag(self):
        assert self._enabled().handle.authentication_enabled is False
        decision = self._enabled(**{keys.NETWORK_AUTHENTICATE: "true"})
        assert decision.handle.authentication_enabled is True

    def test_transport_settings(self):
        decision = self._enabled(
            **{"spark.shuffle.io.maxRetries": "5", "spark.shuffle.io.retryWait": "10s"}
        )
        assert dict(decision.handle.transport.settings) == {
            "maxRetries": "5",
            "retryWait": "10s",
        }

    def test_namespace(self):
        decision = self._enabled(**{keys.SHUFFLE_NAMESPACE: "shuffle-system"})
        assert decision.handle.namespace == "shuffle-system"

    def test_missing_labels_warns(self):
        decision = decide(ConfigSource({keys.SHUFFLE_SERVICE_ENABLED: "true"}))
        assert decision.enabled is True
        assert [w.code for w in decision.warnings] == [WarningCode.SHUFFLE_LABELS_MISSING]

    def test_malformed_labels_warn(self):
        decision = self._enabled(**{keys.SHUFFLE_LABELS: "app"})
        codes = [w.code for w in decision.warnings]
        assert codes == [WarningCode.INVALID_SETTING, WarningCode.SHUFFLE_LABELS_MISSING]
        assert decision.enabled is True

    def test_invalid_authenticate_warns(self):
        decision = self._enabled(**{keys.NETWORK_AUTHENTICATE: "maybe"})
        assert decision.handle.authentication_enabled is False
        assert [w.setting for w in decision.warnings] == [keys.NETWORK_AUTHENTICATE]

    def test_handle_is_read_only(self):
        handle = self._enabled().handle
        with pytest.raises(TypeError):
            handle.labels["app"] = "other"  # type: ignore[index]

    def test_to_dict(self):
        assert self._enabled().to_dict()["handle"]["labels"] == {
            "app": "spark-shuffle-service",
            "spark-version": "2.2.0",
        }
