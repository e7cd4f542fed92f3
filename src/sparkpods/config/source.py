"""Flat key/value configuration source."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import Any, overload

_TRUE = "true"
_FALSE = "false"


class ConfigValueError(ValueError):
    """Raised when a setting cannot be converted to the requested type."""

    def __init__(self, key: str, value: str, expected: str):
        super().__init__(f"Setting '{key}' has invalid value {value!r} (expected {expected})")
        self.key = key
        self.value = value


def _to_setting(value: Any) -> str:
    """Render a scalar as the string form Spark settings use."""
    if isinstance(value, bool):
        return _TRUE if value else _FALSE
    return str(value)


class ConfigSource(Mapping[str, str]):
    """Read-only view over dotted configuration keys.

    An absent key and a key set to the empty string are different states:
    ``get`` returns ``None`` for the former and ``""`` for the latter.
    """

    def __init__(self, settings: Mapping[str, Any] | None = None):
        items = {str(k): _to_setting(v) for k, v in (settings or {}).items() if v is not None}
        self._settings: Mapping[str, str] = MappingProxyType(items)

    @classmethod
    def from_mapping(cls, settings: Mapping[str, Any]) -> ConfigSource:
        return cls(settings)

    # Mapping protocol

    def __getitem__(self, key: str) -> str:
        return self._settings[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._settings)

    def __len__(self) -> int:
        return len(self._settings)

    def __repr__(self) -> str:
        return f"ConfigSource({dict(self._settings)!r})"

    # Typed accessors

    @overload
    def get(self, key: str) -> str | None: ...

    @overload
    def get(self, key: str, default: str) -> str: ...

    def get(self, key: str, default: str | None = None) -> str | None:
        """Return the value for ``key``, or ``default`` when it is absent."""
        return self._settings.get(key, default)

    def get_boolean(self, key: str, default: bool = False) -> bool:
        """Return ``key`` parsed as a boolean.

        Accepts ``true``/``false`` in any case, with surrounding whitespace.

        Raises:
            ConfigValueError: If the value is present but not a boolean.
        """
        raw = self._settings.get(key)
        if raw is None:
            return default
        normalized = raw.strip().lower()
        if normalized == _TRUE:
            return True
        if normalized == _FALSE:
            return False
        raise ConfigValueError(key, raw, "true or false")

    def get_prefixed(self, prefix: str) -> dict[str, str]:
        """Return every setting under ``prefix`` keyed by its suffix.

        Entries are ordered by suffix so that identical sources always
        produce identical results.
        """
        return {
            key[len(prefix) :]: value
            for key, value in sorted(self._settings.items())
            if key.startswith(prefix) and len(key) > len(prefix)
        }

    def with_overrides(self, overrides: Mapping[str, Any]) -> ConfigSource:
        """Return a new source with ``overrides`` layered on top."""
        merged: dict[str, Any] = dict(self._settings)
        merged.update(overrides)
        return ConfigSource(merged)
