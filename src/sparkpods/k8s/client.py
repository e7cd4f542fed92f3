"""Kubernetes client construction from a resolved access descriptor."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from kubernetes import client

from sparkpods.config import ConfigSource, keys

from .access import ClientAccessDescriptor, ConfigurationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClientCredentials:
    """Credential sources for the API client.

    File paths come from the mounted auth settings, falling back to the
    service-account files named by the access descriptor.
    """

    oauth_token: str | None
    oauth_token_file: str | None
    ca_cert_file: str | None
    client_key_file: str | None
    client_cert_file: str | None


def resolve_credentials(access: ClientAccessDescriptor, config: ConfigSource) -> ClientCredentials:
    """Resolve client credentials under the descriptor's auth prefix.

    Raises:
        ConfigurationError: If both an inline token and a token file are set.
    """
    prefix = access.auth_prefix

    def setting(suffix: str) -> str | None:
        return config.get(f"{prefix}.{suffix}")

    oauth_token = setting(keys.OAUTH_TOKEN_CONF_SUFFIX)
    oauth_token_file = setting(keys.OAUTH_TOKEN_FILE_CONF_SUFFIX)
    if oauth_token and oauth_token_file:
        raise ConfigurationError(
            f"Cannot specify both {prefix}.{keys.OAUTH_TOKEN_CONF_SUFFIX} and "
            f"{prefix}.{keys.OAUTH_TOKEN_FILE_CONF_SUFFIX}"
        )

    return ClientCredentials(
        oauth_token=oauth_token,
        oauth_token_file=None if oauth_token else (oauth_token_file or access.token_file),
        ca_cert_file=setting(keys.CA_CERT_FILE_CONF_SUFFIX) or access.ca_cert_file,
        client_key_file=setting(keys.CLIENT_KEY_FILE_CONF_SUFFIX),
        client_cert_file=setting(keys.CLIENT_CERT_FILE_CONF_SUFFIX),
    )


def _existing(path: str | None) -> str | None:
    """Return ``path`` if it names an existing file, else None."""
    if path and Path(path).is_file():
        return path
    if path:
        logger.debug("Credential file %s not present", path)
    return None


def build_configuration(
    access: ClientAccessDescriptor, config: ConfigSource
) -> client.Configuration:
    """Build a kubernetes-client Configuration for ``access``."""
    creds = resolve_credentials(access, config)

    cfg = client.Configuration()
    cfg.host = access.endpoint

    token = creds.oauth_token
    token_file = _existing(creds.oauth_token_file)
    if token is None and token_file:
        token = Path(token_file).read_text().strip()
    if token:
        cfg.api_key = {"authorization": token}
        cfg.api_key_prefix = {"authorization": "Bearer"}

    cfg.ssl_ca_cert = _existing(creds.ca_cert_file)
    cfg.cert_file = _existing(creds.client_cert_file)
    cfg.key_file = _existing(creds.client_key_file)
    return cfg


def create_api_client(access: ClientAccessDescriptor, config: ConfigSource) -> client.ApiClient:
    """Create an ApiClient bound to the selected control plane."""
    return client.ApiClient(configuration=build_configuration(access, config))

