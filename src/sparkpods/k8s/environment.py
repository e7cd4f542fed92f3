"""In-cluster environment detection."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from sparkpods._constants import SERVICE_ACCOUNT_TOKEN_PATH

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EnvironmentProbe:
    """Detects whether this process runs inside the target cluster.

    Kubernetes mounts a service-account token into every pod, so the token
    file existing is the in-cluster marker. The probe performs a single
    existence check and nothing else; callers run it once and pass the
    result down.
    """

    token_path: Path = Path(SERVICE_ACCOUNT_TOKEN_PATH)

    def probe(self) -> bool:
        in_cluster = self.token_path.exists()
        logger.debug(
            "Service account token %s %s", self.token_path, "found" if in_cluster else "absent"
        )
        return in_cluster
