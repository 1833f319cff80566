"""
Upstream Configuration

Reads the upstream credential and adapter settings from the environment.
Values are read on every call so that an operator fixing the environment
does not need to restart the process, and tests can patch os.environ.
"""

import os
import logging
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_ADAPTER = "bearer_two_step"
DEFAULT_TIMEOUT_SECONDS = 10.0

# Checked in order; the first non-empty value wins
CREDENTIAL_ENV_VARS = ["UPSTREAM_API_KEY", "SOCIALDATA_API_KEY"]


@dataclass(frozen=True)
class UpstreamSettings:
    """
    Process-wide upstream configuration.

    Attributes:
        credential: Upstream API credential, None when not configured
        adapter: Name of the upstream adapter to use
        base_url: Optional override for the adapter's default base URL
        timeout_seconds: Per-call timeout applied to every upstream GET
    """
    credential: Optional[str]
    adapter: str = DEFAULT_ADAPTER
    base_url: Optional[str] = None
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS

    @property
    def credential_configured(self) -> bool:
        return bool(self.credential)


def load_upstream_settings() -> UpstreamSettings:
    """
    Build UpstreamSettings from environment variables.

    Returns:
        UpstreamSettings; credential is None when no credential variable is set
    """
    credential = None
    for var in CREDENTIAL_ENV_VARS:
        value = os.getenv(var, "").strip()
        if value:
            credential = value
            break

    adapter = os.getenv("UPSTREAM_ADAPTER", "").strip() or DEFAULT_ADAPTER
    base_url = os.getenv("UPSTREAM_BASE_URL", "").strip() or None

    raw_timeout = os.getenv("UPSTREAM_TIMEOUT_SECONDS")
    timeout_seconds = DEFAULT_TIMEOUT_SECONDS
    if raw_timeout:
        try:
            timeout_seconds = float(raw_timeout)
        except ValueError:
            logger.warning(
                f"Invalid UPSTREAM_TIMEOUT_SECONDS={raw_timeout!r}, "
                f"using default {DEFAULT_TIMEOUT_SECONDS}"
            )
        else:
            if timeout_seconds <= 0:
                logger.warning(
                    f"UPSTREAM_TIMEOUT_SECONDS must be positive, "
                    f"using default {DEFAULT_TIMEOUT_SECONDS}"
                )
                timeout_seconds = DEFAULT_TIMEOUT_SECONDS

    return UpstreamSettings(
        credential=credential,
        adapter=adapter,
        base_url=base_url,
        timeout_seconds=timeout_seconds,
    )
