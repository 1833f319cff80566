"""
Upstream Adapters

Two upstream conventions are in use and neither is authoritative:

- bearer_two_step: identity lookup by handle, then relations by numeric id,
  authenticated with an 'Authorization: Bearer' header.
- api_key_handle: a single relations endpoint keyed by handle, authenticated
  with an 'X-API-Key' header. No identity lookup is made.

Both sit behind the same interface so the resolution pipeline does not care
which one is configured.
"""
import logging
from abc import ABC, abstractmethod
from typing import Optional
from urllib.parse import quote

from models.upstream import CanonicalError, ErrorKind, GatewayError, UpstreamRequest

logger = logging.getLogger(__name__)


class UpstreamAdapter(ABC):
    """Base adapter: endpoint layout and credential header for one upstream."""

    name = ""
    default_base_url = ""
    requires_identity_lookup = True
    credential_header = "Authorization"
    credential_prefix = "Bearer "

    def __init__(self, base_url: Optional[str] = None):
        self.base_url = (base_url or self.default_base_url).rstrip("/")

    def identity_request(self, handle: str) -> Optional[UpstreamRequest]:
        """Identity lookup for handle; None for adapters keyed by handle."""
        return None

    @abstractmethod
    def relations_request(self, identity: str, handle: str) -> UpstreamRequest:
        ...


class BearerTwoStepAdapter(UpstreamAdapter):
    name = "bearer_two_step"
    default_base_url = "https://api.socialdata.tools"

    def identity_request(self, handle: str) -> UpstreamRequest:
        return UpstreamRequest(url=f"{self.base_url}/twitter/user/{quote(handle, safe='')}")

    def relations_request(self, identity: str, handle: str) -> UpstreamRequest:
        return UpstreamRequest(
            url=f"{self.base_url}/twitter/friends/list",
            params={"user_id": identity},
        )


class ApiKeyHandleAdapter(UpstreamAdapter):
    name = "api_key_handle"
    default_base_url = "https://api.twitterapi.io"
    requires_identity_lookup = False
    credential_header = "X-API-Key"
    credential_prefix = ""

    def relations_request(self, identity: str, handle: str) -> UpstreamRequest:
        return UpstreamRequest(
            url=f"{self.base_url}/twitter/user/followings",
            params={"userName": handle},
        )


ADAPTERS = {
    BearerTwoStepAdapter.name: BearerTwoStepAdapter,
    ApiKeyHandleAdapter.name: ApiKeyHandleAdapter,
}


def get_adapter(name: str, base_url: Optional[str] = None) -> UpstreamAdapter:
    """
    Instantiate the adapter registered under name.

    Raises:
        GatewayError: ConfigurationError (500) for an unknown adapter name
    """
    adapter_cls = ADAPTERS.get(name)
    if adapter_cls is None:
        logger.error(f"Unknown UPSTREAM_ADAPTER={name!r}, expected one of {sorted(ADAPTERS)}")
        raise GatewayError(CanonicalError(
            kind=ErrorKind.CONFIGURATION,
            http_status=500,
            message="Upstream Adapter Not Configured",
            details={
                "title": "Server Configuration Error",
                "message": (
                    f"UPSTREAM_ADAPTER must be one of {', '.join(sorted(ADAPTERS))}."
                ),
            },
        ))
    return adapter_cls(base_url=base_url)
