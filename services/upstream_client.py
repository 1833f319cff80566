"""
Upstream HTTP Client

Issues single GET requests against the upstream service and hands back the
raw outcome. Non-2xx statuses are returned, not raised; only network-level
failures raise. Redirects are not followed: a 3xx is returned like any other
non-2xx status so the credential header never reaches another host.
"""
import logging
from typing import Optional

import httpx

from models.upstream import CanonicalError, ErrorKind, GatewayError, UpstreamCallResult
from services.response_normalizer import decode_text, parse_body

logger = logging.getLogger(__name__)


class UpstreamClient:
    """
    Thin async wrapper around httpx for upstream GETs.

    Use as an async context manager; one instance serves one pipeline run.
    """

    def __init__(
        self,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout = timeout
        self.transport = transport
        self.client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self):
        self.client = httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            transport=self.transport,
            follow_redirects=False,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self.client:
            await self.client.aclose()
            self.client = None

    async def call(
        self,
        url: str,
        credential: str,
        *,
        params: Optional[dict] = None,
        credential_header: str = "Authorization",
        credential_prefix: str = "Bearer ",
    ) -> UpstreamCallResult:
        """
        Perform one no-cache GET.

        Args:
            url: Absolute upstream URL
            credential: Upstream credential, sent only as a header
            params: Optional query parameters
            credential_header: Header that carries the credential
            credential_prefix: Prefix placed before the credential value

        Returns:
            UpstreamCallResult for any HTTP status

        Raises:
            GatewayError: TransportError (503) on network failure or timeout
        """
        if self.client is None:
            raise RuntimeError("UpstreamClient must be used as an async context manager")

        headers = {
            credential_header: f"{credential_prefix}{credential}",
            "Accept": "application/json",
            "Cache-Control": "no-store",
        }

        logger.info(f"Upstream GET: url={url}, params={params}")

        try:
            response = await self.client.get(url, params=params, headers=headers)
        except httpx.TimeoutException as e:
            logger.error(f"Upstream timeout: url={url}, error={type(e).__name__}")
            raise GatewayError(CanonicalError(
                kind=ErrorKind.TRANSPORT,
                http_status=503,
                message="Service Unavailable: Timed out while contacting external API.",
                details={"message": str(e) or "Upstream request timed out", "type": type(e).__name__},
            )) from e
        except httpx.HTTPError as e:
            logger.error(f"Upstream transport failure: url={url}, error={type(e).__name__}: {e}")
            raise GatewayError(CanonicalError(
                kind=ErrorKind.TRANSPORT,
                http_status=503,
                message="Service Unavailable: Internal server error while contacting external API.",
                details={"message": str(e), "type": type(e).__name__},
            )) from e

        raw_body = decode_text(response.content)
        result = UpstreamCallResult(
            ok=response.is_success,
            status=response.status_code,
            raw_body=raw_body,
            parsed_body=parse_body(raw_body),
            status_text=response.reason_phrase or "",
            content_type=response.headers.get("content-type"),
        )

        logger.info(
            f"Upstream response: url={url}, status={result.status}, "
            f"body_length={len(raw_body)}, parsed={result.parsed_body is not None}"
        )
        return result
