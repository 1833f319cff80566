"""Resolution pipeline: handle -> numeric identifier -> followed handles.

One pipeline instance serves one request. The two upstream calls are strictly
sequential and each is attempted at most once; the first failure ends the run
with a GatewayError and discards anything resolved so far.
"""
import enum
import logging
from typing import List, Optional

from models.upstream import (
    CanonicalError,
    ErrorKind,
    GatewayError,
    UpstreamCallResult,
    UpstreamRequest,
)
from services.error_classifier import (
    classify_failure,
    classify_unusable_success,
    error_details,
    schema_error,
)
from services.response_normalizer import preview_payload
from services.shape_extractor import extract_handles, extract_identifier, parse_relations
from services.upstream_adapters import UpstreamAdapter
from services.upstream_client import UpstreamClient

logger = logging.getLogger(__name__)


class PipelineState(str, enum.Enum):
    INIT = "init"
    LOOKUP_IDENTITY = "lookup_identity"
    RESOLVE_RELATIONS = "resolve_relations"
    DONE = "done"
    FAILED = "failed"


def missing_credential_error() -> CanonicalError:
    return CanonicalError(
        kind=ErrorKind.CONFIGURATION,
        http_status=500,
        message="API Key Not Configured",
        details={
            "title": "Server Configuration Error",
            "message": (
                "The upstream API key is missing from the server's environment "
                "variables. Set UPSTREAM_API_KEY (or SOCIALDATA_API_KEY) so the "
                "application can authenticate with the external service."
            ),
        },
    )


class ResolutionPipeline:
    """Runs INIT -> LOOKUP_IDENTITY -> RESOLVE_RELATIONS -> DONE for one handle.

    Any failure moves the pipeline to FAILED; `error` then holds the
    CanonicalError that was raised.
    """

    def __init__(
        self,
        client: UpstreamClient,
        adapter: UpstreamAdapter,
        credential: Optional[str],
        request_id: str = "",
    ):
        self.client = client
        self.adapter = adapter
        self.credential = credential
        self.request_id = request_id
        self.state = PipelineState.INIT
        self.error: Optional[CanonicalError] = None

    async def resolve(self, handle: str) -> List[str]:
        """
        Resolve handle to the ordered list of handles it follows.

        Raises:
            GatewayError: on configuration, upstream or transport failure
        """
        if self.state is not PipelineState.INIT:
            raise RuntimeError(f"Pipeline already ran: state={self.state.value}")

        try:
            if not self.credential:
                logger.error(
                    f"Upstream credential is not set: request_id={self.request_id}"
                )
                raise GatewayError(missing_credential_error())

            self._enter(PipelineState.LOOKUP_IDENTITY)
            identity = await self._lookup_identity(handle)

            self._enter(PipelineState.RESOLVE_RELATIONS)
            followings = await self._resolve_relations(identity, handle)
        except GatewayError as e:
            self.error = e.error
            self._enter(PipelineState.FAILED)
            logger.warning(
                f"Resolution failed: request_id={self.request_id}, handle={handle}, "
                f"kind={e.kind.value}, status={e.http_status}"
            )
            raise

        self._enter(PipelineState.DONE)
        return followings

    async def _lookup_identity(self, handle: str) -> str:
        if not self.adapter.requires_identity_lookup:
            logger.info(
                f"Adapter keys relations by handle, skipping identity lookup: "
                f"request_id={self.request_id}, adapter={self.adapter.name}"
            )
            return handle

        result = await self._call(self.adapter.identity_request(handle))

        if not result.ok:
            if result.status == 404:
                logger.warning(
                    f"Handle not found upstream: request_id={self.request_id}, handle={handle}"
                )
                raise GatewayError(CanonicalError(
                    kind=ErrorKind.HANDLE_NOT_FOUND,
                    http_status=404,
                    message=f'User "{handle}" not found.',
                    details=error_details(result),
                ))
            raise GatewayError(classify_failure(result, context="identity_lookup"))

        if result.parsed_body is None:
            raise GatewayError(classify_unusable_success(result, context="identity_lookup"))

        identity = extract_identifier(result.parsed_body)
        if not identity:
            logger.warning(
                f"Identity payload has no identifier: request_id={self.request_id}, "
                f"handle={handle}"
            )
            raise GatewayError(schema_error(
                "Bad Gateway: Upstream API did not return a user identifier.",
                {
                    "message": (
                        "The identity lookup succeeded but no id_str or id field "
                        "was found in the response."
                    ),
                    "receivedData": preview_payload(result.parsed_body),
                },
            ))

        logger.info(
            f"Identity resolved: request_id={self.request_id}, handle={handle}, id={identity}"
        )
        return identity

    async def _resolve_relations(self, identity: str, handle: str) -> List[str]:
        result = await self._call(self.adapter.relations_request(identity, handle))

        if not result.ok:
            raise GatewayError(classify_failure(result, context="relations_fetch"))

        if result.parsed_body is None:
            raise GatewayError(classify_unusable_success(result, context="relations_fetch"))

        relations = parse_relations(result.parsed_body)
        if not relations.recognized:
            logger.warning(
                f"Unexpected data structure from external API: request_id={self.request_id}, "
                f"expected an array at the root or under data/users/data.users"
            )
            raise GatewayError(schema_error(
                "Bad Gateway: Upstream API response has unexpected structure.",
                {
                    "message": (
                        "The list of followings could not be extracted due to an "
                        "unexpected data format from the external service."
                    ),
                    "receivedData": preview_payload(result.parsed_body),
                },
            ))

        return extract_handles(relations, context=f"request_id={self.request_id}")

    async def _call(self, request: UpstreamRequest) -> UpstreamCallResult:
        return await self.client.call(
            request.url,
            self.credential,
            params=request.params,
            credential_header=self.adapter.credential_header,
            credential_prefix=self.adapter.credential_prefix,
        )

    def _enter(self, state: PipelineState) -> None:
        logger.debug(
            f"Pipeline transition: request_id={self.request_id}, "
            f"{self.state.value} -> {state.value}"
        )
        self.state = state
