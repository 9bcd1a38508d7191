"""HTTP client for the share service.

A single ``attempt`` issues one lookup for a share and classifies the
response into a retrieval outcome. It never retries and never swallows
errors; deciding what to do next is the orchestrator's job.
"""

from __future__ import annotations

import logging

import httpx

from itemshare.crypto import ItemDecryptor, JweItemDecryptor
from itemshare.dates import date_from_golang
from itemshare.errors import (
    MalformedResponseError,
    ShareTransportError,
    UnclassifiedServerError,
)
from itemshare.models import (
    OUTCOMES_BY_REASON,
    DerivedAccess,
    IdentityToken,
    ItemShareResponse,
    RetrievalOutcome,
    ShareMetadata,
    Success,
)

logger = logging.getLogger(__name__)


DEFAULT_BASE_URL = "https://share.1password.com"
SHARE_PATH = "/api/v1/share/{uuid}"

# Proves the caller holds the share secret
SHARE_TOKEN_HEADER = "OP-Share-Token"
# Proves the caller controls an email address
IDENTITY_HEADER = "Authorization"


class ShareClient:
    """Fetches and classifies item shares.

    Usage:
        async with ShareClient(base_url) as client:
            outcome = await client.attempt(access, token)
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        user_agent: str | None = None,
        decryptor: ItemDecryptor | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.user_agent = user_agent
        self.decryptor = decryptor or JweItemDecryptor()
        self._owns_http_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=timeout)

    async def __aenter__(self) -> ShareClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_http_client:
            await self._http.aclose()

    def share_url(self, resource_id: str) -> str:
        return self.base_url + SHARE_PATH.format(uuid=resource_id)

    def build_headers(self, access: DerivedAccess, token: IdentityToken | None = None) -> dict[str, str]:
        headers = {SHARE_TOKEN_HEADER: access.possession_token}
        if token is not None:
            headers[IDENTITY_HEADER] = token.token
        if self.user_agent:
            headers["User-Agent"] = self.user_agent
        return headers

    async def attempt(
        self,
        access: DerivedAccess,
        token: IdentityToken | None = None,
    ) -> RetrievalOutcome:
        """Request the share once and classify the result.

        Args:
            access: Parameters derived from the share secret.
            token: Optional identity proof for recipient-restricted shares.

        Returns:
            One of the RetrievalOutcome variants.

        Raises:
            ShareTransportError: The request could not be completed.
            UnclassifiedServerError: The server failed for an unknown reason.
            MalformedResponseError: The success body could not be parsed.
            DecryptionError: The payload could not be decrypted.
        """
        uuid = access.resource_id

        try:
            response = await self._http.get(
                self.share_url(uuid),
                headers=self.build_headers(access, token),
                timeout=self.timeout,
            )
        except httpx.HTTPError as e:
            logger.error(f"Failed to get shared item {uuid}: {e}")
            raise ShareTransportError(f"Request for share {uuid} failed: {e}") from e

        if not response.is_success:
            return self._classify_error(uuid, response)

        try:
            share = ItemShareResponse.from_json(response.json())
        except ValueError as e:
            raise MalformedResponseError(f"Share response is not JSON: {e}") from e

        item = self.decryptor.decrypt(share, access.symmetric_key)

        return Success(
            resource_id=uuid,
            item=item,
            metadata=ShareMetadata(
                max_views=share.max_views,
                expires_at=date_from_golang(share.expires_at),
                account_name=share.account_name,
                account_type=share.account_type or "",
                can_join_team=share.can_join_team,
                template=share.template,
            ),
        )

    def _classify_error(self, uuid: str, response: httpx.Response) -> RetrievalOutcome:
        """Map a failed response to an outcome, or raise if it is unknown."""
        try:
            body = response.json()
        except ValueError:
            body = None

        reason = body.get("reason") if isinstance(body, dict) else None
        logger.error(f"Failed to get shared item {uuid}: {response.status_code} {response.text}")

        outcome_cls = OUTCOMES_BY_REASON.get(reason) if isinstance(reason, str) else None
        if outcome_cls is None:
            raise UnclassifiedServerError(response.status_code, reason, response.text)
        return outcome_cls(resource_id=uuid)
