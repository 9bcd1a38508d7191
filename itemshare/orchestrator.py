"""Retrieval of a shared item with fallback across identity tokens.

A share may be restricted to particular recipients. The caller passes every
identity it holds, preferred first; they are tried one at a time against the
same share until one is accepted. Only ``unauthorized`` moves on to the next
identity: expiry, view limits and missing shares describe the share itself
and end the retrieval straight away.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from itemshare.client import ShareClient
from itemshare.models import IdentityToken, RetrievalOutcome, Unauthorized
from itemshare.resolver import HkdfShareSecretResolver, ShareSecretResolver

if TYPE_CHECKING:
    from itemshare.config import Config

logger = logging.getLogger(__name__)


class SharedItemRetriever:
    """Retrieves shared items, falling back across identity tokens.

    Usage:
        async with ShareClient(base_url) as client:
            retriever = SharedItemRetriever(client)
            outcome = await retriever.retrieve(share_secret, tokens)
    """

    def __init__(self, client: ShareClient, resolver: ShareSecretResolver | None = None):
        self.client = client
        self.resolver = resolver or HkdfShareSecretResolver()

    async def retrieve(
        self,
        share_secret: str,
        tokens: Sequence[IdentityToken] | None = None,
    ) -> RetrievalOutcome:
        """Retrieve the item behind ``share_secret``.

        Attempts run strictly one after another, since each may count as a
        view against the share.

        Args:
            share_secret: Secret taken from the share link.
            tokens: Identity tokens in order of preference.

        Returns:
            The outcome of the deciding attempt.

        Raises:
            DerivationError: If the share secret is unusable.
            ShareError: If the last attempt fails with an unrecoverable error.
        """
        access = self.resolver.derive(share_secret)

        if not tokens:
            logger.info(f"[SHARE] Requesting {access.resource_id} without token")
            return await self.client.attempt(access)

        total = len(tokens)
        for i, token in enumerate(tokens):
            is_last = i + 1 == total
            logger.info(f"[SHARE] Requesting {access.resource_id} with token {i + 1}/{total}")

            try:
                outcome = await self.client.attempt(access, token)
            except Exception as e:
                if is_last:
                    raise
                logger.warning(f"[SHARE] Token {i + 1}/{total} failed, trying next: {e}")
                continue

            if is_last or not isinstance(outcome, Unauthorized):
                logger.info(f"[SHARE] Returning {outcome.outcome_type.value} from token {i + 1}/{total}")
                return outcome

            logger.info(f"[SHARE] Token {i + 1}/{total} unauthorized, trying next")

        # The last token always returns or raises above
        raise AssertionError("unreachable")


def get_shared_item(
    share_secret: str,
    tokens: Sequence[IdentityToken] | None = None,
    config: Config | None = None,
) -> RetrievalOutcome:
    """Retrieve a shared item (sync wrapper).

    Args:
        share_secret: Secret taken from the share link.
        tokens: Identity tokens in order of preference.
        config: Client configuration; loaded from disk if omitted.

    Returns:
        RetrievalOutcome
    """
    if config is None:
        from itemshare.config import Config
        config = Config.load()

    async def _run() -> RetrievalOutcome:
        async with config.create_client() as client:
            return await SharedItemRetriever(client).retrieve(share_secret, tokens)

    return asyncio.run(_run())
