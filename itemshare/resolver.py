"""Derivation of access parameters from a share secret."""

import base64
import re
from abc import ABC, abstractmethod

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

from itemshare.errors import DerivationError
from itemshare.models import DerivedAccess


MIN_SECRET_BYTES = 16

# HKDF info labels, one per derived value
KDF_INFO_UUID = b"itemshare-share-uuid"
KDF_INFO_TOKEN = b"itemshare-share-token"
KDF_INFO_KEY = b"itemshare-share-key"

_BASE64URL = re.compile(r"^[A-Za-z0-9_-]+$")


class ShareSecretResolver(ABC):
    """Interface for turning a share secret into access parameters."""

    @abstractmethod
    def derive(self, share_secret: str) -> DerivedAccess:
        """Derive the resource id, possession token and symmetric key.

        Raises:
            DerivationError: If the secret is not usable.
        """
        pass


class HkdfShareSecretResolver(ShareSecretResolver):
    """Derives access parameters with HKDF-SHA256.

    The share secret is unpadded base64url. Each derived value uses its own
    info label, so the possession token reveals nothing about the key.
    """

    def derive(self, share_secret: str) -> DerivedAccess:
        ikm = decode_share_secret(share_secret)

        uuid_bytes = _hkdf(ikm, KDF_INFO_UUID, 16)
        token_bytes = _hkdf(ikm, KDF_INFO_TOKEN, 32)
        key = _hkdf(ikm, KDF_INFO_KEY, 32)

        return DerivedAccess(
            resource_id=base64.b32encode(uuid_bytes).decode("ascii").rstrip("=").lower(),
            possession_token=base64.urlsafe_b64encode(token_bytes).decode("ascii").rstrip("="),
            symmetric_key=key,
        )


def decode_share_secret(share_secret: str) -> bytes:
    """Decode an unpadded base64url share secret."""
    secret = (share_secret or "").strip()
    if not secret:
        raise DerivationError("Share secret is empty")
    if not _BASE64URL.match(secret):
        raise DerivationError("Share secret is not base64url")

    try:
        raw = base64.urlsafe_b64decode(secret + "=" * (-len(secret) % 4))
    except ValueError as e:
        raise DerivationError(f"Could not decode share secret: {e}") from e

    if len(raw) < MIN_SECRET_BYTES:
        raise DerivationError(f"Share secret too short ({len(raw)} bytes, need {MIN_SECRET_BYTES})")
    return raw


def _hkdf(ikm: bytes, info: bytes, length: int) -> bytes:
    return HKDF(
        algorithm=hashes.SHA256(),
        length=length,
        salt=None,
        info=info,
    ).derive(ikm)
