"""Decryption of shared item payloads.

The share service returns the item's overview and details as JWE-style JSON
objects::

    {"kid": "...", "enc": "A256GCM", "cty": "b5+jwk+json",
     "iv": "<base64url>", "data": "<base64url ciphertext + tag>"}

Both are encrypted with the symmetric key derived from the share secret.
"""

import base64
import binascii
import json
import os
from abc import ABC, abstractmethod
from typing import Any

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from itemshare.errors import DecryptionError
from itemshare.models import ItemShareResponse, VaultItem


SUPPORTED_ENC = "A256GCM"
CONTENT_TYPE = "b5+jwk+json"
NONCE_SIZE = 12
KEY_SIZE = 32


class ItemDecryptor(ABC):
    """Interface for decrypting a share response into an item."""

    @abstractmethod
    def decrypt(self, share: ItemShareResponse, key: bytes) -> VaultItem:
        """Decrypt the encrypted fields of ``share``.

        Raises:
            DecryptionError: If the payload cannot be decrypted.
        """
        pass


class JweItemDecryptor(ItemDecryptor):
    """Decrypts A256GCM JWE blobs."""

    def decrypt(self, share: ItemShareResponse, key: bytes) -> VaultItem:
        overview = decrypt_json(share.enc_overview, key)
        details = decrypt_json(share.enc_details, key)

        return VaultItem(
            uuid=share.uuid,
            template_uuid=share.template_uuid,
            overview=overview,
            details=details,
        )


def decrypt_json(jwe: dict[str, Any], key: bytes) -> dict[str, Any]:
    """Decrypt one JWE blob and parse its plaintext as a JSON object."""
    if len(key) != KEY_SIZE:
        raise DecryptionError(f"Expected a {KEY_SIZE}-byte key, got {len(key)}")

    enc = jwe.get("enc")
    if enc != SUPPORTED_ENC:
        raise DecryptionError(f"Unsupported encryption: {enc!r}")

    try:
        iv = _b64decode(jwe["iv"])
        data = _b64decode(jwe["data"])
    except (KeyError, TypeError, ValueError, binascii.Error) as e:
        raise DecryptionError(f"Malformed encrypted payload: {e}") from e

    try:
        plaintext = AESGCM(key).decrypt(iv, data, None)
    except (InvalidTag, ValueError) as e:
        raise DecryptionError("Payload failed authentication") from e

    try:
        payload = json.loads(plaintext)
    except ValueError as e:
        raise DecryptionError("Decrypted payload is not JSON") from e

    if not isinstance(payload, dict):
        raise DecryptionError("Decrypted payload is not a JSON object")
    return payload


def encrypt_json(payload: dict[str, Any], key: bytes, kid: str = "") -> dict[str, Any]:
    """Encrypt a JSON object into a JWE blob readable by ``decrypt_json``."""
    iv = os.urandom(NONCE_SIZE)
    plaintext = json.dumps(payload, separators=(",", ":")).encode("utf-8")
    data = AESGCM(key).encrypt(iv, plaintext, None)

    return {
        "kid": kid,
        "enc": SUPPORTED_ENC,
        "cty": CONTENT_TYPE,
        "iv": _b64encode(iv),
        "data": _b64encode(data),
    }


def _b64decode(value: str) -> bytes:
    return base64.urlsafe_b64decode(value + "=" * (-len(value) % 4))


def _b64encode(value: bytes) -> str:
    return base64.urlsafe_b64encode(value).decode("ascii").rstrip("=")
