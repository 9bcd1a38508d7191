"""Tests for share secret derivation and payload decryption."""

import base64

import pytest

from itemshare.crypto import JweItemDecryptor, decrypt_json, encrypt_json
from itemshare.errors import DecryptionError, DerivationError
from itemshare.models import ItemShareResponse
from itemshare.resolver import HkdfShareSecretResolver


SECRET = base64.urlsafe_b64encode(bytes(range(32))).decode().rstrip("=")


class TestResolver:

    def test_derive_is_deterministic(self):
        resolver = HkdfShareSecretResolver()

        first = resolver.derive(SECRET)
        second = resolver.derive(SECRET)

        assert first == second

    def test_derived_shapes(self):
        access = HkdfShareSecretResolver().derive(SECRET)

        assert len(access.resource_id) == 26
        assert access.resource_id == access.resource_id.lower()
        assert len(access.symmetric_key) == 32
        assert access.possession_token
        assert access.symmetric_key.hex() not in repr(access)

    def test_values_are_independent(self):
        access = HkdfShareSecretResolver().derive(SECRET)
        token_bytes = base64.urlsafe_b64decode(access.possession_token + "=")

        assert token_bytes != access.symmetric_key

    def test_different_secrets_differ(self):
        resolver = HkdfShareSecretResolver()
        other = base64.urlsafe_b64encode(bytes(range(1, 33))).decode().rstrip("=")

        assert resolver.derive(SECRET).resource_id != resolver.derive(other).resource_id

    @pytest.mark.parametrize("secret", ["", "   ", "not base64!", "c2hvcnQ"])
    def test_rejects_unusable_secrets(self, secret):
        with pytest.raises(DerivationError):
            HkdfShareSecretResolver().derive(secret)


class TestDecryptor:

    def test_round_trip(self):
        key = bytes(32)
        share = ItemShareResponse(
            uuid="u1",
            template_uuid="001",
            enc_overview=encrypt_json({"title": "Bank"}, key),
            enc_details=encrypt_json({"notesPlain": "pin 1234"}, key),
        )

        item = JweItemDecryptor().decrypt(share, key)

        assert item.uuid == "u1"
        assert item.overview == {"title": "Bank"}
        assert item.details == {"notesPlain": "pin 1234"}

    def test_tampered_data_fails(self):
        key = bytes(32)
        jwe = encrypt_json({"title": "Bank"}, key)
        data = bytearray(base64.urlsafe_b64decode(jwe["data"] + "=" * (-len(jwe["data"]) % 4)))
        data[0] ^= 1
        jwe["data"] = base64.urlsafe_b64encode(bytes(data)).decode().rstrip("=")

        with pytest.raises(DecryptionError):
            decrypt_json(jwe, key)

    def test_unsupported_enc(self):
        key = bytes(32)
        jwe = encrypt_json({"title": "Bank"}, key)
        jwe["enc"] = "A128CBC-HS256"

        with pytest.raises(DecryptionError):
            decrypt_json(jwe, key)

    def test_missing_iv(self):
        key = bytes(32)
        jwe = encrypt_json({"title": "Bank"}, key)
        del jwe["iv"]

        with pytest.raises(DecryptionError):
            decrypt_json(jwe, key)

    def test_wrong_key_length(self):
        with pytest.raises(DecryptionError):
            decrypt_json(encrypt_json({}, bytes(32)), bytes(16))
