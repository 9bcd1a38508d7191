"""Exceptions raised while retrieving a shared item.

Classified server outcomes (unauthorized, expired, ...) are not errors and
are returned as values; see ``itemshare.models``.
"""


class ShareError(Exception):
    """Base class for unrecoverable retrieval errors."""


class DerivationError(ShareError):
    """The share secret could not be turned into access parameters."""


class ShareTransportError(ShareError):
    """The request could not be sent or the response could not be read."""


class MalformedResponseError(ShareError):
    """A successful response had a body that could not be parsed."""


class DecryptionError(ShareError):
    """The encrypted payload could not be decrypted with the derived key."""


class UnclassifiedServerError(ShareError):
    """The server failed with a reason outside the known set."""

    def __init__(self, status_code: int, reason: str | None, body: str = ""):
        self.status_code = status_code
        self.reason = reason
        self.body = body
        super().__init__(f"Unknown error (HTTP {status_code}, reason={reason!r})")
