"""Retrieval of securely shared items."""

__version__ = "0.1.0"

from itemshare.client import ShareClient
from itemshare.errors import (
    DecryptionError,
    DerivationError,
    MalformedResponseError,
    ShareError,
    ShareTransportError,
    UnclassifiedServerError,
)
from itemshare.models import (
    DerivedAccess,
    Expired,
    IdentityToken,
    MaxViewsExceeded,
    NotFound,
    OutcomeType,
    RetrievalOutcome,
    ShareMetadata,
    Success,
    Unauthorized,
    VaultItem,
)
from itemshare.orchestrator import SharedItemRetriever, get_shared_item

__all__ = [
    "ShareClient",
    "SharedItemRetriever",
    "get_shared_item",
    "DerivedAccess",
    "IdentityToken",
    "VaultItem",
    "ShareMetadata",
    "OutcomeType",
    "RetrievalOutcome",
    "Success",
    "Unauthorized",
    "MaxViewsExceeded",
    "Expired",
    "NotFound",
    "ShareError",
    "DerivationError",
    "ShareTransportError",
    "MalformedResponseError",
    "DecryptionError",
    "UnclassifiedServerError",
]
