"""Core data models for item shares."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, ClassVar, Union

from itemshare.errors import MalformedResponseError


class OutcomeType(Enum):
    """Kind of outcome returned by a retrieval."""
    SUCCESS = "success"
    UNAUTHORIZED = "unauthorized"
    MAX_VIEWS = "max_views"
    EXPIRED = "expired"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class DerivedAccess:
    """Parameters derived from a share secret.

    Computed once per retrieval and shared by every attempt in it.
    The symmetric key never leaves the process.
    """
    resource_id: str
    possession_token: str
    symmetric_key: bytes = field(repr=False)


@dataclass(frozen=True)
class IdentityToken:
    """A bearer token proving control of an account or email address."""
    token: str = field(repr=False)
    email: str | None = None


@dataclass
class VaultItem:
    """A decrypted shared item."""
    uuid: str
    template_uuid: str
    overview: dict[str, Any] = field(default_factory=dict)
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def title(self) -> str:
        return self.overview.get("title", "")

    def to_dict(self) -> dict[str, Any]:
        return {
            "uuid": self.uuid,
            "template_uuid": self.template_uuid,
            "overview": self.overview,
            "details": self.details,
        }


@dataclass
class ShareMetadata:
    """Descriptive metadata that accompanies a successful retrieval."""
    max_views: int | None = None
    expires_at: datetime | None = None
    account_name: str | None = None
    account_type: str = ""
    can_join_team: bool = False
    template: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "max_views": self.max_views,
            "expires_at": self.expires_at.isoformat() if self.expires_at else None,
            "account_name": self.account_name,
            "account_type": self.account_type,
            "can_join_team": self.can_join_team,
            "template": self.template,
        }


@dataclass
class ItemShareResponse:
    """Body of a successful share lookup, before decryption."""
    uuid: str
    template_uuid: str
    enc_overview: dict[str, Any]
    enc_details: dict[str, Any]
    max_views: int | None = None
    expires_at: str | None = None
    can_join_team: bool = False
    template: dict[str, Any] | None = None
    account_name: str | None = None
    account_type: str | None = None

    @classmethod
    def from_json(cls, data: Any) -> "ItemShareResponse":
        """Build from the decoded JSON body.

        Raises:
            MalformedResponseError: If required fields are missing or mistyped.
        """
        if not isinstance(data, dict):
            raise MalformedResponseError(f"Expected a JSON object, got {type(data).__name__}")

        try:
            uuid = data["uuid"]
            template_uuid = data["templateUuid"]
            enc_overview = data["encOverview"]
            enc_details = data["encDetails"]
        except KeyError as e:
            raise MalformedResponseError(f"Share response missing field: {e.args[0]}") from e

        if not isinstance(enc_overview, dict) or not isinstance(enc_details, dict):
            raise MalformedResponseError("Encrypted overview and details must be JSON objects")
        if not isinstance(uuid, str) or not isinstance(template_uuid, str):
            raise MalformedResponseError("uuid and templateUuid must be strings")

        can_join_team = data.get("canJoinTeam", False)
        if not isinstance(can_join_team, bool):
            raise MalformedResponseError(f"Invalid canJoinTeam: {can_join_team!r}")

        return cls(
            uuid=uuid,
            template_uuid=template_uuid,
            enc_overview=enc_overview,
            enc_details=enc_details,
            max_views=_optional(data, "maxViews", int),
            expires_at=_optional(data, "expiresAt", str),
            can_join_team=can_join_team,
            template=_optional(data, "template", dict),
            account_name=_optional(data, "accountName", str),
            account_type=_optional(data, "accountType", str),
        )


def _optional(data: dict[str, Any], key: str, kind: type) -> Any:
    """Return ``data[key]`` if absent/null or of ``kind``, else raise."""
    value = data.get(key)
    if value is None:
        return None
    # bool is an int subclass
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise MalformedResponseError(f"Invalid {key}: {value!r}")
    return value


# =============================================================================
# Retrieval outcomes
# =============================================================================


@dataclass(frozen=True)
class Success:
    """The item was retrieved and decrypted."""
    outcome_type: ClassVar[OutcomeType] = OutcomeType.SUCCESS

    resource_id: str
    item: VaultItem
    metadata: ShareMetadata


@dataclass(frozen=True)
class Unauthorized:
    """The supplied identity (or lack of one) may not view the share."""
    outcome_type: ClassVar[OutcomeType] = OutcomeType.UNAUTHORIZED

    resource_id: str


@dataclass(frozen=True)
class MaxViewsExceeded:
    """The share has been viewed as many times as it allows."""
    outcome_type: ClassVar[OutcomeType] = OutcomeType.MAX_VIEWS

    resource_id: str


@dataclass(frozen=True)
class Expired:
    """The share is past its expiry."""
    outcome_type: ClassVar[OutcomeType] = OutcomeType.EXPIRED

    resource_id: str


@dataclass(frozen=True)
class NotFound:
    """No share exists for the resource id."""
    outcome_type: ClassVar[OutcomeType] = OutcomeType.NOT_FOUND

    resource_id: str


RetrievalOutcome = Union[Success, Unauthorized, MaxViewsExceeded, Expired, NotFound]

# Server error reasons that classify into an outcome rather than an error
OUTCOMES_BY_REASON: dict[str, type[Unauthorized | MaxViewsExceeded | Expired | NotFound]] = {
    OutcomeType.UNAUTHORIZED.value: Unauthorized,
    OutcomeType.MAX_VIEWS.value: MaxViewsExceeded,
    OutcomeType.EXPIRED.value: Expired,
    OutcomeType.NOT_FOUND.value: NotFound,
}


def outcome_to_dict(outcome: RetrievalOutcome) -> dict[str, Any]:
    """Serialize an outcome for JSON output."""
    data: dict[str, Any] = {
        "type": outcome.outcome_type.value,
        "uuid": outcome.resource_id,
    }
    if isinstance(outcome, Success):
        data["item"] = outcome.item.to_dict()
        data["metadata"] = outcome.metadata.to_dict()
    return data
