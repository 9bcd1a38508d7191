"""Configuration management for itemshare."""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from itemshare import __version__
from itemshare.client import DEFAULT_BASE_URL, ShareClient
from itemshare.crypto import ItemDecryptor


DEFAULT_CONFIG_PATH = "~/.itemshare/config.json"
DEFAULT_TIMEOUT = 30.0
DEFAULT_USER_AGENT = f"itemshare/{__version__}"


@dataclass
class Config:
    """Application configuration."""

    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def load(cls, path: str = DEFAULT_CONFIG_PATH) -> "Config":
        """Load config from a JSON file, or return defaults if not found."""
        config_path = Path(path).expanduser()

        if not config_path.exists():
            return cls()

        try:
            data = json.loads(config_path.read_text())
            return cls(
                base_url=data.get("base_url", DEFAULT_BASE_URL),
                timeout=float(data.get("timeout", DEFAULT_TIMEOUT)),
                user_agent=data.get("user_agent", DEFAULT_USER_AGENT),
                extra=data.get("extra", {}),
            )
        except (json.JSONDecodeError, AttributeError, TypeError, ValueError):
            return cls()

    def save(self, path: str = DEFAULT_CONFIG_PATH) -> None:
        """Save config to a JSON file."""
        config_path = Path(path).expanduser()
        config_path.parent.mkdir(parents=True, exist_ok=True)

        config_path.write_text(json.dumps(self.to_dict(), indent=2))

    def to_dict(self) -> dict[str, Any]:
        return {
            "base_url": self.base_url,
            "timeout": self.timeout,
            "user_agent": self.user_agent,
            "extra": self.extra,
        }

    def create_client(self, decryptor: ItemDecryptor | None = None) -> ShareClient:
        """Create a share client from this config."""
        return ShareClient(
            base_url=self.base_url,
            timeout=self.timeout,
            user_agent=self.user_agent,
            decryptor=decryptor,
        )
