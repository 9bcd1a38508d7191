"""Shared fixtures for itemshare tests."""

import json

import httpx
import pytest

from itemshare.client import ShareClient
from itemshare.crypto import encrypt_json
from itemshare.models import DerivedAccess


KEY = bytes(range(32))
RESOURCE_ID = "abcdefghijklmnopqrstuvwxyz"

OVERVIEW = {"title": "Office wifi", "url": "https://example.com"}
DETAILS = {"fields": [{"name": "password", "value": "hunter2"}], "notesPlain": ""}


@pytest.fixture
def access():
    return DerivedAccess(
        resource_id=RESOURCE_ID,
        possession_token="possession-token",
        symmetric_key=KEY,
    )


def share_body(key: bytes = KEY, **overrides) -> dict:
    """Build a success body whose payload decrypts under ``key``."""
    body = {
        "uuid": RESOURCE_ID,
        "templateUuid": "001",
        "encOverview": encrypt_json(OVERVIEW, key, kid="share"),
        "encDetails": encrypt_json(DETAILS, key, kid="share"),
        "maxViews": 5,
        "expiresAt": "2026-11-01T12:30:00.123456789Z",
        "canJoinTeam": False,
        "accountName": "Acme",
        "accountType": "B",
    }
    body.update(overrides)
    return body


def error_response(status_code: int, reason: str) -> httpx.Response:
    return httpx.Response(status_code, json={"reason": reason})


class RecordingHandler:
    """Replays queued responses and records each request."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        if isinstance(response, dict):
            return httpx.Response(200, content=json.dumps(response).encode())
        return response


def make_client(handler: RecordingHandler, **kwargs) -> ShareClient:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return ShareClient(base_url="https://share.example.com", http_client=http_client, **kwargs)
