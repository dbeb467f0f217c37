"""Shared fixtures: a client wired to an in-memory HTTP transport."""

import json
from typing import Callable

import httpx
import pytest

from elevenlabs_ttv.client import ElevenLabsTTVClient

TEST_BASE_URL = "https://api.test.local/v1"

DESIGN_RESPONSE = {
    "previews": [
        {
            "audio_base_64": "SUQzBAAAAAAA",
            "generated_voice_id": "gen-1",
            "media_type": "audio/mpeg",
            "duration_secs": 4.2,
            "language": "en",
        },
        {
            "audio_base_64": "SUQzBAAAAAAB",
            "generated_voice_id": "gen-2",
            "media_type": "audio/mpeg",
            "duration_secs": 3.9,
        },
    ],
    "text": "Hello there, this is the text the previews were generated from.",
}

CREATED_VOICE_RESPONSE = {
    "voice_id": "voice-123",
    "name": "Elina",
    "category": "generated",
    "labels": {"accent": "american"},
    "samples": [
        {"sample_id": "s1", "duration_secs": 2.5},
        {"sample_id": "s2", "duration_secs": 1.5},
        {"sample_id": "s3"},
    ],
    "sharing": {"status": "enabled", "liked_by_count": 3},
    "voice_verification": {
        "requires_verification": False,
        "is_verified": False,
        "verification_failures": [],
        "verification_attempts_count": 0,
    },
    "is_owner": True,
    "created_at_unix": 1760000000,
}


class RecordingTransport:
    """Collects every request and answers with a fixed handler."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.handler = handler
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    @property
    def last_json(self) -> dict:
        return json.loads(self.requests[-1].content)


def json_response(body, status_code: int = 200, headers=None) -> Callable:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, json=body, headers=headers)

    return handler


def text_response(body: str, status_code: int, headers=None) -> Callable:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, text=body, headers=headers)

    return handler


@pytest.fixture
def make_client():
    """Build a client whose HTTP calls go to ``handler``.

    Returns a ``(client, transport)`` pair so tests can inspect what was sent.
    """

    def _make(handler: Callable[[httpx.Request], httpx.Response]):
        transport = RecordingTransport(handler)
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(transport))
        client = ElevenLabsTTVClient("k", TEST_BASE_URL, http_client=http_client)
        return client, transport

    return _make
