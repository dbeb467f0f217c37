"""End-to-end tests for the client against an in-memory transport."""

import asyncio
import json
import re

import httpx
import pytest

from elevenlabs_ttv.client import ElevenLabsTTVClient
from elevenlabs_ttv.config import DEFAULT_BASE_URL, Config
from elevenlabs_ttv.exceptions import ElevenLabsTTVError, ErrorKind
from elevenlabs_ttv.schemas import CreatedVoice, DesignVoiceResult, VoiceCategory

from .conftest import (
    CREATED_VOICE_RESPONSE,
    DESIGN_RESPONSE,
    TEST_BASE_URL,
    json_response,
    text_response,
)


class TestClientConstruction:
    def test_default_base_url(self):
        client = ElevenLabsTTVClient("k")
        assert client.base_url == DEFAULT_BASE_URL

    def test_trailing_slash_stripped(self):
        client = ElevenLabsTTVClient("k", "https://example.test/v1/")
        assert client.base_url == "https://example.test/v1"

    def test_from_config(self):
        config = Config(base_url="https://enterprise.test/v1", timeout=30)
        client = ElevenLabsTTVClient.from_config("k", config)
        assert client.base_url == "https://enterprise.test/v1"

    @pytest.mark.asyncio
    async def test_injected_http_client_left_open(self):
        http_client = httpx.AsyncClient()
        async with ElevenLabsTTVClient("k", http_client=http_client):
            pass
        assert not http_client.is_closed
        await http_client.aclose()


class TestDesignVoice:
    @pytest.mark.asyncio
    async def test_default_request(self, make_client):
        client, transport = make_client(json_response(DESIGN_RESPONSE))

        result = await client.design_voice("X").execute()

        request = transport.requests[0]
        assert request.method == "POST"
        assert request.url.path == "/v1/text-to-voice/design"
        assert request.url.params["output_format"] == "mp3_44100_128"
        assert request.headers["xi-api-key"] == "k"
        assert request.headers["content-type"] == "application/json"
        assert transport.last_json == {
            "voice_description": "X",
            "model_id": "eleven_multilingual_ttv_v2",
            "loudness": 0.5,
            "guidance_scale": 5,
            "stream_previews": False,
            "auto_generate_text": True,
        }
        assert isinstance(result, DesignVoiceResult)

    @pytest.mark.asyncio
    async def test_guidance_scale_sent_as_integer(self, make_client):
        client, transport = make_client(json_response(DESIGN_RESPONSE))

        await client.design_voice("X").execute()
        await client.design_voice("X").guidance_scale(20).execute()

        default_body, explicit_body = (r.content.decode() for r in transport.requests)
        assert re.search(r'"guidance_scale":\s*5[,}]', default_body)
        assert re.search(r'"guidance_scale":\s*20[,}]', explicit_body)
        assert "5.0" not in default_body
        assert "20.0" not in explicit_body
        assert type(json.loads(default_body)["guidance_scale"]) is int

    @pytest.mark.asyncio
    async def test_response_decoded(self, make_client):
        client, _ = make_client(json_response(DESIGN_RESPONSE))

        result = await client.design_voice("X").execute()

        assert [p.generated_voice_id for p in result.previews] == ["gen-1", "gen-2"]
        assert result.previews[0].language == "en"
        assert result.previews[1].language is None
        assert result.previews[0].duration_secs == 4.2
        assert result.previews[0].audio_bytes().startswith(b"ID3")
        assert result.text == DESIGN_RESPONSE["text"]

    @pytest.mark.asyncio
    async def test_output_format_in_query(self, make_client):
        client, transport = make_client(json_response(DESIGN_RESPONSE))

        await client.design_voice("X").output_format("pcm_16000").execute()

        assert transport.requests[0].url.params["output_format"] == "pcm_16000"
        assert "output_format" not in transport.last_json

    @pytest.mark.asyncio
    async def test_validation_happens_before_network(self, make_client):
        client, transport = make_client(json_response(DESIGN_RESPONSE))

        with pytest.raises(ElevenLabsTTVError) as exc_info:
            await client.design_voice("X").loudness(3.0).execute()

        assert exc_info.value.kind is ErrorKind.VALIDATION
        assert transport.requests == []

    @pytest.mark.asyncio
    async def test_rate_limited_without_retry_after(self, make_client):
        client, _ = make_client(text_response("Too many requests", 429))

        with pytest.raises(ElevenLabsTTVError) as exc_info:
            await client.design_voice("X").execute()

        error = exc_info.value
        assert error.kind is ErrorKind.RATE_LIMITED
        assert error.retry_after is None
        assert error.message == "Too many requests"

    @pytest.mark.asyncio
    async def test_rate_limited_with_retry_after(self, make_client):
        client, _ = make_client(
            text_response("Too many requests", 429, headers={"Retry-After": "17"})
        )

        with pytest.raises(ElevenLabsTTVError) as exc_info:
            await client.design_voice("X").execute()

        assert exc_info.value.retry_after == 17

    @pytest.mark.asyncio
    async def test_unauthorized(self, make_client):
        client, _ = make_client(text_response('{"detail":"invalid_api_key"}', 401))

        with pytest.raises(ElevenLabsTTVError) as exc_info:
            await client.design_voice("X").execute()

        assert exc_info.value.kind is ErrorKind.AUTHENTICATION

    @pytest.mark.asyncio
    async def test_quota_exceeded(self, make_client):
        client, _ = make_client(text_response("", 402))

        with pytest.raises(ElevenLabsTTVError) as exc_info:
            await client.design_voice("X").execute()

        assert exc_info.value.kind is ErrorKind.QUOTA_EXCEEDED

    @pytest.mark.asyncio
    async def test_server_error_carries_body(self, make_client):
        client, _ = make_client(text_response("upstream exploded", 500))

        with pytest.raises(ElevenLabsTTVError) as exc_info:
            await client.design_voice("X").execute()

        assert exc_info.value.kind is ErrorKind.API
        assert exc_info.value.status == 500
        assert exc_info.value.message == "upstream exploded"

    @pytest.mark.asyncio
    async def test_undecodable_body_is_parse_failure(self, make_client):
        client, _ = make_client(json_response({"previews": "not-a-list"}))

        with pytest.raises(ElevenLabsTTVError) as exc_info:
            await client.design_voice("X").execute()

        error = exc_info.value
        assert error.kind is ErrorKind.PARSE
        assert error.status is None
        assert error.__cause__ is not None

    @pytest.mark.asyncio
    async def test_non_json_body_is_parse_failure(self, make_client):
        client, _ = make_client(text_response("<html>ok</html>", 200))

        with pytest.raises(ElevenLabsTTVError) as exc_info:
            await client.design_voice("X").execute()

        assert exc_info.value.kind is ErrorKind.PARSE

    @pytest.mark.asyncio
    async def test_connection_error_is_request_failure(self, make_client):
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client, _ = make_client(refuse)

        with pytest.raises(ElevenLabsTTVError) as exc_info:
            await client.design_voice("X").execute()

        error = exc_info.value
        assert error.kind is ErrorKind.REQUEST
        assert isinstance(error.__cause__, httpx.ConnectError)


class TestCreateVoice:
    @pytest.mark.asyncio
    async def test_request_without_labels(self, make_client):
        client, transport = make_client(json_response(CREATED_VOICE_RESPONSE))

        await client.create_voice("Elina", "Warm voice", "abc123").execute()

        request = transport.requests[0]
        assert str(request.url) == f"{TEST_BASE_URL}/text-to-voice"
        assert request.headers["xi-api-key"] == "k"
        body = transport.last_json
        assert body["generated_voice_id"] == "abc123"
        assert "labels" not in body
        assert "played_not_selected_voice_ids" not in body

    @pytest.mark.asyncio
    async def test_request_with_labels(self, make_client):
        client, transport = make_client(json_response(CREATED_VOICE_RESPONSE))

        await (
            client.create_voice("Elina", "Warm voice", "abc123")
            .labels({"accent": "american"})
            .played_not_selected_voice_ids(["gen-2"])
            .execute()
        )

        body = transport.last_json
        assert body["labels"] == {"accent": "american"}
        assert body["played_not_selected_voice_ids"] == ["gen-2"]

    @pytest.mark.asyncio
    async def test_response_decoded(self, make_client):
        client, _ = make_client(json_response(CREATED_VOICE_RESPONSE))

        voice = await client.create_voice("Elina", "Warm voice", "abc123").execute()

        assert isinstance(voice, CreatedVoice)
        assert voice.voice_id == "voice-123"
        assert voice.category is VoiceCategory.GENERATED
        assert voice.is_shared()
        assert voice.is_ready()

    @pytest.mark.asyncio
    async def test_missing_voice_id_is_parse_failure(self, make_client):
        client, _ = make_client(json_response({"name": "Elina"}))

        with pytest.raises(ElevenLabsTTVError) as exc_info:
            await client.create_voice("Elina", "Warm voice", "abc123").execute()

        assert exc_info.value.kind is ErrorKind.PARSE


class TestConcurrentCalls:
    @pytest.mark.asyncio
    async def test_independent_calls_share_client(self, make_client):
        client, transport = make_client(json_response(DESIGN_RESPONSE))

        results = await asyncio.gather(
            client.design_voice("A").execute(),
            client.design_voice("B").seed(1).execute(),
        )

        assert len(results) == 2
        descriptions = sorted(json.loads(r.content)["voice_description"] for r in transport.requests)
        assert descriptions == ["A", "B"]
