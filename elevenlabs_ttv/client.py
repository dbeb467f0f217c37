"""Async HTTP client for the ElevenLabs Text to Voice endpoints."""

import logging
from typing import Any, Optional, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from .builders import (
    CreateVoiceBuilder,
    CreateVoiceOptions,
    DesignVoiceBuilder,
    DesignVoiceOptions,
)
from .config import DEFAULT_BASE_URL, Config
from .exceptions import classify_failure, parse_failure, request_failure
from .schemas import (
    CreatedVoice,
    CreateVoiceParameters,
    DesignVoiceParameters,
    DesignVoiceResult,
)

logger = logging.getLogger(__name__)

DESIGN_VOICE_PATH = "/text-to-voice/design"
CREATE_VOICE_PATH = "/text-to-voice"

ResponseT = TypeVar("ResponseT", bound=BaseModel)


class ElevenLabsTTVClient:
    """Client for Design Voice and Create Voice.

    The client holds no per-call state, so one instance can serve concurrent
    calls. Pass ``http_client`` to share a connection pool or to plug in a
    test transport; a client passed in is never closed by this class.

    Example:
        async with ElevenLabsTTVClient(api_key) as client:
            result = await client.design_voice("Calm narrator, deep voice").execute()
            voice = await client.create_voice(
                "Narrator", "Calm narrator, deep voice",
                result.previews[0].generated_voice_id,
            ).execute()
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        *,
        timeout: Optional[float] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._owns_http_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=timeout)

    @classmethod
    def from_config(
        cls,
        api_key: str,
        config: Config,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> "ElevenLabsTTVClient":
        return cls(
            api_key,
            config.base_url,
            timeout=config.timeout,
            http_client=http_client,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    async def aclose(self) -> None:
        if self._owns_http_client:
            await self._http.aclose()

    async def __aenter__(self) -> "ElevenLabsTTVClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    def design_voice(self, voice_description: str) -> DesignVoiceBuilder:
        """Start building a Design Voice request."""
        return DesignVoiceBuilder(self, DesignVoiceOptions(voice_description=voice_description))

    def create_voice(
        self,
        voice_name: str,
        voice_description: str,
        generated_voice_id: str,
    ) -> CreateVoiceBuilder:
        """Start building a Create Voice request."""
        return CreateVoiceBuilder(
            self,
            CreateVoiceOptions(
                voice_name=voice_name,
                voice_description=voice_description,
                generated_voice_id=generated_voice_id,
            ),
        )

    async def send_design_voice(self, params: DesignVoiceParameters) -> DesignVoiceResult:
        return await self._post(
            DESIGN_VOICE_PATH,
            params.to_payload(),
            DesignVoiceResult,
            query={"output_format": params.output_format},
        )

    async def send_create_voice(self, params: CreateVoiceParameters) -> CreatedVoice:
        return await self._post(CREATE_VOICE_PATH, params.to_payload(), CreatedVoice)

    async def _post(
        self,
        path: str,
        payload: dict[str, Any],
        response_model: type[ResponseT],
        query: Optional[dict[str, str]] = None,
    ) -> ResponseT:
        url = f"{self._base_url}{path}"
        headers = {
            "xi-api-key": self._api_key,
            "Content-Type": "application/json",
        }

        logger.debug("POST %s fields=%s", url, sorted(payload))
        try:
            response = await self._http.post(url, params=query, json=payload, headers=headers)
        except httpx.RequestError as e:
            raise request_failure(e) from e

        logger.debug("POST %s -> %d (%d bytes)", url, response.status_code, len(response.content))

        if not response.is_success:
            raise classify_failure(
                response.status_code,
                response.text,
                response.headers.get("retry-after"),
            )

        try:
            return response_model.model_validate_json(response.content)
        except ValidationError as e:
            raise parse_failure(e) from e
