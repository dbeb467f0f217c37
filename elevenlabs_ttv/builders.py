"""Request builders for Design Voice and Create Voice.

Builders are immutable: every setter returns a new builder holding a copy of
the options with one field changed. ``build()`` turns the options into the
request model, applying defaults, and ``execute()`` sends it.
"""

import logging
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Optional

from pydantic import ValidationError

from .config import DEFAULT_MODEL_ID, DEFAULT_OUTPUT_FORMAT, ELEVEN_TTV_V3
from .exceptions import validation_failure
from .schemas import (
    CreatedVoice,
    CreateVoiceParameters,
    DesignVoiceParameters,
    DesignVoiceResult,
)

if TYPE_CHECKING:
    from .client import ElevenLabsTTVClient

logger = logging.getLogger(__name__)

DEFAULT_LOUDNESS = 0.5
DEFAULT_GUIDANCE_SCALE = 5
DEFAULT_STREAM_PREVIEWS = False


@dataclass(frozen=True)
class DesignVoiceOptions:
    voice_description: str
    output_format: Optional[str] = None
    model_id: Optional[str] = None
    text: Optional[str] = None
    auto_generate_text: Optional[bool] = None
    loudness: Optional[float] = None
    seed: Optional[int] = None
    guidance_scale: Optional[int] = None
    stream_previews: Optional[bool] = None
    remixing_session_id: Optional[str] = None
    remixing_session_iteration_id: Optional[str] = None
    quality: Optional[float] = None
    reference_audio_base64: Optional[str] = None
    prompt_strength: Optional[float] = None


@dataclass(frozen=True)
class CreateVoiceOptions:
    voice_name: str
    voice_description: str
    generated_voice_id: str
    labels: Optional[dict[str, str]] = None
    played_not_selected_voice_ids: Optional[tuple[str, ...]] = None


def _or_default(value, default):
    return default if value is None else value


def finalize_design_voice(options: DesignVoiceOptions) -> DesignVoiceParameters:
    """Apply Design Voice defaults and validate the result.

    Explicit values always win. ``auto_generate_text`` defaults to true only
    when no preview text was given, so a request always carries either text
    or an instruction to generate it.

    Raises:
        ElevenLabsTTVError: VALIDATION kind if a field is out of range
    """
    auto_generate_text = options.auto_generate_text
    if auto_generate_text is None and options.text is None:
        auto_generate_text = True

    model_id = _or_default(options.model_id, DEFAULT_MODEL_ID)
    if model_id != ELEVEN_TTV_V3 and (
        options.reference_audio_base64 is not None or options.prompt_strength is not None
    ):
        logger.warning(
            "reference_audio_base64/prompt_strength are only supported by %s; "
            "the API may reject this request for model %s",
            ELEVEN_TTV_V3,
            model_id,
        )

    try:
        return DesignVoiceParameters(
            voice_description=options.voice_description,
            output_format=_or_default(options.output_format, DEFAULT_OUTPUT_FORMAT),
            model_id=model_id,
            text=options.text,
            auto_generate_text=auto_generate_text,
            loudness=_or_default(options.loudness, DEFAULT_LOUDNESS),
            seed=options.seed,
            guidance_scale=_or_default(options.guidance_scale, DEFAULT_GUIDANCE_SCALE),
            stream_previews=_or_default(options.stream_previews, DEFAULT_STREAM_PREVIEWS),
            remixing_session_id=options.remixing_session_id,
            remixing_session_iteration_id=options.remixing_session_iteration_id,
            quality=options.quality,
            reference_audio_base64=options.reference_audio_base64,
            prompt_strength=options.prompt_strength,
        )
    except ValidationError as e:
        raise validation_failure(str(e)) from e


def finalize_create_voice(options: CreateVoiceOptions) -> CreateVoiceParameters:
    ids = options.played_not_selected_voice_ids
    try:
        return CreateVoiceParameters(
            voice_name=options.voice_name,
            voice_description=options.voice_description,
            generated_voice_id=options.generated_voice_id,
            labels=options.labels,
            played_not_selected_voice_ids=list(ids) if ids is not None else None,
        )
    except ValidationError as e:
        raise validation_failure(str(e)) from e


class DesignVoiceBuilder:
    """Fluent configuration for a Design Voice call."""

    def __init__(self, client: "ElevenLabsTTVClient", options: DesignVoiceOptions):
        self._client = client
        self._options = options

    @property
    def options(self) -> DesignVoiceOptions:
        return self._options

    def _with(self, **changes) -> "DesignVoiceBuilder":
        return DesignVoiceBuilder(self._client, replace(self._options, **changes))

    def output_format(self, output_format: str) -> "DesignVoiceBuilder":
        return self._with(output_format=output_format)

    def text(self, text: str) -> "DesignVoiceBuilder":
        return self._with(text=text)

    def model(self, model_id: str) -> "DesignVoiceBuilder":
        return self._with(model_id=model_id)

    def auto_generate_text(self, auto_generate_text: bool) -> "DesignVoiceBuilder":
        return self._with(auto_generate_text=auto_generate_text)

    def loudness(self, loudness: float) -> "DesignVoiceBuilder":
        return self._with(loudness=loudness)

    def seed(self, seed: int) -> "DesignVoiceBuilder":
        return self._with(seed=seed)

    def guidance_scale(self, guidance_scale: int) -> "DesignVoiceBuilder":
        return self._with(guidance_scale=guidance_scale)

    def stream_previews(self, stream_previews: bool) -> "DesignVoiceBuilder":
        return self._with(stream_previews=stream_previews)

    def remixing_session_id(self, remixing_session_id: str) -> "DesignVoiceBuilder":
        return self._with(remixing_session_id=remixing_session_id)

    def remixing_session_iteration_id(self, iteration_id: str) -> "DesignVoiceBuilder":
        return self._with(remixing_session_iteration_id=iteration_id)

    def quality(self, quality: float) -> "DesignVoiceBuilder":
        return self._with(quality=quality)

    def reference_audio_base64(self, reference_audio_base64: str) -> "DesignVoiceBuilder":
        return self._with(reference_audio_base64=reference_audio_base64)

    def prompt_strength(self, prompt_strength: float) -> "DesignVoiceBuilder":
        return self._with(prompt_strength=prompt_strength)

    def build(self) -> DesignVoiceParameters:
        return finalize_design_voice(self._options)

    async def execute(self) -> DesignVoiceResult:
        return await self._client.send_design_voice(self.build())


class CreateVoiceBuilder:
    """Fluent configuration for a Create Voice call."""

    def __init__(self, client: "ElevenLabsTTVClient", options: CreateVoiceOptions):
        self._client = client
        self._options = options

    @property
    def options(self) -> CreateVoiceOptions:
        return self._options

    def labels(self, labels: dict[str, str]) -> "CreateVoiceBuilder":
        return CreateVoiceBuilder(self._client, replace(self._options, labels=dict(labels)))

    def played_not_selected_voice_ids(self, voice_ids: list[str]) -> "CreateVoiceBuilder":
        return CreateVoiceBuilder(
            self._client,
            replace(self._options, played_not_selected_voice_ids=tuple(voice_ids)),
        )

    def build(self) -> CreateVoiceParameters:
        return finalize_create_voice(self._options)

    async def execute(self) -> CreatedVoice:
        return await self._client.send_create_voice(self.build())
