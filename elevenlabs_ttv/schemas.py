"""Pydantic request/response models for the Text to Voice API."""

import base64
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .config import DEFAULT_OUTPUT_FORMAT, OUTPUT_FORMATS


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, protected_namespaces=())


# -- requests ----------------------------------------------------------------


class DesignVoiceParameters(_Frozen):
    """Request body for Design Voice.

    ``output_format`` travels in the query string, so it is excluded from the
    JSON body.
    """

    voice_description: str = Field(..., min_length=1)
    output_format: str = Field(default=DEFAULT_OUTPUT_FORMAT, exclude=True)
    model_id: Optional[str] = Field(default=None)
    text: Optional[str] = Field(default=None, min_length=100, max_length=1000)
    auto_generate_text: Optional[bool] = Field(default=None)
    loudness: Optional[float] = Field(default=None, ge=-1.0, le=1.0)
    seed: Optional[int] = Field(default=None, ge=0, le=4294967295)
    guidance_scale: Optional[int] = Field(default=None, ge=0, le=100)
    stream_previews: Optional[bool] = Field(default=None)
    remixing_session_id: Optional[str] = Field(default=None)
    remixing_session_iteration_id: Optional[str] = Field(default=None)
    quality: Optional[float] = Field(default=None, ge=-1.0, le=1.0)
    reference_audio_base64: Optional[str] = Field(default=None)
    prompt_strength: Optional[float] = Field(default=None, ge=0.0, le=1.0)

    @field_validator("output_format")
    @classmethod
    def _known_output_format(cls, value: str) -> str:
        if value not in OUTPUT_FORMATS:
            raise ValueError(
                f"Unsupported output format: {value}. "
                f"Supported formats: {', '.join(OUTPUT_FORMATS)}"
            )
        return value

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class CreateVoiceParameters(_Frozen):
    """Request body for Create Voice."""

    voice_name: str = Field(..., min_length=1)
    voice_description: str = Field(..., min_length=1)
    generated_voice_id: str = Field(..., min_length=1)
    labels: Optional[dict[str, str]] = Field(default=None)
    played_not_selected_voice_ids: Optional[list[str]] = Field(default=None)

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


# -- design voice response ---------------------------------------------------


class DesignVoicePreview(_Frozen):
    audio_base_64: str
    generated_voice_id: str
    media_type: str
    duration_secs: float
    language: Optional[str] = None

    def audio_bytes(self) -> bytes:
        return base64.b64decode(self.audio_base_64)


class DesignVoiceResult(_Frozen):
    previews: list[DesignVoicePreview]
    text: str


# -- created voice record ----------------------------------------------------


class SeparationStatus(str, Enum):
    NOT_STARTED = "not_started"
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


class VoiceCategory(str, Enum):
    GENERATED = "generated"
    CLONED = "cloned"
    PREMADE = "premade"
    PROFESSIONAL = "professional"
    FAMOUS = "famous"
    HIGH_QUALITY = "high_quality"


class FineTuningState(str, Enum):
    NOT_STARTED = "not_started"
    QUEUED = "queued"
    FINE_TUNING = "fine_tuning"
    FINE_TUNED = "fine_tuned"
    FAILED = "failed"
    DELAYED = "delayed"


class SharingStatus(str, Enum):
    ENABLED = "enabled"
    DISABLED = "disabled"
    COPIED = "copied"
    COPIED_DISABLED = "copied_disabled"


class ReviewStatus(str, Enum):
    NOT_REQUESTED = "not_requested"
    PENDING = "pending"
    DECLINED = "declined"
    ALLOWED = "allowed"
    ALLOWED_WITH_CHANGES = "allowed_with_changes"


class ResourceType(str, Enum):
    READ = "read"
    COLLECTION = "collection"


class SafetyControl(str, Enum):
    NONE = "NONE"
    BAN = "BAN"
    CAPTCHA = "CAPTCHA"
    ENTERPRISE_BAN = "ENTERPRISE_BAN"
    ENTERPRISE_CAPTCHA = "ENTERPRISE_CAPTCHA"


class Utterance(_Frozen):
    start: float
    end: float


class Speaker(_Frozen):
    speaker_id: str
    duration_secs: float
    utterances: Optional[list[Utterance]] = None


class SpeakerSeparation(_Frozen):
    voice_id: str
    sample_id: str
    status: SeparationStatus
    speakers: Optional[dict[str, Speaker]] = None
    selected_speaker_ids: Optional[list[str]] = None


class Sample(_Frozen):
    sample_id: Optional[str] = None
    file_name: Optional[str] = None
    mime_type: Optional[str] = None
    size_bytes: Optional[int] = None
    hash: Optional[str] = None
    duration_secs: Optional[float] = None
    remove_background_noise: Optional[bool] = None
    has_isolated_audio: Optional[bool] = None
    has_isolated_audio_preview: Optional[bool] = None
    speaker_separation: Optional[SpeakerSeparation] = None
    trim_start: Optional[int] = None
    trim_end: Optional[int] = None


class Recording(_Frozen):
    recording_id: str
    mime_type: str
    size_bytes: int
    upload_date_unix: int
    transcription: str


class VerificationAttempt(_Frozen):
    text: str
    date_unix: int
    accepted: bool
    similarity: float
    levenshtein_distance: float
    recording: Optional[Recording] = None


class VerificationFile(_Frozen):
    file_id: str
    file_name: str
    mime_type: str
    size_bytes: int
    upload_date_unix: int


class ManualVerification(_Frozen):
    extra_text: str
    request_time_unix: int
    files: list[VerificationFile]


class FineTuning(_Frozen):
    is_allowed_to_fine_tune: Optional[bool] = None
    state: Optional[dict[str, FineTuningState]] = None
    verification_failures: Optional[list[str]] = None
    verification_attempts_count: Optional[int] = None
    manual_verification_requested: Optional[bool] = None
    language: Optional[str] = None
    progress: Optional[dict[str, float]] = None
    message: Optional[dict[str, str]] = None
    dataset_duration_seconds: Optional[float] = None
    verification_attempts: Optional[list[VerificationAttempt]] = None
    slice_ids: Optional[list[str]] = None
    manual_verification: Optional[ManualVerification] = None
    max_verification_attempts: Optional[int] = None
    next_max_verification_attempts_reset_unix_ms: Optional[int] = None
    finetuning_state: Optional[Any] = None


class VoiceSettings(_Frozen):
    stability: Optional[float] = None
    use_speaker_boost: Optional[bool] = None
    similarity_boost: Optional[float] = None
    style: Optional[float] = None
    speed: Optional[float] = None

    @classmethod
    def default(cls) -> "VoiceSettings":
        return cls(
            stability=0.5,
            use_speaker_boost=True,
            similarity_boost=0.5,
            style=0.0,
            speed=1.0,
        )


class ModerationCheck(_Frozen):
    date_checked_unix: Optional[int] = None
    name_value: Optional[str] = None
    name_check: Optional[bool] = None
    description_value: Optional[str] = None
    description_check: Optional[bool] = None
    sample_ids: Optional[list[str]] = None
    sample_checks: Optional[list[float]] = None
    captcha_ids: Optional[list[str]] = None
    captcha_checks: Optional[list[float]] = None


class ReaderRestriction(_Frozen):
    resource_type: ResourceType
    resource_id: str


class VoiceSharing(_Frozen):
    status: Optional[SharingStatus] = None
    history_item_sample_id: Optional[str] = None
    date_unix: Optional[int] = None
    whitelisted_emails: Optional[list[str]] = None
    public_owner_id: Optional[str] = None
    original_voice_id: Optional[str] = None
    financial_rewards_enabled: Optional[bool] = None
    free_users_allowed: Optional[bool] = None
    live_moderation_enabled: Optional[bool] = None
    rate: Optional[float] = None
    fiat_rate: Optional[float] = None
    notice_period: Optional[int] = None
    disable_at_unix: Optional[int] = None
    voice_mixing_allowed: Optional[bool] = None
    featured: Optional[bool] = None
    category: Optional[VoiceCategory] = None
    reader_app_enabled: Optional[bool] = None
    image_url: Optional[str] = None
    ban_reason: Optional[str] = None
    liked_by_count: Optional[int] = None
    cloned_by_count: Optional[int] = None
    name: Optional[str] = None
    description: Optional[str] = None
    labels: Optional[dict[str, str]] = None
    review_status: Optional[ReviewStatus] = None
    review_message: Optional[str] = None
    enabled_in_library: Optional[bool] = None
    instagram_username: Optional[str] = None
    twitter_username: Optional[str] = None
    youtube_username: Optional[str] = None
    tiktok_username: Optional[str] = None
    moderation_check: Optional[ModerationCheck] = None
    reader_restricted_on: Optional[list[ReaderRestriction]] = None


class VerifiedLanguage(_Frozen):
    language: str
    model_id: str
    accent: Optional[str] = None
    locale: Optional[str] = None
    preview_url: Optional[str] = None


class VoiceVerification(_Frozen):
    requires_verification: bool
    is_verified: bool
    verification_failures: list[str]
    verification_attempts_count: int
    language: Optional[str] = None
    verification_attempts: Optional[list[VerificationAttempt]] = None


class CreatedVoice(_Frozen):
    """The persisted voice record returned by Create Voice."""

    voice_id: str
    name: Optional[str] = None
    samples: Optional[list[Sample]] = None
    category: Optional[VoiceCategory] = None
    fine_tuning: Optional[FineTuning] = None
    labels: Optional[dict[str, str]] = None
    description: Optional[str] = None
    preview_url: Optional[str] = None
    available_for_tiers: Optional[list[str]] = None
    settings: Optional[VoiceSettings] = None
    sharing: Optional[VoiceSharing] = None
    high_quality_base_model_ids: Optional[list[str]] = None
    verified_languages: Optional[list[VerifiedLanguage]] = None
    safety_control: Optional[SafetyControl] = None
    voice_verification: Optional[VoiceVerification] = None
    permission_on_resource: Optional[str] = None
    is_owner: Optional[bool] = None
    is_legacy: Optional[bool] = None
    is_mixed: Optional[bool] = None
    favorited_at_unix: Optional[int] = None
    created_at_unix: Optional[int] = None

    def is_ready(self) -> bool:
        """True unless the voice still needs a verification it has not passed."""
        if self.voice_verification is None:
            return True
        verification = self.voice_verification
        return not verification.requires_verification or verification.is_verified

    def total_sample_duration(self) -> float:
        if not self.samples:
            return 0.0
        return sum(s.duration_secs for s in self.samples if s.duration_secs is not None)

    def is_shared(self) -> bool:
        return self.sharing is not None and self.sharing.status is SharingStatus.ENABLED
