"""Async client for the ElevenLabs Text to Voice API."""

__version__ = "0.1.0"

from .builders import CreateVoiceBuilder, DesignVoiceBuilder
from .client import ElevenLabsTTVClient
from .config import ELEVEN_MULTILINGUAL_TTV_V2, ELEVEN_TTV_V3, Config
from .exceptions import ElevenLabsTTVError, ErrorKind, classify_failure
from .schemas import (
    CreatedVoice,
    CreateVoiceParameters,
    DesignVoiceParameters,
    DesignVoicePreview,
    DesignVoiceResult,
)

__all__ = [
    "__version__",
    "ElevenLabsTTVClient",
    "DesignVoiceBuilder",
    "CreateVoiceBuilder",
    "Config",
    "ELEVEN_MULTILINGUAL_TTV_V2",
    "ELEVEN_TTV_V3",
    "ElevenLabsTTVError",
    "ErrorKind",
    "classify_failure",
    "DesignVoiceParameters",
    "CreateVoiceParameters",
    "DesignVoiceResult",
    "DesignVoicePreview",
    "CreatedVoice",
]
