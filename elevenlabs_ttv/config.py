"""Configuration loading and management."""

import os
import sys
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

ELEVEN_MULTILINGUAL_TTV_V2 = "eleven_multilingual_ttv_v2"
ELEVEN_TTV_V3 = "eleven_ttv_v3"

MODELS = {
    "multilingual-v2": ELEVEN_MULTILINGUAL_TTV_V2,
    "v3": ELEVEN_TTV_V3,
}

DEFAULT_MODEL = "multilingual-v2"
DEFAULT_MODEL_ID = MODELS[DEFAULT_MODEL]

# codec_samplerate_bitrate
OUTPUT_FORMATS = (
    "mp3_22050_32",
    "mp3_44100_32",
    "mp3_44100_64",
    "mp3_44100_96",
    "mp3_44100_128",
    "mp3_44100_192",
    "pcm_8000",
    "pcm_16000",
    "pcm_22050",
    "pcm_24000",
    "pcm_44100",
    "pcm_48000",
    "ulaw_8000",
    "alaw_8000",
    "opus_48000_32",
    "opus_48000_64",
    "opus_48000_96",
)

DEFAULT_OUTPUT_FORMAT = "mp3_44100_128"
DEFAULT_BASE_URL = "https://api.elevenlabs.io/v1"
API_KEY_ENV = "ELEVENLABS_API_KEY"


def get_config_dir() -> Path:
    if sys.platform == "win32":
        base = Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming"))
    else:
        base = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    return base / "elevenlabs-ttv"


def get_config_path() -> Path:
    return get_config_dir() / "config.toml"


class Config(BaseModel):
    base_url: str = Field(default=DEFAULT_BASE_URL)
    default_model: str = Field(default=DEFAULT_MODEL)
    default_output_format: str = Field(default=DEFAULT_OUTPUT_FORMAT)
    default_output_dir: Path = Field(default_factory=Path.cwd)
    timeout: Optional[float] = Field(default=None, gt=0)  # None waits indefinitely

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Config":
        path = config_path or get_config_path()
        if not path.exists():
            return cls()

        try:
            import tomllib
        except ImportError:
            import tomli as tomllib  # type: ignore[import-not-found]

        with open(path, "rb") as f:
            data = tomllib.load(f)

        return cls(**data)

    def get_model_id(self, model_name: Optional[str] = None) -> str:
        name = model_name or self.default_model
        if name in MODELS:
            return MODELS[name]
        return name
