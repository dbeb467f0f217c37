"""Writing Design Voice previews to disk."""

from pathlib import Path

from .schemas import DesignVoicePreview, DesignVoiceResult

MEDIA_TYPE_EXTENSIONS = {
    "audio/mpeg": "mp3",
    "audio/mp3": "mp3",
    "audio/wav": "wav",
    "audio/x-wav": "wav",
    "audio/pcm": "pcm",
    "audio/basic": "ulaw",
    "audio/ogg": "ogg",
    "audio/opus": "opus",
}


def preview_extension(media_type: str) -> str:
    base = media_type.split(";", 1)[0].strip().lower()
    if base in MEDIA_TYPE_EXTENSIONS:
        return MEDIA_TYPE_EXTENSIONS[base]
    if base.startswith("audio/"):
        return base[len("audio/"):]
    return "bin"


def save_preview(preview: DesignVoicePreview, output_dir: Path) -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / f"{preview.generated_voice_id}.{preview_extension(preview.media_type)}"
    path.write_bytes(preview.audio_bytes())
    return path


def save_previews(result: DesignVoiceResult, output_dir: Path) -> list[Path]:
    """Decode every preview and write it as ``<generated_voice_id>.<ext>``.

    Previews requested with ``stream_previews`` carry no audio and are skipped.
    """
    return [save_preview(p, output_dir) for p in result.previews if p.audio_base_64]
