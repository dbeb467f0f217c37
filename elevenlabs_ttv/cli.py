"""CLI entrypoint for elevenlabs-ttv."""

import asyncio
import base64
import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from . import __version__
from .client import ElevenLabsTTVClient
from .config import API_KEY_ENV, MODELS, OUTPUT_FORMATS, Config, get_config_path
from .exceptions import ElevenLabsTTVError, validation_failure
from .previews import save_previews
from .schemas import CreatedVoice, DesignVoiceResult

app = typer.Typer(
    name="elevenlabs-ttv",
    help="Design and create voices with the ElevenLabs Text to Voice API",
    add_completion=False,
    no_args_is_help=True,
)
console = Console()
err_console = Console(stderr=True)

ApiKeyOption = Annotated[
    Optional[str],
    typer.Option("--api-key", envvar=API_KEY_ENV, help="ElevenLabs API key", show_default=False),
]
BaseUrlOption = Annotated[
    Optional[str],
    typer.Option("--base-url", help="Override the API base URL"),
]
ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", help="Path to config file"),
]
VerboseOption = Annotated[
    bool,
    typer.Option("--verbose", "-v", help="Log HTTP exchanges"),
]


def version_callback(value: bool) -> None:
    if value:
        console.print(f"elevenlabs-ttv version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option("--version", callback=version_callback, is_eager=True),
    ] = None,
) -> None:
    """Design and create voices with the ElevenLabs Text to Voice API."""


def parse_labels(mapping: str) -> dict[str, str]:
    result = {}
    for pair in mapping.split(","):
        pair = pair.strip()
        if not pair:
            continue
        if "=" not in pair:
            raise validation_failure(
                f"Invalid label: '{pair}'. Expected format: 'key=value'"
            )
        key, value = pair.split("=", 1)
        result[key.strip()] = value.strip()
    return result


def build_client(api_key: str, config: Config) -> ElevenLabsTTVClient:
    return ElevenLabsTTVClient.from_config(api_key, config)


def load_config(config_path: Optional[Path] = None) -> Config:
    # TOMLDecodeError and pydantic's ValidationError are both ValueErrors
    try:
        return Config.load(config_path)
    except (OSError, ValueError) as e:
        err_console.print(
            f"[red]Error:[/red] Invalid config file {config_path or get_config_path()}: {e}"
        )
        raise typer.Exit(1)


def _setup(
    api_key: Optional[str],
    base_url: Optional[str],
    config_path: Optional[Path],
    verbose: bool,
) -> tuple[str, Config]:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=err_console, show_path=False)],
        )
    if not api_key:
        err_console.print(
            f"[red]Error:[/red] No API key provided. Use --api-key or set {API_KEY_ENV}."
        )
        raise typer.Exit(1)

    config = load_config(config_path)
    if base_url:
        config = config.model_copy(update={"base_url": base_url})
    return api_key, config


async def _run_design(client: ElevenLabsTTVClient, builder_args: dict) -> DesignVoiceResult:
    async with client:
        builder = client.design_voice(builder_args.pop("voice_description"))
        for name, value in builder_args.items():
            if value is not None:
                builder = getattr(builder, name)(value)
        return await builder.execute()


async def _run_create(
    client: ElevenLabsTTVClient,
    voice_name: str,
    voice_description: str,
    generated_voice_id: str,
    labels: Optional[dict[str, str]],
    rejected: Optional[list[str]],
) -> CreatedVoice:
    async with client:
        builder = client.create_voice(voice_name, voice_description, generated_voice_id)
        if labels:
            builder = builder.labels(labels)
        if rejected:
            builder = builder.played_not_selected_voice_ids(rejected)
        return await builder.execute()


@app.command("design")
def design(
    description: Annotated[str, typer.Argument(help="Natural-language voice description")],
    text: Annotated[
        Optional[str],
        typer.Option("--text", "-t", help="Preview text (100-1000 characters)"),
    ] = None,
    file: Annotated[
        Optional[Path],
        typer.Option("--file", "-f", help="Read preview text from a file"),
    ] = None,
    model: Annotated[
        Optional[str],
        typer.Option("--model", "-m", help="Model alias (multilingual-v2, v3) or model id"),
    ] = None,
    output_format: Annotated[
        Optional[str],
        typer.Option("--output-format", help="Preview audio format, e.g. mp3_44100_128"),
    ] = None,
    auto_text: Annotated[
        Optional[bool],
        typer.Option("--auto-text/--no-auto-text", help="Let the API write the preview text"),
    ] = None,
    loudness: Annotated[
        Optional[float],
        typer.Option("--loudness", help="Volume level, -1 to 1"),
    ] = None,
    seed: Annotated[
        Optional[int],
        typer.Option("--seed", help="Best-effort deterministic sampling seed"),
    ] = None,
    guidance_scale: Annotated[
        Optional[int],
        typer.Option("--guidance-scale", help="Prompt adherence, 0 to 100"),
    ] = None,
    quality: Annotated[
        Optional[float],
        typer.Option("--quality", help="Quality versus variety, -1 to 1"),
    ] = None,
    reference_audio: Annotated[
        Optional[Path],
        typer.Option("--reference-audio", help="Reference audio file (v3 model only)"),
    ] = None,
    prompt_strength: Annotated[
        Optional[float],
        typer.Option("--prompt-strength", help="Prompt versus reference audio, 0 to 1"),
    ] = None,
    remixing_session_id: Annotated[
        Optional[str],
        typer.Option("--remixing-session-id", help="Remixing session to attach to"),
    ] = None,
    remixing_session_iteration_id: Annotated[
        Optional[str],
        typer.Option("--remixing-session-iteration-id", help="Remixing iteration to attach to"),
    ] = None,
    stream_previews: Annotated[
        bool,
        typer.Option("--stream-previews", help="Return preview ids only, without audio"),
    ] = False,
    output_dir: Annotated[
        Optional[Path],
        typer.Option("--output-dir", "-o", help="Directory for preview audio files"),
    ] = None,
    api_key: ApiKeyOption = None,
    base_url: BaseUrlOption = None,
    config_path: ConfigOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Generate voice previews from a description."""
    api_key, config = _setup(api_key, base_url, config_path, verbose)

    try:
        if file is not None:
            if not file.exists():
                err_console.print(f"[red]Error:[/red] File not found: {file}")
                raise typer.Exit(1)
            text = file.read_text(encoding="utf-8").strip()

        reference_audio_base64 = None
        if reference_audio is not None:
            if not reference_audio.exists():
                err_console.print(f"[red]Error:[/red] File not found: {reference_audio}")
                raise typer.Exit(1)
            reference_audio_base64 = base64.b64encode(reference_audio.read_bytes()).decode("ascii")

        builder_args = {
            "voice_description": description,
            "model": config.get_model_id(model),
            "output_format": output_format or config.default_output_format,
            "text": text,
            "auto_generate_text": auto_text,
            "loudness": loudness,
            "seed": seed,
            "guidance_scale": guidance_scale,
            "quality": quality,
            "reference_audio_base64": reference_audio_base64,
            "prompt_strength": prompt_strength,
            "remixing_session_id": remixing_session_id,
            "remixing_session_iteration_id": remixing_session_iteration_id,
            "stream_previews": True if stream_previews else None,
        }
        result = asyncio.run(_run_design(build_client(api_key, config), builder_args))

        target_dir = output_dir or config.default_output_dir
        try:
            saved = save_previews(result, target_dir)
        except OSError as e:
            err_console.print(f"[red]Error:[/red] Could not save previews to {target_dir}: {e}")
            raise typer.Exit(1)
        saved_by_id = {path.stem: path for path in saved}

        table = Table(title="Voice previews")
        table.add_column("Generated voice id")
        table.add_column("Duration", justify="right")
        table.add_column("Media type")
        table.add_column("Language")
        table.add_column("File")
        for preview in result.previews:
            path = saved_by_id.get(preview.generated_voice_id)
            table.add_row(
                preview.generated_voice_id,
                f"{preview.duration_secs:.1f}s",
                preview.media_type,
                preview.language or "-",
                str(path) if path else "-",
            )
        console.print(table)
        console.print(f"[bold]Preview text:[/bold] {result.text}")

    except ElevenLabsTTVError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(e.exit_code)
    except KeyboardInterrupt:
        err_console.print("\n[yellow]Interrupted[/yellow]")
        raise typer.Exit(130)


@app.command("create")
def create(
    name: Annotated[str, typer.Argument(help="Name for the new voice")],
    description: Annotated[str, typer.Argument(help="Description for the new voice")],
    generated_voice_id: Annotated[str, typer.Argument(help="Preview id from 'design'")],
    labels: Annotated[
        Optional[str],
        typer.Option("--labels", help="Voice labels (e.g., 'accent=british,age=young')"),
    ] = None,
    rejected: Annotated[
        Optional[list[str]],
        typer.Option("--rejected", help="Preview id played but not selected (repeatable)"),
    ] = None,
    api_key: ApiKeyOption = None,
    base_url: BaseUrlOption = None,
    config_path: ConfigOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Save a designed preview as a permanent voice."""
    api_key, config = _setup(api_key, base_url, config_path, verbose)

    try:
        label_map = parse_labels(labels) if labels else None
        voice = asyncio.run(
            _run_create(
                build_client(api_key, config),
                name,
                description,
                generated_voice_id,
                label_map,
                rejected,
            )
        )

        console.print(f"[green]Voice created:[/green] {voice.voice_id}")
        if voice.name:
            console.print(f"  Name: {voice.name}")
        if voice.category:
            console.print(f"  Category: {voice.category.value}")
        if not voice.is_ready():
            console.print("[yellow]Warning:[/yellow] Voice requires verification before use")

    except ElevenLabsTTVError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(e.exit_code)
    except KeyboardInterrupt:
        err_console.print("\n[yellow]Interrupted[/yellow]")
        raise typer.Exit(130)


@app.command("models")
def models() -> None:
    """List model aliases and output formats."""
    console.print("[bold]Available models:[/bold]")
    for alias, model_id in MODELS.items():
        console.print(f"  {alias}: {model_id}")

    console.print("\n[bold]Output formats:[/bold]")
    for fmt in OUTPUT_FORMATS:
        console.print(f"  {fmt}")

    config = load_config()
    console.print(f"\n[bold]Config file:[/bold] {get_config_path()}")
    console.print(f"[bold]Default model:[/bold] {config.default_model}")
    console.print(f"[bold]Default output format:[/bold] {config.default_output_format}")


if __name__ == "__main__":
    app()
