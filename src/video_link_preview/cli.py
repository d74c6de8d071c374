"""Command-line interface for video-link-preview."""

import sys
from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError

from .config import Settings, SettingsStore
from .exceptions import SettingsValidationError
from .logging import setup_logging

app = typer.Typer(
    name="vlp",
    help="Video Link Preview - enrich video links in rendered notes with titles and thumbnails",
    add_completion=False,
)

SettingsFileOption = Annotated[
    Path | None,
    typer.Option("--settings", help="Settings file (default: ~/.vlp/settings.json)"),
]


def _load_settings(store: SettingsStore) -> Settings:
    try:
        return store.load()
    except ValidationError as e:
        typer.echo(f"❌ Configuration error: {e}", err=True)
        raise typer.Exit(1) from e


def _mask_key(key: str) -> str:
    if not key:
        return "(not set)"
    if len(key) <= 8:
        return "*" * len(key)
    return f"{key[:4]}{'*' * (len(key) - 8)}{key[-4:]}"


@app.command()
def enrich(
    source: Annotated[
        str,
        typer.Argument(help="Rendered HTML file to enrich, or '-' for stdin"),
    ],
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write result here (default: stdout)"),
    ] = None,
    mode: Annotated[
        str,
        typer.Option("--mode", "-m", help="Link discovery: anchors (hyperlinks) or text (bare URLs)"),
    ] = "anchors",
    thumbnail: Annotated[
        bool | None,
        typer.Option("--thumbnail/--no-thumbnail", help="Override the thumbnail setting"),
    ] = None,
    channel_icon: Annotated[
        bool | None,
        typer.Option("--channel-icon/--no-channel-icon", help="Override the channel icon setting"),
    ] = None,
    settings_file: SettingsFileOption = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Enable verbose logging"),
    ] = False,
) -> None:
    """Replace video links in rendered content with preview cards.

    Each recognized YouTube link is looked up once; links whose metadata
    cannot be fetched are left untouched.

    Examples:
        vlp enrich note.html -o note.enriched.html
        vlp enrich - --mode text < export.html
        vlp enrich note.html --no-channel-icon
    """
    from .pipeline import EnrichmentPipeline

    if mode not in ("anchors", "text"):
        typer.echo(f"❌ Unknown mode '{mode}'. Use 'anchors' or 'text'.", err=True)
        raise typer.Exit(1)

    settings = _load_settings(SettingsStore(settings_file))

    setup_logging(verbose, settings.log_file)

    # Overrides apply to this run only and are never persisted
    if thumbnail is not None:
        settings.show_thumbnail = thumbnail
    if channel_icon is not None:
        settings.show_channel_icon = channel_icon

    if settings.show_channel_icon and not settings.youtube_api_key:
        typer.echo("⚠️  Channel icons are on but no API key is set; icons will be skipped.", err=True)

    if source == "-":
        content = sys.stdin.read()
    else:
        source_path = Path(source)
        if not source_path.is_file():
            typer.echo(f"❌ File not found: {source}", err=True)
            raise typer.Exit(1)
        content = source_path.read_text(encoding="utf-8")

    pipeline = EnrichmentPipeline(settings, mode=mode)  # type: ignore[arg-type]
    result = pipeline.enrich(content)

    if output:
        output.write_text(result.content, encoding="utf-8")
        typer.echo(
            f"✅ Replaced {result.replaced}/{result.recognized} video link(s) → {output}",
            err=True,
        )
    else:
        typer.echo(result.content, nl=False)


# =============================================================================
# Config Command Group
# =============================================================================

config_app = typer.Typer(
    name="config",
    help="View and change preview settings",
)
app.add_typer(config_app, name="config")


@config_app.command("show")
def config_show(settings_file: SettingsFileOption = None) -> None:
    """Show current preview settings."""
    store = SettingsStore(settings_file)
    settings = _load_settings(store)

    typer.echo(f"⚙️  Settings ({store.path})")
    typer.echo(f"   Show thumbnail:    {'on' if settings.show_thumbnail else 'off'}")
    typer.echo(f"   Show channel icon: {'on' if settings.show_channel_icon else 'off'}")

    key_desc = _mask_key(settings.youtube_api_key)
    if not settings.show_channel_icon:
        key_desc += " (unused while channel icons are off)"
    typer.echo(f"   YouTube API key:   {key_desc}")


@config_app.command("set")
def config_set(
    thumbnail: Annotated[
        bool | None,
        typer.Option("--thumbnail/--no-thumbnail", help="Display the video thumbnail"),
    ] = None,
    channel_icon: Annotated[
        bool | None,
        typer.Option(
            "--channel-icon/--no-channel-icon",
            help="Display the channel icon (requires a YouTube API key)",
        ),
    ] = None,
    api_key: Annotated[
        str | None,
        typer.Option("--api-key", help="YouTube Data API v3 key ('' to clear)"),
    ] = None,
    settings_file: SettingsFileOption = None,
) -> None:
    """Change and save preview settings.

    Examples:
        vlp config set --no-thumbnail
        vlp config set --channel-icon --api-key AIza...
        vlp config set --no-channel-icon --api-key ""
    """
    store = SettingsStore(settings_file)
    settings = _load_settings(store)

    if thumbnail is not None:
        settings.show_thumbnail = thumbnail
    if channel_icon is not None:
        settings.show_channel_icon = channel_icon
    if api_key is not None:
        settings.youtube_api_key = api_key.strip()

    try:
        path = store.save(settings)
    except SettingsValidationError as e:
        typer.echo(f"❌ Settings not saved: {e}", err=True)
        raise typer.Exit(1) from e

    typer.echo(f"✅ Settings saved to {path}")


@app.command()
def version() -> None:
    """Show version information."""
    typer.echo("video-link-preview v0.1.0")
    typer.echo("Video link enrichment for rendered notes")


if __name__ == "__main__":
    app()
