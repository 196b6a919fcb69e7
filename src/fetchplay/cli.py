"""Typer CLI definition for fetchplay."""

import asyncio
import logging
import tomllib
from pathlib import Path

import typer

from .config import FetchPlayConfig, generate_config, load_config
from .paths import ensure_media_dir

app = typer.Typer(help="Download and play media URLs received over TCP")

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def build_config(
    port: int,
    config_path: Path | None,
    host: str | None,
    media_dir: Path | None,
    backend: str | None,
) -> FetchPlayConfig:
    """Resolve configuration: CLI flags > env vars > config file > defaults.

    Raises:
        ValueError: If a value is invalid (bad port, bad TOML, ...)
    """
    try:
        config = load_config(config_path)
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"Invalid config file: {e}") from e

    return config.with_overrides(
        port=port, host=host, media_dir=media_dir, backend=backend
    )


@app.command()
def main(
    port: int | None = typer.Argument(None, help="TCP port to listen on"),
    host: str | None = typer.Option(
        None, "--host", help="Bind address (from config if omitted)"
    ),
    media_dir: Path | None = typer.Option(
        None, "--media-dir", help="Directory for downloaded media (from config if omitted)"
    ),
    backend: str | None = typer.Option(
        None, "-b", "--backend", help="Display backend: pygame or opencv"
    ),
    config_path: Path | None = typer.Option(
        None, "-c", "--config", help="Config file (default: XDG config dir)"
    ),
    init_config: bool = typer.Option(
        False, "--init-config", help="Write the default config file and exit"
    ),
    debug: bool = typer.Option(False, "--debug", help="Show verbose log output"),
) -> None:
    """Listen on PORT and play every media URL a client sends."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO, format=LOG_FORMAT
    )

    if init_config:
        path = generate_config(config_path)
        typer.echo(f"Config written to {path}")
        raise typer.Exit(0)

    if port is None:
        typer.echo("USAGE: fetchplay <port number>", err=True)
        raise typer.Exit(1)

    try:
        config = build_config(port, config_path, host, media_dir, backend)
    except ValueError as e:
        if debug:
            typer.echo(f"Debug - Configuration error: {e!r}", err=True)
        else:
            typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None

    try:
        ensure_media_dir(config.media.directory)
    except OSError as e:
        if debug:
            typer.echo(f"Debug - Media directory error: {e!r}", err=True)
        else:
            typer.echo(
                f"Error: Unable to create media directory {config.media.directory}",
                err=True,
            )
        raise typer.Exit(1) from None

    from .media.pipeline import MediaPipeline
    from .server import serve

    try:
        pipeline = MediaPipeline.from_config(config)
    except (KeyError, ValueError) as e:
        typer.echo(f"Error: {e.args[0] if e.args else e}", err=True)
        raise typer.Exit(1) from None

    try:
        asyncio.run(serve(config, pipeline))
    except RuntimeError as e:
        if debug:
            typer.echo(f"Debug - Server setup failed: {e!r}", err=True)
        else:
            typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None
    except KeyboardInterrupt:
        typer.echo("Server stopped by user")
