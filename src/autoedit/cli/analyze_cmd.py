"""autoedit analyze: build an EDL for a video."""

from __future__ import annotations

from pathlib import Path

import click

from autoedit.cli.options import (
    AGGRESSIVENESS,
    config_or_exit,
    tools_or_exit,
    transcript_or_exit,
)
from autoedit.utils.progress import log_error


@click.command()
@click.argument("video", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--transcript", "-t",
    default=None,
    type=click.Path(exists=True, dir_okay=False),
    help="Transcript JSON ({\"segments\": [...]})",
)
@click.option(
    "--aggressiveness", "-a",
    default=None,
    type=click.Choice(AGGRESSIVENESS),
    help="How much to cut (default from config: high)",
)
@click.option(
    "--output-dir", "-o",
    default="out",
    type=click.Path(file_okay=False),
    help="Directory for edl.json and analysis.json",
)
@click.option(
    "--config", "-c", "config_path",
    default=None,
    type=click.Path(dir_okay=False),
    help="Path to autoedit.yaml",
)
def analyze_cmd(
    video: str,
    transcript: str | None,
    aggressiveness: str | None,
    output_dir: str,
    config_path: str | None,
) -> None:
    """Analyze VIDEO and write edl.json and analysis.json."""
    tools = tools_or_exit()
    config = config_or_exit(config_path)
    segments = transcript_or_exit(transcript)

    from autoedit.editing.module import analyze_video

    try:
        analyze_video(
            Path(video),
            Path(output_dir),
            transcript=segments,
            tools=tools,
            config=config,
            aggressiveness=aggressiveness,
        )
    except Exception as e:
        log_error(f"Analyze failed: {e}")
        raise SystemExit(1)
