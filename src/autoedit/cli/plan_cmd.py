"""autoedit plan: retention plan for a video (no render)."""

from __future__ import annotations

import json
from pathlib import Path

import click

from autoedit.cli.options import (
    AGGRESSIVENESS,
    config_or_exit,
    tools_or_exit,
    transcript_or_exit,
)
from autoedit.utils.io import write_json
from autoedit.utils.progress import log_error, log_success


@click.command()
@click.argument("video", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--transcript", "-t",
    default=None,
    type=click.Path(exists=True, dir_okay=False),
    help="Transcript JSON",
)
@click.option(
    "--aggressiveness", "-a",
    default=None,
    type=click.Choice(AGGRESSIVENESS),
    help="How much to cut",
)
@click.option(
    "--output", "-o",
    default=None,
    type=click.Path(dir_okay=False),
    help="Write the plan here instead of stdout",
)
@click.option(
    "--config", "-c", "config_path",
    default=None,
    type=click.Path(dir_okay=False),
    help="Path to autoedit.yaml",
)
def plan_cmd(
    video: str,
    transcript: str | None,
    aggressiveness: str | None,
    output: str | None,
    config_path: str | None,
) -> None:
    """Compute a retention plan for VIDEO."""
    tools = tools_or_exit()
    config = config_or_exit(config_path)
    segments = transcript_or_exit(transcript)

    from autoedit.editing.retention import build_retention_plan
    from autoedit.editing.silence import detect_silence_intervals
    from autoedit.utils.ffprobe import probe_media

    try:
        info = probe_media(video, tools=tools)
        silence = detect_silence_intervals(
            video, tools=tools, config=config.retention.silence
        )
        plan = build_retention_plan(
            info.duration_seconds,
            segments,
            silence,
            aggressiveness=aggressiveness,
            config=config.retention,
        )
    except Exception as e:
        log_error(f"Plan failed: {e}")
        raise SystemExit(1)

    data = plan.model_dump(mode="json")
    if output:
        write_json(Path(output), data)
        log_success(f"Plan written to {output}")
    else:
        click.echo(json.dumps(data, indent=2))
