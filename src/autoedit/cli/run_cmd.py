"""autoedit run: analyze and render in one go."""

from __future__ import annotations

from pathlib import Path

import click

from autoedit.cli.options import config_or_exit, tools_or_exit, transcript_or_exit
from autoedit.utils.progress import log_error


@click.command()
@click.argument("video", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--transcript", "-t",
    default=None,
    type=click.Path(exists=True, dir_okay=False),
    help="Transcript JSON",
)
@click.option(
    "--output-dir", "-o",
    default="out",
    type=click.Path(file_okay=False),
    help="Directory for all job outputs",
)
@click.option("--fast", is_flag=True, help="ultrafast preset, lower quality")
@click.option(
    "--config", "-c", "config_path",
    default=None,
    type=click.Path(dir_okay=False),
    help="Path to autoedit.yaml",
)
def run_cmd(
    video: str,
    transcript: str | None,
    output_dir: str,
    fast: bool,
    config_path: str | None,
) -> None:
    """Analyze VIDEO and render the edited cut."""
    tools = tools_or_exit()
    config = config_or_exit(config_path)
    segments = transcript_or_exit(transcript)
    if fast:
        config = config.model_copy(
            update={"render": config.render.model_copy(update={"fast_render": True})}
        )

    from autoedit.pipeline.orchestrator import run_job

    try:
        result = run_job(
            Path(video),
            Path(output_dir),
            transcript=segments,
            tools=tools,
            config=config,
        )
    except Exception as e:
        log_error(f"Job failed: {e}")
        raise SystemExit(1)

    if not result.success:
        raise SystemExit(1)
