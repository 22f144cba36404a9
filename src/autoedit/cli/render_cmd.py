"""autoedit render: apply an EDL to a video."""

from __future__ import annotations

from pathlib import Path

import click

from autoedit.cli.options import config_or_exit, tools_or_exit
from autoedit.models.edl import EDL
from autoedit.pipeline.sink import ConsoleSink
from autoedit.utils.io import read_json, write_json
from autoedit.utils.progress import log_error, log_success


@click.command()
@click.argument("video", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--edl", "-e", "edl_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False),
    help="edl.json produced by `autoedit analyze`",
)
@click.option(
    "--output", "-o",
    required=True,
    type=click.Path(dir_okay=False),
    help="Output video path",
)
@click.option("--no-sound-enhance", is_flag=True, help="Skip the loudness/denoise chain")
@click.option("--watermark", is_flag=True, help="Overlay the watermark text")
@click.option(
    "--quality", "-q",
    default=None,
    type=click.Choice(["720p", "1080p", "4k"]),
    help="Scale output to this height",
)
@click.option("--fast", is_flag=True, help="ultrafast preset, lower quality")
@click.option(
    "--stall-timeout",
    default=None,
    type=click.FloatRange(min=0.1),
    help="Seconds without progress before the encode is killed",
)
@click.option(
    "--config", "-c", "config_path",
    default=None,
    type=click.Path(dir_okay=False),
    help="Path to autoedit.yaml",
)
def render_cmd(
    video: str,
    edl_path: str,
    output: str,
    no_sound_enhance: bool,
    watermark: bool,
    quality: str | None,
    fast: bool,
    stall_timeout: float | None,
    config_path: str | None,
) -> None:
    """Render VIDEO according to an EDL."""
    tools = tools_or_exit()
    config = config_or_exit(config_path)

    try:
        edl = EDL(**read_json(edl_path))
    except (OSError, ValueError) as e:
        log_error(f"Could not read EDL {edl_path}: {e}")
        raise SystemExit(1)

    updates = {}
    if no_sound_enhance:
        updates["sound_enhance"] = False
    if watermark:
        updates["watermark"] = True
    if quality:
        updates["export_quality"] = quality
    if fast:
        updates["fast_render"] = True
    if stall_timeout is not None:
        updates["stall_timeout_sec"] = stall_timeout
    render_config = config.render.model_copy(update=updates)

    from autoedit.rendering.apply import apply_edl

    output_path = Path(output)
    sink = ConsoleSink()
    result = apply_edl(
        Path(video),
        edl,
        output_path,
        tools=tools,
        config=render_config,
        on_progress=sink.progress,
    )
    result_path = output_path.with_name("render-result.json")
    write_json(result_path, result.model_dump(mode="json", by_alias=True))

    if not result.success:
        sink.fail(result.error or "Render failed", result.details)
        raise SystemExit(1)

    sink.complete({"output": str(output_path)})
    log_success(
        f"{result.original_duration_sec:.1f}s → {result.final_duration_sec:.1f}s "
        f"(result: {result_path.name})"
    )
