"""Apply an EDL to a source video with a single ffmpeg filter-graph render.

Every outcome is returned as a ``RenderResult``; nothing raises past
``apply_edl``.
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import Callable

from autoedit.editing.edl_builder import min_removed_seconds
from autoedit.models.config import RenderConfig, ToolPaths
from autoedit.models.edl import EDL, ExpectedChange
from autoedit.models.render import ProgressUpdate, RenderResult, ValidationDetails
from autoedit.rendering.filtergraph import build_filter_complex, build_render_args
from autoedit.rendering.sanitize import kept_seconds, prepare_edl
from autoedit.rendering.verify import validate_output_file
from autoedit.utils.ffmpeg import FFmpegError, FFmpegStalledError, run_with_progress, tail
from autoedit.utils.ffprobe import probe_media
from autoedit.utils.progress import log_error, log_step, log_success, log_warning

DETAILS_LIMIT = 2000
UNCHANGED_DURATION_SEC = 3.0


def _failure(
    error: str,
    details: str | None,
    edl: EDL,
    original: float,
    final: float,
    *,
    stderr: str | None = None,
) -> RenderResult:
    log_warning(f"{error}: {details}")
    return RenderResult(
        success=False,
        error=error,
        details=details,
        stderr=stderr,
        used_edl=edl,
        original_duration_sec=original,
        final_duration_sec=final,
        removed_sec=max(0.0, original - final),
    )


def apply_edl(
    input_path: Path | str,
    edl: EDL,
    output_path: Path | str,
    *,
    tools: ToolPaths,
    config: RenderConfig | None = None,
    job_id: str = "",
    on_progress: Callable[[ProgressUpdate], None] | None = None,
) -> RenderResult:
    """Render ``[hook, *segments]`` of ``input_path`` into ``output_path``.

    The EDL is sanitized against the probed duration, repaired if it would
    render too little, merged and capped, then rejected without encoding if
    the result is not a meaningful edit.
    """
    config = config or RenderConfig()
    try:
        return _apply(input_path, edl, output_path, tools, config, job_id, on_progress)
    except Exception as e:
        log_error(f"EDL application failed: {e}")
        return RenderResult(
            success=False,
            error="EDL application failed",
            details=str(e)[:DETAILS_LIMIT],
        )


def _apply(
    input_path: Path | str,
    edl: EDL,
    output_path: Path | str,
    tools: ToolPaths,
    config: RenderConfig,
    job_id: str,
    on_progress: Callable[[ProgressUpdate], None] | None,
) -> RenderResult:
    input_path = Path(input_path)
    output_path = Path(output_path)
    render_start = time.time()
    log_step("Render", f"Job {job_id or '-'}: {input_path.name}")

    duration = edl.original_duration
    try:
        info = probe_media(input_path, tools=tools)
        duration = info.duration_seconds
        log_step("Render", f"Input: {duration:.2f}s, {info.size_bytes / 1e6:.2f} MB")
    except (OSError, ValueError, FFmpegError) as e:
        log_warning(f"Could not probe input, using EDL duration {duration:.2f}s: {e}")

    prepared = prepare_edl(edl, duration, config=config)
    working = prepared.edl
    segments = prepared.segments

    if len(segments) < 2:
        kept = kept_seconds(working)
        return _failure(
            "No meaningful edits applied",
            "Segment count below minimum after merge/cap",
            working,
            duration,
            kept,
        )

    hook = working.hook
    expected_sec = hook.duration + sum(s.duration for s in segments)
    removed = max(0.0, duration - expected_sec)
    min_removed = min_removed_seconds(duration)
    hook_from_later = hook.start > 3 or duration < 10

    if removed < min_removed or not hook_from_later:
        return _failure(
            "No meaningful edits applied",
            f"removedSec={removed:.2f}s, minRemoved={min_removed:.2f}s, "
            f"hookStart={hook.start:.2f}s, segments={len(segments)}",
            working,
            duration,
            expected_sec,
        )

    graph = build_filter_complex(
        [hook, *segments],
        sound_enhance=config.sound_enhance,
        watermark=config.watermark,
        export_quality=config.export_quality,
        watermark_text=config.watermark_text,
        watermark_font=config.watermark_font,
    )
    args = build_render_args(
        input_path,
        output_path,
        graph,
        fast_render=config.fast_render,
        audio_bitrate=config.audio_bitrate,
    )
    log_step(
        "Render",
        f"{len(segments) + 1} parts, {expected_sec:.2f}s expected, "
        f"{'fast' if config.fast_render else 'standard'} preset",
    )

    try:
        run_with_progress(
            tools.ffmpeg,
            args,
            expected_duration_sec=expected_sec,
            on_progress=on_progress,
            stall_timeout_sec=config.stall_timeout_sec,
        )
    except FFmpegStalledError as e:
        return _failure(
            "FFmpeg stalled during final render",
            str(e),
            working,
            duration,
            expected_sec,
            stderr=tail(e.stderr),
        )
    except (FFmpegError, OSError) as e:
        return _failure(
            "FFmpeg render failed",
            str(e)[:DETAILS_LIMIT],
            working,
            duration,
            expected_sec,
            stderr=tail(getattr(e, "stderr", None)),
        )

    log_step("Render", f"Encode finished in {time.time() - render_start:.1f}s")

    check = validate_output_file(
        output_path, input_path, expected_sec, tools=tools, config=config
    )
    if not check.valid:
        return _failure(
            "Output validation failed", check.reason, working, duration, expected_sec
        )

    output_duration = check.output_duration_sec or expected_sec
    if abs(output_duration - duration) < UNCHANGED_DURATION_SEC and hook.start <= 3:
        return _failure(
            "No meaningful edits applied",
            f"Output duration diff {abs(output_duration - duration):.2f}s "
            f"and hookStart={hook.start:.2f}s",
            working,
            duration,
            output_duration,
        )

    used_edl = working.model_copy(update={
        "segments": segments,
        "expected_change": ExpectedChange(
            original_duration_sec=duration,
            final_duration_sec=expected_sec,
            total_removed_sec=max(0.0, duration - expected_sec),
        ),
    })
    log_success(
        f"Rendered {output_path.name}: {output_duration:.2f}s "
        f"(removed {max(0.0, duration - output_duration):.2f}s)"
    )

    return RenderResult(
        success=True,
        used_edl=used_edl,
        original_duration_sec=duration,
        final_duration_sec=output_duration,
        removed_sec=max(0.0, duration - output_duration),
        validation_details=ValidationDetails(
            kept_sec=expected_sec,
            segment_count=len(segments),
            hook_start=hook.start,
            hook_end=hook.end,
            output_size_bytes=check.output_size_bytes,
            output_duration_sec=check.output_duration_sec,
            input_size_bytes=check.input_size_bytes,
            fallback_used=prepared.repaired,
        ),
    )
