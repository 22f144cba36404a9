"""Post-render output verification."""

from __future__ import annotations

from pathlib import Path

from autoedit.models.config import RenderConfig, ToolPaths
from autoedit.models.render import OutputCheck
from autoedit.utils.ffmpeg import FFmpegError
from autoedit.utils.ffprobe import MediaInfo, probe_media
from autoedit.utils.progress import log_step, log_success, log_warning
from autoedit.utils.retry import retry_probe


@retry_probe()
def _probe_rendered(path: Path, tools: ToolPaths) -> MediaInfo:
    return probe_media(path, tools=tools)


def validate_output_file(
    output_path: Path | str,
    input_path: Path | str,
    expected_kept_sec: float,
    *,
    tools: ToolPaths,
    config: RenderConfig | None = None,
) -> OutputCheck:
    """Check that a rendered file exists, is big enough and long enough.

    The size floor is the larger of ``min_output_bytes`` and
    ``min_output_ratio`` of the input; the duration floor is
    ``min_duration_ratio`` of the expected kept seconds.
    """
    config = config or RenderConfig()
    output_path = Path(output_path)
    input_path = Path(input_path)

    log_step("Verify", f"Checking {output_path.name}...")

    if not output_path.exists():
        return OutputCheck(valid=False, reason="Output file missing")

    output_size = output_path.stat().st_size
    input_size = input_path.stat().st_size if input_path.exists() else 0
    min_size = max(config.min_output_bytes, int(input_size * config.min_output_ratio))

    if output_size < min_size:
        log_warning(f"Output too small: {output_size} bytes < {min_size} bytes")
        return OutputCheck(
            valid=False,
            output_size_bytes=output_size,
            input_size_bytes=input_size,
            reason=f"Output too small ({output_size} bytes, expected at least {min_size})",
        )

    try:
        info = _probe_rendered(output_path, tools)
    except (OSError, ValueError, FFmpegError) as e:
        return OutputCheck(
            valid=False,
            output_size_bytes=output_size,
            input_size_bytes=input_size,
            reason=f"Could not probe output: {e}",
        )

    min_duration = expected_kept_sec * config.min_duration_ratio
    if info.duration_seconds < min_duration:
        log_warning(
            f"Output too short: {info.duration_seconds:.2f}s < {min_duration:.2f}s"
        )
        return OutputCheck(
            valid=False,
            output_size_bytes=output_size,
            output_duration_sec=info.duration_seconds,
            input_size_bytes=input_size,
            reason=(
                f"Output too short ({info.duration_seconds:.2f}s, "
                f"expected at least {min_duration:.2f}s)"
            ),
        )

    log_success(f"Output verified: {info.duration_seconds:.2f}s, {output_size / 1e6:.1f} MB")
    return OutputCheck(
        valid=True,
        output_size_bytes=output_size,
        output_duration_sec=info.duration_seconds,
        input_size_bytes=input_size,
    )
