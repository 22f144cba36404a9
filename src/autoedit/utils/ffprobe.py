"""FFprobe wrapper for media metadata extraction."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from pathlib import Path

from autoedit.models.config import ToolPaths
from autoedit.utils.ffmpeg import FFmpegError, ProcessRunner, run_command
from autoedit.utils.progress import log_warning

_DURATION_RE = re.compile(r"Duration: (\d+):(\d+):(\d+(?:\.\d+)?)")


@dataclass
class MediaInfo:
    """Media file metadata extracted via FFprobe."""

    path: str
    duration_seconds: float
    width: int
    height: int
    size_bytes: int
    format_name: str
    has_audio: bool


def probe_media(
    path: Path | str,
    *,
    tools: ToolPaths,
    runner: ProcessRunner = run_command,
) -> MediaInfo:
    """Probe a media file with FFprobe and return metadata.

    Falls back to the ``Duration:`` banner of ``ffmpeg -i`` when ffprobe
    output cannot be used.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Media file not found: {path}")

    size_bytes = path.stat().st_size

    try:
        result = runner(
            tools.ffprobe,
            [
                "-v", "error",
                "-print_format", "json",
                "-show_format",
                "-show_streams",
                str(path),
            ],
        )
        data = json.loads(result.stdout)
    except (FFmpegError, OSError, ValueError) as e:
        log_warning(f"ffprobe failed for {path.name}: {e}. Falling back to ffmpeg banner.")
        duration = probe_duration_banner(path, tools=tools, runner=runner)
        if duration <= 0:
            raise ValueError(f"No duration from ffprobe or ffmpeg banner: {path}") from e
        return MediaInfo(
            path=str(path),
            duration_seconds=duration,
            width=1920,
            height=1080,
            size_bytes=size_bytes,
            format_name="",
            has_audio=True,
        )

    streams = data.get("streams", [])
    video = next((s for s in streams if s.get("codec_type") == "video"), {})
    has_audio = any(s.get("codec_type") == "audio" for s in streams)
    fmt = data.get("format", {})

    try:
        duration = float(fmt.get("duration", video.get("duration", 0)) or 0)
    except (TypeError, ValueError):
        duration = 0.0

    if duration <= 0:
        raise ValueError(f"Invalid duration from ffprobe: {path}")

    return MediaInfo(
        path=str(path),
        duration_seconds=duration,
        width=int(video.get("width") or 1920),
        height=int(video.get("height") or 1080),
        size_bytes=size_bytes,
        format_name=fmt.get("format_name", ""),
        has_audio=has_audio,
    )


def probe_duration_banner(
    path: Path | str,
    *,
    tools: ToolPaths,
    runner: ProcessRunner = run_command,
) -> float:
    """Read the duration from ``ffmpeg -i`` stderr. Returns 0.0 if absent."""
    # ffmpeg exits non-zero without an output file; only stderr matters.
    result = runner(tools.ffmpeg, ["-hide_banner", "-i", str(path)], check=False)
    return parse_duration_banner(result.stderr)


def parse_duration_banner(stderr: str) -> float:
    match = _DURATION_RE.search(stderr)
    if not match:
        return 0.0
    hours, minutes, seconds = match.groups()
    return int(hours) * 3600 + int(minutes) * 60 + float(seconds)
