"""Silence detection via ffmpeg ``silencedetect``."""

from __future__ import annotations

import re
from pathlib import Path

from autoedit.models.config import SilenceConfig, ToolPaths
from autoedit.models.transcript import SilenceInterval
from autoedit.utils.ffmpeg import FFmpegError, ProcessRunner, run_command
from autoedit.utils.progress import log_step, log_warning

_START_RE = re.compile(r"silence_start:\s*(-?[0-9]+(?:\.[0-9]+)?)")
_END_RE = re.compile(r"silence_end:\s*(-?[0-9]+(?:\.[0-9]+)?)")


def parse_silence_output(stderr: str) -> list[SilenceInterval]:
    """Pair ``silence_start``/``silence_end`` markers into intervals.

    A start with no following end (silence running to end of file) is
    dropped, as is an end with no start.
    """
    intervals: list[SilenceInterval] = []
    current_start: float | None = None

    for line in stderr.splitlines():
        start_match = _START_RE.search(line)
        if start_match:
            current_start = max(0.0, float(start_match.group(1)))
        end_match = _END_RE.search(line)
        if end_match and current_start is not None:
            end = float(end_match.group(1))
            if end > current_start:
                intervals.append(SilenceInterval(start=current_start, end=end))
            current_start = None

    intervals.sort(key=lambda i: i.start)
    return intervals


def detect_silence_intervals(
    input_path: Path | str,
    *,
    tools: ToolPaths,
    config: SilenceConfig | None = None,
    runner: ProcessRunner = run_command,
) -> list[SilenceInterval]:
    """Run one silencedetect pass over the whole file.

    Silence is only a scoring signal, so any failure yields an empty list.
    """
    config = config or SilenceConfig()
    args = [
        "-hide_banner",
        "-nostats",
        "-i", str(input_path),
        "-af", f"silencedetect=n={config.noise_db:g}dB:d={config.min_duration:g}",
        "-f", "null",
        "-",
    ]

    try:
        result = runner(tools.ffmpeg, args)
    except (FFmpegError, OSError) as e:
        log_warning(f"Silence detection failed, continuing without it: {e}")
        return []

    intervals = parse_silence_output(result.stderr)
    total = sum(i.duration for i in intervals)
    log_step("Silence", f"Found {len(intervals)} silent intervals ({total:.1f}s total)")
    return intervals
