"""Audio energy profile from ffmpeg ``astats`` RMS levels."""

from __future__ import annotations

import re
from pathlib import Path

import numpy as np

from autoedit.models.analysis import EnergyWindow
from autoedit.models.config import ToolPaths
from autoedit.models.transcript import SilenceInterval
from autoedit.utils.ffmpeg import FFmpegError, ProcessRunner, run_command
from autoedit.utils.progress import log_step, log_warning

_RMS_RE = re.compile(r"RMS_level=(-?[0-9.]+|-inf|inf|nan)")

# Linear amplitude above which a second counts as voiced.
VOICED_FLOOR = 0.0005


def parse_rms_levels(output: str) -> np.ndarray:
    """Convert ``RMS_level`` dB lines to linear amplitude (silence → 0)."""
    levels = [m.group(1) for m in _RMS_RE.finditer(output)]
    if not levels:
        return np.zeros(0, dtype=float)
    db = np.array([float(v) for v in levels], dtype=float)
    linear = np.power(10.0, db / 20.0)
    return np.where(np.isfinite(linear), linear, 0.0)


def measure_energy_profile(
    input_path: Path | str,
    *,
    tools: ToolPaths,
    runner: ProcessRunner = run_command,
) -> np.ndarray:
    """Linear RMS energy per one-second block. Empty on failure."""
    args = [
        "-hide_banner",
        "-nostats",
        "-i", str(input_path),
        "-af",
        "asetnsamples=n=48000:p=0,"
        "astats=metadata=1:reset=1,"
        "ametadata=print:key=lavfi.astats.Overall.RMS_level",
        "-f", "null",
        "-",
    ]
    try:
        result = runner(tools.ffmpeg, args)
    except (FFmpegError, OSError) as e:
        log_warning(f"Energy profile failed, continuing without it: {e}")
        return np.zeros(0, dtype=float)

    profile = parse_rms_levels(result.stderr or result.stdout)
    log_step("Energy", f"Measured {len(profile)} energy blocks")
    return profile


def _silence_coverage(
    start: float, end: float, intervals: list[SilenceInterval]
) -> float:
    overlap = sum(
        max(0.0, min(i.end, end) - max(i.start, start)) for i in intervals
    )
    return overlap / (end - start)


def rank_energy_windows(
    profile: np.ndarray,
    duration: float,
    silence_intervals: list[SilenceInterval],
    *,
    windows: tuple[int, ...] = (3, 5, 7, 10),
    top: int = 50,
) -> list[EnergyWindow]:
    """Rank sliding windows (1 s step) by energy, voicing and silence."""
    if profile.size == 0 or duration <= 0:
        return []

    ranked: list[EnergyWindow] = []
    last_start = max(1, int(duration))
    for width in windows:
        for t in range(0, last_start - width + 1):
            block = profile[t:min(profile.size, t + width)]
            energy_avg = float(block.mean()) if block.size else 0.0
            voiced = max(0.1, float(np.mean(block > VOICED_FLOOR))) if block.size else 0.0
            coverage = _silence_coverage(t, t + width, silence_intervals)
            score = energy_avg * 0.30 + voiced * 0.25 + 0.20 - coverage * 0.50
            ranked.append(EnergyWindow(
                start=float(t),
                end=float(t + width),
                duration=float(width),
                energy_avg=energy_avg,
                silence_coverage=coverage,
                score=round(score, 4),
            ))

    ranked.sort(key=lambda w: (-w.score, w.start))
    return ranked[:top]
