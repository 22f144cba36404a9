"""Retention planner: a coarser alternative to the EDL builder.

Runs on the ``RetentionConfig`` preset (4 s windows, stricter silence
filter, smaller merge gap) and returns diagnostics alongside the plan.
"""

from __future__ import annotations

from autoedit.editing.edl_builder import merge_segments, remove_hook_overlap, score_windows
from autoedit.editing.scoring import keyword_score, speech_density
from autoedit.models.config import Aggressiveness, RetentionConfig
from autoedit.models.edl import EDLHook, EDLSegment
from autoedit.models.retention import RetentionPlan, RetentionStats
from autoedit.models.transcript import SilenceInterval, TranscriptSegment
from autoedit.utils.progress import log_step


def earliest_non_silence(start: float, intervals: list[SilenceInterval]) -> float:
    """Move ``start`` past a silence interval that contains it."""
    for interval in intervals:
        if interval.start <= start <= interval.end:
            return interval.end
    return start


def pick_hook_segment(
    duration: float,
    transcript: list[TranscriptSegment],
    silence_intervals: list[SilenceInterval],
    *,
    no_transcript_density: float = 0.6,
) -> EDLHook:
    if not transcript:
        start = earliest_non_silence(0.0, silence_intervals)
        return EDLHook(
            start=start,
            end=min(duration, start + 2.5),
            reason="Fallback hook (no transcript)",
        )

    def score(seg: TranscriptSegment) -> float:
        density = speech_density(
            seg.start, seg.end, transcript, default=no_transcript_density
        )
        keywords = keyword_score(seg.start, seg.end, transcript)
        length = min(1.0, seg.duration / 3)
        return 0.45 * density + 0.35 * keywords + 0.2 * length

    best = min(transcript, key=lambda seg: (-score(seg), seg.start))
    start = earliest_non_silence(best.start, silence_intervals)
    return EDLHook(
        start=start,
        end=min(duration, start + 2.5),
        reason="High-interest moment hook",
    )


def _enforce_keep_ratio(
    segments: list[EDLSegment],
    duration: float,
    target_ratio: float,
    config: RetentionConfig,
) -> list[EDLSegment]:
    kept = sum(s.duration for s in segments)
    if kept >= duration * target_ratio:
        return segments

    target = max(config.min_keep_seconds, duration * target_ratio)
    chosen: list[EDLSegment] = []
    total = 0.0
    for seg in sorted(segments, key=lambda s: (-s.score, s.start)):
        if total >= target:
            break
        chosen.append(seg)
        total += seg.duration
    return merge_segments(chosen, gap=config.merge_gap, min_length=0.0)


def build_retention_plan(
    duration: float,
    transcript: list[TranscriptSegment],
    silence_intervals: list[SilenceInterval],
    *,
    aggressiveness: Aggressiveness | None = None,
    config: RetentionConfig | None = None,
) -> RetentionPlan:
    config = config or RetentionConfig()
    aggressiveness = aggressiveness or config.aggressiveness

    windows = score_windows(
        duration,
        transcript,
        silence_intervals,
        window_size=config.window_size,
        step=config.step,
        no_transcript_density=config.no_transcript_density,
    )

    threshold = config.thresholds[aggressiveness]
    kept_windows = [
        w for w in windows
        if w.score >= threshold and w.silence_ratio < config.max_silence_ratio
    ]
    if not kept_windows:
        threshold = max(config.threshold_floor, threshold - config.threshold_relief)
        kept_windows = [w for w in windows if w.score >= threshold]

    segments = merge_segments(
        [
            EDLSegment(start=w.start, end=w.end, score=w.score, reason="Retention window")
            for w in kept_windows
        ],
        gap=config.merge_gap,
        min_length=0.0,
    )
    segments = _enforce_keep_ratio(
        segments, duration, config.keep_ratios[aggressiveness], config
    )

    hook = pick_hook_segment(
        duration,
        transcript,
        silence_intervals,
        no_transcript_density=config.no_transcript_density,
    )
    segments = remove_hook_overlap(segments, hook, min_length=config.min_segment)

    kept = sum(s.duration for s in segments)
    stats = RetentionStats(
        duration=duration,
        kept_duration=kept,
        keep_ratio=kept / duration if duration else 1.0,
        aggressiveness=aggressiveness,
        window_size=config.window_size,
        step=config.step,
    )
    log_step(
        "Retention",
        f"{len(segments)} segments, keep ratio {stats.keep_ratio:.2f} ({aggressiveness})",
    )
    return RetentionPlan(hook=hook, segments=segments, stats=stats)
