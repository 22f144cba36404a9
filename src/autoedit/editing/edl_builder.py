"""EDL generation: threshold-based segment selection around a hook.

States: SCORE → FILTER → MERGE → ENFORCE_RATIO → REMOVE_HOOK_OVERLAP →
VALIDATE_MEANINGFUL → DONE, with a REWRITE detour when the first pass does
not produce a meaningful edit.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from autoedit.editing.hook import find_best_hook, find_best_hook_in_range
from autoedit.editing.scoring import WindowFeatures, window_features
from autoedit.models.config import Aggressiveness, BuilderConfig
from autoedit.models.edl import EDL, EDLHook, EDLSegment
from autoedit.models.transcript import SilenceInterval, TranscriptSegment
from autoedit.utils.progress import log_debug, log_step

CONTEXT_MIN_LENGTH = 2.0
CONTEXT_MAX_LENGTH = 4.5
REWRITE_MIN_LENGTH = 2.0
REWRITE_MAX_LENGTH = 6.0
REWRITE_MIN_TARGET = 25.0
REWRITE_TARGET_RATIO = 0.6
FALLBACK_LENGTH = 3.5
FALLBACK_MIN_LENGTH = 1.0


class BuildState(str, Enum):
    SCORE = "score"
    FILTER = "filter"
    MERGE = "merge"
    ENFORCE_RATIO = "enforce_ratio"
    REMOVE_HOOK_OVERLAP = "remove_hook_overlap"
    VALIDATE_MEANINGFUL = "validate_meaningful"
    REWRITE = "rewrite"
    DONE = "done"


def _enter(state: BuildState, detail: str = "") -> None:
    log_debug("EDL", f"→ {state.value} {detail}".rstrip())


@dataclass(frozen=True)
class EDLStats:
    kept_sec: float
    removed_sec: float
    hook_from_later: bool
    segment_count: int


def min_removed_seconds(duration: float) -> float:
    """Smallest removal that still counts as an edit."""
    return max(3.0, duration * 0.05)


def compute_edl_stats(edl: EDL, duration: float) -> EDLStats:
    kept = edl.kept_seconds
    return EDLStats(
        kept_sec=kept,
        removed_sec=max(0.0, duration - kept),
        hook_from_later=edl.hook.start > 3,
        segment_count=len(edl.segments),
    )


def is_meaningful_edit(edl: EDL, duration: float) -> bool:
    stats = compute_edl_stats(edl, duration)
    hook_ok = True if duration < 10 else stats.hook_from_later
    return (
        stats.removed_sec >= min_removed_seconds(duration)
        and hook_ok
        and stats.segment_count >= 2
    )


def too_short_edl(duration: float) -> EDL:
    """Terminal EDL for clips too short to cut: everything kept, nothing moved."""
    return EDL.from_parts(
        EDLHook(start=0.0, end=duration, reason="Video too short"),
        [],
        duration,
        notes="Video shorter than 5 seconds, no edits applied",
    )


def score_windows(
    duration: float,
    transcript: list[TranscriptSegment],
    silence_intervals: list[SilenceInterval],
    *,
    window_size: float,
    step: float,
    no_transcript_density: float,
) -> list[WindowFeatures]:
    """Slide a fixed window across ``[0, duration)``."""
    windows = []
    i = 0
    start = 0.0
    while start < duration:
        end = min(duration, start + window_size)
        windows.append(
            window_features(
                start,
                end,
                transcript,
                silence_intervals,
                no_transcript_density=no_transcript_density,
            )
        )
        i += 1
        start = i * step
    return windows


def merge_segments(
    segments: list[EDLSegment],
    *,
    gap: float = 0.3,
    min_length: float = 0.8,
) -> list[EDLSegment]:
    """Union segments closer than ``gap`` and drop spans under ``min_length``.

    The result does not depend on the input order.
    """
    if not segments:
        return []

    ordered = sorted(segments, key=lambda s: (s.start, s.end, -s.score, s.reason))
    merged: list[EDLSegment] = []
    current = ordered[0].model_copy()

    for nxt in ordered[1:]:
        if nxt.start <= current.end + gap:
            current.end = max(current.end, nxt.end)
            current.score = max(current.score, nxt.score)
        else:
            if current.duration >= min_length:
                merged.append(current)
            current = nxt.model_copy()

    if current.duration >= min_length:
        merged.append(current)

    return merged


def generate_segments(
    duration: float,
    transcript: list[TranscriptSegment],
    silence_intervals: list[SilenceInterval],
    aggressiveness: Aggressiveness,
    *,
    config: BuilderConfig,
    no_transcript_density: float | None = None,
) -> list[EDLSegment]:
    """Score, filter and merge candidate windows at one aggressiveness level."""
    density = (
        config.no_transcript_density
        if no_transcript_density is None
        else no_transcript_density
    )
    _enter(BuildState.SCORE, f"({aggressiveness})")
    windows = score_windows(
        duration,
        transcript,
        silence_intervals,
        window_size=config.window_size,
        step=config.step,
        no_transcript_density=density,
    )

    _enter(BuildState.FILTER)
    threshold = config.thresholds[aggressiveness]
    candidates = [
        EDLSegment(start=w.start, end=w.end, score=w.score, reason="High-value content")
        for w in windows
        if w.score >= threshold and w.silence_ratio < config.max_silence_ratio
    ]

    if not candidates:
        relaxed = max(config.threshold_floor, threshold - config.threshold_relief)
        log_debug("EDL", f"No windows at {threshold:.2f}, relaxing to {relaxed:.2f}")
        candidates = [
            EDLSegment(start=w.start, end=w.end, score=w.score, reason="Acceptable content")
            for w in windows
            if w.score >= relaxed
        ]

    _enter(BuildState.MERGE, f"{len(candidates)} windows")
    return merge_segments(candidates, gap=config.merge_gap, min_length=config.min_segment)


def enforce_keep_ratio(
    segments: list[EDLSegment],
    duration: float,
    transcript: list[TranscriptSegment],
    silence_intervals: list[SilenceInterval],
    aggressiveness: Aggressiveness,
    *,
    config: BuilderConfig,
) -> list[EDLSegment]:
    """Top up with low-threshold material until the keep ratio is met."""
    _enter(BuildState.ENFORCE_RATIO)
    target = duration * config.keep_ratios[aggressiveness]
    kept = sum(s.duration for s in segments)
    if kept >= target:
        return segments

    pool = generate_segments(
        duration, transcript, silence_intervals, "low", config=config
    )
    pool.sort(key=lambda s: (-s.score, s.start))

    result = list(segments)
    for candidate in pool:
        if kept >= target:
            break
        covered = any(
            s.start <= candidate.start and s.end >= candidate.end for s in result
        )
        if covered:
            continue
        result = merge_segments(
            result + [candidate], gap=config.merge_gap, min_length=config.min_segment
        )
        kept = sum(s.duration for s in result)

    log_debug("EDL", f"Keep ratio {kept / duration:.2f} (target {target / duration:.2f})")
    return result


def remove_hook_overlap(
    segments: list[EDLSegment],
    hook: EDLHook,
    *,
    min_length: float = 0.8,
) -> list[EDLSegment]:
    """Split segments around the hook, keeping parts of at least ``min_length``."""
    result: list[EDLSegment] = []
    for seg in segments:
        if seg.end <= hook.start or seg.start >= hook.end:
            parts = [seg]
        else:
            parts = []
            if seg.start < hook.start:
                parts.append(seg.model_copy(update={"end": hook.start}))
            if seg.end > hook.end:
                parts.append(seg.model_copy(update={"start": hook.end}))
        result.extend(p for p in parts if p.duration >= min_length)
    return result


def _fallback_segment(
    duration: float, hook: EDLHook, segments: list[EDLSegment], length: float
) -> EDLSegment | None:
    preferred = min(duration * 0.7, max(0.0, duration - 6))
    spans = [
        (preferred, min(duration, preferred + length)),
        (max(0.0, duration - length), duration),
        (0.0, min(length, hook.start)),
    ]
    for start, end in spans:
        if end - start < FALLBACK_MIN_LENGTH:
            continue
        if start < hook.end and hook.start < end:
            continue
        if any(s.overlaps(start, end) for s in segments):
            continue
        return EDLSegment(start=start, end=end, reason="Fallback energetic segment", score=0.4)
    return None


def rewrite_meaningful(
    duration: float,
    transcript: list[TranscriptSegment],
    silence_intervals: list[SilenceInterval],
    *,
    config: BuilderConfig,
) -> EDL:
    """Rebuild the EDL around a mid-video hook so the edit is substantial.

    Kept time never exceeds ``duration - min_removed_seconds(duration)``.
    """
    _enter(BuildState.REWRITE)
    density = config.rewrite_no_transcript_density
    hook = find_best_hook_in_range(
        duration, transcript, silence_intervals, no_transcript_density=density
    )
    budget = duration - min_removed_seconds(duration)
    target = min(max(REWRITE_MIN_TARGET, duration * REWRITE_TARGET_RATIO), budget)

    # Leave room for a second segment after the context.
    context_length = min(CONTEXT_MAX_LENGTH, (target - hook.duration) / 2)
    segments: list[EDLSegment] = []
    context_end = min(duration, hook.end + context_length)
    if context_end - hook.end >= CONTEXT_MIN_LENGTH:
        segments.append(
            EDLSegment(start=hook.end, end=context_end, reason="Post-hook context", score=0.6)
        )

    kept = hook.duration + sum(s.duration for s in segments)

    raw = generate_segments(
        duration,
        transcript,
        silence_intervals,
        "high",
        config=config,
        no_transcript_density=density,
    )
    candidates = [
        seg
        for seg in remove_hook_overlap(raw, hook, min_length=config.min_segment)
        if seg.duration >= REWRITE_MIN_LENGTH
    ]
    candidates.sort(key=lambda s: (-s.score, s.start))

    for candidate in candidates:
        room = target - kept
        if not segments:
            room /= 2
        length = min(candidate.duration, REWRITE_MAX_LENGTH, room)
        if length < REWRITE_MIN_LENGTH:
            break
        capped = candidate.model_copy(update={"end": candidate.start + length})
        if any(s.overlaps(capped.start, capped.end) for s in segments):
            continue
        segments.append(capped)
        kept += capped.duration

    if len(segments) < 2:
        length = min(FALLBACK_LENGTH, budget - kept)
        fallback = _fallback_segment(duration, hook, segments, length)
        if fallback is not None:
            segments.append(fallback)

    segments.sort(key=lambda s: s.start)
    final = hook.duration + sum(s.duration for s in segments)
    return EDL.from_parts(
        hook,
        segments,
        duration,
        notes=f"Auto-rewrite for meaningful edits (kept {final:.1f}s)",
    )


def build_edl(
    duration: float,
    transcript: list[TranscriptSegment],
    silence_intervals: list[SilenceInterval],
    *,
    aggressiveness: Aggressiveness | None = None,
    config: BuilderConfig | None = None,
) -> EDL:
    """Build an EDL (hook + kept segments) for a video of ``duration`` seconds."""
    config = config or BuilderConfig()
    aggressiveness = aggressiveness or config.aggressiveness

    if duration < config.min_duration:
        log_step("EDL", f"Video too short ({duration:.1f}s), keeping everything")
        return too_short_edl(duration)

    hook = find_best_hook(
        duration,
        transcript,
        silence_intervals,
        no_transcript_density=config.no_transcript_density,
    )
    segments = generate_segments(
        duration, transcript, silence_intervals, aggressiveness, config=config
    )
    segments = enforce_keep_ratio(
        segments,
        duration,
        transcript,
        silence_intervals,
        aggressiveness,
        config=config,
    )

    _enter(BuildState.REMOVE_HOOK_OVERLAP)
    segments = remove_hook_overlap(segments, hook, min_length=config.min_segment)

    final = hook.duration + sum(s.duration for s in segments)
    removed = max(0.0, duration - final)
    if segments:
        notes = f"Extracted hook from {hook.start:.1f}s, kept {len(segments)} segments"
    else:
        notes = f"Hook-only edit (removed {removed:.1f}s)"
    edl = EDL.from_parts(hook, segments, duration, notes=notes)

    _enter(BuildState.VALIDATE_MEANINGFUL)
    if not is_meaningful_edit(edl, duration):
        stats = compute_edl_stats(edl, duration)
        log_step(
            "EDL",
            f"First pass not meaningful (removed {stats.removed_sec:.1f}s, "
            f"hook at {hook.start:.1f}s, {stats.segment_count} segments), rewriting",
        )
        edl = rewrite_meaningful(duration, transcript, silence_intervals, config=config)

    _enter(BuildState.DONE)
    log_step(
        "EDL",
        f"Hook {edl.hook.start:.2f}s-{edl.hook.end:.2f}s, {len(edl.segments)} segments, "
        f"{edl.expected_change.total_removed_sec:.1f}s removed",
    )
    return edl
