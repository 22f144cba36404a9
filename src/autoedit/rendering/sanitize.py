"""Render-time EDL sanitation and repair.

The stored EDL was built against the duration known at analysis time; the
probed file can be slightly shorter or longer, so every timestamp is
re-clamped here and degenerate plans are widened before rendering. All
functions return new models and never mutate their input.
"""

from __future__ import annotations

from dataclasses import dataclass

from autoedit.models.config import RenderConfig
from autoedit.models.edl import EDL, EDLSegment
from autoedit.utils.progress import log_step, log_warning

MIN_SEG_LENGTH = 0.25
HOOK_MIN_LENGTH = 1.0
HOOK_MAX_LENGTH = 3.5
BACKBONE_PADDING = 5.0
INTRO_LENGTH = 3.0


@dataclass(frozen=True)
class ThresholdCheck:
    valid: bool
    kept_sec: float
    reason: str | None = None


@dataclass(frozen=True)
class PreparedEDL:
    """Sanitized (and possibly repaired) EDL plus its merged render segments."""

    edl: EDL
    segments: list[EDLSegment]
    repaired: bool
    check: ThresholdCheck


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(value, high))


def sanitize_edl(edl: EDL, duration: float) -> EDL:
    """Clamp timestamps to ``[0, duration]`` and round to milliseconds.

    The hook is widened to 0.25 s if needed; segments shorter than that
    after clamping are dropped. Idempotent for a given duration.
    """
    hook_start = round(_clamp(edl.hook.start, 0.0, duration), 3)
    hook_end = round(max(hook_start + MIN_SEG_LENGTH, min(edl.hook.end, duration)), 3)

    segments: list[EDLSegment] = []
    for seg in edl.segments:
        start = round(_clamp(seg.start, 0.0, duration), 3)
        end = round(min(seg.end, duration), 3)
        if end - start < MIN_SEG_LENGTH:
            continue
        segments.append(seg.model_copy(update={"start": start, "end": end}))

    return edl.model_copy(update={
        "hook": edl.hook.model_copy(update={"start": hook_start, "end": hook_end}),
        "segments": segments,
    })


def kept_seconds(edl: EDL) -> float:
    return max(edl.hook_duration, MIN_SEG_LENGTH) + edl.segments_duration


def min_keep_seconds(duration: float) -> float:
    """Shortest acceptable render: 15 s, or a quarter of the video up to 60 s."""
    return max(15.0, min(0.25 * duration, 60.0))


def check_render_thresholds(edl: EDL, duration: float) -> ThresholdCheck:
    kept = kept_seconds(edl)
    hook_len = edl.hook_duration

    if hook_len < HOOK_MIN_LENGTH or hook_len > HOOK_MAX_LENGTH:
        too = "short" if hook_len < HOOK_MIN_LENGTH else "long"
        return ThresholdCheck(False, kept, f"Hook too {too} ({hook_len:.2f}s)")

    if len(edl.segments) + 1 < 2:
        return ThresholdCheck(False, kept, "Fewer than 2 segments")

    min_keep = min_keep_seconds(duration)
    if kept < min_keep:
        return ThresholdCheck(False, kept, f"Too short: {kept:.2f}s < {min_keep:.2f}s")

    return ThresholdCheck(True, kept)


def repair_edl(edl: EDL, duration: float) -> EDL:
    """Widen an EDL that would render too little material."""
    check = check_render_thresholds(edl, duration)
    if check.valid:
        return edl

    min_keep = min_keep_seconds(duration)
    needed = min_keep - check.kept_sec
    repaired = edl

    if not edl.segments and needed > 0:
        start = edl.hook.end
        end = round(min(start + needed + BACKBONE_PADDING, duration), 3)
        if end - start >= MIN_SEG_LENGTH:
            repaired = edl.model_copy(update={"segments": [
                EDLSegment(start=start, end=end, reason="Auto-repair: backbone segment", score=0.5)
            ]})
    elif needed > 0:
        last = edl.segments[-1]
        limit = duration
        if edl.hook.start >= last.end:
            limit = min(limit, edl.hook.start)
        extended_end = round(max(last.end, min(last.end + needed, limit)), 3)
        repaired = edl.model_copy(update={"segments": [
            *edl.segments[:-1],
            last.model_copy(update={"end": extended_end, "reason": "Extended for minimum length"}),
        ]})

    if kept_seconds(repaired) < min_keep and not edl.segments:
        backbone_end = round(min(max(60.0, duration * 0.5), duration), 3)
        intro_end = min(INTRO_LENGTH, backbone_end)
        segments = []
        if backbone_end - intro_end >= MIN_SEG_LENGTH:
            segments.append(EDLSegment(
                start=intro_end, end=backbone_end, reason="Auto-repair: backbone", score=0.5
            ))
        repaired = edl.model_copy(update={
            "hook": edl.hook.model_copy(update={
                "start": 0.0,
                "end": intro_end,
                "reason": "Auto-repair: full video intro",
            }),
            "segments": segments,
        })

    return repaired


def merge_and_cap(
    segments: list[EDLSegment],
    *,
    max_segments: int = 25,
    merge_gap: float = 0.4,
    min_segment: float = 0.8,
) -> list[EDLSegment]:
    """Merge near-adjacent segments and keep the highest-scoring ones.

    Caps filter-graph size; output is chronological.
    """
    ordered = sorted(
        (seg.model_copy() for seg in segments if seg.duration >= min_segment),
        key=lambda s: s.start,
    )

    merged: list[EDLSegment] = []
    for seg in ordered:
        if merged and seg.start - merged[-1].end < merge_gap:
            last = merged[-1]
            last.end = max(last.end, seg.end)
            last.score = max(last.score, seg.score)
            last.reason = last.reason or seg.reason
        else:
            merged.append(seg)

    if len(merged) <= max_segments:
        return merged

    best = sorted(merged, key=lambda s: (-s.score, s.start))[:max_segments]
    return sorted(best, key=lambda s: s.start)


def prepare_edl(edl: EDL, duration: float, *, config: RenderConfig | None = None) -> PreparedEDL:
    """Sanitize, check, repair and merge an EDL for rendering."""
    config = config or RenderConfig()

    working = sanitize_edl(edl, duration)
    log_step(
        "Sanitize",
        f"Hook {working.hook.start:.3f}s-{working.hook.end:.3f}s, "
        f"{len(working.segments)} segments",
    )

    check = check_render_thresholds(working, duration)
    repaired = False
    if not check.valid:
        log_warning(f"EDL below render thresholds ({check.reason}), repairing")
        working = repair_edl(working, duration)
        repaired = True
        log_step("Repair", f"Kept {check.kept_sec:.2f}s → {kept_seconds(working):.2f}s")

    segments = merge_and_cap(
        working.segments,
        max_segments=config.max_segments,
        merge_gap=config.merge_gap,
        min_segment=config.min_segment,
    )
    return PreparedEDL(edl=working, segments=segments, repaired=repaired, check=check)
