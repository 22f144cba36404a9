"""Structural and business checks for a built EDL."""

from __future__ import annotations

from autoedit.editing.edl_builder import min_removed_seconds
from autoedit.models.edl import EDL, ValidationResult


def validate_edl(edl: EDL) -> ValidationResult:
    """Check an EDL and collect every violation (no short-circuit)."""
    errors: list[str] = []
    duration = edl.expected_change.original_duration_sec

    if edl.version != 1:
        errors.append("Invalid EDL version")

    hook = edl.hook
    if hook.end <= hook.start:
        errors.append("Invalid hook timing")
    if hook.start < 0 or hook.end > duration:
        errors.append("Hook out of bounds")

    for i, seg in enumerate(edl.segments):
        if seg.end <= seg.start:
            errors.append(f"Segment {i}: end <= start")
        if seg.start < 0 or seg.end > duration:
            errors.append(f"Segment {i}: out of bounds")
        if seg.overlaps(hook.start, hook.end):
            errors.append(f"Segment {i} overlaps hook")

    for i in range(len(edl.segments) - 1):
        current, nxt = edl.segments[i], edl.segments[i + 1]
        if current.start > nxt.start:
            errors.append(f"Segments {i} and {i + 1} out of order")
        if current.end > nxt.start:
            errors.append(f"Segments {i} and {i + 1} overlap")

    min_removed = min_removed_seconds(duration)
    removed = edl.expected_change.total_removed_sec
    if removed < min_removed:
        errors.append(
            "No meaningful edits: meaningful edits below threshold "
            f"(removed {removed:.2f}s < {min_removed:.2f}s)"
        )
    if duration >= 10 and hook.start <= 3:
        errors.append("No meaningful edits: hook not moved from later in the video")
    if len(edl.segments) < 2:
        errors.append("No meaningful edits: fewer than 2 segments")

    return ValidationResult(valid=not errors, errors=errors)
