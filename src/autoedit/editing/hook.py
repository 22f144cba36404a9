"""Hook selection: the short cold open moved to the front of the cut."""

from __future__ import annotations

from autoedit.editing.scoring import keyword_score, score_window
from autoedit.models.edl import EDLHook
from autoedit.models.transcript import SilenceInterval, TranscriptSegment

HOOK_DEFAULT_LENGTH = 2.5
HOOK_MIN_LENGTH = 1.5
HOOK_MAX_LENGTH = 3.0
CANDIDATE_MIN_LENGTH = 0.5
CANDIDATE_MAX_LENGTH = 5.0
KEYWORD_BONUS = 0.3
OPENING_SECONDS = 3.0


def _opening_hook(duration: float, reason: str) -> EDLHook:
    return EDLHook(start=0.0, end=min(duration, HOOK_DEFAULT_LENGTH), reason=reason)


def find_best_hook(
    duration: float,
    transcript: list[TranscriptSegment],
    silence_intervals: list[SilenceInterval],
    *,
    no_transcript_density: float = 0.6,
) -> EDLHook:
    """Pick the best 1.5–3 s transcript moment as the hook.

    Without a transcript, the hook starts after any leading silence.
    """
    if duration < 3:
        return _opening_hook(duration, "Video too short for hook extraction")

    if not transcript:
        first_non_silent = 0.0
        if silence_intervals and silence_intervals[0].start == 0:
            first_non_silent = silence_intervals[0].end
        return EDLHook(
            start=first_non_silent,
            end=min(duration, first_non_silent + HOOK_DEFAULT_LENGTH),
            reason="First non-silent moment (no transcript)",
        )

    scored: list[tuple[float, TranscriptSegment]] = []
    for seg in transcript:
        if not CANDIDATE_MIN_LENGTH <= seg.duration <= CANDIDATE_MAX_LENGTH:
            continue
        score = score_window(
            seg.start,
            seg.end,
            transcript,
            silence_intervals,
            no_transcript_density=no_transcript_density,
        )
        score += KEYWORD_BONUS * keyword_score(seg.start, seg.end, transcript)
        scored.append((score, seg))

    if not scored:
        return _opening_hook(duration, "No suitable hook found, using opening")

    _, best = min(scored, key=lambda item: (-item[0], item[1].start))
    hook_start = best.start
    hook_end = min(
        duration,
        max(hook_start + HOOK_MIN_LENGTH, min(hook_start + HOOK_MAX_LENGTH, best.end)),
    )

    if hook_start < OPENING_SECONDS:
        return EDLHook(start=hook_start, end=hook_end, reason="Best moment already at opening")

    return EDLHook(
        start=hook_start,
        end=hook_end,
        reason=f"High-retention moment from {hook_start:.1f}s",
    )


def find_best_hook_in_range(
    duration: float,
    transcript: list[TranscriptSegment],
    silence_intervals: list[SilenceInterval],
    *,
    min_ratio: float = 0.1,
    max_ratio: float = 0.9,
    window: float = HOOK_DEFAULT_LENGTH,
    step: float = 0.5,
    no_transcript_density: float = 0.3,
) -> EDLHook:
    """Scan fixed windows over the middle of the video for the best hook.

    Used when the first hook choice did not produce a meaningful edit, so
    the opening seconds are never considered.
    """
    min_start = max(0.0, duration * min_ratio)
    if duration >= 10:
        # A hook inside the opening seconds does not count as moved.
        min_start = max(min_start, OPENING_SECONDS + step)
    max_start = max(min_start, duration * max_ratio - window)

    best_start = min_start
    best_score = float("-inf")

    i = 0
    start = min_start
    while start <= max_start + 1e-9:
        end = min(duration, start + window)
        score = score_window(
            start,
            end,
            transcript,
            silence_intervals,
            no_transcript_density=no_transcript_density,
        )
        if score > best_score:
            best_score = score
            best_start = start
        i += 1
        start = min_start + i * step

    hook_start = min(best_start, max(0.0, duration - window))
    hook_end = min(duration, hook_start + window)

    return EDLHook(
        start=hook_start,
        end=hook_end,
        reason=f"Auto-rewrite hook from {hook_start:.1f}s",
    )
