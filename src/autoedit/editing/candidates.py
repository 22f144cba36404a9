"""Fixed-length clip candidates and their 0–100 retention score."""

from __future__ import annotations

import re

from autoedit.editing.retention import earliest_non_silence
from autoedit.editing.scoring import silence_ratio, speech_density
from autoedit.models.analysis import ClipCandidate
from autoedit.models.transcript import SilenceInterval, TranscriptSegment

# Openers that tend to hold attention in the first seconds of a clip.
CLIP_HOOK_KEYWORDS = [
    "?",
    "how",
    "why",
    "what",
    "top",
    "best",
    "secret",
    "number",
    "step",
    "result",
    "growth",
    "insane",
    "crazy",
    "shocking",
]

ALIGN_TOLERANCE = 1.0
SIGNAL_WINDOW = 4.0
HOOK_SEARCH_WINDOW = 5.0

HOOK_PATTERNS = [
    re.compile(p)
    for p in (
        r"\?",
        r"\bhow\b",
        r"\bwhy\b",
        r"\btop\b",
        r"\bnumber\b",
        r"\bsecret\b",
        r"\bresult\b",
        r"\bfast\b",
        r"\bboost\b",
        r"\bwin\b",
    )
]


def align_to_transcript(start: float, transcript: list[TranscriptSegment]) -> float:
    """Snap ``start`` to the nearest segment start within one second."""
    if not transcript:
        return start
    nearest = min(transcript, key=lambda seg: abs(seg.start - start))
    if abs(nearest.start - start) <= ALIGN_TOLERANCE:
        return nearest.start
    return start


def generate_candidate_segments(
    duration: float,
    clip_lengths: list[int],
    transcript: list[TranscriptSegment],
) -> list[ClipCandidate]:
    candidates: list[ClipCandidate] = []
    for length in clip_lengths:
        step = max(2, length // 2)
        start = 0
        while start + length <= duration:
            aligned = align_to_transcript(float(start), transcript)
            end = min(duration, aligned + length)
            candidates.append(ClipCandidate(
                id=f"{length}-{aligned:.2f}",
                start=aligned,
                end=end,
                duration=end - aligned,
                length_target=length,
            ))
            start += step
    return candidates


def hook_signals(start: float, transcript: list[TranscriptSegment]) -> list[str]:
    """Keywords spoken in the first few seconds after ``start``."""
    if not transcript:
        return []
    text = " ".join(
        seg.text.lower()
        for seg in transcript
        if seg.end >= start and seg.start <= start + SIGNAL_WINDOW
    )
    return [keyword for keyword in CLIP_HOOK_KEYWORDS if keyword in text]


def select_hook_start(
    candidate: ClipCandidate,
    transcript: list[TranscriptSegment],
    silence_intervals: list[SilenceInterval],
) -> float:
    """Where the clip should open.

    The first line starting within five seconds that matches a hook pattern,
    otherwise the candidate start moved past any silence covering it.
    """
    for seg in transcript:
        if not candidate.start <= seg.start <= candidate.start + HOOK_SEARCH_WINDOW:
            continue
        text = seg.text.lower()
        if any(pattern.search(text) for pattern in HOOK_PATTERNS):
            return seg.start
    return earliest_non_silence(candidate.start, silence_intervals)


def score_candidates(
    candidates: list[ClipCandidate],
    transcript: list[TranscriptSegment],
    silence_intervals: list[SilenceInterval],
) -> list[ClipCandidate]:
    scored = []
    for candidate in candidates:
        ratio = silence_ratio(candidate.start, candidate.end, silence_intervals)
        density = speech_density(candidate.start, candidate.end, transcript, default=0.6)
        signals = hook_signals(candidate.start, transcript)
        energy = max(0.2, 1 - ratio)
        boost = min(1.0, len(signals) / 2)

        raw = 100 * (0.45 * density + 0.35 * energy + 0.2 * boost) - ratio * 15
        score = max(0, round(min(100.0, raw)))

        scored.append(candidate.model_copy(update={
            "silence_ratio": ratio,
            "speech_density": density,
            "energy": round(energy * 100),
            "hook_signals": signals,
            "hook_start": select_hook_start(candidate, transcript, silence_intervals),
            "score": score,
        }))
    return scored


def top_candidates(
    duration: float,
    clip_lengths: list[int],
    transcript: list[TranscriptSegment],
    silence_intervals: list[SilenceInterval],
    *,
    limit: int = 10,
) -> list[ClipCandidate]:
    scored = score_candidates(
        generate_candidate_segments(duration, clip_lengths, transcript),
        transcript,
        silence_intervals,
    )
    scored.sort(key=lambda c: (-c.score, c.start))
    return scored[:limit]
