"""Per-window retention signals and the composite window score.

All functions are pure: same inputs, same result, no shared state.
"""

from __future__ import annotations

from dataclasses import dataclass

from autoedit.models.transcript import SilenceInterval, TranscriptSegment

HOOK_KEYWORDS = [
    "?",
    "how",
    "why",
    "what",
    "wait",
    "watch",
    "look",
    "listen",
    "bro",
    "no way",
    "oh my god",
    "secret",
    "insane",
    "crazy",
    "shocking",
    "unbelievable",
    "wild",
    "funny",
    "hilarious",
    "awkward",
    "emotional",
    "surprise",
    "boom",
    "wow",
    "stop",
    "real",
]

WORDS_PER_SECOND_CEILING = 3.5
KEYWORD_CAP = 3

WEIGHT_DENSITY = 0.45
WEIGHT_ENERGY = 0.35
WEIGHT_KEYWORDS = 0.2


def _overlapping(
    start: float, end: float, transcript: list[TranscriptSegment]
) -> list[TranscriptSegment]:
    return [seg for seg in transcript if seg.end >= start and seg.start <= end]


def silence_ratio(
    start: float, end: float, intervals: list[SilenceInterval]
) -> float:
    """Share of ``[start, end]`` covered by silence, in [0, 1]."""
    if not intervals:
        return 0.0
    duration = end - start
    if duration <= 0:
        return 0.0
    overlap = 0.0
    for interval in intervals:
        s = max(start, interval.start)
        e = min(end, interval.end)
        if e > s:
            overlap += e - s
    return min(1.0, overlap / duration)


def speech_density(
    start: float,
    end: float,
    transcript: list[TranscriptSegment],
    *,
    default: float = 0.6,
) -> float:
    """Words per second against a 3.5 w/s ceiling.

    ``default`` is returned when there is no transcript at all.
    """
    if not transcript:
        return default
    words = sum(seg.word_count for seg in _overlapping(start, end, transcript))
    duration = max(1.0, end - start)
    return min(1.0, words / duration / WORDS_PER_SECOND_CEILING)


def keyword_hits(
    start: float, end: float, transcript: list[TranscriptSegment]
) -> list[str]:
    if not transcript:
        return []
    text = " ".join(seg.text.lower() for seg in _overlapping(start, end, transcript))
    return [keyword for keyword in HOOK_KEYWORDS if keyword in text]


def keyword_score(
    start: float, end: float, transcript: list[TranscriptSegment]
) -> float:
    hits = len(keyword_hits(start, end, transcript))
    return min(KEYWORD_CAP, hits) / KEYWORD_CAP


@dataclass(frozen=True)
class WindowFeatures:
    start: float
    end: float
    silence_ratio: float
    speech_density: float
    keyword_score: float

    @property
    def energy(self) -> float:
        return 1.0 - self.silence_ratio

    @property
    def score(self) -> float:
        raw = (
            WEIGHT_DENSITY * self.speech_density
            + WEIGHT_ENERGY * self.energy
            + WEIGHT_KEYWORDS * self.keyword_score
        )
        return round(raw, 3)


def window_features(
    start: float,
    end: float,
    transcript: list[TranscriptSegment],
    silence_intervals: list[SilenceInterval],
    *,
    no_transcript_density: float = 0.6,
) -> WindowFeatures:
    return WindowFeatures(
        start=start,
        end=end,
        silence_ratio=silence_ratio(start, end, silence_intervals),
        speech_density=speech_density(
            start, end, transcript, default=no_transcript_density
        ),
        keyword_score=keyword_score(start, end, transcript),
    )


def score_window(
    start: float,
    end: float,
    transcript: list[TranscriptSegment],
    silence_intervals: list[SilenceInterval],
    *,
    no_transcript_density: float = 0.6,
) -> float:
    """Composite score 0.45·density + 0.35·energy + 0.2·keywords, 3 decimals."""
    return window_features(
        start,
        end,
        transcript,
        silence_intervals,
        no_transcript_density=no_transcript_density,
    ).score
