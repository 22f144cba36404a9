"""Transcript providers.

Speech-to-text runs elsewhere; this module only loads its output into the
typed ``TranscriptSegment`` contract.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from autoedit.models.transcript import Transcript, TranscriptSegment
from autoedit.utils.io import read_json
from autoedit.utils.progress import log_step


class TranscriptProvider(Protocol):
    """Returns timed transcript segments for a media file (possibly none)."""

    def __call__(self, media_path: Path) -> list[TranscriptSegment]: ...


def load_transcript(path: Path | str) -> list[TranscriptSegment]:
    """Load ``{"segments": [...]}`` or a bare list of segments."""
    data = read_json(path)
    if isinstance(data, list):
        data = {"segments": data}
    transcript = Transcript(**data)
    segments = sorted(transcript.segments, key=lambda s: s.start)
    log_step(
        "Transcript",
        f"Loaded {len(segments)} segments, "
        f"{sum(s.word_count for s in segments)} words",
    )
    return segments


class JsonTranscriptProvider:
    """Reads a transcript previously written next to the media."""

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def __call__(self, media_path: Path) -> list[TranscriptSegment]:
        return load_transcript(self.path)


class NullTranscriptProvider:
    """Used when no transcript is available; analysis falls back to audio cues."""

    def __call__(self, media_path: Path) -> list[TranscriptSegment]:
        return []
