"""Transcript and silence data models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class TranscriptSegment(BaseModel):
    """A timed span of transcribed speech."""

    start: float
    end: float
    text: str = ""

    @property
    def duration(self) -> float:
        return self.end - self.start

    @property
    def word_count(self) -> int:
        return len(self.text.split())


class SilenceInterval(BaseModel):
    """A detected stretch of silence (start < end)."""

    start: float
    end: float

    @property
    def duration(self) -> float:
        return self.end - self.start


class Transcript(BaseModel):
    """Transcript file wrapper as written by the speech-to-text step."""

    language: str = "en"
    segments: list[TranscriptSegment] = Field(default_factory=list)
