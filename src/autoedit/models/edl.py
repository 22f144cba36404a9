"""EDL (Edit Decision List) model.

The JSON shape is shared with callers that persist it verbatim, so fields
are dumped with camelCase aliases (``expectedChange``,
``originalDurationSec`` ...).
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class EDLHook(_CamelModel):
    """The short opening moved to the front of the cut."""

    start: float
    end: float
    reason: str = ""

    @property
    def duration(self) -> float:
        return self.end - self.start


class EDLSegment(_CamelModel):
    """A kept time range of the source."""

    start: float
    end: float
    reason: str = ""
    score: float = Field(default=0.0, ge=0.0, le=1.0)

    @property
    def duration(self) -> float:
        return self.end - self.start

    def overlaps(self, start: float, end: float) -> bool:
        return self.start < end and start < self.end


class ExpectedChange(_CamelModel):
    original_duration_sec: float
    final_duration_sec: float
    total_removed_sec: float


class EDL(_CamelModel):
    """Hook plus kept segments for one source video."""

    version: int = 1
    hook: EDLHook
    segments: list[EDLSegment] = Field(default_factory=list)
    notes: str = ""
    expected_change: ExpectedChange

    @classmethod
    def from_parts(
        cls,
        hook: EDLHook,
        segments: list[EDLSegment],
        duration: float,
        *,
        notes: str = "",
    ) -> EDL:
        """Assemble an EDL, deriving ``expected_change`` from its parts."""
        final = hook.duration + sum(s.duration for s in segments)
        return cls(
            hook=hook,
            segments=segments,
            notes=notes,
            expected_change=ExpectedChange(
                original_duration_sec=duration,
                final_duration_sec=final,
                total_removed_sec=max(0.0, duration - final),
            ),
        )

    @property
    def original_duration(self) -> float:
        return self.expected_change.original_duration_sec

    @property
    def hook_duration(self) -> float:
        return self.hook.duration

    @property
    def segments_duration(self) -> float:
        return sum(s.duration for s in self.segments)

    @property
    def kept_seconds(self) -> float:
        return self.hook_duration + self.segments_duration

    def to_json_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class ValidationResult(BaseModel):
    """Outcome of a structural EDL check."""

    valid: bool
    errors: list[str] = Field(default_factory=list)
