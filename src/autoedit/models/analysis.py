"""Analysis summary models (``analysis.json``)."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from autoedit.models.edl import EDL


class ClipCandidate(BaseModel):
    """A fixed-length clip window with its retention features."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    start: float
    end: float
    duration: float
    length_target: int
    score: int = 0
    silence_ratio: float = 0.0
    speech_density: float = 0.0
    energy: int = 0
    hook_signals: list[str] = Field(default_factory=list)
    hook_start: float | None = None


class EnergyWindow(BaseModel):
    """A window ranked by mean audio energy."""

    start: float
    end: float
    duration: float
    energy_avg: float
    silence_coverage: float
    score: float


class AnalysisSummary(BaseModel):
    """Summary written next to ``edl.json`` after an analysis pass."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    chosen_start: float
    chosen_end: float
    hook_start: float
    hook_end: float
    improvements: list[str] = Field(default_factory=list)
    edl: EDL
    validation_errors: list[str] = Field(default_factory=list)
    candidates: list[ClipCandidate] = Field(default_factory=list)
    energy_windows: list[EnergyWindow] = Field(default_factory=list)

    def to_json_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
