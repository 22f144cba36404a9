"""Render progress and result models."""

from __future__ import annotations

from pydantic import BaseModel, Field

from autoedit.models.edl import EDL


class ProgressUpdate(BaseModel):
    """One parsed ffmpeg ``-progress`` event."""

    out_time_sec: float
    speed: float = 0.0
    progress: float = Field(default=0.0, ge=0.0, le=1.0)
    eta_sec: float = 0.0
    raw: dict[str, str] = Field(default_factory=dict)


class OutputCheck(BaseModel):
    """Checks applied to a rendered file."""

    valid: bool
    output_size_bytes: int = 0
    output_duration_sec: float | None = None
    input_size_bytes: int = 0
    reason: str | None = None


class ValidationDetails(BaseModel):
    kept_sec: float | None = None
    segment_count: int | None = None
    hook_start: float | None = None
    hook_end: float | None = None
    output_size_bytes: int | None = None
    output_duration_sec: float | None = None
    input_size_bytes: int | None = None
    fallback_used: bool = False


class RenderResult(BaseModel):
    """Outcome of applying an EDL. Failures are data, not exceptions."""

    success: bool
    error: str | None = None
    details: str | None = None
    stderr: str | None = None
    used_edl: EDL | None = None
    original_duration_sec: float | None = None
    final_duration_sec: float | None = None
    removed_sec: float | None = None
    validation_details: ValidationDetails | None = None
