"""Retention plan models (planner-internal diagnostics)."""

from __future__ import annotations

from pydantic import BaseModel, Field

from autoedit.models.config import Aggressiveness
from autoedit.models.edl import EDLHook, EDLSegment


class RetentionStats(BaseModel):
    duration: float
    kept_duration: float
    keep_ratio: float
    aggressiveness: Aggressiveness
    window_size: float
    step: float


class RetentionPlan(BaseModel):
    hook: EDLHook
    segments: list[EDLSegment] = Field(default_factory=list)
    stats: RetentionStats
