"""Configuration models for analysis and rendering.

The EDL builder and the retention planner each have their own scoring preset.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

Aggressiveness = Literal["low", "med", "high"]
ExportQuality = Literal["720p", "1080p", "4k"]


class SilenceConfig(BaseModel):
    """ffmpeg ``silencedetect`` parameters."""

    noise_db: float = Field(default=-30.0, ge=-90.0, le=0.0)
    min_duration: float = Field(default=0.2, ge=0.05, le=10.0)


class BuilderConfig(BaseModel):
    """Preset used by the EDL builder."""

    window_size: float = Field(default=3.0, gt=0.0)
    step: float = Field(default=1.5, gt=0.0)
    no_transcript_density: float = Field(default=0.6, ge=0.0, le=1.0)
    rewrite_no_transcript_density: float = Field(default=0.3, ge=0.0, le=1.0)
    silence: SilenceConfig = Field(default_factory=SilenceConfig)
    thresholds: dict[str, float] = Field(
        default_factory=lambda: {"low": 0.35, "med": 0.45, "high": 0.55}
    )
    keep_ratios: dict[str, float] = Field(
        default_factory=lambda: {"low": 0.65, "med": 0.5, "high": 0.4}
    )
    max_silence_ratio: float = Field(default=0.7, ge=0.0, le=1.0)
    threshold_relief: float = Field(default=0.15, ge=0.0, le=0.5)
    threshold_floor: float = Field(default=0.25, ge=0.0, le=1.0)
    merge_gap: float = Field(default=0.3, ge=0.0, le=5.0)
    min_segment: float = Field(default=0.8, ge=0.1, le=10.0)
    min_duration: float = Field(default=5.0, ge=0.0)
    aggressiveness: Aggressiveness = "high"


class RetentionConfig(BaseModel):
    """Preset used by the retention planner."""

    window_size: float = Field(default=4.0, gt=0.0)
    step: float = Field(default=2.0, gt=0.0)
    no_transcript_density: float = Field(default=0.6, ge=0.0, le=1.0)
    silence: SilenceConfig = Field(
        default_factory=lambda: SilenceConfig(noise_db=-35.0, min_duration=0.6)
    )
    thresholds: dict[str, float] = Field(
        default_factory=lambda: {"low": 0.35, "med": 0.45, "high": 0.55}
    )
    keep_ratios: dict[str, float] = Field(
        default_factory=lambda: {"low": 0.65, "med": 0.5, "high": 0.4}
    )
    max_silence_ratio: float = Field(default=0.65, ge=0.0, le=1.0)
    threshold_relief: float = Field(default=0.1, ge=0.0, le=0.5)
    threshold_floor: float = Field(default=0.25, ge=0.0, le=1.0)
    merge_gap: float = Field(default=0.2, ge=0.0, le=5.0)
    min_segment: float = Field(default=0.8, ge=0.1, le=10.0)
    min_keep_seconds: float = Field(default=30.0, ge=0.0)
    aggressiveness: Aggressiveness = "high"


class RenderConfig(BaseModel):
    """Render-time repair, encode and output checks."""

    stall_timeout_sec: float = Field(default=10.0, gt=0.0, le=600.0)
    max_segments: int = Field(default=25, ge=2, le=200)
    merge_gap: float = Field(default=0.4, ge=0.0, le=5.0)
    min_segment: float = Field(default=0.8, ge=0.1, le=10.0)
    fast_render: bool = False
    sound_enhance: bool = True
    watermark: bool = False
    watermark_text: str = "AutoEditor"
    watermark_font: str | None = None
    export_quality: ExportQuality | None = None
    audio_bitrate: str = "192k"
    min_output_bytes: int = Field(default=5_000_000, ge=0)
    min_output_ratio: float = Field(default=0.05, ge=0.0, le=1.0)
    min_duration_ratio: float = Field(default=0.9, ge=0.0, le=1.0)


class ToolPaths(BaseModel):
    """Locations of the ffmpeg binaries, resolved once at startup."""

    ffmpeg: str = "ffmpeg"
    ffprobe: str = "ffprobe"


class AppConfig(BaseModel):
    """Top-level configuration file (``autoedit.yaml``)."""

    builder: BuilderConfig = Field(default_factory=BuilderConfig)
    retention: RetentionConfig = Field(default_factory=RetentionConfig)
    render: RenderConfig = Field(default_factory=RenderConfig)
    clip_lengths: list[int] = Field(default_factory=lambda: [15, 30, 45])
    energy_profile: bool = True
