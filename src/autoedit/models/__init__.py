"""Pydantic data models for autoedit."""

from autoedit.models.edl import EDL, EDLHook, EDLSegment, ExpectedChange, ValidationResult
from autoedit.models.transcript import SilenceInterval, Transcript, TranscriptSegment
from autoedit.models.config import (
    AppConfig,
    BuilderConfig,
    RenderConfig,
    RetentionConfig,
    ToolPaths,
)

__all__ = [
    "EDL",
    "EDLHook",
    "EDLSegment",
    "ExpectedChange",
    "ValidationResult",
    "SilenceInterval",
    "Transcript",
    "TranscriptSegment",
    "AppConfig",
    "BuilderConfig",
    "RenderConfig",
    "RetentionConfig",
    "ToolPaths",
]
