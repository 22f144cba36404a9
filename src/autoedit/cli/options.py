"""Helpers shared by the subcommands."""

from __future__ import annotations

from autoedit.editing.transcript import load_transcript
from autoedit.models.config import AppConfig, ToolPaths
from autoedit.models.transcript import TranscriptSegment
from autoedit.pipeline.orchestrator import load_config
from autoedit.utils.ffmpeg import ToolNotFoundError, resolve_tool_paths
from autoedit.utils.progress import log_error

AGGRESSIVENESS = ["low", "med", "high"]


def tools_or_exit() -> ToolPaths:
    try:
        return resolve_tool_paths()
    except ToolNotFoundError as e:
        log_error(str(e))
        raise SystemExit(1)


def config_or_exit(path: str | None) -> AppConfig:
    try:
        return load_config(path)
    except (OSError, ValueError) as e:
        log_error(f"Invalid config {path}: {e}")
        raise SystemExit(1)


def transcript_or_exit(path: str | None) -> list[TranscriptSegment]:
    if path is None:
        return []
    try:
        return load_transcript(path)
    except (OSError, ValueError) as e:
        log_error(f"Could not read transcript {path}: {e}")
        raise SystemExit(1)
