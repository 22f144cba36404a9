"""
Test configuration and shared fixtures.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from autoedit.models.config import ToolPaths
from autoedit.models.edl import EDL, EDLHook, EDLSegment
from autoedit.models.transcript import SilenceInterval, TranscriptSegment
from autoedit.utils.ffmpeg import CommandResult


class FakeRunner:
    """Stands in for ``run_command``; answers per binary and records calls."""

    def __init__(self, responses: dict | None = None):
        self.responses = responses or {}
        self.calls: list[tuple[str, list[str]]] = []

    def __call__(self, binary: str, args: list[str], *, check: bool = True) -> CommandResult:
        self.calls.append((binary, list(args)))
        response = self.responses.get(binary, CommandResult(stdout="", stderr="", returncode=0))
        if isinstance(response, Exception):
            raise response
        return response


def make_edl(
    hook: tuple[float, float],
    segments: list[tuple[float, float]],
    duration: float,
    *,
    score: float = 0.6,
) -> EDL:
    return EDL.from_parts(
        EDLHook(start=hook[0], end=hook[1], reason="test hook"),
        [EDLSegment(start=s, end=e, reason="test", score=score) for s, e in segments],
        duration,
    )


@pytest.fixture
def tools() -> ToolPaths:
    return ToolPaths(ffmpeg="ffmpeg", ffprobe="ffprobe")


@pytest.fixture
def fake_runner() -> type[FakeRunner]:
    return FakeRunner


@pytest.fixture
def edl_factory():
    return make_edl


@pytest.fixture
def secret_transcript() -> list[TranscriptSegment]:
    """Transcript with one keyword-heavy moment at 40 s."""
    return [
        TranscriptSegment(start=0.0, end=5.0, text="welcome back to the channel everyone"),
        TranscriptSegment(start=40.0, end=43.0, text="this is the secret"),
    ]


@pytest.fixture
def talk_transcript() -> list[TranscriptSegment]:
    """Two minutes of steady speech, one segment every 4 s."""
    lines = [
        "so today we are going to look at something new",
        "and the first thing you notice is the color of it",
        "why would anyone build it like this in the first place",
        "I honestly did not expect that to work at all",
        "watch closely because this part happens really fast",
        "we tried it three times and got the same result",
    ]
    return [
        TranscriptSegment(start=float(t), end=float(t + 3.5), text=lines[(t // 4) % len(lines)])
        for t in range(0, 120, 4)
    ]


@pytest.fixture
def gappy_silence() -> list[SilenceInterval]:
    return [
        SilenceInterval(start=0.0, end=2.0),
        SilenceInterval(start=20.0, end=30.0),
        SilenceInterval(start=47.5, end=49.0),
    ]


@pytest.fixture
def media_file(tmp_path: Path) -> Path:
    path = tmp_path / "input.mp4"
    path.write_bytes(b"\x00" * 2048)
    return path
