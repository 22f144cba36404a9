"""Tests for autoedit.utils.ffprobe."""

from __future__ import annotations

import json

import pytest

from autoedit.utils.ffmpeg import CommandResult, FFmpegError
from autoedit.utils.ffprobe import parse_duration_banner, probe_media

FFPROBE_JSON = {
    "streams": [
        {"codec_type": "video", "width": 1280, "height": 720},
        {"codec_type": "audio"},
    ],
    "format": {"duration": "62.500000", "format_name": "mov,mp4,m4a,3gp,3g2,mj2"},
}


class TestProbeMedia:
    def test_parses_ffprobe_json(self, tools, fake_runner, media_file) -> None:
        runner = fake_runner({"ffprobe": CommandResult(json.dumps(FFPROBE_JSON), "", 0)})
        info = probe_media(media_file, tools=tools, runner=runner)
        assert info.duration_seconds == pytest.approx(62.5)
        assert (info.width, info.height) == (1280, 720)
        assert info.has_audio
        assert info.size_bytes == 2048
        assert info.format_name.startswith("mov")

    def test_falls_back_to_banner(self, tools, fake_runner, media_file) -> None:
        runner = fake_runner({
            "ffprobe": FFmpegError(["ffprobe"], 1, "moov atom not found"),
            "ffmpeg": CommandResult("", "  Duration: 00:01:02.50, start: 0.000000\n", 1),
        })
        info = probe_media(media_file, tools=tools, runner=runner)
        assert info.duration_seconds == pytest.approx(62.5)
        assert [call[0] for call in runner.calls] == ["ffprobe", "ffmpeg"]

    def test_no_duration_anywhere(self, tools, fake_runner, media_file) -> None:
        runner = fake_runner({
            "ffprobe": FFmpegError(["ffprobe"], 1, "Invalid data found when processing input"),
            "ffmpeg": CommandResult("", "input.mp4: Invalid data found\n", 1),
        })
        with pytest.raises(ValueError, match="No duration"):
            probe_media(media_file, tools=tools, runner=runner)

    def test_zero_duration_is_an_error(self, tools, fake_runner, media_file) -> None:
        data = {"streams": [], "format": {"duration": "0"}}
        runner = fake_runner({"ffprobe": CommandResult(json.dumps(data), "", 0)})
        with pytest.raises(ValueError):
            probe_media(media_file, tools=tools, runner=runner)

    def test_missing_file(self, tools, fake_runner, tmp_path) -> None:
        with pytest.raises(FileNotFoundError):
            probe_media(tmp_path / "nope.mp4", tools=tools, runner=fake_runner())


class TestParseDurationBanner:
    def test_hours_minutes_seconds(self) -> None:
        assert parse_duration_banner("Duration: 01:02:03.25, start") == pytest.approx(3723.25)

    def test_absent(self) -> None:
        assert parse_duration_banner("no banner here") == 0.0
