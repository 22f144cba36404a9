"""Tests for autoedit.editing.transcript."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from autoedit.editing.transcript import (
    JsonTranscriptProvider,
    NullTranscriptProvider,
    load_transcript,
)


class TestLoadTranscript:
    def test_wrapped_segments(self, tmp_path: Path) -> None:
        path = tmp_path / "transcript.json"
        path.write_text(json.dumps({
            "language": "en",
            "segments": [
                {"start": 5.0, "end": 7.0, "text": "second"},
                {"start": 0.0, "end": 2.0, "text": "first part"},
            ],
        }))
        segments = load_transcript(path)
        assert [s.text for s in segments] == ["first part", "second"]
        assert segments[0].word_count == 2

    def test_bare_list(self, tmp_path: Path) -> None:
        path = tmp_path / "transcript.json"
        path.write_text(json.dumps([{"start": 1.0, "end": 2.5}]))
        segments = load_transcript(path)
        assert len(segments) == 1
        assert segments[0].text == ""
        assert segments[0].duration == pytest.approx(1.5)

    def test_malformed_segment(self, tmp_path: Path) -> None:
        path = tmp_path / "transcript.json"
        path.write_text(json.dumps({"segments": [{"start": "soon"}]}))
        with pytest.raises(ValidationError):
            load_transcript(path)


class TestProviders:
    def test_json_provider(self, tmp_path: Path) -> None:
        path = tmp_path / "t.json"
        path.write_text(json.dumps([{"start": 0.0, "end": 1.0, "text": "hi"}]))
        provider = JsonTranscriptProvider(path)
        assert [s.text for s in provider(tmp_path / "video.mp4")] == ["hi"]

    def test_null_provider(self, tmp_path: Path) -> None:
        assert NullTranscriptProvider()(tmp_path / "video.mp4") == []
