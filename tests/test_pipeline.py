"""Tests for autoedit.pipeline."""

from __future__ import annotations

from pathlib import Path

import pytest

from autoedit.models.analysis import AnalysisSummary
from autoedit.models.config import AppConfig
from autoedit.models.render import ProgressUpdate, RenderResult
from autoedit.pipeline import orchestrator
from autoedit.pipeline.sink import ConsoleSink, RecordingSink
from autoedit.utils.io import read_json


@pytest.fixture
def summary(edl_factory) -> AnalysisSummary:
    edl = edl_factory((40.0, 42.5), [(0.0, 20.0), (50.0, 80.0)], 120.0)
    return AnalysisSummary(
        chosen_start=0.0,
        chosen_end=80.0,
        hook_start=40.0,
        hook_end=42.5,
        improvements=["Hook from 40.0s"],
        edl=edl,
    )


@pytest.fixture
def analyzed(monkeypatch, summary):
    calls = []

    def fake_analyze(input_path, output_dir, **kwargs):
        calls.append((input_path, output_dir, kwargs))
        return summary

    monkeypatch.setattr(orchestrator, "analyze_video", fake_analyze)
    return calls


def _renderer(result: RenderResult):
    def fake_apply(input_path, edl, output_path, *, tools, config, job_id, on_progress):
        on_progress(ProgressUpdate(out_time_sec=10.0, progress=0.2))
        return result

    return fake_apply


class TestRunJob:
    def test_success(self, tools, analyzed, summary, monkeypatch, tmp_path: Path) -> None:
        result = RenderResult(
            success=True,
            used_edl=summary.edl,
            original_duration_sec=120.0,
            final_duration_sec=52.5,
            removed_sec=67.5,
        )
        monkeypatch.setattr(orchestrator, "apply_edl", _renderer(result))
        sink = RecordingSink()

        out = orchestrator.run_job(
            tmp_path / "in.mp4", tmp_path / "job", tools=tools, sink=sink, job_id="abc"
        )

        assert out.success
        assert [name for name, _ in sink.of_kind("stage")] == ["Analyzing", "Rendering"]
        assert sink.of_kind("progress")[0].progress == 0.2
        complete = sink.of_kind("complete")[0]
        assert complete["job_id"] == "abc"
        assert complete["output"] == str(tmp_path / "job" / "final.mp4")
        assert complete["improvements"] == ["Hook from 40.0s"]
        assert read_json(tmp_path / "job" / "render-result.json")["success"] is True

    def test_render_failure_is_returned(
        self, tools, analyzed, monkeypatch, tmp_path: Path
    ) -> None:
        result = RenderResult(success=False, error="No meaningful edits applied", details="x")
        monkeypatch.setattr(orchestrator, "apply_edl", _renderer(result))
        sink = RecordingSink()

        out = orchestrator.run_job(tmp_path / "in.mp4", tmp_path / "job", tools=tools, sink=sink)

        assert not out.success
        assert sink.of_kind("fail") == [("No meaningful edits applied", "x")]
        assert sink.of_kind("complete") == []
        saved = read_json(tmp_path / "job" / "render-result.json")
        assert saved["error"] == "No meaningful edits applied"

    def test_analysis_failure_propagates(self, tools, monkeypatch, tmp_path: Path) -> None:
        def broken(*args, **kwargs):
            raise ValueError("no duration")

        monkeypatch.setattr(orchestrator, "analyze_video", broken)
        sink = RecordingSink()
        with pytest.raises(ValueError):
            orchestrator.run_job(tmp_path / "in.mp4", tmp_path / "job", tools=tools, sink=sink)
        assert sink.of_kind("fail") == [("Analyze failed", "no duration")]

    def test_render_config_is_passed(
        self, tools, analyzed, summary, monkeypatch, tmp_path: Path
    ) -> None:
        seen = {}

        def fake_apply(input_path, edl, output_path, *, tools, config, job_id, on_progress):
            seen["config"] = config
            seen["edl"] = edl
            return RenderResult(success=False, error="FFmpeg render failed")

        monkeypatch.setattr(orchestrator, "apply_edl", fake_apply)
        config = AppConfig(render={"fast_render": True})
        orchestrator.run_job(
            tmp_path / "in.mp4", tmp_path / "job", tools=tools, config=config, sink=RecordingSink()
        )
        assert seen["config"].fast_render
        assert seen["edl"] is summary.edl
        assert analyzed[0][2]["config"] is config


class TestLoadConfig:
    def test_defaults(self, tmp_path: Path) -> None:
        assert orchestrator.load_config() == AppConfig()
        assert orchestrator.load_config(tmp_path / "missing.yaml") == AppConfig()

    def test_from_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "autoedit.yaml"
        path.write_text(
            "clip_lengths: [15, 30]\n"
            "render:\n"
            "  stall_timeout_sec: 20\n"
            "builder:\n"
            "  aggressiveness: med\n"
        )
        config = orchestrator.load_config(path)
        assert config.clip_lengths == [15, 30]
        assert config.render.stall_timeout_sec == 20.0
        assert config.builder.aggressiveness == "med"
        assert config.retention.window_size == 4.0


class TestConsoleSink:
    def test_progress_then_complete(self) -> None:
        sink = ConsoleSink()
        sink.stage("Rendering", "Applying EDL")
        sink.progress(ProgressUpdate(out_time_sec=1.0, speed=1.5, progress=0.5))
        sink.progress(ProgressUpdate(out_time_sec=2.0, progress=1.0))
        assert sink._progress is not None
        sink.complete({"output": "final.mp4"})
        assert sink._progress is None
