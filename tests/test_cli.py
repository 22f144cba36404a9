"""Tests for the autoedit command line."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from autoedit import __version__
from autoedit.cli.main import cli
from autoedit.models.config import ToolPaths
from autoedit.models.render import RenderResult
from autoedit.utils.ffmpeg import ToolNotFoundError
from autoedit.utils.io import read_json, write_json


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def found_tools(monkeypatch) -> None:
    monkeypatch.setattr("autoedit.cli.options.resolve_tool_paths", lambda: ToolPaths())


@pytest.fixture
def edl_file(edl_factory, tmp_path: Path) -> Path:
    path = tmp_path / "edl.json"
    edl = edl_factory((40.0, 42.5), [(0.0, 20.0), (50.0, 80.0)], 120.0)
    write_json(path, edl.to_json_dict())
    return path


def test_version(runner) -> None:
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


class TestValidateCommand:
    def test_valid(self, runner, edl_file) -> None:
        result = runner.invoke(cli, ["validate", str(edl_file)])
        assert result.exit_code == 0, result.output

    def test_invalid(self, runner, edl_factory, tmp_path: Path) -> None:
        path = tmp_path / "edl.json"
        write_json(path, edl_factory((1.0, 3.5), [(10.0, 20.0)], 120.0).to_json_dict())
        result = runner.invoke(cli, ["validate", str(path)])
        assert result.exit_code == 1

    def test_unreadable(self, runner, tmp_path: Path) -> None:
        path = tmp_path / "edl.json"
        path.write_text("{not json")
        assert runner.invoke(cli, ["validate", str(path)]).exit_code == 1


class TestRenderCommand:
    def test_missing_ffmpeg(self, runner, monkeypatch, media_file, edl_file, tmp_path) -> None:
        def missing():
            raise ToolNotFoundError("ffmpeg not found")

        monkeypatch.setattr("autoedit.cli.options.resolve_tool_paths", missing)
        result = runner.invoke(
            cli, ["render", str(media_file), "-e", str(edl_file), "-o", str(tmp_path / "o.mp4")]
        )
        assert result.exit_code == 1

    def test_failure_writes_result(
        self, runner, monkeypatch, found_tools, media_file, edl_file, tmp_path
    ) -> None:
        seen = {}

        def fake_apply(input_path, edl, output_path, *, tools, config, on_progress):
            seen["config"] = config
            return RenderResult(success=False, error="FFmpeg render failed", stderr="boom")

        monkeypatch.setattr("autoedit.rendering.apply.apply_edl", fake_apply)
        out = tmp_path / "renders" / "final.mp4"
        result = runner.invoke(cli, [
            "render", str(media_file),
            "-e", str(edl_file),
            "-o", str(out),
            "--fast", "--no-sound-enhance", "-q", "720p", "--stall-timeout", "30",
        ])

        assert result.exit_code == 1
        saved = read_json(out.with_name("render-result.json"))
        assert saved["error"] == "FFmpeg render failed"
        config = seen["config"]
        assert config.fast_render
        assert not config.sound_enhance
        assert config.export_quality == "720p"
        assert config.stall_timeout_sec == 30.0

    def test_success(self, runner, monkeypatch, found_tools, media_file, edl_file, tmp_path) -> None:
        monkeypatch.setattr(
            "autoedit.rendering.apply.apply_edl",
            lambda *a, **kw: RenderResult(
                success=True, original_duration_sec=120.0, final_duration_sec=52.5
            ),
        )
        result = runner.invoke(
            cli, ["render", str(media_file), "-e", str(edl_file), "-o", str(tmp_path / "o.mp4")]
        )
        assert result.exit_code == 0, result.output


class TestAnalyzeCommand:
    def test_passes_options(self, runner, monkeypatch, found_tools, media_file, tmp_path) -> None:
        seen = {}

        def fake_analyze(input_path, output_dir, **kwargs):
            seen.update(kwargs, output_dir=output_dir)

        monkeypatch.setattr("autoedit.editing.module.analyze_video", fake_analyze)
        result = runner.invoke(
            cli, ["analyze", str(media_file), "-a", "med", "-o", str(tmp_path / "out")]
        )
        assert result.exit_code == 0, result.output
        assert seen["aggressiveness"] == "med"
        assert seen["transcript"] == []
        assert seen["output_dir"] == tmp_path / "out"

    def test_failure_exits_nonzero(self, runner, monkeypatch, found_tools, media_file) -> None:
        def broken(*args, **kwargs):
            raise ValueError("could not probe")

        monkeypatch.setattr("autoedit.editing.module.analyze_video", broken)
        assert runner.invoke(cli, ["analyze", str(media_file)]).exit_code == 1

    def test_bad_aggressiveness(self, runner, media_file) -> None:
        assert runner.invoke(cli, ["analyze", str(media_file), "-a", "max"]).exit_code == 2
