"""Analyze-then-render job runner."""

from __future__ import annotations

import time
import uuid
from pathlib import Path

from autoedit.editing.module import analyze_video
from autoedit.models.config import AppConfig, ToolPaths
from autoedit.models.render import RenderResult
from autoedit.models.transcript import TranscriptSegment
from autoedit.pipeline.sink import ConsoleSink, JobSink
from autoedit.rendering.apply import apply_edl
from autoedit.utils.io import read_yaml, write_json
from autoedit.utils.progress import log, show_stage_summary


def load_config(path: Path | str | None = None) -> AppConfig:
    """Load ``AppConfig`` from YAML; no path or a missing file gives defaults."""
    if path is None:
        return AppConfig()
    path = Path(path)
    if not path.exists():
        return AppConfig()
    return AppConfig(**read_yaml(path))


def run_job(
    input_path: Path | str,
    output_dir: Path | str,
    *,
    transcript: list[TranscriptSegment] | None = None,
    tools: ToolPaths,
    config: AppConfig | None = None,
    sink: JobSink | None = None,
    job_id: str | None = None,
    output_name: str = "final.mp4",
) -> RenderResult:
    """Analyze ``input_path`` and render the resulting EDL.

    Writes ``edl.json``, ``analysis.json``, the video and
    ``render-result.json`` into ``output_dir``. Analysis errors propagate;
    render failures come back as an unsuccessful ``RenderResult``.
    """
    config = config or AppConfig()
    sink = sink or ConsoleSink()
    job_id = job_id or uuid.uuid4().hex[:12]
    input_path = Path(input_path)
    output_dir = Path(output_dir)
    output_path = output_dir / output_name

    log(f"[bold]autoedit[/bold] job {job_id}: {input_path.name}")
    started = time.time()

    sink.stage("Analyzing", "Detecting silence and scoring")
    try:
        summary = analyze_video(
            input_path,
            output_dir,
            transcript=transcript,
            tools=tools,
            config=config,
        )
    except Exception as e:
        sink.fail("Analyze failed", str(e)[:500])
        raise

    sink.stage("Rendering", f"Applying EDL ({len(summary.edl.segments)} segments)")
    result = apply_edl(
        input_path,
        summary.edl,
        output_path,
        tools=tools,
        config=config.render,
        job_id=job_id,
        on_progress=sink.progress,
    )
    write_json(
        output_dir / "render-result.json",
        result.model_dump(mode="json", by_alias=True),
    )

    if not result.success:
        sink.fail(result.error or "Render failed", result.details)
        return result

    sink.complete({
        "job_id": job_id,
        "output": str(output_path),
        "original_duration_sec": result.original_duration_sec,
        "final_duration_sec": result.final_duration_sec,
        "removed_sec": result.removed_sec,
        "improvements": summary.improvements,
    })
    show_stage_summary(
        "Job",
        time.time() - started,
        {
            "Hook": f"{summary.hook_start:.1f}s-{summary.hook_end:.1f}s",
            "Segments": len(result.used_edl.segments) if result.used_edl else 0,
            "Original": f"{result.original_duration_sec:.1f}s",
            "Final": f"{result.final_duration_sec:.1f}s",
            "Output": output_path.name,
        },
    )
    return result
