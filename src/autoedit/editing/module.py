"""Analysis module: probe, detect, score and build the EDL for one video."""

from __future__ import annotations

from pathlib import Path

from autoedit.editing.candidates import top_candidates
from autoedit.editing.edl_builder import build_edl
from autoedit.editing.energy import measure_energy_profile, rank_energy_windows
from autoedit.editing.silence import detect_silence_intervals
from autoedit.editing.validate import validate_edl
from autoedit.models.analysis import AnalysisSummary
from autoedit.models.config import Aggressiveness, AppConfig, ToolPaths
from autoedit.models.transcript import TranscriptSegment
from autoedit.utils.ffprobe import probe_media
from autoedit.utils.io import write_json
from autoedit.utils.progress import log_step, log_success, log_warning


def analyze_video(
    input_path: Path | str,
    output_dir: Path | str,
    *,
    transcript: list[TranscriptSegment] | None = None,
    tools: ToolPaths,
    config: AppConfig | None = None,
    aggressiveness: Aggressiveness | None = None,
) -> AnalysisSummary:
    """Analyze a video and write ``edl.json`` and ``analysis.json``.

    Steps:
    1. Probe duration
    2. Silence detection (builder preset)
    3. Clip candidate scoring
    4. Energy ranking (optional, advisory)
    5. Build and validate the EDL

    Validation problems are logged as warnings; the EDL is still written.
    """
    config = config or AppConfig()
    transcript = transcript or []
    input_path = Path(input_path)
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    # Step 1: Probe
    info = probe_media(input_path, tools=tools)
    duration = info.duration_seconds
    log_step("Analyze", f"{input_path.name}: {duration:.2f}s, {len(transcript)} transcript segments")

    # Step 2: Silence
    silence = detect_silence_intervals(input_path, tools=tools, config=config.builder.silence)

    # Step 3: Candidates
    candidates = top_candidates(duration, config.clip_lengths, transcript, silence)
    if candidates:
        best = candidates[0]
        log_step("Candidates", f"Best clip {best.start:.1f}s-{best.end:.1f}s (score {best.score})")

    # Step 4: Energy
    energy_windows = []
    if config.energy_profile and info.has_audio:
        profile = measure_energy_profile(input_path, tools=tools)
        energy_windows = rank_energy_windows(profile, duration, silence)

    # Step 5: EDL
    edl = build_edl(
        duration,
        transcript,
        silence,
        aggressiveness=aggressiveness,
        config=config.builder,
    )
    validation = validate_edl(edl)
    for error in validation.errors:
        log_warning(f"EDL: {error}")

    summary = AnalysisSummary(
        chosen_start=edl.hook.start,
        chosen_end=edl.hook.end,
        hook_start=edl.hook.start,
        hook_end=edl.hook.end,
        improvements=[
            f"Hook from {edl.hook.start:.1f}s",
            f"Removed {edl.expected_change.total_removed_sec:.1f}s",
            f"{len(edl.segments)} high-value segments kept",
        ],
        edl=edl,
        validation_errors=validation.errors,
        candidates=candidates,
        energy_windows=energy_windows,
    )

    log_step("Write", f"Writing edl.json and analysis.json to {output_dir}")
    write_json(output_dir / "edl.json", edl.to_json_dict())
    write_json(output_dir / "analysis.json", summary.to_json_dict())

    log_success(
        f"Analysis complete: hook {edl.hook.start:.1f}s, {len(edl.segments)} segments, "
        f"{edl.expected_change.total_removed_sec:.1f}s removed"
    )
    return summary
