"""FFmpeg filter_complex construction for EDL renders."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from autoedit.models.config import ExportQuality
from autoedit.models.edl import EDLHook, EDLSegment

SOUND_ENHANCE_CHAIN = "loudnorm=I=-16:TP=-1.5:LRA=11,highpass=f=60,alimiter,afftdn=nf=-20"

QUALITY_HEIGHTS: dict[str, int] = {
    "720p": 720,
    "1080p": 1080,
    "4k": 2160,
}


@dataclass(frozen=True)
class FilterGraph:
    filter_complex: str
    video_out: str
    audio_out: str


def build_audio_filter(sound_enhance: bool) -> str | None:
    return SOUND_ENHANCE_CHAIN if sound_enhance else None


def _ts(value: float) -> str:
    return f"{value:.3f}"


def _escape_drawtext(text: str) -> str:
    for ch in ("\\", ":", "'", "%"):
        text = text.replace(ch, f"\\{ch}")
    return text


def build_filter_complex(
    parts: list[EDLHook | EDLSegment],
    *,
    sound_enhance: bool = True,
    watermark: bool = False,
    export_quality: ExportQuality | None = None,
    watermark_text: str = "AutoEditor",
    watermark_font: str | None = None,
) -> FilterGraph:
    """Trim each part out of input 0 and concatenate them in order.

    ``parts`` is the hook followed by the body segments.
    """
    if not parts:
        raise ValueError("No parts to render")

    filters = []
    concat_inputs = []
    for i, part in enumerate(parts):
        filters.append(
            f"[0:v]trim=start={_ts(part.start)}:end={_ts(part.end)},"
            f"setpts=PTS-STARTPTS[v{i}]"
        )
        filters.append(
            f"[0:a]atrim=start={_ts(part.start)}:end={_ts(part.end)},"
            f"asetpts=PTS-STARTPTS[a{i}]"
        )
        concat_inputs.append(f"[v{i}][a{i}]")

    filters.append(f"{''.join(concat_inputs)}concat=n={len(parts)}:v=1:a=1[v][a]")

    video_out = "v"
    if export_quality:
        height = QUALITY_HEIGHTS[export_quality]
        filters.append(
            f"[{video_out}]scale=-2:{height}:force_original_aspect_ratio=decrease[vscaled]"
        )
        video_out = "vscaled"

    if watermark:
        drawtext = (
            f"drawtext=text='{_escape_drawtext(watermark_text)}':fontsize=20:"
            "fontcolor=white@0.4:x=w-tw-10:y=h-th-10"
        )
        if watermark_font:
            drawtext += f":fontfile='{_escape_drawtext(watermark_font)}'"
        filters.append(f"[{video_out}]{drawtext}[vout]")
        video_out = "vout"

    audio_out = "a"
    audio_filter = build_audio_filter(sound_enhance)
    if audio_filter:
        filters.append(f"[a]{audio_filter}[aout]")
        audio_out = "aout"

    return FilterGraph(
        filter_complex=";".join(filters),
        video_out=video_out,
        audio_out=audio_out,
    )


def build_render_args(
    input_path: Path | str,
    output_path: Path | str,
    graph: FilterGraph,
    *,
    fast_render: bool = False,
    audio_bitrate: str = "192k",
) -> list[str]:
    """ffmpeg arguments (without the binary) for an H.264/AAC render."""
    preset, crf = ("ultrafast", "28") if fast_render else ("veryfast", "24")
    return [
        "-hide_banner",
        "-y",
        "-i", str(input_path),
        "-filter_complex", graph.filter_complex,
        "-map", f"[{graph.video_out}]",
        "-map", f"[{graph.audio_out}]",
        "-c:v", "libx264",
        "-preset", preset,
        "-crf", crf,
        "-pix_fmt", "yuv420p",
        "-c:a", "aac",
        "-b:a", audio_bitrate,
        "-movflags", "+faststart",
        "-progress", "pipe:1",
        "-nostats",
        str(output_path),
    ]
