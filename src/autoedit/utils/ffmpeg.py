"""FFmpeg process runner, progress parsing and stall supervision."""

from __future__ import annotations

import os
import queue
import shutil
import subprocess
import threading
import time
from dataclasses import dataclass
from typing import Callable, Protocol

from autoedit.models.config import ToolPaths
from autoedit.models.render import ProgressUpdate
from autoedit.utils.progress import log_debug, log_error

OUTPUT_TAIL_CHARS = 4000


class FFmpegError(Exception):
    """Raised when an FFmpeg command fails."""

    def __init__(
        self,
        cmd: list[str],
        returncode: int | None,
        stderr: str,
        stdout: str = "",
        message: str | None = None,
    ):
        self.cmd = cmd
        self.returncode = returncode
        self.stderr = stderr
        self.stdout = stdout
        super().__init__(message or f"FFmpeg failed (rc={returncode}): {stderr[-500:]}")


class FFmpegStalledError(FFmpegError):
    """Raised when a render stops reporting progress and is killed."""


class ToolNotFoundError(RuntimeError):
    """Raised when ffmpeg or ffprobe cannot be located."""


@dataclass
class CommandResult:
    stdout: str
    stderr: str
    returncode: int


class ProcessRunner(Protocol):
    """Anything that runs ``binary args...`` and returns its captured output."""

    def __call__(self, binary: str, args: list[str], *, check: bool = True) -> CommandResult: ...


def tail(text: str | None, limit: int = OUTPUT_TAIL_CHARS) -> str:
    """Keep the last ``limit`` characters of process output."""
    if not text:
        return ""
    return text[-limit:]


def _resolve_binary(name: str, env_var: str) -> str:
    env_path = os.environ.get(env_var)
    if env_path and os.path.exists(env_path):
        log_debug("tools", f"Using {env_var}: {env_path}")
        return env_path

    found = shutil.which(name)
    if found:
        log_debug("tools", f"Using PATH binary: {found}")
        return found

    raise ToolNotFoundError(
        f"{name} not found. Set {env_var} or add {name} to PATH."
    )


def resolve_tool_paths() -> ToolPaths:
    """Locate ffmpeg and ffprobe: environment variable first, then PATH.

    Call once at startup and pass the result down.
    """
    return ToolPaths(
        ffmpeg=_resolve_binary("ffmpeg", "FFMPEG_PATH"),
        ffprobe=_resolve_binary("ffprobe", "FFPROBE_PATH"),
    )


def run_command(binary: str, args: list[str], *, check: bool = True) -> CommandResult:
    """Run a command to completion and capture its output."""
    cmd = [binary, *args]
    log_debug("exec", " ".join(cmd))
    result = subprocess.run(cmd, capture_output=True, text=True)
    if check and result.returncode != 0:
        log_error(f"{os.path.basename(binary)} exited with code {result.returncode}")
        raise FFmpegError(cmd, result.returncode, tail(result.stderr), tail(result.stdout))
    return CommandResult(
        stdout=result.stdout,
        stderr=result.stderr,
        returncode=result.returncode,
    )


def parse_progress_line(line: str) -> tuple[str, str] | None:
    """Split one ``key=value`` line of ``-progress`` output."""
    line = line.strip()
    if "=" not in line:
        return None
    key, _, value = line.partition("=")
    key = key.strip()
    if not key:
        return None
    return key, value.strip()


def _parse_speed(raw: str | None) -> float:
    if not raw:
        return 0.0
    try:
        return float(raw.rstrip("x").strip())
    except ValueError:
        return 0.0


class ProgressTracker:
    """Accumulates ``-progress`` key/values and emits updates on time ticks."""

    TIME_KEYS = ("out_time_us", "out_time_ms")

    def __init__(self, expected_duration_sec: float):
        self.expected_duration_sec = expected_duration_sec
        self.data: dict[str, str] = {}
        self.last_update: ProgressUpdate | None = None

    def feed(self, line: str) -> ProgressUpdate | None:
        parsed = parse_progress_line(line)
        if parsed is None:
            return None
        key, value = parsed
        self.data[key] = value
        if key not in self.TIME_KEYS:
            return None

        # Both keys carry microseconds.
        try:
            out_time_sec = int(value) / 1_000_000
        except ValueError:
            return None

        expected = self.expected_duration_sec
        speed = _parse_speed(self.data.get("speed"))
        progress = min(1.0, out_time_sec / expected) if expected > 0 else 0.0
        eta = max(0.0, (expected - out_time_sec) / max(speed, 0.1)) if expected > 0 else 0.0

        self.last_update = ProgressUpdate(
            out_time_sec=out_time_sec,
            speed=speed,
            progress=max(0.0, progress),
            eta_sec=eta,
            raw=dict(self.data),
        )
        return self.last_update

    def final(self) -> ProgressUpdate | None:
        if self.last_update is None:
            return None
        return self.last_update.model_copy(update={"progress": 1.0, "eta_sec": 0.0})


def _pump(stream, sink: list[str], events: queue.Queue | None) -> None:
    for line in iter(stream.readline, ""):
        sink.append(line)
        if events is not None:
            events.put(line)
    stream.close()
    if events is not None:
        events.put(None)


def _kill(proc: subprocess.Popen) -> None:
    if proc.poll() is None:
        proc.kill()
    proc.wait()


def run_with_progress(
    binary: str,
    args: list[str],
    *,
    expected_duration_sec: float,
    on_progress: Callable[[ProgressUpdate], None] | None = None,
    stall_timeout_sec: float = 10.0,
) -> CommandResult:
    """Run an encode that writes ``-progress pipe:1`` and supervise it.

    The process is hard-killed and ``FFmpegStalledError`` raised if no
    progress tick arrives within ``stall_timeout_sec``.
    """
    cmd = [binary, *args]
    log_debug("exec", " ".join(cmd))

    proc = subprocess.Popen(
        cmd,
        stdin=subprocess.DEVNULL,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
        bufsize=1,
    )

    events: queue.Queue[str | None] = queue.Queue()
    stdout_lines: list[str] = []
    stderr_lines: list[str] = []
    readers = [
        threading.Thread(target=_pump, args=(proc.stdout, stdout_lines, events), daemon=True),
        threading.Thread(target=_pump, args=(proc.stderr, stderr_lines, None), daemon=True),
    ]
    for reader in readers:
        reader.start()

    tracker = ProgressTracker(expected_duration_sec)
    last_tick = time.monotonic()

    def stalled() -> FFmpegStalledError:
        _kill(proc)
        for reader in readers:
            reader.join(timeout=1.0)
        log_error(f"No progress for {stall_timeout_sec:.0f}s, render killed")
        return FFmpegStalledError(
            cmd,
            proc.returncode,
            tail("".join(stderr_lines)),
            tail("".join(stdout_lines)),
            message="FFmpeg stalled during final render",
        )

    try:
        while True:
            remaining = stall_timeout_sec - (time.monotonic() - last_tick)
            if remaining <= 0:
                raise stalled()
            try:
                line = events.get(timeout=remaining)
            except queue.Empty:
                raise stalled()
            if line is None:
                break
            update = tracker.feed(line)
            if update is not None:
                last_tick = time.monotonic()
                if on_progress:
                    on_progress(update)

        # stdout closed; the process should exit promptly.
        try:
            returncode = proc.wait(timeout=stall_timeout_sec)
        except subprocess.TimeoutExpired:
            raise stalled()
    except BaseException:
        _kill(proc)
        raise
    for reader in readers:
        reader.join(timeout=1.0)

    stdout = "".join(stdout_lines)
    stderr = "".join(stderr_lines)
    if returncode != 0:
        log_error(f"{os.path.basename(binary)} exited with code {returncode}")
        log_debug("exec", f"stderr (last 500 chars):\n{stderr[-500:]}")
        raise FFmpegError(cmd, returncode, tail(stderr), tail(stdout))

    final = tracker.final()
    if final is not None and on_progress:
        on_progress(final)

    return CommandResult(stdout=stdout, stderr=stderr, returncode=returncode)
