"""Job status sinks: where a running job reports stages and progress."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol

from rich.progress import (
    BarColumn,
    Progress,
    TaskID,
    TextColumn,
    TimeRemainingColumn,
)

from autoedit.models.render import ProgressUpdate
from autoedit.utils.progress import console, log_error, log_step, log_success


class JobSink(Protocol):
    """Receives status updates from ``run_job``."""

    def stage(self, name: str, message: str) -> None: ...
    def progress(self, update: ProgressUpdate) -> None: ...
    def complete(self, payload: dict[str, Any]) -> None: ...
    def fail(self, error: str, details: str | None = None) -> None: ...


class ConsoleSink:
    """Logs stages to the console and draws a progress bar while rendering."""

    def __init__(self) -> None:
        self._progress: Progress | None = None
        self._task: TaskID | None = None

    def stage(self, name: str, message: str) -> None:
        self._stop()
        log_step(name, message)

    def progress(self, update: ProgressUpdate) -> None:
        if self._progress is None:
            self._progress = Progress(
                TextColumn("[bold cyan]Render[/bold cyan]"),
                BarColumn(),
                TextColumn("{task.percentage:>3.0f}%"),
                TextColumn("{task.fields[speed]}"),
                TimeRemainingColumn(),
                console=console,
                transient=True,
            )
            self._progress.start()
            self._task = self._progress.add_task("render", total=1.0, speed="")
        self._progress.update(
            self._task,
            completed=update.progress,
            speed=f"{update.speed:.2f}x" if update.speed else "",
        )

    def complete(self, payload: dict[str, Any]) -> None:
        self._stop()
        log_success(f"Job complete: {payload.get('output', '')}")

    def fail(self, error: str, details: str | None = None) -> None:
        self._stop()
        log_error(f"{error}: {details}" if details else error)

    def _stop(self) -> None:
        if self._progress is not None:
            self._progress.stop()
            self._progress = None
            self._task = None


@dataclass
class RecordingSink:
    """Keeps every event in memory, in order."""

    events: list[tuple[str, Any]] = field(default_factory=list)

    def stage(self, name: str, message: str) -> None:
        self.events.append(("stage", (name, message)))

    def progress(self, update: ProgressUpdate) -> None:
        self.events.append(("progress", update))

    def complete(self, payload: dict[str, Any]) -> None:
        self.events.append(("complete", payload))

    def fail(self, error: str, details: str | None = None) -> None:
        self.events.append(("fail", (error, details)))

    def of_kind(self, kind: str) -> list[Any]:
        return [value for event, value in self.events if event == kind]
