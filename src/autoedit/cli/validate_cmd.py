"""autoedit validate: check an EDL file."""

from __future__ import annotations

import click
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from autoedit.editing.validate import validate_edl
from autoedit.models.edl import EDL
from autoedit.utils.io import read_json
from autoedit.utils.progress import log_error, log_success

console = Console()


@click.command()
@click.argument("edl_file", type=click.Path(exists=True, dir_okay=False))
def validate_cmd(edl_file: str) -> None:
    """Validate EDL_FILE; exits 1 if it has errors."""
    try:
        edl = EDL(**read_json(edl_file))
    except (OSError, ValueError, ValidationError) as e:
        log_error(f"Could not read EDL {edl_file}: {e}")
        raise SystemExit(1)

    table = Table(title="EDL", show_lines=False)
    table.add_column("Part", style="bold")
    table.add_column("Start", justify="right")
    table.add_column("End", justify="right")
    table.add_column("Reason")
    table.add_row("hook", f"{edl.hook.start:.2f}", f"{edl.hook.end:.2f}", edl.hook.reason)
    for i, seg in enumerate(edl.segments):
        table.add_row(f"{i}", f"{seg.start:.2f}", f"{seg.end:.2f}", seg.reason)
    console.print(table)

    result = validate_edl(edl)
    if result.valid:
        log_success(
            f"EDL valid: {edl.expected_change.final_duration_sec:.1f}s kept, "
            f"{edl.expected_change.total_removed_sec:.1f}s removed"
        )
        return

    errors = Table(title="Validation errors", show_header=False)
    errors.add_column(style="red")
    for err in result.errors:
        errors.add_row(err)
    console.print(errors)
    raise SystemExit(1)
