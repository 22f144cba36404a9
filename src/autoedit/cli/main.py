"""Root CLI group for autoedit."""

from __future__ import annotations

import click

from autoedit import __version__
from autoedit.utils.progress import set_verbose


@click.group()
@click.version_option(version=__version__, prog_name="autoedit")
@click.option("--verbose", "-v", is_flag=True, help="Show debug output")
def cli(verbose: bool) -> None:
    """autoedit: automatic hook-first video editing."""
    if verbose:
        set_verbose(True)


# Import and register subcommands
from autoedit.cli.analyze_cmd import analyze_cmd  # noqa: E402
from autoedit.cli.plan_cmd import plan_cmd  # noqa: E402
from autoedit.cli.render_cmd import render_cmd  # noqa: E402
from autoedit.cli.run_cmd import run_cmd  # noqa: E402
from autoedit.cli.validate_cmd import validate_cmd  # noqa: E402

cli.add_command(analyze_cmd, "analyze")
cli.add_command(render_cmd, "render")
cli.add_command(validate_cmd, "validate")
cli.add_command(run_cmd, "run")
cli.add_command(plan_cmd, "plan")
