"""Main CLI Module - Command-line interface for reportcard."""

import asyncio
import json
import logging
import math
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn
from rich.table import Table

from .. import __version__
from ..checks import default_checks
from ..config import load_settings
from ..core.aggregator import ChecksResult
from ..core.errors import ReportCardError
from ..runner import run

console = Console(soft_wrap=True)
err_console = Console(stderr=True, soft_wrap=True)

EXIT_BELOW_THRESHOLD = 1
EXIT_FATAL = 2


def get_score_color(score: float) -> str:
    """Get color for score value."""
    if score >= 90:
        return "green"
    elif score >= 70:
        return "yellow"
    elif score >= 60:
        return "orange1"
    else:
        return "red"


def configure_logging(debug: bool) -> None:
    """Send log records to stderr through rich."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=debug)],
        force=True,
    )


@click.group()
@click.version_option(version=__version__, prog_name="reportcard")
def cli():
    """reportcard - Grade the quality of a Python source tree."""


@cli.command("grade")
@click.argument("path", type=click.Path(file_okay=False), default=".")
@click.option("--verbose", "-v", is_flag=True, help="Show every issue found")
@click.option("--threshold", "-t", type=float, default=None,
              help="Minimum percentage for a zero exit status (default: 90)")
@click.option("--timeout", type=float, default=None, help="Timeout in seconds for each check")
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False),
              help="Configuration file (default: PATH/.reportcard.yml)")
@click.option("--format", "-f", "output_format", type=click.Choice(["text", "json"]),
              default="text", help="Output format")
@click.option("--debug", is_flag=True, help="Enable debug logging")
def grade(
    path: str,
    verbose: bool,
    threshold: Optional[float],
    timeout: Optional[float],
    config_path: Optional[str],
    output_format: str,
    debug: bool,
):
    """Grade the Python files under PATH (default: current directory).

    Exits with status 1 when the percentage is below the threshold.
    """
    configure_logging(debug)
    target_path = Path(path)

    try:
        settings = load_settings(target_path, config_path, threshold=threshold, timeout=timeout)
        if output_format == "text" and console.is_terminal:
            result = _run_with_progress(target_path, settings)
        else:
            result = asyncio.run(run(target_path, settings))
    except ReportCardError as e:
        err_console.print(f"[red]Fatal error checking {escape(str(target_path))}: {escape(str(e))}[/red]")
        sys.exit(EXIT_FATAL)

    if output_format == "json":
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        _display_result(result, verbose)

    if not result.passes(settings.threshold):
        sys.exit(EXIT_BELOW_THRESHOLD)


def _run_with_progress(target_path: Path, settings) -> ChecksResult:
    """Run the checks while showing a progress bar on the terminal."""
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task("[cyan]Running checks...", total=None)

        def on_check_complete(completed: int, total: int, check_name: str) -> None:
            progress.update(
                task,
                total=total,
                completed=completed,
                description=f"[cyan]Completed {check_name} ({completed}/{total})",
            )

        return asyncio.run(run(target_path, settings, progress_callback=on_check_complete))


def _format_percentage(percentage: float) -> str:
    if math.isfinite(percentage):
        return f"{int(percentage * 100)}%"
    return str(percentage)


def _display_result(result: ChecksResult, verbose: bool) -> None:
    """Display the report card in the terminal."""
    color = get_score_color(result.percentage)
    console.print(f"Grade: [bold {color}]{result.grade}[/bold {color}] ({result.percentage:.1f}%)")
    console.print(f"Files: {result.files}")
    console.print(f"Issues: {result.issues}")

    for check in result.checks:
        check_color = get_score_color(check.percentage * 100)
        console.print(
            f"{check.name}: [{check_color}]{_format_percentage(check.percentage)}[/{check_color}]"
        )
        if check.error:
            console.print(f"\t[red]error: {escape(check.error)}[/red]")

        if verbose and check.file_summaries:
            for summary in check.file_summaries:
                console.print(f"\t{escape(summary.filename)}", highlight=False)
                for issue in summary.errors:
                    console.print(
                        f"\t\tLine {issue.line_number}: {escape(issue.message)}",
                        highlight=False,
                    )

    if verbose and result.skipped:
        console.print(f"Skipped: {escape(', '.join(result.skipped))}", highlight=False)


@cli.command("check-tools")
def check_tools():
    """Check availability of the tools behind each check."""
    table = Table(title="Checks")
    table.add_column("Check", style="cyan")
    table.add_column("Weight", justify="right")
    table.add_column("Status")
    table.add_column("Description")

    for check in default_checks(".", []):
        if check.is_available():
            status = "[green]✓ Available[/green]"
        else:
            status = f"[red]✗ Not Found[/red] - pip install {getattr(check, 'tool', check.name)}"
        table.add_row(check.name, f"{check.weight:.2f}", status, check.description)

    console.print(table)


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
