"""Output formatting helpers for the PluginGuard CLI.

Findings are rendered in one of five formats (table, json, csv, yaml,
count) with the columns ``plugin_name``, ``file`` and ``message``.
Warnings are streamed to stderr as they happen; the final batch line
follows the ``Success:`` / ``Error:`` convention of WP-CLI.
"""

from __future__ import annotations

import csv
import io
import json
from typing import Sequence

import click
import yaml
from rich.console import Console
from rich.table import Table
from rich.text import Text

from pluginguard.core.models import RunSummary, VerificationError

FIELDS: tuple[str, ...] = ("plugin_name", "file", "message")
OUTPUT_FORMATS: tuple[str, ...] = ("table", "json", "csv", "yaml", "count")

console = Console()


def warn(message: str) -> None:
    """Print a warning to stderr immediately."""
    click.echo(f"Warning: {message}", err=True)


def print_errors_table(errors: Sequence[VerificationError]) -> None:
    """Print findings as a table."""
    table = Table(show_header=True, header_style="bold")
    table.add_column("plugin_name", style="bold")
    table.add_column("file")
    table.add_column("message")
    for error in errors:
        table.add_row(error.plugin_name, error.file, Text(error.message, style="red"))
    console.print(table)


def errors_to_csv(errors: Sequence[VerificationError]) -> str:
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=list(FIELDS), lineterminator="\n")
    writer.writeheader()
    for error in errors:
        writer.writerow(error.as_dict())
    return buffer.getvalue()


def render_errors(errors: Sequence[VerificationError], output_format: str) -> None:
    """Render findings in the requested format.

    Args:
        errors: Findings in display order.
        output_format: One of ``OUTPUT_FORMATS``.
    """
    if output_format == "table":
        print_errors_table(errors)
    elif output_format == "json":
        click.echo(json.dumps([e.as_dict() for e in errors]))
    elif output_format == "csv":
        click.echo(errors_to_csv(errors), nl=False)
    elif output_format == "yaml":
        click.echo(yaml.safe_dump([e.as_dict() for e in errors], sort_keys=False), nl=False)
    elif output_format == "count":
        click.echo(str(len(errors)))
    else:
        raise ValueError(f"Unknown output format: {output_format}")


def batch_message(summary: RunSummary, noun: str = "plugin") -> tuple[bool, str]:
    """Build the closing line of a batch run.

    Returns:
        ``(success, message)``; ``success`` is False when any artifact
        failed.
    """
    plural = f"{noun}s"
    if summary.failed:
        detail = f" ({summary.failed} failed"
        detail += f", {summary.skipped} skipped)" if summary.skipped else ")"
        if summary.succeeded:
            return False, f"Only verified {summary.succeeded} of {summary.total} {plural}{detail}."
        return False, f"No {plural} verified{detail}."
    if summary.succeeded or summary.skipped:
        detail = f" ({summary.skipped} skipped)" if summary.skipped else ""
        return True, f"Verified {summary.succeeded} of {summary.total} {plural}{detail}."
    return True, f"No {plural} verified."


def report_batch_results(summary: RunSummary, noun: str = "plugin") -> None:
    """Print the closing ``Success:`` or ``Error:`` line."""
    ok, message = batch_message(summary, noun)
    if ok:
        click.echo(f"Success: {message}")
    else:
        click.echo(f"Error: {message}", err=True)
