"""Output formatters for junit-annotator CLI."""

from __future__ import annotations

import json

from rich.console import Console
from rich.table import Table
from rich.text import Text

from junit_annotator.core.models import TestResult
from junit_annotator.utils.formatting import first_line


def format_json(result: TestResult) -> str:
    """Format result as JSON (the annotation wire contract)."""
    return json.dumps(result.to_dict(), indent=2, ensure_ascii=False)


def _escape_cell(text: str) -> str:
    return text.replace("|", "\\|").replace("\n", " ")


def format_markdown(result: TestResult, detailed: bool = True) -> str:
    """Format result as a markdown job summary.

    Args:
        result: Result to summarize.
        detailed: Also list each failed test with its location.

    Returns:
        Markdown with a summary table and, optionally, a failure table.
    """
    lines = [
        f"## {result.check_name}",
        "",
        "| **Tests** | **Passed** ✅ | **Skipped** ⚠️ | **Failed** ❌ |",
        "|:---------:|:-------------:|:--------------:|:-------------:|",
        f"| {result.total_count} ran | {result.passed} passed "
        f"| {result.skipped} skipped | {result.failed} failed |",
    ]
    if result.summary:
        lines.extend(["", result.summary])

    failed = result.failed_annotations
    if detailed and failed:
        lines.extend(
            [
                "",
                "| **Test** | **Location** | **Result** |",
                "|:---------|:-------------|:----------:|",
            ]
        )
        for annotation in failed:
            location = f"`{annotation.path}:{annotation.start_line}`"
            lines.append(f"| {_escape_cell(annotation.title)} | {location} | ❌ failure |")
    elif result.total_count == 0:
        lines.extend(["", "No test results found!"])

    return "\n".join(lines)


def render_text(
    result: TestResult, console: Console | None = None, max_message_len: int = 120
) -> None:
    """Print result to the console as rich tables."""
    console = console or Console(highlight=False)

    summary = Table(title=result.check_name, show_lines=False)
    for column in ("Files", "Tests", "Passed", "Skipped", "Failed"):
        summary.add_column(column, justify="right")
    summary.add_row(
        str(result.found_files),
        str(result.total_count),
        f"[green]{result.passed}[/green]",
        f"[yellow]{result.skipped}[/yellow]",
        f"[red]{result.failed}[/red]" if result.failed else "0",
    )
    console.print(summary)

    failed = result.failed_annotations
    if not failed:
        return

    details = Table(title="Failures")
    details.add_column("Test", overflow="fold")
    details.add_column("Location", overflow="fold")
    details.add_column("Message", overflow="fold")
    for annotation in failed:
        message = first_line(annotation.message)
        if len(message) > max_message_len:
            message = message[:max_message_len] + "..."
        details.add_row(
            Text(annotation.title),
            Text(f"{annotation.path}:{annotation.start_line}"),
            Text(message),
        )
    console.print(details)
