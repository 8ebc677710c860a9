"""Main Typer CLI application for junit-annotator."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Annotated

import typer

from junit_annotator.cli.formatters import format_json, format_markdown, render_text
from junit_annotator.config import AnnotatorSettings, load_settings
from junit_annotator.core.exceptions import InvalidConfigurationError
from junit_annotator.core.models import TestResult
from junit_annotator.logging import configure_logging
from junit_annotator.reporting import run

app = typer.Typer(
    name="junit-annotator",
    help="Turn JUnit XML reports into file/line annotations",
    no_args_is_help=True,
)

OUTPUT_FORMATS = ("text", "json", "markdown")


@app.callback()
def main_callback() -> None:
    """Turn JUnit XML reports into file/line annotations."""


def exit_code_for(result: TestResult, settings: AnnotatorSettings) -> int:
    """Exit status implied by the result and the outcome settings."""
    if settings.require_tests and result.total_count == 0:
        return 1
    if settings.require_passed_tests and result.passed == 0:
        return 1
    if settings.fail_on_failure and result.failed > 0:
        return 1
    return 0


@app.command()
def annotate(
    report_paths: Annotated[
        str | None,
        typer.Argument(help="Glob pattern(s) selecting report files, one per line"),
    ] = None,
    config: Annotated[
        Path | None,
        typer.Option("-c", "--config", help="YAML configuration file", exists=True, dir_okay=False),
    ] = None,
    check_name: Annotated[str | None, typer.Option("--check-name", help="Check label")] = None,
    summary: Annotated[str | None, typer.Option("--summary", help="Summary text")] = None,
    suite_regex: Annotated[
        str | None,
        typer.Option("--suite-regex", help="Qualify titles with suite names ('*' for raw names)"),
    ] = None,
    annotate_passed: Annotated[
        bool | None,
        typer.Option("--annotate-passed/--no-annotate-passed", help="Also resolve passed tests"),
    ] = None,
    check_retries: Annotated[
        bool | None,
        typer.Option("--check-retries/--no-check-retries", help="Collapse flaky re-runs"),
    ] = None,
    exclude_sources: Annotated[
        str | None,
        typer.Option("--exclude-sources", help="Comma-separated path parts to skip"),
    ] = None,
    check_title_template: Annotated[
        str | None,
        typer.Option(
            "--check-title-template",
            help="Title with {{FILE_NAME}} {{SUITE_NAME}} {{TEST_NAME}} {{CLASS_NAME}}",
        ),
    ] = None,
    test_files_prefix: Annotated[
        str | None, typer.Option("--test-files-prefix", help="Prefix for resolved paths")
    ] = None,
    transformers: Annotated[
        str | None,
        typer.Option("--transformers", help='JSON list of {"searchValue", "replaceValue"}'),
    ] = None,
    follow_symlink: Annotated[
        bool | None,
        typer.Option("--follow-symlink/--no-follow-symlink", help="Follow symlinked dirs"),
    ] = None,
    annotations_limit: Annotated[
        int | None,
        typer.Option("--annotations-limit", help="Max annotations (<=0 for unlimited)"),
    ] = None,
    truncate_stack_traces: Annotated[
        bool | None,
        typer.Option(
            "--truncate-stack-traces/--no-truncate-stack-traces",
            help="Limit messages to two stack trace lines",
        ),
    ] = None,
    fail_on_failure: Annotated[
        bool | None,
        typer.Option("--fail-on-failure/--no-fail-on-failure", help="Exit 1 on failed tests"),
    ] = None,
    require_tests: Annotated[
        bool | None,
        typer.Option("--require-tests/--no-require-tests", help="Exit 1 if no tests found"),
    ] = None,
    require_passed_tests: Annotated[
        bool | None,
        typer.Option(
            "--require-passed-tests/--no-require-passed-tests",
            help="Exit 1 if no test passed",
        ),
    ] = None,
    output_format: Annotated[
        str,
        typer.Option("-f", "--output-format", help="Output format (text, json, markdown)"),
    ] = "text",
    output: Annotated[
        Path | None,
        typer.Option("-o", "--output", help="Write output to file instead of stdout"),
    ] = None,
    root: Annotated[
        Path | None,
        typer.Option("--root", help="Directory reports and sources are searched from"),
    ] = None,
    log_level: Annotated[str | None, typer.Option("--log-level", help="Logging level")] = None,
) -> None:
    """Parse JUnit reports and print the resulting annotations."""
    if output_format not in OUTPUT_FORMATS:
        typer.echo(f"Error: unknown output format '{output_format}'", err=True)
        raise typer.Exit(code=2)

    try:
        settings = load_settings(
            config,
            report_paths=report_paths,
            check_name=check_name,
            summary=summary,
            suite_regex=suite_regex,
            annotate_passed=annotate_passed,
            check_retries=check_retries,
            exclude_sources=exclude_sources,
            check_title_template=check_title_template,
            test_files_prefix=test_files_prefix,
            transformers=transformers,
            follow_symlink=follow_symlink,
            annotations_limit=annotations_limit,
            truncate_stack_traces=truncate_stack_traces,
            fail_on_failure=fail_on_failure,
            require_tests=require_tests,
            require_passed_tests=require_passed_tests,
            log_level=log_level,
        )
    except InvalidConfigurationError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=2) from e

    configure_logging(settings.log_level, json_format=settings.log_json_format)
    result = asyncio.run(run(settings, root=root))

    if output_format == "json":
        _emit(format_json(result), output)
    elif output_format == "markdown":
        _emit(format_markdown(result), output)
    elif output is not None:
        _emit(format_markdown(result), output)
    else:
        render_text(result)

    raise typer.Exit(code=exit_code_for(result, settings))


def _emit(text: str, output: Path | None) -> None:
    if output is None:
        typer.echo(text)
    else:
        output.write_text(text + "\n", encoding="utf-8")
        typer.echo(f"Output written to {output}", err=True)
