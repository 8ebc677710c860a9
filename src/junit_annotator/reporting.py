"""Report ingestion across every matched JUnit file.

``parse_file`` handles one report and never raises for bad input: a report
that cannot be read or parsed contributes nothing. ``parse_test_reports``
walks all matched files in order and builds the final ``TestResult``.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

from junit_annotator.analysis.traversal import parse_suite
from junit_annotator.config import AnnotatorSettings, ParseOptions
from junit_annotator.core.exceptions import ReportParseError
from junit_annotator.core.models import InternalResult, TestResult
from junit_annotator.logging import get_logger, report_file_context
from junit_annotator.parsers.document import parse_document
from junit_annotator.utils.globbing import iter_glob

logger = get_logger(__name__)


async def parse_file(path: Path, options: ParseOptions, log: Any = None) -> InternalResult:
    """Parse one report file.

    Args:
        path: Report file to read.
        options: Parsing options.
        log: Logger to report through; defaults to the module logger.

    Returns:
        Counts and annotations of the file; empty if it could not be parsed.
    """
    log = log or logger
    log.debug("Parsing file", file=str(path))
    try:
        content = await asyncio.to_thread(path.read_bytes)
        document = parse_document(content, source=str(path))
    except OSError as e:
        log.error("Failed to read report file", file=str(path), error=str(e))
        return InternalResult()
    except ReportParseError as e:
        log.error("Failed to parse report file", file=str(path), error=e.reason)
        return InternalResult()

    return await parse_suite(document, "", options, log=log)


async def parse_test_reports(
    check_name: str,
    summary: str,
    report_paths: str | list[str],
    options: ParseOptions,
    root: Path | None = None,
    log: Any = None,
) -> TestResult:
    """Parse every report matching ``report_paths`` into one result.

    Stops reading further files once an active annotation cap is met.

    Args:
        check_name: Label passed through to the result.
        summary: Label passed through to the result.
        report_paths: Glob pattern(s), one per line.
        options: Parsing options.
        root: Directory relative patterns are resolved against.
        log: Logger to report through; defaults to the module logger.

    Returns:
        The aggregated TestResult.
    """
    log = log or logger
    log.debug("Process test reports", report_paths=report_paths, check_name=check_name)
    accumulated = InternalResult()
    found_files = 0
    async for file in iter_glob(report_paths, root=root, follow_symlinks=options.follow_symlink):
        found_files += 1
        with report_file_context(str(file)):
            result = await parse_file(file, options, log=log)
        if result.total_count == 0:
            continue
        accumulated.merge(result)
        if options.limit_reached(accumulated.counted(options.annotate_passed)):
            log.debug("Annotation limit reached", limit=options.annotations_limit)
            break

    return TestResult.from_internal(check_name, summary, accumulated, found_files)


async def run(settings: AnnotatorSettings, root: Path | None = None) -> TestResult:
    """Parse reports as described by ``settings``."""
    options = ParseOptions.from_settings(settings, source_root=root)
    return await parse_test_reports(
        settings.check_name,
        settings.summary,
        settings.report_paths,
        options,
        root=root,
    )
