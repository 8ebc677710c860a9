"""Turn one test case into an annotation."""

from __future__ import annotations

import posixpath
from typing import Any

from junit_annotator.config import ParseOptions
from junit_annotator.core.models import Annotation, AnnotationLevel, CaseStatus, Position
from junit_annotator.logging import get_logger
from junit_annotator.parsers.junit import JUnitTestCase, SuiteNode
from junit_annotator.resolution.location import leaf_name, resolve_file_and_line
from junit_annotator.resolution.paths import resolve_path
from junit_annotator.utils.formatting import (
    apply_transformers,
    escape_emoji,
    first_line,
    template_var,
)

logger = get_logger(__name__)

# Lines of the stack trace kept for the message when truncation is enabled
TRUNCATED_STACK_LINES = 2


def classify(test_case: JUnitTestCase) -> CaseStatus:
    """Skip wins over failure; anything without a payload is a success."""
    if test_case.is_skipped:
        return CaseStatus.SKIPPED
    if test_case.has_failure:
        return CaseStatus.FAILURE
    return CaseStatus.SUCCESS


def build_message(test_case: JUnitTestCase, stack_trace: str, truncate: bool) -> str:
    """First non-empty of: payload message, stack trace, test name."""
    if truncate:
        stack_trace = "\n".join(stack_trace.split("\n")[:TRUNCATED_STACK_LINES])
    return (test_case.failure_message or stack_trace or test_case.name).strip()


def build_title(
    test_case: JUnitTestCase,
    position: Position,
    suite_name: str,
    template: str | None,
) -> str:
    """Render the annotation title.

    The file name is left out whenever it merely repeats the test name.
    """
    file_name = position.file_name if position.file_name != test_case.name else ""
    if template:
        return (
            template.replace(template_var("FILE_NAME"), file_name)
            .replace(template_var("SUITE_NAME"), suite_name)
            .replace(template_var("TEST_NAME"), test_case.name)
            .replace(template_var("CLASS_NAME"), leaf_name(test_case.lookup_name))
        )
    name = f"{suite_name}/{test_case.name}" if suite_name else test_case.name
    return f"{file_name}.{name}" if file_name else name


def strip_workspace(path: str, workspace: str | None) -> str:
    """Make an absolute path below the workspace relative to it."""
    if not workspace:
        return path
    return path.replace(f"{workspace.rstrip('/')}/", "", 1)


async def evaluate_test_case(
    test_case: JUnitTestCase,
    suite: SuiteNode,
    suite_name: str,
    options: ParseOptions,
    log: Any = None,
) -> Annotation:
    """Classify a test case and build its annotation.

    Args:
        test_case: The case to evaluate.
        suite: Owning suite, consulted for ``file``/``line`` fallbacks.
        suite_name: Resolved display name of the suite ("" if disabled).
        options: Parsing options.
        log: Logger to report through; defaults to the module logger.

    Returns:
        The annotation for this case; skipped cases are always notices.
    """
    log = log or logger
    status = classify(test_case)
    failure = test_case.failure or test_case.error
    stack_trace = test_case.stack_trace
    message = build_message(test_case, stack_trace, options.truncate_stack_traces)

    position = resolve_file_and_line(
        test_case.file or (failure.file if failure else None) or suite.file,
        test_case.line or (failure.line if failure else None) or suite.line,
        test_case.lookup_name,
        stack_trace,
        log=log,
    )
    file_name = apply_transformers(options.transformers, position.file_name)

    # a skipped case without a payload still counts as a success here
    wants_path = status is CaseStatus.FAILURE or (
        options.annotate_passed and not test_case.has_failure
    )
    if wants_path:
        path = await resolve_path(
            file_name,
            options.exclude_sources,
            options.follow_symlink,
            root=options.source_root,
            log=log,
        )
    else:
        path = file_name
    log.debug("Path prior to stripping", path=path)
    path = strip_workspace(path, options.workspace)
    if options.test_files_prefix:
        path = posixpath.normpath(f"{options.test_files_prefix}/{path}")

    title = build_title(test_case, position, suite_name, options.check_title_template)

    duration = f" ({test_case.time}s)" if test_case.time is not None else ""
    log.info(f"{path}:{position.line} | {first_line(message)}{duration}")

    raw_details = stack_trace
    if test_case.system_out:
        raw_details += f"\n\n{test_case.system_out}"

    level = AnnotationLevel.FAILURE if status is CaseStatus.FAILURE else AnnotationLevel.NOTICE
    return Annotation(
        path=path,
        start_line=position.line,
        end_line=position.line,
        annotation_level=level,
        status=status,
        title=escape_emoji(title),
        message=escape_emoji(message),
        raw_details=escape_emoji(raw_details),
    )
