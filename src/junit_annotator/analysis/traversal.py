"""Depth-first walk over nested test suites.

Each suite's nested suites are visited before its own test cases, and the
partial results are folded into one ``InternalResult``. An active annotation
cap stops the walk as soon as it is met.
"""

from __future__ import annotations

import re
from typing import Any

from junit_annotator.analysis.evaluator import evaluate_test_case
from junit_annotator.analysis.retries import reconcile_retries
from junit_annotator.config import ParseOptions
from junit_annotator.core.models import CaseStatus, InternalResult
from junit_annotator.logging import get_logger
from junit_annotator.parsers.document import DocumentNode
from junit_annotator.parsers.junit import SuiteNode, suites_of

logger = get_logger(__name__)

# suite_regex value meaning "always use the raw suite name"
MATCH_ALL = "*"


def resolve_suite_name(suite: SuiteNode, parent_name: str, suite_regex: str) -> str:
    """Compute the display name used in annotation titles.

    Returns "" when suite naming is disabled (empty ``suite_regex``).
    """
    if not suite_regex:
        return ""
    name = ""
    if parent_name:
        name = f"{parent_name}/{suite.name}"
    elif suite_regex != MATCH_ALL:
        try:
            match = re.search(suite_regex, suite.name)
        except re.error:
            match = None
        name = match.group(0) if match else ""
    return name or suite.name


async def parse_suite(
    node: DocumentNode,
    parent_name: str,
    options: ParseOptions,
    log: Any = None,
) -> InternalResult:
    """Fold counts and annotations over every suite below ``node``.

    Args:
        node: Document root, ``testsuites`` wrapper or ``testsuite`` node.
        parent_name: Display name of the enclosing suite ("" at the root).
        options: Parsing options.
        log: Logger to report through; defaults to the module logger.

    Returns:
        Accumulated totals and annotations, in traversal order.
    """
    log = log or logger
    result = InternalResult()

    for suite in suites_of(node):
        suite_name = resolve_suite_name(suite, parent_name, options.suite_regex)

        result.merge(await parse_suite(suite.node, suite_name, options, log=log))

        if options.limit_reached(result.counted(options.annotate_passed)):
            return result
        if not suite.has_test_cases():
            continue

        test_cases = suite.test_cases()
        if options.check_retries:
            test_cases = reconcile_retries(test_cases, log=log)

        for test_case in test_cases:
            result.total_count += 1
            annotation = await evaluate_test_case(test_case, suite, suite_name, options, log=log)
            if annotation.status is CaseStatus.SKIPPED:
                result.skipped += 1
            result.annotations.append(annotation)

            if options.limit_reached(result.counted(options.annotate_passed)):
                return result

    return result
