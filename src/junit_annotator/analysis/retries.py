"""Collapse re-runs of flaky test cases into one representative result."""

from __future__ import annotations

from typing import Any

from junit_annotator.logging import get_logger
from junit_annotator.parsers.junit import JUnitTestCase

logger = get_logger(__name__)


def reconcile_retries(test_cases: list[JUnitTestCase], log: Any = None) -> list[JUnitTestCase]:
    """Keep one test case per name, preferring a passing run.

    Cases are keyed by ``name`` within one suite. A later failure never
    replaces an earlier pass; a later pass replaces an earlier failure but
    keeps the slot of the first occurrence. Any other duplicate is dropped.

    Args:
        test_cases: Cases of one suite in document order.
        log: Logger to report through; defaults to the module logger.

    Returns:
        Deduplicated cases, ordered by first occurrence of each name.
    """
    log = log or logger
    by_name: dict[str, JUnitTestCase] = {}
    for test_case in test_cases:
        key = test_case.name
        previous = by_name.get(key)
        if previous is None:
            by_name[key] = test_case
            continue
        if test_case.has_failure and not previous.has_failure:
            log.debug("Drop flaky test failure, earlier run passed", test=key)
        elif not test_case.has_failure and previous.has_failure:
            # dict assignment keeps the original insertion slot
            by_name[key] = test_case
            log.debug("Drop flaky test failure, later run passed", test=key)
    return list(by_name.values())
