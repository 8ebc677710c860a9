"""Best-effort recovery of the source file and line behind a test case.

Explicit ``file``/``line`` attributes always win. Without them the file name
is guessed from the classname and the stack trace is searched for the last
``<path ending in that name>...:<line>`` reference.

Some toolchains print a more precise location than the classname allows
(cargo reports ``src/lib.rs:42`` for test ``crate::module::test``); those
dialects are handled by ``STACK_DIALECTS``.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from typing import Any

from junit_annotator.core.models import Position
from junit_annotator.logging import get_logger
from junit_annotator.utils.formatting import safe_parse_int

logger = get_logger(__name__)

# Rust module paths use "::" where the file system uses "/"
NAMESPACE_SEPARATOR = "::"


def _rust_file_override(prefix: str) -> str | None:
    if prefix.endswith(".rs"):
        return prefix.split(" ")[-1]
    return None


# Each dialect inspects the token preceding the line number and may return
# the real file name found in the stack trace.
STACK_DIALECTS: list[Callable[[str], str | None]] = [_rust_file_override]


def _location_pattern(file_name: str) -> re.Pattern[str]:
    escaped = re.escape(file_name).replace(NAMESPACE_SEPARATOR, "/")
    return re.compile(rf" [^ ]*{escaped}.*?:\d+")


def leaf_name(class_name: str) -> str:
    """Last dot-separated segment of a package-qualified name."""
    return class_name.split(".")[-1]


def resolve_file_and_line(
    file: str | None,
    line: str | None,
    class_name: str,
    output: str,
    log: Any = None,
) -> Position:
    """Resolve the file and line a test case refers to.

    Args:
        file: Explicit ``file`` attribute, if any.
        line: Explicit ``line`` attribute, if any.
        class_name: Classname (or test name) used to guess the file.
        output: Stack trace text searched for a location.
        log: Logger to report through; defaults to the module logger.

    Returns:
        The resolved position. Never raises.
    """
    log = log or logger
    file_name = file if file else leaf_name(class_name)
    line_number = safe_parse_int(line)
    try:
        if file_name and line_number:
            return Position(file_name=file_name, line=line_number)

        matches = _location_pattern(file_name).findall(output)
        if not matches:
            return Position(file_name=file_name, line=line_number or 1)

        tokens = matches[-1].split(":")
        line = tokens.pop() or "0"
        prefix = tokens.pop() if tokens else ""
        for dialect in STACK_DIALECTS:
            override = dialect(prefix)
            if override is not None:
                file_name = override
                break

        log.debug("Resolved file and line", file=file_name, line=line)
        return Position(file_name=file_name, line=safe_parse_int(line) or -1)
    except Exception as e:  # noqa: BLE001 - resolution is best effort
        log.warning(
            "Failed to resolve file and/or line",
            file=file,
            line=line,
            class_name=class_name,
            error=str(e),
        )
        return Position(file_name=file_name, line=safe_parse_int(line) or -1)
