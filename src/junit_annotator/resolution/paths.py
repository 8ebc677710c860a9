"""Map a bare file name to a repository-relative path."""

from __future__ import annotations

import glob
from pathlib import Path
from typing import Any

from junit_annotator.logging import get_logger
from junit_annotator.utils.globbing import iter_glob, search_root

logger = get_logger(__name__)

DEFAULT_EXCLUDE_SOURCES: tuple[str, ...] = ("/build/", "/__pycache__/")


def normalize_file_name(file_name: str) -> str:
    """Strip a leading ``./``."""
    return file_name[2:] if file_name.startswith("./") else file_name


async def resolve_path(
    file_name: str,
    exclude_sources: list[str] | tuple[str, ...] = DEFAULT_EXCLUDE_SOURCES,
    follow_symlink: bool = False,
    root: Path | None = None,
    log: Any = None,
) -> str:
    """Find the first source file called ``<file_name>.*`` below ``root``.

    Candidates whose absolute path contains any of ``exclude_sources`` are
    skipped. On a miss the normalized input is returned unchanged.

    Args:
        file_name: Bare name, possibly with directories or a ``./`` prefix.
        exclude_sources: Path substrings that disqualify a candidate.
        follow_symlink: Descend into symlinked directories.
        root: Directory to search (defaults to the working directory).
        log: Logger to report through; defaults to the module logger.

    Returns:
        Path relative to ``root`` using ``/`` separators.
    """
    log = log or logger
    log.debug("Resolving path", file_name=file_name)
    normalized = normalize_file_name(file_name)
    root = (root or Path.cwd()).absolute()
    # glob characters in test names are literal
    pattern = f"**/{glob.escape(normalized)}.*"
    base = search_root(pattern, root)
    async for candidate in iter_glob(pattern, root=root, follow_symlinks=follow_symlink):
        log.debug("Matched file", candidate=str(candidate))
        if any(excluded in candidate.as_posix() for excluded in exclude_sources):
            continue
        path = candidate.relative_to(base).as_posix()
        log.debug("Resolved path", path=path)
        return path
    return normalized
