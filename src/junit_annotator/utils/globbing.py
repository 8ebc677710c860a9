"""Asynchronous file globbing for report and source enumeration.

Patterns follow the usual CI conventions: ``**`` spans any number of
directories, ``*`` and ``?`` stay within one path segment, several patterns
may be given one per line, and a leading ``!`` excludes matches.

Results are yielded in a deterministic order (directories walked
depth-first, entries sorted by name). Directory listings run in a worker
thread so a large tree does not block the event loop.
"""

from __future__ import annotations

import asyncio
import os
import re
from collections.abc import AsyncIterator
from pathlib import Path

_GLOB_CHARS = frozenset("*?[")


def split_patterns(patterns: str | list[str] | tuple[str, ...]) -> list[str]:
    """Split newline-separated patterns, dropping blanks and comments."""
    raw = patterns.splitlines() if isinstance(patterns, str) else list(patterns)
    result = []
    for pattern in raw:
        pattern = pattern.strip()
        negated = pattern.startswith("!")
        body = pattern[1:].lstrip() if negated else pattern
        while body.startswith("./"):
            body = body[2:]
        pattern = f"!{body}" if negated else body
        if body and not body.startswith("#"):
            result.append(pattern)
    return result


def glob_to_regex(pattern: str) -> re.Pattern[str]:
    """Translate a glob into a regex over ``/``-separated relative paths."""
    i = 0
    out = []
    n = len(pattern)
    while i < n:
        c = pattern[i]
        if c == "*":
            if pattern.startswith("**", i):
                i += 2
                if i < n and pattern[i] == "/":
                    i += 1
                    out.append("(?:.*/)?")
                else:
                    out.append(".*")
                continue
            out.append("[^/]*")
        elif c == "?":
            out.append("[^/]")
        elif c == "[":
            end = pattern.find("]", i + 1)
            if end == -1:
                out.append(re.escape(c))
            else:
                body = pattern[i + 1 : end].replace("\\", r"\\")
                body = re.sub(r"([&~|[])", r"\\\1", body)
                if body.startswith("!"):
                    body = "^" + body[1:]
                try:
                    re.compile(f"[{body}]")
                except re.error:
                    # not a valid class, e.g. "[z-a]"; match the bracket literally
                    out.append(re.escape(c))
                else:
                    out.append(f"[{body}]")
                    i = end
        else:
            out.append(re.escape(c))
        i += 1
    return re.compile("".join(out) + r"\Z")


def search_root(pattern: str, root: Path) -> Path:
    """Return the directory a pattern's walk starts from.

    This is the longest leading run of segments without glob characters.
    """
    pattern = pattern.replace(os.sep, "/")
    fixed: list[str] = []
    for segment in pattern.split("/")[:-1]:
        if _GLOB_CHARS.intersection(segment):
            break
        fixed.append(segment)
    if pattern.startswith("/"):
        return Path("/" + "/".join(s for s in fixed if s))
    return root.joinpath(*fixed) if fixed else root


def _scan(
    directory: Path, follow_symlinks: bool, visited: set[str]
) -> tuple[list[Path], list[Path]]:
    """List one directory as ``(subdirectories, files)``, each sorted by name.

    Directories whose real path was already scanned are skipped, which stops
    symlink loops.
    """
    real = os.path.realpath(directory)
    if real in visited:
        return [], []
    visited.add(real)
    try:
        entries = sorted(os.scandir(directory), key=lambda entry: entry.name)
    except OSError:
        return [], []
    dirs: list[Path] = []
    files: list[Path] = []
    for entry in entries:
        try:
            is_dir = entry.is_dir()
        except OSError:
            is_dir = False
        if not is_dir:
            files.append(Path(entry.path))
        elif follow_symlinks or not entry.is_symlink():
            dirs.append(Path(entry.path))
    return dirs, files


async def _walk(base: Path, follow_symlinks: bool) -> AsyncIterator[Path]:
    visited: set[str] = set()
    pending = [base]
    while pending:
        directory = pending.pop()
        dirs, files = await asyncio.to_thread(_scan, directory, follow_symlinks, visited)
        for path in files:
            yield path
        pending.extend(reversed(dirs))


def _relative_pattern(pattern: str, base: Path, root: Path) -> str:
    pattern = pattern.replace(os.sep, "/")
    if pattern.startswith("/"):
        prefix = base.as_posix().rstrip("/") + "/"
        return pattern[len(prefix) :] if pattern.startswith(prefix) else pattern.lstrip("/")
    try:
        offset = base.relative_to(root).as_posix()
    except ValueError:
        return pattern
    if offset == ".":
        return pattern
    return pattern[len(offset) + 1 :]


async def iter_glob(
    patterns: str | list[str] | tuple[str, ...],
    root: Path | None = None,
    follow_symlinks: bool = False,
) -> AsyncIterator[Path]:
    """Yield files matching ``patterns`` below ``root`` (default: cwd).

    Args:
        patterns: One pattern per line, or a sequence of patterns.
        root: Directory relative patterns are resolved against.
        follow_symlinks: Descend into symlinked directories.

    Yields:
        Absolute paths of matching files; each path at most once.
    """
    root = (root or Path.cwd()).absolute()
    includes: list[str] = []
    excludes: list[re.Pattern[str]] = []
    for pattern in split_patterns(patterns):
        if pattern.startswith("!"):
            negated = pattern[1:]
            base = search_root(negated, root)
            absolute = base.joinpath(_relative_pattern(negated, base, root)).as_posix()
            excludes.append(glob_to_regex(absolute))
        else:
            includes.append(pattern)

    seen: set[Path] = set()
    for pattern in includes:
        base = search_root(pattern, root)
        if not base.is_dir():
            continue
        matcher = glob_to_regex(_relative_pattern(pattern, base, root))
        async for path in _walk(base, follow_symlinks):
            relative = path.relative_to(base).as_posix()
            if not matcher.match(relative) or path in seen:
                continue
            if any(exclude.match(path.as_posix()) for exclude in excludes):
                continue
            seen.add(path)
            yield path
