"""String helpers used while building annotations."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from junit_annotator.core.models import Transformer

EMOJI_PATTERN = re.compile(
    "["
    "\U0001f300-\U0001f5ff"
    "\U0001f900-\U0001f9ff"
    "\U0001f600-\U0001f64f"
    "\U0001f680-\U0001f6ff"
    "\u2600-\u26ff"
    "\u2700-\u27bf"
    "\U0001f1e6-\U0001f1ff"
    "\U0001f191-\U0001f251"
    "\U0001f004"
    "\U0001f0cf"
    "\U0001f170-\U0001f171"
    "\U0001f17e-\U0001f17f"
    "\U0001f18e"
    "\u3030"
    "\u2b50"
    "\u2b55"
    "\u2934-\u2935"
    "\u2b05-\u2b07"
    "\u2b1b-\u2b1c"
    "\u3297"
    "\u3299"
    "\u303d"
    "\u00a9"
    "\u00ae"
    "\u2122"
    "\u23f3"
    "\u24c2"
    "\u23e9-\u23ef"
    "\u25b6"
    "\u23f8-\u23fa"
    "]"
)

# JavaScript style replacement references: $1, $<name>, $&, $$
_JS_REPLACEMENT = re.compile(r"\$(?:(\d+)|<([A-Za-z_]\w*)>|(&)|(\$))")

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def escape_emoji(text: str) -> str:
    """Remove emoji code points, leaving every other character untouched."""
    return EMOJI_PATTERN.sub("", text)


def safe_parse_int(token: str | None) -> int | None:
    """Parse the leading integer of ``token``.

    Returns None when the token is missing or does not start with a number.
    """
    if not token:
        return None
    match = _LEADING_INT.match(token)
    if not match:
        return None
    return int(match.group(1))


def _js_replacement(replace_value: str) -> str:
    """Translate ``$1``-style references into ``re.sub`` syntax."""

    def convert(match: re.Match[str]) -> str:
        number, name, whole, dollar = match.groups()
        if number is not None:
            return rf"\g<{int(number)}>"
        if name is not None:
            return rf"\g<{name}>"
        if whole is not None:
            return r"\g<0>"
        return "$"

    escaped = replace_value.replace("\\", "\\\\")
    return _JS_REPLACEMENT.sub(convert, escaped)


def apply_transformer(transformer: Transformer, value: str) -> str:
    """Apply one search/replace rule to a file name.

    The search value is used as a regular expression replacing every match;
    if it does not compile, its first literal occurrence is replaced instead.
    """
    try:
        pattern = re.compile(transformer.search_value)
    except re.error:
        return value.replace(transformer.search_value, transformer.replace_value, 1)
    try:
        return pattern.sub(_js_replacement(transformer.replace_value), value)
    except (re.error, IndexError):
        # replacement references a group the pattern does not have
        return pattern.sub(lambda _: transformer.replace_value, value)


def apply_transformers(
    transformers: list[Transformer] | tuple[Transformer, ...], value: str
) -> str:
    for transformer in transformers:
        value = apply_transformer(transformer, value)
    return value


def template_var(name: str) -> str:
    return "{{" + name + "}}"


def first_line(text: str) -> str:
    return text.split("\n", 1)[0]
