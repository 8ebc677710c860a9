"""Generic document tree for JUnit-family XML.

Reports come in many dialects: a child may appear once or many times, the
payload may be plain text or CDATA, attributes are optional. ``DocumentNode``
flattens those differences once, at construction, so the schema adapter in
``parsers.junit`` never has to check shapes again.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from junit_annotator.core.exceptions import ReportParseError

# Keys used by the "compact" xml-to-JSON representation
_ATTRIBUTES_KEY = "_attributes"
_TEXT_KEY = "_text"
_CDATA_KEY = "_cdata"
_RESERVED_KEYS = frozenset({_ATTRIBUTES_KEY, _TEXT_KEY, _CDATA_KEY, "_declaration", "_comment"})

DOCUMENT_TAG = "#document"


@dataclass
class DocumentNode:
    """One element: attributes, named children, and an optional payload."""

    tag: str
    attributes: dict[str, str] = field(default_factory=dict)
    children: dict[str, list[DocumentNode]] = field(default_factory=dict)
    text: str | None = None
    cdata: str | None = None

    def get(self, name: str) -> str | None:
        """Return an attribute value, treating empty strings as missing."""
        value = self.attributes.get(name)
        return value if value else None

    def all(self, name: str) -> list[DocumentNode]:
        return self.children.get(name, [])

    def first(self, name: str) -> DocumentNode | None:
        """Return the first child called ``name``; dialects may repeat it."""
        nodes = self.children.get(name)
        return nodes[0] if nodes else None

    def has(self, name: str) -> bool:
        return bool(self.children.get(name))

    @property
    def payload(self) -> str:
        """Trimmed payload, CDATA preferred over plain text."""
        return (self.cdata or self.text or "").strip()

    @classmethod
    def from_element(cls, element: ET.Element) -> DocumentNode:
        """Convert a parsed ``xml.etree`` element (recursively)."""
        children: dict[str, list[DocumentNode]] = {}
        for child in element:
            if not isinstance(child.tag, str):
                # comments and processing instructions
                continue
            children.setdefault(child.tag, []).append(cls.from_element(child))
        return cls(
            tag=element.tag,
            attributes=dict(element.attrib),
            children=children,
            text=element.text,
        )

    @classmethod
    def from_compact(cls, data: Mapping[str, Any], tag: str = DOCUMENT_TAG) -> DocumentNode:
        """Convert the compact JSON shape produced by xml-to-JSON tools.

        A child key maps to either one object or a list of objects; both are
        stored as a list.
        """
        children: dict[str, list[DocumentNode]] = {}
        for key, value in data.items():
            if key in _RESERVED_KEYS:
                continue
            items = value if isinstance(value, list) else [value]
            children[key] = [
                cls.from_compact(item, tag=key) for item in items if isinstance(item, Mapping)
            ]
        attributes = data.get(_ATTRIBUTES_KEY) or {}
        return cls(
            tag=tag,
            attributes={str(k): str(v) for k, v in attributes.items()},
            children=children,
            text=_join_payload(data.get(_TEXT_KEY)),
            cdata=_join_payload(data.get(_CDATA_KEY)),
        )


def _join_payload(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, list):
        return "".join(str(v) for v in value)
    return str(value)


def wrap_document(root: DocumentNode) -> DocumentNode:
    """Put the document element under a synthetic root.

    Traversal always looks for ``testsuite``/``testsuites`` *children*, so a
    report whose root is itself a ``testsuite`` must be wrapped.
    """
    return DocumentNode(tag=DOCUMENT_TAG, children={root.tag: [root]})


def parse_document(content: str | bytes, source: str = "<string>") -> DocumentNode:
    """Parse XML text into a wrapped document tree.

    Args:
        content: Raw XML, as text or undecoded bytes.
        source: Name used in error messages.

    Returns:
        Synthetic document root holding the report's root element.

    Raises:
        ReportParseError: If the content is not well-formed XML.
    """
    try:
        root = ET.fromstring(content)  # noqa: S314 - trusted test report data
    except ET.ParseError as e:
        raise ReportParseError(source, str(e)) from e
    return wrap_document(DocumentNode.from_element(root))
