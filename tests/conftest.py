"""Pytest configuration and fixtures."""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING

import pytest
import structlog

from junit_annotator.config import ParseOptions
from junit_annotator.parsers.document import parse_document

if TYPE_CHECKING:
    from collections.abc import Callable

    from junit_annotator.parsers.document import DocumentNode


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers",
        "integration: end-to-end runs over report files on disk",
    )


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep CI variables of the machine running the tests out of settings."""
    monkeypatch.delenv("GITHUB_WORKSPACE", raising=False)
    for name in list(os.environ):
        if name.upper().startswith("JUNIT_ANNOTATOR_"):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo configure_logging() calls made by a test."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def source_tree(tmp_path: Path) -> Path:
    """A small repository with sources in several languages."""
    files = {
        "src/main/java/com/example/LoginTest.java": "class LoginTest {}\n",
        "build/classes/com/example/LoginTest.class": "",
        "web/file.js": "module.exports = {}\n",
        "pkg/tests/test_math.py": "def test_add(): pass\n",
        "pkg/tests/__pycache__/test_math.cpython-312.pyc": "",
        "crate/src/lib.rs": "#[test] fn it_works() {}\n",
    }
    for relative, content in files.items():
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
    return tmp_path


@pytest.fixture
def options_for(source_tree: Path) -> Callable[..., ParseOptions]:
    """Build ParseOptions that resolve sources inside ``source_tree``."""

    def build(**overrides) -> ParseOptions:
        overrides.setdefault("source_root", source_tree)
        return ParseOptions(**overrides)

    return build


@pytest.fixture
def write_report(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write a report below ``tmp_path/reports`` and return its path."""

    def write(name: str, xml: str) -> Path:
        path = tmp_path / "reports" / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(xml, encoding="utf-8")
        return path

    return write


@pytest.fixture
def document() -> Callable[[str], DocumentNode]:
    """Parse an XML string into a document tree."""
    return parse_document
