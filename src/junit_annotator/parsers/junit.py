"""JUnit schema adapter over the generic document tree.

Covers the dialects written by:
- JUnit / Surefire / Gradle (Java, Kotlin)
- jest-junit, mocha-junit-reporter (JavaScript)
- pytest ``--junitxml`` (Python)
- cargo-nextest, ``go-junit-report`` and friends

Everything here is a read-only view; nothing is validated against a schema.
Missing elements simply yield empty collections.
"""

from __future__ import annotations

from dataclasses import dataclass

from junit_annotator.parsers.document import DocumentNode

SKIP_STATUSES = frozenset({"disabled", "ignored"})


@dataclass(frozen=True)
class FailurePayload:
    """A ``failure`` or ``error`` element."""

    message: str | None
    file: str | None
    line: str | None
    text: str

    @classmethod
    def from_node(cls, node: DocumentNode) -> FailurePayload:
        return cls(
            message=node.get("message"),
            file=node.get("file"),
            line=node.get("line"),
            text=node.payload,
        )


@dataclass(frozen=True)
class JUnitTestCase:
    """Represents a single ``testcase`` element."""

    name: str
    classname: str | None
    status: str | None
    file: str | None
    line: str | None
    time: str | None
    failure: FailurePayload | None
    error: FailurePayload | None
    skipped: bool
    system_out: str | None

    @classmethod
    def from_node(cls, node: DocumentNode) -> JUnitTestCase:
        failure = node.first("failure")
        error = node.first("error")
        system_out = node.first("system-out")
        return cls(
            name=node.attributes.get("name", ""),
            classname=node.get("classname"),
            status=node.get("status"),
            file=node.get("file"),
            line=node.get("line"),
            time=node.attributes.get("time"),
            failure=FailurePayload.from_node(failure) if failure else None,
            error=FailurePayload.from_node(error) if error else None,
            skipped=node.has("skipped"),
            system_out=(system_out.payload or None) if system_out else None,
        )

    @property
    def has_failure(self) -> bool:
        """A failure or error payload is present."""
        return self.failure is not None or self.error is not None

    @property
    def is_skipped(self) -> bool:
        return self.skipped or self.status in SKIP_STATUSES

    @property
    def lookup_name(self) -> str:
        """Classname if present, else the test name."""
        return self.classname or self.name

    @property
    def stack_trace(self) -> str:
        """Failure payload text, falling back to the error payload."""
        for payload in (self.failure, self.error):
            if payload and payload.text:
                return payload.text
        return ""

    @property
    def failure_message(self) -> str | None:
        for payload in (self.failure, self.error):
            if payload and payload.message:
                return payload.message
        return None


@dataclass(frozen=True)
class SuiteNode:
    """A ``testsuite`` element."""

    node: DocumentNode

    @property
    def name(self) -> str:
        return self.node.attributes.get("name", "")

    @property
    def file(self) -> str | None:
        return self.node.get("file")

    @property
    def line(self) -> str | None:
        return self.node.get("line")

    def has_test_cases(self) -> bool:
        return self.node.has("testcase")

    def test_cases(self) -> list[JUnitTestCase]:
        return [JUnitTestCase.from_node(n) for n in self.node.all("testcase")]


def suites_of(node: DocumentNode) -> list[SuiteNode]:
    """Return the suites directly below ``node``.

    Direct ``testsuite`` children win; otherwise the ``testsuite`` children
    of every ``testsuites`` wrapper are used.
    """
    if node.has("testsuite"):
        return [SuiteNode(n) for n in node.all("testsuite")]
    return [
        SuiteNode(suite) for wrapper in node.all("testsuites") for suite in wrapper.all("testsuite")
    ]
