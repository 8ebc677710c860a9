"""Tests for the JUnit schema adapter.

These tests verify that the dialects written by common test frameworks
map onto suites and test cases the same way.
"""

from __future__ import annotations

from junit_annotator.parsers.document import parse_document
from junit_annotator.parsers.junit import JUnitTestCase, suites_of


def _cases(xml: str) -> list[JUnitTestCase]:
    suites = suites_of(parse_document(xml))
    return [case for suite in suites for case in suite.test_cases()]


class TestSuitesOf:
    """Tests for suite normalization."""

    def test_testsuites_wrapper(self):
        """Suites inside a testsuites wrapper are found."""
        xml = """<?xml version="1.0" encoding="UTF-8"?>
<testsuites name="all" tests="2">
    <testsuite name="Suite1"><testcase classname="Suite1" name="test1"/></testsuite>
    <testsuite name="Suite2"><testcase classname="Suite2" name="test2"/></testsuite>
</testsuites>
"""
        suites = suites_of(parse_document(xml))

        assert [s.name for s in suites] == ["Suite1", "Suite2"]

    def test_single_testsuite_root(self):
        """A testsuite root is a one-element suite list."""
        suites = suites_of(parse_document('<testsuite name="UnitTests"/>'))

        assert [s.name for s in suites] == ["UnitTests"]
        assert not suites[0].has_test_cases()
        assert suites[0].test_cases() == []

    def test_empty_testsuites(self):
        """An empty wrapper yields no suites."""
        assert suites_of(parse_document('<testsuites tests="0" failures="0"/>')) == []

    def test_unrelated_root(self):
        """A document without suites yields no suites."""
        assert suites_of(parse_document("<coverage/>")) == []

    def test_nested_suites(self):
        """Nested suites are direct testsuite children of their parent."""
        xml = """<testsuites>
    <testsuite name="outer">
        <testsuite name="inner"><testcase name="t"/></testsuite>
    </testsuite>
</testsuites>"""
        (outer,) = suites_of(parse_document(xml))

        assert [s.name for s in suites_of(outer.node)] == ["inner"]

    def test_suite_file_and_line(self):
        suite = suites_of(parse_document('<testsuite name="s" file="a/b.ts" line="3"/>'))[0]

        assert suite.file == "a/b.ts"
        assert suite.line == "3"


class TestJUnitTestCase:
    """Tests for test case extraction."""

    def test_java_failure(self):
        """Surefire style failure with message and text payload."""
        xml = """<?xml version="1.0" encoding="UTF-8"?>
<testsuite name="LoginTests">
    <testcase classname="com.example.LoginTests" name="test_login_failure" time="2.0">
        <failure message="Expected true but got false" type="AssertionError">
AssertionError: Expected true but got false
    at LoginTests.test_login_failure(LoginTests.java:42)
        </failure>
    </testcase>
</testsuite>
"""
        (case,) = _cases(xml)

        assert case.name == "test_login_failure"
        assert case.classname == "com.example.LoginTests"
        assert case.lookup_name == "com.example.LoginTests"
        assert case.time == "2.0"
        assert case.has_failure
        assert not case.is_skipped
        assert case.failure_message == "Expected true but got false"
        assert case.stack_trace.startswith("AssertionError")
        assert case.stack_trace.endswith("(LoginTests.java:42)")

    def test_error_payload(self):
        """An error element counts as a failure payload."""
        xml = """<testsuite name="APITests">
    <testcase classname="APITests" name="test_connection">
        <error message="Connection refused" type="ConnectionError">ConnectionError</error>
    </testcase>
</testsuite>"""
        (case,) = _cases(xml)

        assert case.failure is None
        assert case.error is not None
        assert case.has_failure
        assert case.failure_message == "Connection refused"
        assert case.stack_trace == "ConnectionError"

    def test_failure_text_preferred_over_error_text(self):
        xml = """<testsuite>
    <testcase name="t"><failure>from failure</failure><error>from error</error></testcase>
</testsuite>"""
        (case,) = _cases(xml)

        assert case.stack_trace == "from failure"

    def test_only_first_failure_is_used(self):
        """Dialects that repeat failure elements contribute only the first."""
        xml = """<testsuite>
    <testcase name="t">
        <failure message="one">1</failure><failure message="two">2</failure>
    </testcase>
</testsuite>"""
        (case,) = _cases(xml)

        assert case.failure_message == "one"
        assert case.stack_trace == "1"

    def test_skipped_element(self):
        (case,) = _cases('<testsuite><testcase name="t"><skipped/></testcase></testsuite>')

        assert case.is_skipped
        assert not case.has_failure

    def test_disabled_and_ignored_status(self):
        xml = """<testsuite>
    <testcase name="a" status="disabled"/>
    <testcase name="b" status="ignored"/>
    <testcase name="c" status="run"/>
</testsuite>"""
        a, b, c = _cases(xml)

        assert a.is_skipped
        assert b.is_skipped
        assert not c.is_skipped

    def test_system_out(self):
        xml = """<testsuite>
    <testcase name="t"><system-out><![CDATA[  captured  ]]></system-out></testcase>
    <testcase name="u"><system-out>   </system-out></testcase>
</testsuite>"""
        t, u = _cases(xml)

        assert t.system_out == "captured"
        assert u.system_out is None

    def test_missing_attributes(self):
        """Cases without optional attributes still parse."""
        (case,) = _cases("<testsuite><testcase/></testsuite>")

        assert case.name == ""
        assert case.classname is None
        assert case.file is None
        assert case.line is None
        assert case.time is None
        assert case.lookup_name == ""
        assert case.stack_trace == ""
        assert case.failure_message is None
