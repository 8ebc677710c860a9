"""junit-annotator - JUnit report ingestion and annotation synthesis."""

__version__ = "1.0.0"

from junit_annotator.core.models import (
    Annotation,
    AnnotationLevel,
    CaseStatus,
    InternalResult,
    Position,
    TestResult,
    Transformer,
)
from junit_annotator.reporting import parse_file, parse_test_reports

__all__ = [
    "Annotation",
    "AnnotationLevel",
    "CaseStatus",
    "InternalResult",
    "Position",
    "TestResult",
    "Transformer",
    "parse_file",
    "parse_test_reports",
]
