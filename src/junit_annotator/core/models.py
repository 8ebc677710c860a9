"""Result model shared by every stage of report ingestion.

The field names of ``Annotation`` and the keys produced by
``TestResult.to_dict`` are the wire contract consumed by whatever posts
the annotations to a review system, so they must not change.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class AnnotationLevel(Enum):
    """Severity of an annotation."""

    FAILURE = "failure"
    NOTICE = "notice"
    WARNING = "warning"


class CaseStatus(Enum):
    """Outcome of a single test case."""

    SUCCESS = "success"
    FAILURE = "failure"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class Position:
    """Resolved source location of a test case.

    ``line`` is ``-1`` when a search was attempted but produced no usable
    number, and ``1`` when there was no numeric evidence at all.
    """

    file_name: str
    line: int


@dataclass(frozen=True)
class Transformer:
    """Substitution applied to a resolved file name before path lookup."""

    search_value: str
    replace_value: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Transformer:
        """Build from the ``{searchValue, replaceValue}`` wire shape."""
        return cls(
            search_value=str(data.get("searchValue", data.get("search_value", ""))),
            replace_value=str(data.get("replaceValue", data.get("replace_value", ""))),
        )

    def to_dict(self) -> dict[str, str]:
        return {"searchValue": self.search_value, "replaceValue": self.replace_value}


@dataclass(frozen=True)
class Annotation:
    """A file/line anchored report entry for one test case."""

    path: str
    start_line: int
    end_line: int
    annotation_level: AnnotationLevel
    status: CaseStatus
    title: str
    message: str
    raw_details: str
    start_column: int = 0
    end_column: int = 0

    @property
    def is_failure(self) -> bool:
        return self.annotation_level is AnnotationLevel.FAILURE

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the wire shape."""
        return {
            "path": self.path,
            "start_line": self.start_line,
            "end_line": self.end_line,
            "start_column": self.start_column,
            "end_column": self.end_column,
            "annotation_level": self.annotation_level.value,
            "status": self.status.value,
            "title": self.title,
            "message": self.message,
            "raw_details": self.raw_details,
        }


@dataclass
class InternalResult:
    """Fold accumulator for one suite subtree or one report file."""

    total_count: int = 0
    skipped: int = 0
    annotations: list[Annotation] = field(default_factory=list)

    def merge(self, other: InternalResult) -> None:
        """Append another partial result onto this one."""
        self.total_count += other.total_count
        self.skipped += other.skipped
        self.annotations.extend(other.annotations)

    def counted(self, annotate_passed: bool) -> int:
        """Number of annotations that count toward the annotation cap."""
        if annotate_passed:
            return len(self.annotations)
        return sum(1 for a in self.annotations if a.is_failure)


@dataclass
class TestResult:
    """Final outcome of ingesting every matched report file."""

    __test__ = False  # not a pytest test class

    check_name: str
    summary: str
    total_count: int
    skipped: int
    failed: int
    passed: int
    found_files: int
    annotations: list[Annotation] = field(default_factory=list)

    @classmethod
    def from_internal(
        cls, check_name: str, summary: str, result: InternalResult, found_files: int
    ) -> TestResult:
        """Derive failed/passed counts from an accumulated result."""
        failed = sum(1 for a in result.annotations if a.is_failure)
        return cls(
            check_name=check_name,
            summary=summary,
            total_count=result.total_count,
            skipped=result.skipped,
            failed=failed,
            passed=result.total_count - failed - result.skipped,
            found_files=found_files,
            annotations=list(result.annotations),
        )

    @property
    def failed_annotations(self) -> list[Annotation]:
        return [a for a in self.annotations if a.is_failure]

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the wire shape."""
        return {
            "checkName": self.check_name,
            "summary": self.summary,
            "totalCount": self.total_count,
            "skipped": self.skipped,
            "failed": self.failed,
            "passed": self.passed,
            "foundFiles": self.found_files,
            "annotations": [a.to_dict() for a in self.annotations],
        }
