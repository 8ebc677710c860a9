"""Shared exceptions for the junit_annotator package."""


class AnnotatorError(Exception):
    """Base class for errors raised by junit_annotator."""


class ReportParseError(AnnotatorError):
    """Raised when a report file cannot be turned into a document tree.

    Caught per file by the ingestor; one broken report never aborts a run.
    """

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to parse report {path}: {reason}")


class InvalidConfigurationError(AnnotatorError):
    """Raised when a configuration file or option value cannot be used."""
