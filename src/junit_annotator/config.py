"""Configuration for junit_annotator.

``AnnotatorSettings`` is loaded from ``JUNIT_ANNOTATOR_*`` environment
variables, an optional ``.env`` file and an optional YAML file.
``ParseOptions`` is the immutable subset handed to the parsing core.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Annotated, Any

import yaml
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from junit_annotator.core.exceptions import InvalidConfigurationError
from junit_annotator.core.models import Transformer
from junit_annotator.resolution.paths import DEFAULT_EXCLUDE_SOURCES

DEFAULT_CHECK_NAME = "JUnit Test Report"
DEFAULT_REPORT_PATHS = "**/junit-reports/TEST-*.xml"


class TransformerSetting(BaseModel):
    """One ``{searchValue, replaceValue}`` rule as written in configuration."""

    model_config = ConfigDict(populate_by_name=True)

    search_value: str = Field(alias="searchValue")
    replace_value: str = Field(default="", alias="replaceValue")

    def to_transformer(self) -> Transformer:
        return Transformer(search_value=self.search_value, replace_value=self.replace_value)


class AnnotatorSettings(BaseSettings):
    """Settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="JUNIT_ANNOTATOR_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Labels passed through to the result
    check_name: str = DEFAULT_CHECK_NAME
    summary: str = ""

    # Report selection
    report_paths: str = DEFAULT_REPORT_PATHS
    follow_symlink: bool = False

    # Parsing
    suite_regex: str = ""
    annotate_passed: bool = False
    check_retries: bool = False
    exclude_sources: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: list(DEFAULT_EXCLUDE_SOURCES)
    )
    check_title_template: str | None = None
    test_files_prefix: str = ""
    transformers: Annotated[list[TransformerSetting], NoDecode] = Field(default_factory=list)
    annotations_limit: int = -1
    truncate_stack_traces: bool = True
    workspace: str | None = Field(
        default=None,
        validation_alias=AliasChoices("JUNIT_ANNOTATOR_WORKSPACE", "GITHUB_WORKSPACE", "workspace"),
    )

    # Outcome
    fail_on_failure: bool = False
    require_tests: bool = False
    require_passed_tests: bool = False

    # Logging
    log_level: str = "INFO"
    log_json_format: bool = False

    @field_validator("exclude_sources", mode="before")
    @classmethod
    def _split_exclude_sources(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [v.strip() for v in value.replace("\n", ",").split(",") if v.strip()]
        return value

    @field_validator("transformers", mode="before")
    @classmethod
    def _parse_transformers(cls, value: Any) -> Any:
        if isinstance(value, str):
            return parse_transformers(value)
        return value


def parse_transformers(raw: str) -> list[dict[str, str]]:
    """Parse a JSON list of ``{searchValue, replaceValue}`` objects."""
    if not raw.strip():
        return []
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise InvalidConfigurationError(f"Invalid transformer JSON: {e}") from e
    if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
        raise InvalidConfigurationError("Transformers must be a JSON list of objects")
    return data


def load_config_file(path: Path) -> dict[str, Any]:
    """Read settings from a YAML file.

    Raises:
        InvalidConfigurationError: If the file is unreadable or not a mapping.
    """
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        raise InvalidConfigurationError(f"Cannot read config file {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidConfigurationError(f"Config file {path} must contain a mapping")
    return {str(k).replace("-", "_"): v for k, v in data.items()}


def load_settings(config_file: Path | None = None, **overrides: Any) -> AnnotatorSettings:
    """Build settings from environment, an optional YAML file and overrides.

    Overrides whose value is None are ignored, so CLI flags left unset do not
    mask values from the file or the environment.
    """
    values: dict[str, Any] = {}
    if config_file is not None:
        values.update(load_config_file(config_file))
    values.update({k: v for k, v in overrides.items() if v is not None})
    try:
        return AnnotatorSettings(**values)
    except ValueError as e:
        raise InvalidConfigurationError(str(e)) from e


@dataclass(frozen=True)
class ParseOptions:
    """Options consumed by suite traversal and test case evaluation."""

    suite_regex: str = ""
    annotate_passed: bool = False
    check_retries: bool = False
    exclude_sources: tuple[str, ...] = DEFAULT_EXCLUDE_SOURCES
    check_title_template: str | None = None
    test_files_prefix: str = ""
    transformers: tuple[Transformer, ...] = field(default_factory=tuple)
    follow_symlink: bool = False
    annotations_limit: int = -1
    truncate_stack_traces: bool = True
    workspace: str | None = None
    source_root: Path | None = None

    @classmethod
    def from_settings(
        cls, settings: AnnotatorSettings, source_root: Path | None = None
    ) -> ParseOptions:
        return cls(
            suite_regex=settings.suite_regex,
            annotate_passed=settings.annotate_passed,
            check_retries=settings.check_retries,
            exclude_sources=tuple(settings.exclude_sources),
            check_title_template=settings.check_title_template,
            test_files_prefix=settings.test_files_prefix,
            transformers=tuple(t.to_transformer() for t in settings.transformers),
            follow_symlink=settings.follow_symlink,
            annotations_limit=settings.annotations_limit,
            truncate_stack_traces=settings.truncate_stack_traces,
            workspace=settings.workspace,
            source_root=source_root,
        )

    def limit_reached(self, counted: int) -> bool:
        return self.annotations_limit > 0 and counted >= self.annotations_limit
