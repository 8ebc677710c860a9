"""Tests for settings loading and parse options."""

from __future__ import annotations

from pathlib import Path

import pytest

from junit_annotator.config import (
    DEFAULT_CHECK_NAME,
    DEFAULT_REPORT_PATHS,
    AnnotatorSettings,
    ParseOptions,
    load_config_file,
    load_settings,
    parse_transformers,
)
from junit_annotator.core.exceptions import InvalidConfigurationError
from junit_annotator.core.models import Transformer


class TestAnnotatorSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self):
        settings = AnnotatorSettings()

        assert settings.check_name == DEFAULT_CHECK_NAME
        assert settings.report_paths == DEFAULT_REPORT_PATHS
        assert settings.exclude_sources == ["/build/", "/__pycache__/"]
        assert settings.annotations_limit == -1
        assert settings.truncate_stack_traces is True
        assert settings.annotate_passed is False
        assert settings.transformers == []
        assert settings.workspace is None

    def test_environment_variables(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("JUNIT_ANNOTATOR_CHECK_NAME", "Unit tests")
        monkeypatch.setenv("JUNIT_ANNOTATOR_ANNOTATE_PASSED", "true")
        monkeypatch.setenv("JUNIT_ANNOTATOR_ANNOTATIONS_LIMIT", "50")
        monkeypatch.setenv("JUNIT_ANNOTATOR_EXCLUDE_SOURCES", "/dist/, /target/\n/out/")

        settings = AnnotatorSettings()

        assert settings.check_name == "Unit tests"
        assert settings.annotate_passed is True
        assert settings.annotations_limit == 50
        assert settings.exclude_sources == ["/dist/", "/target/", "/out/"]

    def test_transformers_from_environment(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv(
            "JUNIT_ANNOTATOR_TRANSFORMERS", '[{"searchValue": "::", "replaceValue": "/"}]'
        )

        settings = AnnotatorSettings()

        assert [t.to_transformer() for t in settings.transformers] == [
            Transformer(search_value="::", replace_value="/")
        ]

    def test_github_workspace(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("GITHUB_WORKSPACE", "/home/runner/work/repo")

        assert AnnotatorSettings().workspace == "/home/runner/work/repo"

    def test_own_workspace_variable(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("JUNIT_ANNOTATOR_WORKSPACE", "/ws")

        assert AnnotatorSettings().workspace == "/ws"


class TestParseTransformers:
    def test_empty(self):
        assert parse_transformers("  ") == []

    def test_invalid_json(self):
        with pytest.raises(InvalidConfigurationError, match="Invalid transformer JSON"):
            parse_transformers("[{")

    def test_not_a_list(self):
        with pytest.raises(InvalidConfigurationError):
            parse_transformers('{"searchValue": "x"}')


class TestLoadSettings:
    """Tests for load_settings."""

    def test_yaml_file(self, tmp_path: Path):
        config = tmp_path / "annotator.yaml"
        config.write_text(
            """
check-name: From file
report_paths: "build/test-results/**/*.xml"
suite-regex: "*"
transformers:
  - searchValue: "^com/example/"
    replaceValue: "src/"
"""
        )

        settings = load_settings(config)

        assert settings.check_name == "From file"
        assert settings.report_paths == "build/test-results/**/*.xml"
        assert settings.suite_regex == "*"
        assert settings.transformers[0].search_value == "^com/example/"

    def test_overrides_win_over_file(self, tmp_path: Path):
        config = tmp_path / "annotator.yaml"
        config.write_text("check_name: From file\nannotations_limit: 5\n")

        settings = load_settings(config, check_name="From flag", annotations_limit=None)

        assert settings.check_name == "From flag"
        assert settings.annotations_limit == 5

    def test_file_wins_over_environment(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("JUNIT_ANNOTATOR_CHECK_NAME", "From env")
        config = tmp_path / "annotator.yaml"
        config.write_text("check_name: From file\n")

        assert load_settings(config).check_name == "From file"

    def test_invalid_value(self):
        with pytest.raises(InvalidConfigurationError):
            load_settings(annotations_limit="many")

    def test_invalid_transformers(self):
        with pytest.raises(InvalidConfigurationError):
            load_settings(transformers="not json")

    def test_empty_file(self, tmp_path: Path):
        config = tmp_path / "empty.yaml"
        config.write_text("")

        assert load_config_file(config) == {}

    def test_file_must_be_mapping(self, tmp_path: Path):
        config = tmp_path / "list.yaml"
        config.write_text("- a\n- b\n")

        with pytest.raises(InvalidConfigurationError, match="must contain a mapping"):
            load_settings(config)

    def test_broken_yaml(self, tmp_path: Path):
        config = tmp_path / "broken.yaml"
        config.write_text("check_name: [unclosed\n")

        with pytest.raises(InvalidConfigurationError, match="Cannot read config file"):
            load_settings(config)


class TestParseOptions:
    """Tests for ParseOptions."""

    def test_from_settings(self, tmp_path: Path):
        settings = load_settings(
            suite_regex="*",
            check_retries=True,
            exclude_sources="/dist/",
            transformers='[{"searchValue": "a", "replaceValue": "b"}]',
            annotations_limit=3,
            workspace="/ws",
        )

        options = ParseOptions.from_settings(settings, source_root=tmp_path)

        assert options.suite_regex == "*"
        assert options.check_retries is True
        assert options.exclude_sources == ("/dist/",)
        assert options.transformers == (Transformer(search_value="a", replace_value="b"),)
        assert options.annotations_limit == 3
        assert options.workspace == "/ws"
        assert options.source_root == tmp_path

    @pytest.mark.parametrize(
        "limit,counted,reached",
        [(-1, 100, False), (0, 100, False), (2, 1, False), (2, 2, True), (2, 3, True)],
    )
    def test_limit_reached(self, limit: int, counted: int, reached: bool) -> None:
        assert ParseOptions(annotations_limit=limit).limit_reached(counted) is reached
