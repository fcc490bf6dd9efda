"""
Tests for TOML configuration loading.
"""

import json

from loguru import logger

from split_merge.config_loader import DEFAULT_CONFIG, deep_merge, load_config, load_config_from_path
from split_merge.errors import ErrorType
from split_merge.logging_config import json_sink


def test_missing_file_gives_defaults(tmp_path):
    result = load_config_from_path(tmp_path / "config.toml")

    assert result.is_ok()
    assert result.value == DEFAULT_CONFIG


def test_user_values_override_defaults(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text('[merge]\ntarget = "first"\n\n[logging]\nconsole_level = "DEBUG"\n')

    config = load_config_from_path(path).value

    assert config["merge"]["target"] == "first"
    assert config["logging"]["console_level"] == "DEBUG"
    assert config["logging"]["file_level"] == "DEBUG"
    assert config["logging"]["rotation"] == "10 MB"


def test_invalid_toml_reports_line(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text('[merge]\ntarget = "first"\nthis is not toml\n')

    result = load_config_from_path(path)

    assert result.is_err()
    assert result.error.error_type is ErrorType.PARSE_ERROR
    assert result.error.context["line_number"] == 3
    assert result.error.context["line_content"] == "this is not toml"


def test_unknown_merge_target_is_rejected(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text('[merge]\ntarget = "largest"\n')

    result = load_config_from_path(path)

    assert result.is_err()
    assert result.error.error_type is ErrorType.VALIDATION_ERROR


def test_load_config_falls_back_to_defaults(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text("[merge\n")

    assert load_config(path) == DEFAULT_CONFIG


def test_deep_merge_keeps_nested_defaults():
    merged = deep_merge({"a": {"x": 1, "y": 2}, "b": 1}, {"a": {"y": 3}})

    assert merged == {"a": {"x": 1, "y": 3}, "b": 1}


def test_load_config_reports_rejected_file(tmp_path, capsys):
    path = tmp_path / "config.toml"
    path.write_text('[merge]\ntarget = "largest"\n')

    handler_id = logger.add(json_sink, level="DEBUG")
    try:
        config = load_config(path)
    finally:
        logger.remove(handler_id)

    entries = [json.loads(line) for line in capsys.readouterr().err.splitlines() if line.startswith("{")]
    errors = [e for e in entries if e["level"] == "error"]
    assert config == DEFAULT_CONFIG
    assert errors[-1]["operation"] == "load_config"
    assert errors[-1]["context"]["error_type"] == "validation_error"
    assert errors[-1]["context"]["value"] == "largest"
