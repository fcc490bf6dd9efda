"""
Tests for the JSONL log sink and ErrorReport bookkeeping.
"""

import json
import sys

import pytest
from loguru import logger

from split_merge import logging_config
from split_merge.errors import Error, ErrorReport, ErrorType, Result
from split_merge.logging_config import json_sink, setup_logger, trace_id_var


@pytest.fixture
def jsonl(capsys):
    handler_id = logger.add(json_sink, level="DEBUG")
    yield lambda: [json.loads(line) for line in capsys.readouterr().err.splitlines() if line.startswith("{")]
    logger.remove(handler_id)


def test_sink_writes_structured_entry(jsonl):
    logger.info("Window merged", operation="merge_windows", status="merged", window_id=2, metrics={"tabs": 3})

    entry = jsonl()[-1]
    assert entry["message"] == "Window merged"
    assert entry["operation"] == "merge_windows"
    assert entry["operation_status"] == "merged"
    assert entry["context"] == {"window_id": 2}
    assert entry["metrics"] == {"tabs": 3}


def test_sink_uses_trace_id_context(jsonl):
    token = trace_id_var.set("trace-123")
    try:
        logger.info("Split starting", operation="split_tabs")
    finally:
        trace_id_var.reset(token)

    assert jsonl()[-1]["trace_id"] == "trace-123"


def test_sink_includes_exception(jsonl):
    try:
        raise RuntimeError("Move failed")
    except RuntimeError:
        logger.exception("Relocation failed", operation="split_tabs")

    error = jsonl()[-1]["error"]
    assert error["type"] == "RuntimeError"
    assert error["message"] == "Move failed"


def test_report_logs_errors_with_context(jsonl):
    report = ErrorReport(operation="merge_windows")
    report.add_error(Error(
        error_type=ErrorType.RELOCATION_ERROR,
        message="Failed to merge window 2",
        context={"window_id": 2, "phase": "move_tabs"}
    ))

    entry = jsonl()[-1]
    assert entry["level"] == "error"
    assert entry["operation"] == "merge_windows"
    assert entry["context"]["error_type"] == "relocation_error"
    assert entry["context"]["window_id"] == 2
    assert [e.error_type for e in report.errors] == [ErrorType.RELOCATION_ERROR]


def test_report_collects_results():
    report = ErrorReport()
    failure = Error(error_type=ErrorType.PARSE_ERROR, message="bad toml")

    assert report.collect_result(Result.ok({})) is True
    assert report.collect_result(Result.err(failure)) is False
    assert report.errors == [failure]
    assert report.has_errors()


def test_setup_logger_writes_log_file(tmp_path, monkeypatch):
    monkeypatch.setattr(logging_config.platformdirs, "user_log_dir", lambda **kwargs: str(tmp_path))
    try:
        setup_logger({"logging": {"console_level": "WARNING"}})
        logger.debug("Config loaded", operation="load_config")
        assert (tmp_path / "split-merge.jsonl").exists()
    finally:
        logger.remove()
        logger.add(sys.stderr)
