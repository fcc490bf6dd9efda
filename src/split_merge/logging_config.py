# =============================================================================
# Structured Logging Setup (JSONL format)
# =============================================================================

import json
import sys
import traceback
from contextvars import ContextVar
from pathlib import Path

import platformdirs
from loguru import logger

APP_NAME = "iterm2-split-merge"

# Correlation ID for one split/merge invocation
trace_id_var: ContextVar[str] = ContextVar('trace_id', default=None)

_CONTEXT_SKIP = ("operation", "status", "trace_id", "metrics")


def json_sink(message):
    """JSONL sink for the iTerm2 Script Console - writes to stderr."""
    record = message.record
    log_entry = {
        "timestamp": record["time"].strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z",
        "level": record["level"].name.lower(),
        "component": record["function"],
        "operation": record["extra"].get("operation", "unknown"),
        "operation_status": record["extra"].get("status", None),
        "trace_id": record["extra"].get("trace_id") or trace_id_var.get(),
        "message": record["message"],
        "context": {k: v for k, v in record["extra"].items()
                   if k not in _CONTEXT_SKIP},
        "metrics": record["extra"].get("metrics", {}),
        "error": None
    }

    if record["exception"]:
        exc_type, exc_value, exc_tb = record["exception"]
        tb_lines = []
        if exc_tb:
            tb_lines = traceback.format_tb(exc_tb)

        log_entry["error"] = {
            "type": exc_type.__name__ if exc_type else "Unknown",
            "message": str(exc_value) if exc_value else "Unknown error",
            "traceback_lines": tb_lines
        }

    sys.stderr.write(json.dumps(log_entry, default=str) + "\n")


def setup_logger(config: dict | None = None):
    """Configure Loguru for machine-readable JSONL output.

    Args:
        config: Loaded configuration; only the ``logging`` table is read.
            Missing keys fall back to INFO on the console and DEBUG in the file.
    """
    log_config = (config or {}).get("logging", {})
    logger.remove()

    logger.add(
        json_sink,
        level=log_config.get("console_level", "INFO")
    )

    # macOS: ~/Library/Logs/iterm2-split-merge/
    # Linux: ~/.local/state/iterm2-split-merge/log/
    log_dir = Path(platformdirs.user_log_dir(
        appname=APP_NAME,
        ensure_exists=True
    ))

    logger.add(
        str(log_dir / "split-merge.jsonl"),
        format="{message}",
        serialize=True,
        rotation=log_config.get("rotation", "10 MB"),
        retention=log_config.get("retention", "7 days"),
        compression="gz",
        level=log_config.get("file_level", "DEBUG")
    )

    return logger
