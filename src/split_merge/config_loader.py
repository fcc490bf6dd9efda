# =============================================================================
# Configuration Loading
# =============================================================================

import re
import tomllib
from pathlib import Path

from loguru import logger

from .errors import Error, ErrorReport, ErrorType, Result
from .merge import MERGE_TARGET_POLICIES

CONFIG_DIR = Path("~/.config/iterm2-split-merge").expanduser()
CONFIG_PATH = CONFIG_DIR / "config.toml"

# Default configuration - used as-is when no config file exists
DEFAULT_CONFIG = {
    "merge": {
        "target": "current",  # "current" (focused window) or "first"
    },
    "logging": {
        "console_level": "INFO",
        "file_level": "DEBUG",
        "rotation": "10 MB",
        "retention": "7 days",
    },
}


def extract_toml_error_context(error: tomllib.TOMLDecodeError, file_path: Path) -> dict:
    """
    Extract line context from TOML parse error.

    Args:
        error: The TOMLDecodeError exception
        file_path: Path to the TOML file

    Returns:
        Dict with line_number, line_content, and formatted_message
    """
    error_str = str(error)
    line_number = None
    line_content = None

    # Common formats: "line 15", "at line 15", "(line 15)"
    line_match = re.search(r'line\s+(\d+)', error_str, re.IGNORECASE)
    if line_match:
        line_number = int(line_match.group(1))

    if line_number and file_path.exists():
        try:
            with open(file_path, "r") as f:
                lines = f.readlines()
                if 0 < line_number <= len(lines):
                    line_content = lines[line_number - 1].rstrip()
        except OSError:
            pass

    if line_number:
        formatted = f"Error on line {line_number}"
        if line_content:
            display_line = line_content[:50] + "..." if len(line_content) > 50 else line_content
            formatted += f": {display_line}"
        formatted += f"\n\nDetails: {error_str}"
    else:
        formatted = f"TOML parse error: {error_str}"

    return {
        "line_number": line_number,
        "line_content": line_content,
        "formatted_message": formatted,
        "raw_error": error_str
    }


def deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge override into base dictionary."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def validate_config(config: dict) -> Result[dict]:
    target = config.get("merge", {}).get("target")
    if target not in MERGE_TARGET_POLICIES:
        return Result.err(Error(
            error_type=ErrorType.VALIDATION_ERROR,
            message="Invalid merge.target in configuration file",
            context={"key": "merge.target", "value": target, "allowed": list(MERGE_TARGET_POLICIES)}
        ))
    return Result.ok(config)


def load_config_from_path(config_path: Path) -> Result[dict]:
    """
    Load configuration from a TOML file merged over DEFAULT_CONFIG.

    A missing file is not an error: the defaults are returned.

    Args:
        config_path: Path to the TOML file

    Returns:
        Result[dict]: Ok with merged config, or Err with error details
    """
    if not config_path.exists():
        logger.debug(
            "No config file, using defaults",
            operation="load_config_from_path",
            status="defaults",
            config_path=str(config_path)
        )
        return Result.ok(deep_merge(DEFAULT_CONFIG, {}))

    try:
        with open(config_path, "rb") as f:
            user_config = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        error_context = extract_toml_error_context(e, config_path)
        return Result.err(Error(
            error_type=ErrorType.PARSE_ERROR,
            message="Invalid TOML syntax in configuration file",
            context={
                "config_path": str(config_path),
                "line_number": error_context["line_number"],
                "line_content": error_context["line_content"],
                "details": error_context["formatted_message"]
            },
            original_exception=e
        ))

    merged = deep_merge(DEFAULT_CONFIG, user_config)
    result = validate_config(merged)
    if result.is_ok():
        logger.debug(
            "Config loaded successfully",
            operation="load_config_from_path",
            status="success",
            config_path=str(config_path),
            merge_target=merged["merge"]["target"]
        )
    return result


def load_config(config_path: Path = CONFIG_PATH) -> dict:
    """
    Load configuration, falling back to defaults when it is missing or invalid.

    Returns:
        dict: Merged configuration
    """
    report = ErrorReport(operation="load_config")
    result = load_config_from_path(config_path)
    if not report.collect_result(result):
        logger.warning(
            "Config rejected - using defaults",
            operation="load_config",
            status="fallback",
            config_path=str(config_path)
        )
        return deep_merge(DEFAULT_CONFIG, {})
    return result.value
