#!/usr/bin/env python3
# ruff: noqa: F401
# /// script
# requires-python = ">=3.11"
# dependencies = ["iterm2", "loguru", "platformdirs"]
# ///
"""
iTerm2 Split/Merge Script
Splits the tabs right of the active tab into a new window, or merges
every other window's tabs into the current one.

Configuration: ~/.config/iterm2-split-merge/config.toml (XDG standard)

Features:
- split_tabs_here / merge_windows_here script functions for key bindings
- Rollback of the new window when a split fails before tabs move
- Per-window failure isolation when merging
- Structured JSONL logging (machine-readable)
"""

import functools
import json
import re
import subprocess
import sys
import tomllib
import traceback
from contextvars import ContextVar
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Generic, Protocol, Sequence, TypeVar
from uuid import uuid4


def show_import_error_dialog(package: str, error_msg: str) -> None:
    """
    Show visible osascript dialog when imports fail.

    AutoLaunch scripts have no visible stderr, so a missing package would
    otherwise fail silently.

    Args:
        package: Name of the missing package
        error_msg: The actual error message
    """
    message = (
        f"Missing Python package: {package}\\n\\n"
        f"Run this command to install:\\n"
        f"uv pip install {package}\\n\\n"
        f"Error: {error_msg}"
    )
    title = "iTerm2 Split/Merge - Import Error"

    applescript = f'''
    display dialog "{message}" with title "{title}" buttons {{"OK"}} default button "OK" with icon stop
    '''

    try:
        subprocess.run(
            ["osascript", "-e", applescript],
            capture_output=True,
            timeout=30,
            check=False
        )
    except (OSError, subprocess.TimeoutExpired, subprocess.SubprocessError) as e:
        sys.stderr.write(f"ERROR: {message.replace(chr(92) + 'n', chr(10))}\n")
        sys.stderr.write(f"(osascript also failed: {e})\n")


try:
    import iterm2
except ImportError as e:
    show_import_error_dialog("iterm2", str(e))
    sys.exit(1)

try:
    import platformdirs
except ImportError as e:
    show_import_error_dialog("platformdirs", str(e))
    sys.exit(1)

try:
    from loguru import logger
except ImportError as e:
    show_import_error_dialog("loguru", str(e))
    sys.exit(1)
