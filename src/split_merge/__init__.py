"""Split and merge iTerm2 windows by moving their tabs."""

from .commands import MERGE_COMMAND, SPLIT_COMMAND, handle_command
from .errors import Error, ErrorReport, ErrorType, HostError
from .host import APPEND, WindowingHost
from .merge import merge_windows
from .models import Snapshot, Tab, Window
from .split import SplitPhase, split_tabs

__version__ = "1.0.0"

__all__ = [
    "APPEND",
    "Error",
    "ErrorReport",
    "ErrorType",
    "HostError",
    "MERGE_COMMAND",
    "SPLIT_COMMAND",
    "Snapshot",
    "SplitPhase",
    "Tab",
    "Window",
    "WindowingHost",
    "handle_command",
    "merge_windows",
    "split_tabs",
]
