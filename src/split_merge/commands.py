# =============================================================================
# Command Dispatch
# =============================================================================
# Maps trigger names (key bindings, RPC calls) to split/merge invocations.

from loguru import logger

from .errors import ErrorReport
from .host import WindowingHost
from .merge import MERGE_TARGET_CURRENT, merge_windows
from .split import split_tabs

SPLIT_COMMAND = "split-tabs"
MERGE_COMMAND = "merge-windows"


async def handle_command(
    host: WindowingHost,
    command: str,
    config: dict | None = None,
    window_id=None,
) -> ErrorReport | None:
    """
    Run the operation named by ``command``.

    Args:
        host: Windowing host
        command: SPLIT_COMMAND or MERGE_COMMAND
        config: Loaded configuration (merge.target is read from it)
        window_id: Window the trigger fired in; the current window when None

    Returns:
        The operation's ErrorReport, or None for unknown commands
    """
    target_policy = (config or {}).get("merge", {}).get("target", MERGE_TARGET_CURRENT)

    # A missing window_id is resolved inside the operation, so a failing
    # lookup is reported like any other host failure
    if command == SPLIT_COMMAND:
        return await split_tabs(host, window_id)

    if command == MERGE_COMMAND:
        return await merge_windows(host, window_id, target_policy)

    logger.warning(
        "Unknown command ignored",
        operation="handle_command",
        status="ignored",
        command=command
    )
    return None

