# =============================================================================
# iTerm2 Entry Point
# =============================================================================
# Registers two script functions. Bind them in iTerm2 under
# Settings > Keys > Key Bindings > "Invoke Script Function":
#   split_tabs_here(session_id: id)
#   merge_windows_here(session_id: id)

import functools
from uuid import uuid4

import iterm2
from loguru import logger

from .commands import MERGE_COMMAND, SPLIT_COMMAND, handle_command
from .config_loader import load_config
from .errors import HostError
from .iterm2_host import ITerm2Host
from .logging_config import setup_logger
from .merge import MERGE_TARGET_FIRST


async def main(connection, config: dict | None = None):
    """
    Register the split/merge RPCs and keep serving them.

    Flow:
    1. Build the iTerm2 host for this connection
    2. Register split_tabs_here / merge_windows_here
    3. Each invocation resolves the invoking session's window (skipped for
       merges under merge.target = "first") and dispatches
    """
    main_trace_id = str(uuid4())
    config = config or load_config()
    host = ITerm2Host(connection)

    target_policy = config["merge"]["target"]

    async def dispatch(command: str, session_id):
        # Under the "first" policy the merge target never depends on
        # where the key binding fired
        if command == MERGE_COMMAND and target_policy == MERGE_TARGET_FIRST:
            await handle_command(host, command, config)
            return

        try:
            window_id = await host.window_id_for_session(session_id)
        except (iterm2.RPCException, HostError) as e:
            logger.warning(
                "Could not resolve invoking session's window",
                operation="main",
                status="fallback",
                command=command,
                session_id=session_id,
                error=str(e),
                error_type=type(e).__name__
            )
            window_id = None
        if window_id is None:
            logger.info(
                "Invoking session has no window - using current window",
                operation="main",
                status="fallback",
                command=command,
                session_id=session_id
            )
        await handle_command(host, command, config, window_id)

    @iterm2.RPC
    async def split_tabs_here(session_id=iterm2.Reference("id")):
        await dispatch(SPLIT_COMMAND, session_id)

    @iterm2.RPC
    async def merge_windows_here(session_id=iterm2.Reference("id")):
        await dispatch(MERGE_COMMAND, session_id)

    await split_tabs_here.async_register(connection)
    await merge_windows_here.async_register(connection)

    logger.info(
        "Split/merge functions registered",
        operation="main",
        status="ready",
        trace_id=main_trace_id,
        merge_target=target_policy
    )


def run():
    config = load_config()
    setup_logger(config)
    iterm2.run_forever(functools.partial(main, config=config))


if __name__ == "__main__":
    run()
