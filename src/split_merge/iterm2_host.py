# =============================================================================
# iTerm2 Windowing Host
# =============================================================================
# Implements the WindowingHost protocol with the iTerm2 Python API.
#
# iTerm2 has no "move tabs" call: Window.async_set_tabs() takes the full tab
# list a window should end up with, pulling tabs out of other windows as
# needed. Windows left without tabs are closed by iTerm2 itself.

from typing import Sequence

import iterm2
from loguru import logger

from .errors import HostError
from .host import APPEND
from .models import Tab, Window


def order_for_move(existing: Sequence, moving: Sequence, index: int = APPEND) -> list:
    """
    Compute a destination window's tab order after a move.

    Args:
        existing: Tab ids currently in the destination, in order
        moving: Tab ids being moved in, in the order they should appear
        index: Insert position; APPEND (or any index past the end) appends

    Returns:
        Full ordered list of tab ids for the destination window
    """
    moving_set = set(moving)
    kept = [tab_id for tab_id in existing if tab_id not in moving_set]
    if index == APPEND or index >= len(kept):
        return kept + list(moving)
    if index < 0:
        raise ValueError(f"Invalid destination index: {index}")
    return kept[:index] + list(moving) + kept[index:]


def _to_tab(tab, index: int, window) -> Tab:
    return Tab(
        tab_id=tab.tab_id,
        index=index,
        active=window.current_tab is not None and tab.tab_id == window.current_tab.tab_id,
        window_id=window.window_id,
    )


def _to_window(window, populate_tabs: bool = True) -> Window:
    tabs = ()
    if populate_tabs:
        tabs = tuple(_to_tab(tab, i, window) for i, tab in enumerate(window.tabs))
    return Window(window_id=window.window_id, tabs=tabs)


class ITerm2Host:
    """WindowingHost backed by a live iTerm2 connection."""

    def __init__(self, connection):
        self.connection = connection
        self._app = None

    async def _get_app(self):
        # App state is cached by the library; refresh so each read is current
        if self._app is None:
            self._app = await iterm2.async_get_app(self.connection)
        else:
            await self._app.async_refresh()
        return self._app

    async def _window(self, window_id):
        app = await self._get_app()
        window = app.get_window_by_id(window_id)
        if window is None:
            raise HostError(f"Window not found: {window_id}")
        return window

    async def query_tabs(self, active_only: bool = False, window_id=None) -> list[Tab]:
        app = await self._get_app()
        if window_id is None:
            windows = [app.current_terminal_window] if active_only else app.terminal_windows
            windows = [w for w in windows if w is not None]
        else:
            window = app.get_window_by_id(window_id)
            if window is None:
                raise HostError(f"Window not found: {window_id}")
            windows = [window]

        tabs = []
        for window in windows:
            for tab in _to_window(window).tabs:
                if not active_only or tab.active:
                    tabs.append(tab)
        return tabs

    async def create_window(self, seed_tab_id=None) -> Window:
        window = await iterm2.Window.async_create(self.connection)
        if window is None:
            raise HostError("iTerm2 did not create a window")

        if seed_tab_id is not None:
            placeholder_ids = [tab.tab_id for tab in window.tabs]
            await self.move_tabs([seed_tab_id], window.window_id, APPEND)
            for tab_id in placeholder_ids:
                await self.remove_tab(tab_id)
            window = await self._window(window.window_id)

        logger.debug(
            "Window created",
            operation="create_window",
            status="success",
            window_id=window.window_id,
            seeded=seed_tab_id is not None
        )
        return _to_window(window)

    async def move_tabs(self, tab_ids: Sequence, window_id, index: int = APPEND) -> None:
        app = await self._get_app()
        destination = app.get_window_by_id(window_id)
        if destination is None:
            raise HostError(f"Window not found: {window_id}")

        tabs_by_id = {}
        for window in app.terminal_windows:
            for tab in window.tabs:
                tabs_by_id[tab.tab_id] = tab
        missing = [tab_id for tab_id in tab_ids if tab_id not in tabs_by_id]
        if missing:
            raise HostError(f"Tabs not found: {missing}")

        new_order = order_for_move([tab.tab_id for tab in destination.tabs], tab_ids, index)
        await destination.async_set_tabs([tabs_by_id[tab_id] for tab_id in new_order])
        logger.debug(
            "Tabs moved",
            operation="move_tabs",
            status="success",
            window_id=window_id,
            tab_ids=list(tab_ids),
            index=index
        )

    async def remove_tab(self, tab_id) -> None:
        app = await self._get_app()
        tab = app.get_tab_by_id(tab_id)
        if tab is None:
            raise HostError(f"Tab not found: {tab_id}")
        await tab.async_close(force=True)

    async def get_all_windows(self, populate_tabs: bool = True) -> list[Window]:
        app = await self._get_app()
        return [_to_window(window, populate_tabs) for window in app.terminal_windows]

    async def get_current_window(self) -> Window:
        app = await self._get_app()
        window = app.current_terminal_window
        if window is None:
            raise HostError("No current terminal window")
        return _to_window(window)

    async def window_id_for_session(self, session_id):
        """Window holding the given session, or None if it is gone."""
        app = await self._get_app()
        for window in app.terminal_windows:
            for tab in window.tabs:
                for session in tab.sessions:
                    if session.session_id == session_id:
                        return window.window_id
        return None

    async def remove_window(self, window_id) -> None:
        app = await self._get_app()
        window = app.get_window_by_id(window_id)
        if window is None:
            logger.debug(
                "Window already closed",
                operation="remove_window",
                status="skip",
                window_id=window_id
            )
            return
        await window.async_close(force=True)
