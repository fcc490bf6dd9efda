# =============================================================================
# Windowing Host Interface
# =============================================================================
# The operations in split.py and merge.py talk to the host only through this
# protocol. iterm2_host.ITerm2Host is the live backend; tests pass AsyncMocks.

from typing import Protocol, Sequence

from .models import Tab, Window

# Destination index meaning "append after the last tab"
APPEND = -1


class WindowingHost(Protocol):
    async def query_tabs(self, active_only: bool = False, window_id=None) -> list[Tab]:
        """Tabs matching the filter, in no guaranteed order."""
        ...

    async def create_window(self, seed_tab_id=None) -> Window:
        """Create a window; without a seed the host adds one placeholder tab."""
        ...

    async def move_tabs(self, tab_ids: Sequence, window_id, index: int = APPEND) -> None:
        ...

    async def remove_tab(self, tab_id) -> None:
        ...

    async def get_all_windows(self, populate_tabs: bool = True) -> list[Window]:
        ...

    async def get_current_window(self) -> Window:
        ...

    async def remove_window(self, window_id) -> None:
        ...
