# =============================================================================
# Window / Tab Snapshot Model
# =============================================================================
# Immutable point-in-time reads of host state. A snapshot is taken once when
# an operation starts and dropped when it ends; nothing here is cached.

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Tab:
    tab_id: object
    index: int
    active: bool = False
    window_id: object = None


@dataclass(frozen=True)
class Window:
    window_id: object
    tabs: tuple[Tab, ...] = field(default_factory=tuple)

    @property
    def is_empty(self) -> bool:
        return len(self.tabs) == 0

    @property
    def tab_ids(self) -> list:
        """Tab ids in ordering-position order."""
        return [tab.tab_id for tab in sorted_by_position(self.tabs)]


@dataclass(frozen=True)
class Snapshot:
    windows: tuple[Window, ...] = field(default_factory=tuple)

    def window(self, window_id) -> Window | None:
        for window in self.windows:
            if window.window_id == window_id:
                return window
        return None

    def non_empty_windows_except(self, window_id) -> list[Window]:
        """Windows other than ``window_id`` holding at least one tab, in enumeration order."""
        return [
            window for window in self.windows
            if window.window_id != window_id and not window.is_empty
        ]


def sorted_by_position(tabs) -> list[Tab]:
    """Sort tabs by ordering position; hosts may return them in any order."""
    return sorted(tabs, key=lambda tab: tab.index)
