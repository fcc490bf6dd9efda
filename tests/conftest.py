"""
pytest configuration for split/merge tests.

The windowing host is an AsyncMock specced on the WindowingHost protocol, so
every host call can be asserted (or made to fail) individually.
"""

from unittest.mock import AsyncMock

import pytest

from split_merge.host import WindowingHost
from split_merge.models import Tab, Window


def make_tab(tab_id, index, active=False, window_id=None) -> Tab:
    return Tab(tab_id=tab_id, index=index, active=active, window_id=window_id)


def make_window(window_id, *tab_ids) -> Window:
    return Window(
        window_id=window_id,
        tabs=tuple(make_tab(tab_id, i, window_id=window_id) for i, tab_id in enumerate(tab_ids)),
    )


@pytest.fixture
def host():
    """Host double with no default behaviour beyond returning mocks."""
    return AsyncMock(spec=WindowingHost)


def assert_no_mutations(host):
    host.create_window.assert_not_awaited()
    host.move_tabs.assert_not_awaited()
    host.remove_tab.assert_not_awaited()
    host.remove_window.assert_not_awaited()
