"""
Tests for command dispatch from key bindings.
"""

from conftest import make_window

from split_merge.commands import MERGE_COMMAND, SPLIT_COMMAND, handle_command
from split_merge.config_loader import DEFAULT_CONFIG


async def test_split_command_uses_given_window(host):
    host.query_tabs.return_value = []

    report = await handle_command(host, SPLIT_COMMAND, DEFAULT_CONFIG, window_id=456)

    host.query_tabs.assert_awaited_once_with(active_only=True, window_id=456)
    assert report is not None
    assert not report.has_errors()


async def test_split_command_without_window_uses_current(host):
    host.get_current_window.return_value = make_window(456, 1)
    host.query_tabs.return_value = []

    await handle_command(host, SPLIT_COMMAND)

    host.get_current_window.assert_awaited_once()
    host.query_tabs.assert_awaited_once_with(active_only=True, window_id=456)


async def test_merge_command_targets_current_window(host):
    host.get_current_window.return_value = make_window(456, 1)
    host.get_all_windows.return_value = [make_window(456, 1), make_window(7, 70)]

    await handle_command(host, MERGE_COMMAND, DEFAULT_CONFIG)

    host.move_tabs.assert_awaited_once_with([70], 456, -1)


async def test_merge_command_honours_first_policy(host):
    host.get_all_windows.return_value = [make_window(7, 70), make_window(456, 1)]

    await handle_command(host, MERGE_COMMAND, {"merge": {"target": "first"}})

    host.get_current_window.assert_not_awaited()
    host.move_tabs.assert_awaited_once_with([1], 7, -1)


async def test_unknown_command_is_ignored(host):
    result = await handle_command(host, "unknown")

    assert result is None
    assert host.mock_calls == []

