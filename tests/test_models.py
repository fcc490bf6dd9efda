from conftest import make_tab, make_window

from split_merge.models import Snapshot, Window, sorted_by_position


def test_sorted_by_position():
    tabs = [make_tab("c", 2), make_tab("a", 0), make_tab("b", 1)]

    assert [t.tab_id for t in sorted_by_position(tabs)] == ["a", "b", "c"]


def test_non_empty_windows_except_target():
    snapshot = Snapshot(windows=(make_window(1, 10), make_window(2), make_window(3, 30, 31)))

    assert [w.window_id for w in snapshot.non_empty_windows_except(1)] == [3]
    assert snapshot.window(2).is_empty
    assert snapshot.window(4) is None


def test_tab_ids_follow_position():
    window = Window(window_id=1, tabs=(make_tab(12, 2), make_tab(10, 0), make_tab(11, 1)))

    assert window.tab_ids == [10, 11, 12]
