"""
Pytest tests for ViewerNavigator

Tests keyboard navigation independently of the UI.
"""

import pytest
from unittest.mock import Mock

from gui.navigation import ViewerNavigator, NavigationState


@pytest.fixture
def fat_table():
    return [(0, 0x0100), (1, 2), (2, 0xFFFF), (5, 9), (9, 0xFFFF), (12, 40)]


@pytest.fixture
def navigator():
    return ViewerNavigator(logger=Mock())


class TestNavigatorInitialization:
    def test_defaults(self, navigator):
        assert navigator.state == NavigationState(selected=0, raw_mode=False)

    def test_raw_mode_from_settings(self):
        assert ViewerNavigator(raw_mode=True).raw_mode


class TestMovement:
    def test_move_down_and_up(self, navigator, fat_table):
        navigator.move_down(fat_table)
        navigator.move_down(fat_table)
        assert navigator.selected_entry(fat_table) == (2, 0xFFFF)
        navigator.move_up()
        assert navigator.selected_entry(fat_table) == (1, 2)

    def test_stops_at_bottom(self, navigator, fat_table):
        for _ in range(20):
            navigator.move_down(fat_table)
        assert navigator.state.selected == len(fat_table) - 1

    def test_stops_at_top(self, navigator):
        navigator.move_up()
        assert navigator.state.selected == 0

    def test_select_ignores_out_of_range(self, navigator, fat_table):
        navigator.select(3, fat_table)
        navigator.select(99, fat_table)
        navigator.select(-1, fat_table)
        assert navigator.state.selected == 3

    def test_clamp_after_table_shrinks(self, navigator, fat_table):
        navigator.select(5, fat_table)
        navigator.clamp(fat_table[:2])
        assert navigator.state.selected == 1

    def test_empty_table(self, navigator):
        navigator.move_down([])
        navigator.clamp([])
        assert navigator.selected_entry([]) is None
        assert not navigator.follow_link([])


class TestFollowLink:
    def test_follow_to_next_block(self, navigator, fat_table):
        navigator.select(1, fat_table)
        assert navigator.follow_link(fat_table)
        assert navigator.selected_entry(fat_table) == (2, 0xFFFF)

    def test_follow_skips_gap(self, navigator, fat_table):
        navigator.select(3, fat_table)
        assert navigator.follow_link(fat_table)
        assert navigator.selected_entry(fat_table) == (9, 0xFFFF)

    def test_terminator_does_not_move(self, navigator, fat_table):
        navigator.select(2, fat_table)
        assert not navigator.follow_link(fat_table)
        assert navigator.state.selected == 2

    def test_missing_target_does_not_move(self, navigator, fat_table):
        navigator.select(5, fat_table)
        assert not navigator.follow_link(fat_table)
        assert navigator.state.selected == 5
        navigator.logger.debug.assert_called_once()

    def test_follow_from_last_row(self, navigator):
        table = [(1, 3), (3, 1)]
        navigator.select(1, table)
        assert navigator.follow_link(table)
        assert navigator.state.selected == 0


class TestModes:
    def test_toggle(self, navigator):
        navigator.toggle_mode()
        assert navigator.raw_mode
        navigator.toggle_mode()
        assert not navigator.raw_mode

    def test_set_raw_mode(self, navigator):
        navigator.set_raw_mode(True)
        navigator.set_raw_mode(True)
        assert navigator.raw_mode
