#!/usr/bin/env python3

# Copyright (c) 2026 Stephen P Smith
# MIT License

"""
Viewer Navigation State for pfview
Tracks the selected FAT row and the raw/directory view mode, independently of Qt
"""

import bisect
import logging
from typing import List, Optional, Tuple
from dataclasses import dataclass

from pennfat_backend.handler import FAT_EOF, FAT_FREE


@dataclass
class NavigationState:
    """Selection and display mode of the viewer"""
    selected: int = 0
    raw_mode: bool = False


class ViewerNavigator:
    """Keyboard-driven navigation over the occupied FAT entries

    The FAT table is passed in on every call because it is re-read after
    each reload and may grow or shrink between calls.
    """

    def __init__(self, raw_mode: bool = False, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)
        self.state = NavigationState(raw_mode=raw_mode)

    @property
    def raw_mode(self) -> bool:
        return self.state.raw_mode

    def set_raw_mode(self, enabled: bool):
        self.state.raw_mode = enabled

    def toggle_mode(self):
        self.state.raw_mode = not self.state.raw_mode

    def selected_entry(self, fat_table: List[Tuple[int, int]]) -> Optional[Tuple[int, int]]:
        """Return the (block_num, next_block) pair under the cursor, if any"""
        if 0 <= self.state.selected < len(fat_table):
            return fat_table[self.state.selected]
        return None

    def clamp(self, fat_table: List[Tuple[int, int]]):
        """Keep the selection inside a table that may have shrunk"""
        if self.state.selected >= len(fat_table):
            self.state.selected = max(0, len(fat_table) - 1)

    def move_down(self, fat_table: List[Tuple[int, int]]):
        if self.state.selected < len(fat_table) - 1:
            self.state.selected += 1

    def move_up(self):
        if self.state.selected > 0:
            self.state.selected -= 1

    def select(self, row: int, fat_table: List[Tuple[int, int]]):
        if 0 <= row < len(fat_table):
            self.state.selected = row

    def follow_link(self, fat_table: List[Tuple[int, int]]) -> bool:
        """
        Move the cursor to the entry the selected entry links to.

        The table is sorted by block number, so the target row is found by
        binary search.

        Returns:
            True if the cursor moved.
        """
        entry = self.selected_entry(fat_table)
        if entry is None:
            return False

        next_block = entry[1]
        if next_block in (FAT_FREE, FAT_EOF):
            return False

        blocks = [block for block, _ in fat_table]
        row = bisect.bisect_left(blocks, next_block)
        if row < len(blocks) and blocks[row] == next_block:
            self.state.selected = row
            return True

        self.logger.debug(f"Link target {next_block:04x} is not an occupied FAT entry")
        return False
