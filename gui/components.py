#!/usr/bin/env python3

# Copyright (c) 2026 Stephen P Smith
# MIT License

import logging
from typing import List, Tuple

from PySide6.QtWidgets import (
    QLabel, QListWidget, QListWidgetItem, QPlainTextEdit, QDialog, QVBoxLayout,
    QHBoxLayout, QTableWidget, QTableWidgetItem, QPushButton, QAbstractItemView
)
from PySide6.QtCore import Qt
from PySide6.QtGui import QFont

from pennfat_backend.handler import PennFatImage
from pennfat_backend.directory import PennFatError
from pennfat_backend.format_utils import format_block, format_fat_link

logger = logging.getLogger(__name__)

# (key, description) pairs for the help bar
INSTRUCTIONS = [
    ("q", "quit"),
    ("r", "view in raw mode"),
    ("d", "view in directory mode"),
    ("t", "toggle (raw/dir)"),
    ("j/↓", "move down a block"),
    ("k/↑", "move up a block"),
    ("l/→", "move to next block in file"),
]


def _monospace_font() -> QFont:
    font = QFont("Consolas")
    font.setStyleHint(QFont.StyleHint.Monospace)
    return font


def overview_text(image: PennFatImage) -> str:
    return (
        f"fat size = {image.fat_size} ({image.num_fat_entries} entries max), "
        f"block size: {image.block_size}, # data blocks = {image.data_block_count}, "
        f"last updated: {image.last_update_time.strftime('%Y-%m-%d %H:%M:%S')}"
    )


class OverviewLabel(QLabel):
    """Banner with the image geometry and last modification time"""

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.setWordWrap(True)

    def update_from(self, image: PennFatImage):
        self.setText(overview_text(image))


class HelpBar(QLabel):
    """Key binding summary shown under the main view"""

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setTextFormat(Qt.TextFormat.RichText)
        self.setWordWrap(True)
        parts = [f"<b>{key}</b>: {desc}" for key, desc in INSTRUCTIONS]
        self.setText(" | ".join(parts))


class FatTableList(QListWidget):
    """List of occupied FAT entries as 'block -> next' lines"""

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setFont(_monospace_font())
        self.setSelectionMode(QAbstractItemView.SelectionMode.SingleSelection)
        self.setFixedWidth(150)
        self._fat_table: List[Tuple[int, int]] = []

    def set_fat_table(self, fat_table: List[Tuple[int, int]], selected: int):
        """Repopulate only when the table changed, then restore the selection"""
        if fat_table != self._fat_table:
            self._fat_table = list(fat_table)
            self.blockSignals(True)
            self.clear()
            for block_num, next_block in fat_table:
                self.addItem(QListWidgetItem(format_fat_link(block_num, next_block)))
            self.blockSignals(False)

        if 0 <= selected < self.count() and self.currentRow() != selected:
            self.blockSignals(True)
            self.setCurrentRow(selected)
            self.blockSignals(False)
            self.scrollToItem(self.item(selected))


class BlockView(QPlainTextEdit):
    """Read-only view of a single block, raw or as dentries"""

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setReadOnly(True)
        self.setFont(_monospace_font())
        self.setLineWrapMode(QPlainTextEdit.LineWrapMode.WidgetWidth)
        # keyboard navigation belongs to the main window
        self.setFocusPolicy(Qt.FocusPolicy.NoFocus)

    def show_block(self, image: PennFatImage, block_num: int, raw_mode: bool):
        try:
            text = format_block(image.get_block(block_num), raw_mode)
        except PennFatError as e:
            text = f"error reading block: {e}"
        self._set_text(text)

    def show_nothing(self):
        self._set_text("nothing selected")

    def _set_text(self, text: str):
        if text != self.toPlainText():
            self.setPlainText(text)


class HeaderViewer(QDialog):
    """Dialog to view the header and derived geometry"""

    def __init__(self, image: PennFatImage, parent=None):
        super().__init__(parent)
        self.image = image
        logger.debug("Opening Header Viewer")
        self.setup_ui()

    def setup_ui(self):
        """Setup the viewer UI"""
        self.setWindowTitle("PennFat Header")

        layout = QVBoxLayout(self)

        table = QTableWidget()
        table.setColumnCount(2)
        table.setHorizontalHeaderLabels(['Field', 'Value'])
        table.horizontalHeader().setStretchLastSection(True)
        table.setEditTriggers(QTableWidget.EditTrigger.NoEditTriggers)
        table.setAlternatingRowColors(True)

        usage = self.image.get_fat_usage()

        data = [
            ('Block Size Code', str(self.image.block_size_code)),
            ('Number of FAT Blocks', str(self.image.num_fat_blocks)),
            ('Block Size', f'{self.image.block_size:,} bytes'),
            ('FAT Size', f'{self.image.fat_size:,} bytes'),
            ('FAT Entries', str(self.image.num_fat_entries)),
            ('Data Blocks', str(self.image.data_block_count)),
            ('Data Region Size', f'{self.image.data_size:,} bytes'),
            ('Total Size', f'{self.image.total_size:,} bytes'),
            ('Free Blocks', str(usage[PennFatImage.ENTRY_FREE])),
            ('Linked Blocks', str(usage[PennFatImage.ENTRY_USED])),
            ('End-of-Chain Blocks', str(usage[PennFatImage.ENTRY_EOF])),
        ]

        table.setRowCount(len(data))
        for i, (field, value) in enumerate(data):
            table.setItem(i, 0, QTableWidgetItem(field))
            table.setItem(i, 1, QTableWidgetItem(value))

        table.resizeColumnsToContents()
        layout.addWidget(table)

        button_layout = QHBoxLayout()
        button_layout.addStretch()
        close_btn = QPushButton("Close")
        close_btn.setFixedWidth(100)
        close_btn.clicked.connect(self.accept)
        button_layout.addWidget(close_btn)
        layout.addLayout(button_layout)

        self.adjustSize()
        self.setMinimumSize(360, 420)
