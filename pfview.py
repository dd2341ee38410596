#!/usr/bin/env python3

# Copyright (c) 2026 Stephen P Smith
# MIT License

"""
pfview
A live GUI viewer for PennFat filesystem images
"""

import sys
import os
import logging
from typing import List, Optional, Tuple

from PySide6.QtWidgets import (
    QApplication, QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QMessageBox,
    QStyle
)
from PySide6.QtCore import Qt, QSettings, QTimer
from PySide6.QtGui import QAction, QKeySequence, QActionGroup

from pennfat_backend.handler import PennFatImage
from pennfat_backend.directory import PennFatError

from gui.components import OverviewLabel, HelpBar, FatTableList, BlockView, HeaderViewer
from gui.navigation import ViewerNavigator
from gui.styles import apply_theme
from gui.about import about_html

__version__ = "0.1.0"

DEFAULT_REFRESH_INTERVAL_MS = 700


class PennFatViewerWindow(QMainWindow):
    """Main window for the PennFat viewer"""

    def setup_logging(self):
        """Configure application-wide logging"""
        logging.basicConfig(
            level=logging.INFO,
            format='%(asctime)s - %(filename)s:%(lineno)d - %(levelname)s - %(message)s',
            handlers=[
                logging.FileHandler("pfview.log", mode='w'),
                logging.StreamHandler()
            ]
        )
        self.logger = logging.getLogger("pfview")

    def __init__(self):
        super().__init__()

        # Settings
        self.settings = QSettings('PennFatViewer', 'Settings')
        self.theme_mode = self.settings.value('theme_mode', 'light', type=str)
        self.refresh_interval = self.settings.value(
            'refresh_interval_ms', DEFAULT_REFRESH_INTERVAL_MS, type=int)
        raw_mode = self.settings.value('raw_mode', False, type=bool)

        self.setup_logging()
        self.logger.info("Application started")

        self.image: Optional[PennFatImage] = None
        self.fat_table: List[Tuple[int, int]] = []
        self.navigator = ViewerNavigator(raw_mode=raw_mode, logger=self.logger)

        self.setup_ui()

        geometry = self.settings.value('window_geometry')
        if geometry:
            self.restoreGeometry(geometry)

        apply_theme(self.theme_mode)

        self.timer = QTimer(self)
        self.timer.timeout.connect(self.refresh)

    def setup_ui(self):
        """Create the user interface"""
        self.setWindowTitle("pfview")
        self.setGeometry(400, 200, 900, 600)
        self.setWindowIcon(self.style().standardIcon(QStyle.StandardPixmap.SP_DriveHDIcon))

        central = QWidget()
        layout = QVBoxLayout(central)

        self.overview = OverviewLabel()
        layout.addWidget(self.overview)

        body = QHBoxLayout()
        self.fat_list = FatTableList()
        self.fat_list.setFocusPolicy(Qt.FocusPolicy.NoFocus)
        self.fat_list.currentRowChanged.connect(self.on_row_clicked)
        body.addWidget(self.fat_list)

        self.block_view = BlockView()
        body.addWidget(self.block_view, 1)
        layout.addLayout(body, 1)

        layout.addWidget(HelpBar())
        self.setCentralWidget(central)

        self.create_menus()
        self.create_shortcuts()

    def create_menus(self):
        """Create the menu bar"""
        menubar = self.menuBar()

        file_menu = menubar.addMenu("&File")
        header_action = QAction("Header &Info...", self)
        header_action.triggered.connect(self.show_header_info)
        file_menu.addAction(header_action)
        file_menu.addSeparator()
        quit_action = QAction("&Quit", self)
        quit_action.setShortcut(QKeySequence("Ctrl+Q"))
        quit_action.triggered.connect(self.close)
        file_menu.addAction(quit_action)

        view_menu = menubar.addMenu("&View")
        theme_menu = view_menu.addMenu("Theme")
        theme_group = QActionGroup(self)
        for mode in ('light', 'dark'):
            action = QAction(mode.capitalize(), self)
            action.setCheckable(True)
            action.setChecked(self.theme_mode == mode)
            action.triggered.connect(lambda checked, m=mode: self.set_theme(m))
            theme_group.addAction(action)
            theme_menu.addAction(action)

        help_menu = menubar.addMenu("&Help")
        about_action = QAction("&About", self)
        about_action.triggered.connect(self.show_about)
        help_menu.addAction(about_action)

    def create_shortcuts(self):
        """Single-key navigation bindings"""
        bindings = [
            (("Q",), self.close),
            (("R",), lambda: self.set_raw_mode(True)),
            (("D",), lambda: self.set_raw_mode(False)),
            (("T",), self.toggle_mode),
            (("J", "Down"), self.move_down),
            (("K", "Up"), self.move_up),
            (("L", "Right"), self.follow_link),
        ]
        for keys, handler in bindings:
            action = QAction(self)
            action.setShortcuts([QKeySequence(k) for k in keys])
            action.setShortcutContext(Qt.ShortcutContext.WindowShortcut)
            action.triggered.connect(handler)
            self.addAction(action)

    def load_image(self, image_path: str) -> bool:
        """
        Open an image and start polling it for changes.

        Returns:
            False if the image could not be loaded; the error has been shown.
        """
        try:
            self.image = PennFatImage(image_path)
        except (PennFatError, OSError) as e:
            self.logger.critical(f"Failed to load {image_path}: {e}")
            QMessageBox.critical(self, "Cannot Open Image", f"Could not open '{image_path}'.\n\n{e}")
            return False

        self.setWindowTitle(f"pfview - {os.path.basename(image_path)}")
        self.refresh()
        self.timer.start(self.refresh_interval)
        return True

    def refresh(self):
        """Reload the image if it changed and redraw everything"""
        if self.image is None:
            return
        try:
            self.image.reload()
        except (PennFatError, OSError) as e:
            self.timer.stop()
            self.logger.critical(f"Lost image {self.image.image_path}: {e}")
            QMessageBox.critical(self, "Image Error", f"The image can no longer be read.\n\n{e}")
            QApplication.exit(1)
            return

        self.fat_table = self.image.get_fat_table()
        self.navigator.clamp(self.fat_table)
        self.redraw()

    def redraw(self):
        if self.image is None:
            return
        self.overview.update_from(self.image)
        self.fat_list.set_fat_table(self.fat_table, self.navigator.state.selected)

        entry = self.navigator.selected_entry(self.fat_table)
        if entry is None:
            self.block_view.show_nothing()
        else:
            self.block_view.show_block(self.image, entry[0], self.navigator.raw_mode)

    def on_row_clicked(self, row: int):
        self.navigator.select(row, self.fat_table)
        self.redraw()

    def move_down(self):
        self.navigator.move_down(self.fat_table)
        self.redraw()

    def move_up(self):
        self.navigator.move_up()
        self.redraw()

    def follow_link(self):
        if self.navigator.follow_link(self.fat_table):
            self.redraw()

    def set_raw_mode(self, enabled: bool):
        self.navigator.set_raw_mode(enabled)
        self.settings.setValue('raw_mode', enabled)
        self.redraw()

    def toggle_mode(self):
        self.set_raw_mode(not self.navigator.raw_mode)

    def set_theme(self, mode: str):
        self.theme_mode = mode
        self.settings.setValue('theme_mode', mode)
        apply_theme(mode)

    def show_header_info(self):
        if self.image is None:
            return
        HeaderViewer(self.image, self).exec()

    def show_about(self):
        QMessageBox.about(self, "About pfview", about_html)

    def closeEvent(self, event):
        self.timer.stop()
        self.settings.setValue('window_geometry', self.saveGeometry())
        if self.image is not None:
            self.image.close()
        self.logger.info("Application closed")
        super().closeEvent(event)


def main():
    """Main entry point"""
    if len(sys.argv) != 2:
        print(f"pfview {__version__} - PennFat image viewer")
        print(f"Usage: {os.path.basename(sys.argv[0])} <filename>")
        return 1

    image_path = sys.argv[1]
    app = QApplication(sys.argv[:1])
    app.setApplicationName("pfview")
    app.setOrganizationName("PennFatViewer")
    app.setStyle('Fusion')

    window = PennFatViewerWindow()
    if not window.load_image(image_path):
        return 1
    window.show()

    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
