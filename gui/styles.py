#!/usr/bin/env python3

# Copyright (c) 2026 Stephen P Smith
# MIT License

from PySide6.QtGui import QPalette, QColor
from PySide6.QtWidgets import QApplication

_DARK_COLORS = {
    QPalette.ColorRole.Window: (53, 53, 53),
    QPalette.ColorRole.WindowText: (255, 255, 255),
    QPalette.ColorRole.Base: (35, 35, 35),
    QPalette.ColorRole.AlternateBase: (53, 53, 53),
    QPalette.ColorRole.Text: (255, 255, 255),
    QPalette.ColorRole.Button: (53, 53, 53),
    QPalette.ColorRole.ButtonText: (255, 255, 255),
    QPalette.ColorRole.Highlight: (230, 200, 40),
    QPalette.ColorRole.HighlightedText: (0, 0, 0),
}

_LIGHT_COLORS = {
    QPalette.ColorRole.Window: (240, 240, 240),
    QPalette.ColorRole.WindowText: (0, 0, 0),
    QPalette.ColorRole.Base: (255, 255, 255),
    QPalette.ColorRole.AlternateBase: (245, 245, 245),
    QPalette.ColorRole.Text: (0, 0, 0),
    QPalette.ColorRole.Button: (240, 240, 240),
    QPalette.ColorRole.ButtonText: (0, 0, 0),
    QPalette.ColorRole.Highlight: (255, 215, 0),
    QPalette.ColorRole.HighlightedText: (0, 0, 0),
}


def _build_palette(colors) -> QPalette:
    palette = QPalette()
    for role, rgb in colors.items():
        palette.setColor(role, QColor(*rgb))
    return palette


def get_dark_palette():
    return _build_palette(_DARK_COLORS)


def get_light_palette():
    return _build_palette(_LIGHT_COLORS)


def apply_theme(theme_mode: str):
    """Apply the 'dark' or 'light' palette to the running application"""
    app = QApplication.instance()
    if theme_mode == 'dark':
        app.setPalette(get_dark_palette())
        app.setStyleSheet(dark_overview_stylesheet)
    else:
        app.setPalette(get_light_palette())
        app.setStyleSheet(light_overview_stylesheet)


dark_overview_stylesheet = """
                OverviewLabel {
                    padding: 4px;
                    font-weight: bold;
                    color: #80deea;
                    border: 1px solid #606060;
                }
            """

light_overview_stylesheet = """
                OverviewLabel {
                    padding: 4px;
                    font-weight: bold;
                    color: #00838f;
                    border: 1px solid #c0c0c0;
                }
            """
