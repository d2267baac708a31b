"""
Design tokens and helper utilities for PySide6 UI styling.

Accent color: goldenrod rgb(184, 134, 11)
"""

from PySide6.QtGui import QPalette, QColor
from PySide6.QtWidgets import QApplication

# Color palette (tokens)
PRIMARY_RGB = (30, 64, 120)
PRIMARY = QColor(*PRIMARY_RGB)
ACCENT = QColor(184, 134, 11)         # #B8860B, "saved" feedback

SURFACE = QColor(250, 250, 250)       # #FAFAFA
SURFACE_ELEVATED = QColor(255, 255, 255)
TEXT_PRIMARY = QColor(34, 34, 34)     # #222
TEXT_MUTED = QColor(102, 102, 102)    # #666
SUCCESS = QColor(46, 125, 50)
ERROR = QColor(183, 28, 28)
DISABLED_BG = QColor(158, 158, 158)

# Feedback durations (ms)
SEARCH_FEEDBACK_MS = 3000
FORM_FEEDBACK_MS = 2000

# Spacing scale (px)
SPACE_2 = 6
SPACE_3 = 8
SPACE_4 = 10

FLAG_WIDTH = 220


def css_color(color: QColor) -> str:
    return color.name()


def apply_palette(app: QApplication):
    """
    Apply a light palette aligned with tokens.
    This augments QSS styling with sane widget defaults.
    """
    pal = app.palette()

    pal.setColor(QPalette.Window, SURFACE)
    pal.setColor(QPalette.Base, SURFACE_ELEVATED)
    pal.setColor(QPalette.AlternateBase, SURFACE)
    pal.setColor(QPalette.Text, TEXT_PRIMARY)
    pal.setColor(QPalette.WindowText, TEXT_PRIMARY)
    pal.setColor(QPalette.Button, SURFACE_ELEVATED)
    pal.setColor(QPalette.ButtonText, TEXT_PRIMARY)
    pal.setColor(QPalette.Highlight, PRIMARY)
    pal.setColor(QPalette.HighlightedText, QColor(255, 255, 255))
    pal.setColor(QPalette.Disabled, QPalette.Text, DISABLED_BG)
    pal.setColor(QPalette.Disabled, QPalette.ButtonText, DISABLED_BG)

    app.setPalette(pal)


def load_qss(app: QApplication, qss: str):
    """
    Set application-wide stylesheet.
    """
    app.setStyleSheet(qss)
