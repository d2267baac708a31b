"""PySide6 main window hosting the Search and My Itinerary tabs."""

import logging
import sys
from typing import Optional

from PySide6.QtCore import Signal
from PySide6.QtWidgets import QApplication, QMainWindow, QWidget, QVBoxLayout, QTabWidget, QStatusBar, QLabel

from world_explorer.controllers.app_controller import AppController
from world_explorer.services.config_service import AppConfig, load_config
from world_explorer.utils.file_utils import resource_path
from world_explorer.ui.pyside_tokens import apply_palette, load_qss
from world_explorer.ui.pyside_search_tab import SearchTabWidget
from world_explorer.ui.pyside_itinerary_tab import ItineraryTabWidget

logger = logging.getLogger(__name__)


class MainWindowQt(QMainWindow):
    """Main application window using PySide6 components."""

    itinerariesChanged = Signal(object)

    def __init__(self, config: AppConfig, controller: Optional[AppController] = None, parent=None):
        super().__init__(parent)
        self.config = config
        self.controller = controller or AppController.from_config(config)

        self._setup_window()
        self._setup_tabs()
        self._setup_status_bar()
        self._setup_controller_callbacks()
        self._initialize_state()

    def _setup_window(self):
        self.setWindowTitle("World Explorer")
        self.resize(self.config.window_width, self.config.window_height)
        if self.config.start_maximized:
            self.showMaximized()

    def _setup_tabs(self):
        central = QWidget(self)
        self.setCentralWidget(central)
        layout = QVBoxLayout(central)
        layout.setContentsMargins(10, 10, 10, 10)

        self.tabs = QTabWidget(central)
        self.search_tab = SearchTabWidget(self.controller, parent=self.tabs)
        self.tabs.addTab(self.search_tab, "Search")
        self.itinerary_tab = ItineraryTabWidget(self.controller, parent=self.tabs)
        self.tabs.addTab(self.itinerary_tab, "My Itinerary")
        layout.addWidget(self.tabs, 1)

    def _setup_status_bar(self):
        sb = QStatusBar(self)
        self.setStatusBar(sb)
        self.status_label = QLabel("Ready", self)
        sb.addWidget(self.status_label, 1)

    def _setup_controller_callbacks(self):
        self.search_tab.attach_controller_callbacks()
        self.controller.on_itineraries_changed = self.itinerariesChanged.emit
        self.itinerariesChanged.connect(self._on_itineraries_changed)

    def _initialize_state(self):
        self.itinerary_tab.load_itineraries()
        if self.controller.store.load_error is not None:
            self.status_label.setText("Saved itineraries could not be loaded; starting with an empty list.")
        else:
            self._update_count(len(self.controller.store))

    def _on_itineraries_changed(self, items):
        self.itinerary_tab.load_itineraries(items)
        self._update_count(len(items))

    def _update_count(self, count: int):
        self.status_label.setText(f"{count} saved itinerar{'y' if count == 1 else 'ies'}")

    def closeEvent(self, event):
        self.controller.close()
        super().closeEvent(event)


def run_app(config: Optional[AppConfig] = None):
    config = config or load_config()
    app = QApplication(sys.argv)
    apply_palette(app)
    qss_path = resource_path("ui/style_pyside.qss")
    try:
        with open(qss_path, "r", encoding="utf-8") as f:
            load_qss(app, f.read())
    except OSError:
        logger.warning("Stylesheet not found at %s", qss_path)

    win = MainWindowQt(config)
    win.show()
    sys.exit(app.exec())
