"""PySide6 Search tab: country lookup and the result card."""

import html
import logging
import threading
from typing import Optional

from PySide6.QtCore import Qt, QTimer, Signal
from PySide6.QtGui import QPixmap
from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QLineEdit, QPushButton, QFrame, QStyle
)

from world_explorer.controllers.app_controller import AppController
from world_explorer.models.country import CountryView
from world_explorer.services.errors import LookupFailed
from world_explorer.ui.pyside_tokens import (
    ACCENT, ERROR, FLAG_WIDTH, SEARCH_FEEDBACK_MS, SPACE_3, SPACE_4, css_color
)

logger = logging.getLogger(__name__)


class SearchTabWidget(QWidget):
    """
    Search page.

    Lookups run on the controller's worker thread; the signals below carry the
    results back onto the GUI thread.
    """

    countryFound = Signal(int, object)
    searchFailed = Signal(int, str)
    flagLoaded = Signal(int, object)

    def __init__(self, controller: AppController, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self.controller = controller
        self.country: Optional[CountryView] = None
        self._shown_seq = 0

        self._feedback_timer = QTimer(self)
        self._feedback_timer.setSingleShot(True)
        self._feedback_timer.timeout.connect(self._clear_feedback)

        self._build_ui()

        self.countryFound.connect(self._on_country_found)
        self.searchFailed.connect(self._on_search_failed)
        self.flagLoaded.connect(self._on_flag_loaded)

    def _build_ui(self):
        root = QVBoxLayout(self)
        root.setContentsMargins(SPACE_4, SPACE_4, SPACE_4, SPACE_4)
        root.setSpacing(SPACE_3)

        row = QHBoxLayout()
        self.input = QLineEdit(self)
        self.input.setPlaceholderText("Type a country name, e.g. France")
        self.input.returnPressed.connect(self.run_search)

        self.search_btn = QPushButton("Search", self)
        try:
            self.search_btn.setIcon(self.style().standardIcon(QStyle.SP_FileDialogContentsView))
        except Exception:
            logger.debug("Standard search icon unavailable", exc_info=True)
        self.search_btn.clicked.connect(self.run_search)

        row.addWidget(self.input, 1)
        row.addWidget(self.search_btn)
        root.addLayout(row)

        self.feedback = QLabel("", self)
        root.addWidget(self.feedback)

        self.hint = QLabel("", self)
        self.hint.setObjectName("Hint")
        root.addWidget(self.hint)

        self.card = QFrame(self)
        self.card.setObjectName("ResultCard")
        card_layout = QHBoxLayout(self.card)
        card_layout.setContentsMargins(SPACE_4, SPACE_4, SPACE_4, SPACE_4)

        self.flag_label = QLabel(self.card)
        self.flag_label.setFixedWidth(FLAG_WIDTH)
        self.flag_label.setAlignment(Qt.AlignTop | Qt.AlignHCenter)
        card_layout.addWidget(self.flag_label)

        meta = QVBoxLayout()
        self.title_label = QLabel(self.card)
        self.title_label.setObjectName("CountryTitle")
        self.title_label.setTextFormat(Qt.RichText)
        self.details_label = QLabel(self.card)
        self.details_label.setTextFormat(Qt.RichText)
        self.details_label.setOpenExternalLinks(True)
        self.details_label.setWordWrap(True)
        self.save_btn = QPushButton("Save to Itinerary", self.card)
        self.save_btn.clicked.connect(self._save_current)

        meta.addWidget(self.title_label)
        meta.addWidget(self.details_label)
        meta.addWidget(self.save_btn, 0, Qt.AlignLeft)
        meta.addStretch(1)
        card_layout.addLayout(meta, 1)

        self.card.setVisible(False)
        root.addWidget(self.card)
        root.addStretch(1)

    # -------- Public API --------

    def attach_controller_callbacks(self):
        # Called from the worker thread; emitting queues the slot on the GUI thread
        self.controller.on_country_found = lambda seq, c: self.countryFound.emit(seq, c)
        self.controller.on_search_failed = lambda seq, msg: self.searchFailed.emit(seq, msg)

    def run_search(self):
        self.feedback.setText("")
        self.feedback.setStyleSheet("")
        self.card.setVisible(False)
        self.hint.setText("Loading...")
        self.controller.search_async(self.input.text())

    # -------- Slots --------

    def _on_country_found(self, seq: int, country: CountryView):
        if not self.controller.is_latest(seq):
            logger.debug("Dropping stale search result #%d", seq)
            return
        self._shown_seq = seq
        self.country = country
        self.hint.setText("")
        self._render_country(country)
        self._load_flag_async(seq, country.flag_url)

    def _on_search_failed(self, seq: int, message: str):
        if not self.controller.is_latest(seq):
            return
        self.hint.setText("")
        self.card.setVisible(False)
        self.feedback.setStyleSheet(f"color: {css_color(ERROR)};")
        self.feedback.setText(message)

    def _on_flag_loaded(self, seq: int, data: bytes):
        if seq != self._shown_seq:
            return
        pixmap = QPixmap()
        if pixmap.loadFromData(data):
            self.flag_label.setPixmap(pixmap.scaledToWidth(FLAG_WIDTH, Qt.SmoothTransformation))

    # -------- Helpers --------

    def _render_country(self, country: CountryView):
        esc = html.escape
        title = esc(country.name)
        if country.official_name:
            title += f" <small>({esc(country.official_name)})</small>"
        self.title_label.setText(title)

        maps_url = country.google_maps_url or "#"
        rows = [
            ("Capital", esc(country.capital)),
            ("Region / Subregion", f"{esc(country.region)} / {esc(country.subregion)}"),
            ("Population", country.population_label),
            ("Area", esc(country.area_label)),
            ("Languages", esc(country.languages_label)),
            ("Timezones", esc(country.timezones_label)),
            ("Maps", f'<a href="{esc(maps_url)}">Google Maps</a>'),
        ]
        self.details_label.setText("<br>".join(f"<b>{k}:</b> {v}" for k, v in rows))
        self.flag_label.clear()
        self.flag_label.setToolTip(f"flag of {country.name}")
        self.card.setVisible(True)

    def _load_flag_async(self, seq: int, url: str):
        if not url:
            return

        def worker():
            try:
                data = self.controller.lookup_client.fetch_flag(url)
            except LookupFailed as e:
                logger.warning("Flag unavailable for %s: %s", url, e)
                return
            self.flagLoaded.emit(seq, data)

        threading.Thread(target=worker, daemon=True).start()

    def _save_current(self):
        if self.country is None:
            return
        result = self.controller.save_country(self.country)
        color = ACCENT if result.ok else ERROR
        self.feedback.setStyleSheet(f"color: {css_color(color)};")
        self.feedback.setText(result.message)
        self._feedback_timer.start(SEARCH_FEEDBACK_MS)

    def _clear_feedback(self):
        self.feedback.setText("")
        self.feedback.setStyleSheet("")
