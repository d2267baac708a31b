"""PySide6 "My Itinerary" tab: add, edit and delete saved trips."""

import html
from typing import Optional, Tuple

from PySide6.QtCore import Qt, QTimer
from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QFormLayout, QLabel, QLineEdit, QTextEdit,
    QPushButton, QMessageBox, QScrollArea, QFrame, QGroupBox
)

from world_explorer.controllers.app_controller import AppController, MSG_EDITING
from world_explorer.models.itinerary import ItineraryRecord
from world_explorer.ui.pyside_tokens import (
    ERROR, FORM_FEEDBACK_MS, SPACE_2, SPACE_3, SPACE_4, SUCCESS, css_color
)

EMPTY_HINT = "No itineraries yet. Add one above or save directly from Search."


class ItineraryCard(QFrame):
    """One row of the itinerary list."""

    def __init__(self, record: ItineraryRecord, on_edit, on_delete, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self.setObjectName("ItineraryCard")
        self.record = record

        layout = QHBoxLayout(self)
        layout.setContentsMargins(SPACE_4, SPACE_3, SPACE_4, SPACE_3)

        left = QVBoxLayout()
        heading = f"<b>{html.escape(record.country)}</b>"
        if record.date:
            heading += f" | {html.escape(record.date)}"
        title = QLabel(heading, self)
        notes = QLabel(html.escape(record.notes) if record.notes else "<em>No notes</em>", self)
        notes.setObjectName("Hint" if not record.notes else "")
        notes.setWordWrap(True)
        left.addWidget(title)
        left.addWidget(notes)
        layout.addLayout(left, 1)

        edit_btn = QPushButton("Edit", self)
        edit_btn.clicked.connect(lambda: on_edit(record.id))
        del_btn = QPushButton("Delete", self)
        del_btn.setStyleSheet(
            "QPushButton { background-color: #D32F2F; color: white; }"
            "QPushButton:hover { background-color: #B71C1C; }"
        )
        del_btn.clicked.connect(lambda: on_delete(record))
        layout.addWidget(edit_btn, 0, Qt.AlignTop)
        layout.addWidget(del_btn, 0, Qt.AlignTop)


class ItineraryTabWidget(QWidget):
    """
    Itinerary page.

    Public methods:
      - load_itineraries()
    """

    def __init__(self, controller: AppController, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self.controller = controller

        self._feedback_timer = QTimer(self)
        self._feedback_timer.setSingleShot(True)
        self._feedback_timer.timeout.connect(self._clear_feedback)

        self._build_ui()

    def _build_ui(self):
        root = QVBoxLayout(self)
        root.setContentsMargins(SPACE_4, SPACE_4, SPACE_4, SPACE_4)
        root.setSpacing(SPACE_3)

        form_box = QGroupBox("Plan a trip", self)
        form = QFormLayout(form_box)
        self.country_edit = QLineEdit(form_box)
        self.date_edit = QLineEdit(form_box)
        self.date_edit.setPlaceholderText("YYYY-MM-DD (optional)")
        self.notes_edit = QTextEdit(form_box)
        self.notes_edit.setFixedHeight(80)
        form.addRow("Country", self.country_edit)
        form.addRow("Date", self.date_edit)
        form.addRow("Notes", self.notes_edit)

        actions = QHBoxLayout()
        self.submit_btn = QPushButton("Add / Save", form_box)
        self.submit_btn.clicked.connect(self._submit)
        self.clear_btn = QPushButton("Clear", form_box)
        self.clear_btn.clicked.connect(self._reset_form)
        actions.addWidget(self.submit_btn)
        actions.addWidget(self.clear_btn)
        actions.addStretch(1)
        form.addRow(actions)
        root.addWidget(form_box)

        self.feedback = QLabel("", self)
        root.addWidget(self.feedback)

        self._list_host = QWidget(self)
        self._list_layout = QVBoxLayout(self._list_host)
        self._list_layout.setContentsMargins(0, 0, 0, 0)
        self._list_layout.setSpacing(SPACE_2)

        scroll = QScrollArea(self)
        scroll.setWidgetResizable(True)
        scroll.setWidget(self._list_host)
        root.addWidget(scroll, 1)

    # -------- Public API --------

    def load_itineraries(self, items: Optional[Tuple[ItineraryRecord, ...]] = None):
        """Rebuild the list from the store."""
        if items is None:
            items = self.controller.list_itineraries()

        while self._list_layout.count():
            child = self._list_layout.takeAt(0)
            if child.widget():
                child.widget().deleteLater()

        if not items:
            hint = QLabel(EMPTY_HINT, self._list_host)
            hint.setObjectName("Hint")
            self._list_layout.addWidget(hint)
        else:
            for record in items:
                self._list_layout.addWidget(
                    ItineraryCard(record, self._edit, self._confirm_delete, self._list_host)
                )
        self._list_layout.addStretch(1)

    # -------- Slots --------

    def _submit(self):
        result = self.controller.submit_itinerary(
            self.country_edit.text(),
            self.date_edit.text(),
            self.notes_edit.toPlainText(),
        )
        self._show_feedback(result.message, SUCCESS if result.ok else ERROR)
        if result.ok:
            self._clear_inputs()
            self._feedback_timer.start(FORM_FEEDBACK_MS)

    def _edit(self, itinerary_id: str):
        record = self.controller.begin_edit(itinerary_id)
        if record is None:
            self.load_itineraries()
            return
        self.country_edit.setText(record.country)
        self.date_edit.setText(record.date)
        self.notes_edit.setPlainText(record.notes)
        self._show_feedback(MSG_EDITING, None)

    def _confirm_delete(self, record: ItineraryRecord):
        reply = QMessageBox.question(
            self,
            "Delete itinerary",
            f"Delete itinerary: {record.country}?",
            QMessageBox.Yes | QMessageBox.No,
            QMessageBox.No,
        )
        if reply != QMessageBox.Yes:
            return
        editing = self.controller.editing_id == record.id
        result = self.controller.delete_itinerary(record.id)
        if editing:
            self._reset_form()
        if not result.ok and result.message:
            self._show_feedback(result.message, ERROR)

    def _reset_form(self):
        self._clear_inputs()
        self.controller.cancel_edit()
        self._clear_feedback()

    # -------- Helpers --------

    def _clear_inputs(self):
        self.country_edit.clear()
        self.date_edit.clear()
        self.notes_edit.clear()

    def _show_feedback(self, message: str, color):
        self.feedback.setStyleSheet(f"color: {css_color(color)};" if color is not None else "")
        self.feedback.setText(message)

    def _clear_feedback(self):
        self.feedback.setText("")
        self.feedback.setStyleSheet("")
