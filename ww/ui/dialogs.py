"""Booking dialog shown when the work timer is stopped."""

from PySide6.QtCore import Qt
from PySide6.QtGui import QFont
from PySide6.QtWidgets import (
    QComboBox,
    QDialog,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMessageBox,
    QPushButton,
    QVBoxLayout,
)
from ww.core.booking import WORK_TYPE_LABELS, BookingDraft
from ww.core.errors import BookingError

# Asks which project and kind of work the stopped time belongs to. Saving is done by the caller through `on_save`, so
# a failed save can keep the dialog open.
class BookingDialog(QDialog):

    def __init__(self, parent, draft: BookingDraft, projects, on_save):
        super().__init__(parent)
        self.setWindowTitle("Uren boeken")
        self.setWindowFlags(self.windowFlags() | Qt.WindowStaysOnTopHint)
        self.setModal(True)
        self._on_save = on_save

        # Output attribute, read by MainWindow after the dialog closes
        self.registration = None

        lay = QVBoxLayout(self)
        lay.setSpacing(12)

        summary = QLabel(draft.display)
        summary.setFont(QFont("Calibri", 16, QFont.Bold))
        summary.setAlignment(Qt.AlignCenter)
        lay.addWidget(summary)

        # Project
        row = QHBoxLayout()
        lbl = QLabel("Project:")
        lbl.setFont(QFont("Calibri", 12, QFont.Bold))
        self._project = QComboBox()
        self._project.addItem("Selecteer project", None)
        for project in projects:
            self._project.addItem(project.get("naam") or project.get("name") or project["id"], project["id"])
        self._project.setMinimumWidth(220)
        row.addWidget(lbl)
        row.addWidget(self._project)
        lay.addLayout(row)

        # Work type
        row = QHBoxLayout()
        lbl = QLabel("Werktype:")
        lbl.setFont(QFont("Calibri", 12, QFont.Bold))
        self._work_type = QComboBox()
        self._work_type.addItem("Selecteer werktype", None)
        for work_type, label in WORK_TYPE_LABELS.items():
            self._work_type.addItem(label, work_type.value)
        self._work_type.setMinimumWidth(220)
        row.addWidget(lbl)
        row.addWidget(self._work_type)
        lay.addLayout(row)

        # Description
        self._description = QLineEdit()
        self._description.setPlaceholderText("Omschrijving (optioneel)")
        lay.addWidget(self._description)

        btn_row = QHBoxLayout()
        btn_row.addStretch()
        cancel_btn = QPushButton("Annuleren")
        cancel_btn.clicked.connect(self.reject)
        save_btn = QPushButton("Opslaan")
        save_btn.setDefault(True)
        save_btn.clicked.connect(self._save)
        btn_row.addWidget(cancel_btn)
        btn_row.addWidget(save_btn)
        lay.addLayout(btn_row)

    def _save(self):
        try:
            self.registration = self._on_save(
                self._project.currentData(),
                self._work_type.currentData(),
                self._description.text().strip(),
            )
        except BookingError as e:
            QMessageBox.warning(self, "Uren boeken", str(e))
            return
        self.accept()
