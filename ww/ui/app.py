import sys
from PySide6.QtCore import Qt
from PySide6.QtGui import QFont
from PySide6.QtWidgets import (
    QApplication,
    QFrame,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QTreeWidget,
    QTreeWidgetItem,
    QVBoxLayout,
    QWidget,
)
from ww.common.logger import log
from ww.core import config
from ww.core.access import AccessGate
from ww.core.booking import active_projects, cancel_booking, format_time, hours_from_seconds, request_booking, save_booking
from ww.core.modules import SystemSettings
from ww.core.navigation import DEFAULT_EXPANDED, MENU_GROUPS, group_of
from ww.core.records import JsonRecordStore
from ww.core.session import Session, User
from ww.core.store import JsonFileStore
from ww.core.timer_engine import TimerEngine
from ww.core.timer_visibility import TimerVisibility
from ww.ui.dialogs import BookingDialog
from ww.ui.ticker import QtTicker


# ---------------------------------------------------------------------------
# Main window
# ---------------------------------------------------------------------------

# Main window: role filtered navigation on the left, the work timer on the right.
class MainWindow(QMainWindow):

    def __init__(self):
        super().__init__()
        self.setWindowTitle("WerkWise")

        # -- Load config --
        self._config = config.load_config()
        s = self._config["settings"]
        self.always_on_top = s["always_on_top"]
        self.confirm_reset = s["confirm_reset"]
        if self.always_on_top:
            self.setWindowFlags(self.windowFlags() | Qt.WindowStaysOnTopHint)

        # -- Collaborators --
        self._records = JsonRecordStore(config.RECORDS_PATH)
        self._storage = JsonFileStore(config.STORAGE_PATH)
        self._session = Session(User.from_profile(self._config["profile"]))
        self._settings = SystemSettings(self._records)
        self._settings.load()
        self._gate = AccessGate(self._session, self._settings)
        self._visibility = TimerVisibility(self._storage)

        self._active_section = "dashboard"
        self._expanded = set(DEFAULT_EXPANDED)

        # -- Build UI skeleton --
        central = QWidget()
        self.setCentralWidget(central)
        body = QHBoxLayout(central)

        self._nav = QTreeWidget()
        self._nav.setHeaderHidden(True)
        self._nav.setFixedWidth(240)
        self._nav.setFont(QFont("Calibri", 11))
        self._nav.itemClicked.connect(self._on_nav_clicked)
        self._nav.itemExpanded.connect(lambda it: self._expanded.add(it.data(0, Qt.UserRole)))
        self._nav.itemCollapsed.connect(lambda it: self._expanded.discard(it.data(0, Qt.UserRole)))
        body.addWidget(self._nav)

        right = QVBoxLayout()
        self._section_lbl = QLabel()
        self._section_lbl.setFont(QFont("Calibri", 16, QFont.Bold))
        right.addWidget(self._section_lbl)
        right.addStretch()
        self._timer_panel = self._build_timer_panel()
        right.addWidget(self._timer_panel)
        self._show_timer_btn = QPushButton("Timer tonen")
        self._show_timer_btn.clicked.connect(self._on_show_timer)
        right.addWidget(self._show_timer_btn)
        body.addLayout(right, 1)

        # -- Work timer, ticking on the Qt event loop --
        self._engine = TimerEngine(self._storage, ticker=QtTicker(self))
        if s["start_open"] and not self._engine.snapshot.is_open:
            self._engine.set_open(True)
        self._engine.subscribe(lambda snapshot: self._update_timer_display())

        # Module switches can change underneath us, rebuild the menu when they do
        self._settings.watch()
        self._records.subscribe("system_settings", lambda event, row: self._rebuild_nav())

        self._rebuild_nav()
        self._update_timer_display()

    # ------------------------------------------------------------------ #
    #  Navigation                                                          #
    # ------------------------------------------------------------------ #

    def _rebuild_nav(self):
        self._nav.clear()
        groups = self._gate.visible_groups(MENU_GROUPS)
        active_group = group_of(self._active_section, groups)
        if active_group is not None:
            self._expanded.add(active_group.id)

        for group in groups:
            top = QTreeWidgetItem([group.label])
            top.setData(0, Qt.UserRole, group.id)
            f = top.font(0)
            f.setBold(True)
            top.setFont(0, f)
            for item in group.items:
                child = QTreeWidgetItem([item.label])
                child.setData(0, Qt.UserRole, item.id)
                top.addChild(child)
                if item.id == self._active_section:
                    self._nav.setCurrentItem(child)
            self._nav.addTopLevelItem(top)
            top.setExpanded(group.id in self._expanded)

        visible_ids = [item.id for group in groups for item in group.items]
        if self._active_section not in visible_ids:
            self._active_section = visible_ids[0] if visible_ids else None
        self._section_lbl.setText(self._section_title())

    def _section_title(self):
        for group in MENU_GROUPS:
            for item in group.items:
                if item.id == self._active_section:
                    return item.label
        return "Geen toegang"

    def _on_nav_clicked(self, tree_item, _column):
        if tree_item.parent() is None:
            return
        self._active_section = tree_item.data(0, Qt.UserRole)
        self._section_lbl.setText(self._section_title())
        log.debug(f"Navigated to '{self._active_section}'")

    # ------------------------------------------------------------------ #
    #  Timer panel                                                         #
    # ------------------------------------------------------------------ #

    def _build_timer_panel(self):
        panel = QFrame()
        panel.setFrameShape(QFrame.StyledPanel)
        lay = QVBoxLayout(panel)

        header = QHBoxLayout()
        self._toggle_btn = QPushButton("Timer")
        self._toggle_btn.setFont(QFont("Calibri", 12, QFont.Bold))
        self._toggle_btn.clicked.connect(lambda: self._engine.toggle_open())
        header.addWidget(self._toggle_btn)
        header.addStretch()
        self._hide_btn = QPushButton("Verbergen")
        self._hide_btn.clicked.connect(self._on_hide_timer)
        header.addWidget(self._hide_btn)
        lay.addLayout(header)

        self._body = QWidget()
        body_lay = QVBoxLayout(self._body)
        body_lay.setContentsMargins(0, 0, 0, 0)

        self._time_lbl = QLabel("00:00:00")
        self._time_lbl.setFont(QFont("Consolas", 28, QFont.Bold))
        self._time_lbl.setAlignment(Qt.AlignCenter)
        body_lay.addWidget(self._time_lbl)

        self._hours_lbl = QLabel()
        self._hours_lbl.setAlignment(Qt.AlignCenter)
        body_lay.addWidget(self._hours_lbl)

        btn_row = QHBoxLayout()
        self._start_btn = QPushButton("Start")
        self._start_btn.clicked.connect(lambda: self._engine.start())
        self._pause_btn = QPushButton("Pauze")
        self._pause_btn.clicked.connect(lambda: self._engine.pause())
        self._stop_btn = QPushButton("Stop")
        self._stop_btn.clicked.connect(self._on_stop)
        self._reset_btn = QPushButton("Reset")
        self._reset_btn.clicked.connect(self._on_reset)
        for btn in (self._start_btn, self._pause_btn, self._stop_btn, self._reset_btn):
            btn_row.addWidget(btn)
        body_lay.addLayout(btn_row)

        lay.addWidget(self._body)
        return panel

    def _update_timer_display(self):
        snap = self._engine.snapshot
        hidden = self._visibility.is_hidden(snap)
        self._timer_panel.setVisible(not hidden)
        self._show_timer_btn.setVisible(hidden)
        self._hide_btn.setVisible(self._visibility.can_hide(snap))
        self._body.setVisible(snap.is_open)

        self._time_lbl.setText(format_time(snap.elapsed_seconds))
        has_time = snap.is_running or snap.elapsed_seconds > 0
        self._hours_lbl.setText(f"= {hours_from_seconds(snap.elapsed_seconds):.2f} uur" if has_time else "")
        self._toggle_btn.setText(f"Timer  {format_time(snap.elapsed_seconds)}" if not snap.is_open else "Timer")

        self._start_btn.setVisible(not snap.is_running)
        self._start_btn.setText("Hervat" if snap.elapsed_seconds > 0 else "Start")
        self._pause_btn.setVisible(snap.is_running)
        self._pause_btn.setText("Hervat" if snap.is_paused else "Pauze")
        self._stop_btn.setEnabled(snap.elapsed_seconds > 0)
        self._reset_btn.setEnabled(has_time)

    def _on_hide_timer(self):
        self._visibility.hide()
        self._update_timer_display()

    def _on_show_timer(self):
        self._visibility.show()
        self._update_timer_display()

    # ------------------------------------------------------------------ #
    #  Booking                                                             #
    # ------------------------------------------------------------------ #

    def _on_stop(self):
        draft = request_booking(self._engine)
        if draft is None:
            return
        user = self._session.current_user()
        dialog = BookingDialog(
            self, draft, active_projects(self._records),
            on_save=lambda project_id, work_type, description: save_booking(
                self._engine, self._records, user, draft, project_id, work_type, description),
        )
        dialog.exec()
        # No registration means the dialog was closed without saving, so the time goes back on the clock
        if dialog.registration is None:
            cancel_booking(self._engine)

    def _on_reset(self):
        if self.confirm_reset and QMessageBox.question(
                self, "Confirm", "Timer terugzetten naar nul?"
        ) != QMessageBox.Yes:
            return
        self._engine.reset()

    # ------------------------------------------------------------------ #
    #  Window close                                                        #
    # ------------------------------------------------------------------ #

    def closeEvent(self, event):
        self._settings.unwatch()
        try:
            config.save_config(self._config)
        except OSError as e:
            log.warning("Failed to save config on exit", exc_info=True)
            QMessageBox.warning(self, "Save Error", f"Failed to save settings:\n{e}")
        event.accept()


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def main():
    app = QApplication(sys.argv)
    window = MainWindow()
    window.show()
    sys.exit(app.exec())
