from PySide6.QtCore import QTimer

# Drives TimerEngine.tick() from the Qt event loop. Ticks run on the GUI thread, so they never interleave with a
# button handler mutating the same timer.
class QtTicker:

    def __init__(self, parent=None):
        self._timer = QTimer(parent)
        self._callback = None
        self._timer.timeout.connect(self._fire)

    @property
    def active(self):
        return self._timer.isActive()

    def start(self, callback, interval_ms):
        self._callback = callback
        self._timer.start(interval_ms)

    def stop(self):
        self._timer.stop()
        self._callback = None

    def _fire(self):
        if self._callback is not None:
            self._callback()
