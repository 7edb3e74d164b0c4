from ww.core.timer_state import TimerSnapshot

TIMER_HIDDEN_KEY = "werkwise_timer_hidden"

# Remembers whether the user tucked the floating timer away. Hiding only sticks while the timer is stopped at zero,
# anything with time on it stays visible.
class TimerVisibility:

    def __init__(self, store, key=TIMER_HIDDEN_KEY):
        self._store = store
        self._key = key

    @property
    def hide_requested(self):
        return self._store.get(self._key) == "true"

    def hide(self):
        self._store.set(self._key, "true")

    def show(self):
        self._store.remove(self._key)

    @staticmethod
    def can_hide(snapshot: TimerSnapshot):
        return not snapshot.is_running and snapshot.elapsed_seconds == 0

    # A running timer clears the hidden flag, same as the browser widget did on its next render.
    def is_hidden(self, snapshot: TimerSnapshot):
        if not self.hide_requested:
            return False
        if snapshot.is_running:
            self.show()
            return False
        return self.can_hide(snapshot)
