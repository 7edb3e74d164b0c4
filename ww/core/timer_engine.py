import math
from datetime import datetime
from ww.common.logger import log
from ww.core.errors import TimerCodecError
from ww.core.timer_codec import decode_snapshot, encode_snapshot
from ww.core.timer_state import DEFAULT_SNAPSHOT, TimerSnapshot
from ww.util.misc import now_local

TIMER_STORAGE_KEY = "werkwise_timer_state"
TICK_INTERVAL_MS = 1000

# Ticker used when nothing drives the engine (tests, headless use). It only records whether the loop would be
# running, so callers can tick() by hand.
class ManualTicker:
    def __init__(self):
        self.active = False
        self.callback = None
        self.interval_ms = None

    def start(self, callback, interval_ms):
        self.active = True
        self.callback = callback
        self.interval_ms = interval_ms

    def stop(self):
        self.active = False
        self.callback = None

# This object owns the single work timer for a session. It has no background thread of its own: elapsed time comes
# from tick() calls while the process is alive, and from wall-clock gaps between saves when it wasn't.
class TimerEngine:

    def __init__(self, store, clock=now_local, ticker=None, key=TIMER_STORAGE_KEY):
        self._store = store
        self._clock = clock
        self._ticker = ticker or ManualTicker()
        self._key = key
        self._ticking = False
        self._listeners = []
        self._state = self._load()
        self._sync_ticker()

    #region === Reading ===

    @property
    def snapshot(self) -> TimerSnapshot:
        return self._state

    @property
    def elapsed_seconds(self):
        return self._state.elapsed_seconds

    @property
    def ticker(self):
        return self._ticker

    # Registers a callback that receives the new snapshot after every mutation, returns a function that removes it.
    def subscribe(self, callback):
        self._listeners.append(callback)
        def unsubscribe():
            if callback in self._listeners:
                self._listeners.remove(callback)
        return unsubscribe

    #endregion === Reading ===

    #region === Transitions ===

    # Starts (or resumes) the timer. The first start_time survives pauses, stops and reloads, only reset clears it.
    def start(self):
        state = self._state
        if state.is_ticking:
            return
        self._commit(state.evolve(
            is_running=True,
            is_paused=False,
            start_time=state.start_time or self._clock(),
        ))
        log.debug(f"Started work timer at {self._state.elapsed_seconds}s (first started {self._state.start_time})")

    # Toggles pause. There's no separate resume, calling pause() again resumes. Does nothing while stopped.
    def pause(self):
        state = self._state
        if not state.is_running:
            log.debug("Ignoring pause on a stopped work timer")
            return
        self._commit(state.evolve(is_paused=not state.is_paused))
        log.debug(f"{'Paused' if self._state.is_paused else 'Resumed'} work timer at {self._state.elapsed_seconds}s")

    # Stops the timer but keeps the total and start_time, so the time can still be booked or resumed.
    def stop(self):
        state = self._state
        if not state.is_running:
            return
        self._commit(state.evolve(is_running=False, is_paused=False))
        log.debug(f"Stopped work timer at {self._state.elapsed_seconds}s")

    # Zeroes everything and erases the persisted entry outright, rather than writing a zeroed record over it.
    def reset(self):
        self._state = self._state.evolve(
            is_running=False,
            is_paused=False,
            elapsed_seconds=0,
            start_time=None,
        )
        try:
            self._store.remove(self._key)
        except OSError:
            log.warning(f"Could not remove persisted work timer '{self._key}'", exc_info=True)
        self._sync_ticker()
        self._notify()
        log.debug("Reset work timer to 0")

    # One second of work. Ticks that arrive after a stop/pause/reset are dropped.
    def tick(self):
        state = self._state
        if not state.is_ticking:
            return
        self._commit(state.evolve(elapsed_seconds=state.elapsed_seconds + 1))

    def toggle_open(self):
        self._commit(self._state.evolve(is_open=not self._state.is_open))

    def set_open(self, is_open):
        if bool(is_open) != self._state.is_open:
            self._commit(self._state.evolve(is_open=bool(is_open)))

    #endregion === Transitions ===

    #region === Persistence ===

    # Swaps in the new snapshot, then persists it, so the write always belongs to the state callers can observe.
    def _commit(self, new_state):
        self._state = new_state
        self._persist()
        self._sync_ticker()
        self._notify()

    # Best effort. A failed write (or a snapshot that can't be encoded) is logged but never stops the timer.
    def _persist(self):
        try:
            self._store.set(self._key, encode_snapshot(self._state, self._clock()))
        except (OSError, ValueError, OverflowError):
            log.warning(f"Could not persist work timer to '{self._key}'", exc_info=True)

    # Restores the persisted timer, adding the wall-clock time that passed while nothing was ticking.
    def _load(self):
        raw = self._store.get(self._key)
        if raw is None:
            log.info("No persisted work timer found, starting from zero.")
            return DEFAULT_SNAPSHOT
        try:
            persisted = decode_snapshot(raw)
        except TimerCodecError:
            log.warning("Persisted work timer is unreadable, starting from zero.", exc_info=True)
            return DEFAULT_SNAPSHOT

        # lastSaved is always reported when missing, only worth a warning when it actually matters
        noisy = set(persisted.defaulted)
        if not persisted.snapshot.is_ticking:
            noisy.discard("lastSaved")
        if noisy:
            log.warning(f"Loaded persisted work timer with values that were defaulted: {', '.join(sorted(noisy))}")

        snapshot = persisted.snapshot
        if snapshot.is_ticking and snapshot.start_time is not None:
            gap = self._gap_since(persisted.last_saved)
            snapshot = snapshot.evolve(elapsed_seconds=snapshot.elapsed_seconds + gap)
            log.info(f"Restored running work timer, caught up {gap}s since last save ({snapshot.elapsed_seconds}s total).")
        else:
            log.info(f"Restored work timer at {snapshot.elapsed_seconds}s (running={snapshot.is_running}, paused={snapshot.is_paused}).")
        return snapshot

    # Whole seconds between the last save and now. Unknown save times and clocks that went backwards count as no gap.
    def _gap_since(self, last_saved: datetime | None):
        if last_saved is None:
            return 0
        try:
            seconds = (self._clock() - last_saved).total_seconds()
        except TypeError:
            # naive clock against an aware timestamp
            return 0
        return max(0, math.floor(seconds))

    #endregion === Persistence ===

    # Keeps the tick loop running exactly while the timer is running and unpaused.
    def _sync_ticker(self):
        should_tick = self._state.is_ticking
        if should_tick and not self._ticking:
            self._ticker.start(self.tick, TICK_INTERVAL_MS)
            self._ticking = True
        elif not should_tick and self._ticking:
            self._ticker.stop()
            self._ticking = False

    def _notify(self):
        for listener in list(self._listeners):
            listener(self._state)
