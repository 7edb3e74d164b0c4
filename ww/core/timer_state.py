from dataclasses import dataclass, replace
from datetime import datetime


# Immutable view of the work timer. The engine swaps in a new one on every mutation, so whatever a caller holds is
# always a consistent read.
@dataclass(frozen=True)
class TimerSnapshot:
    is_running: bool = False
    is_paused: bool = False
    elapsed_seconds: int = 0
    start_time: datetime | None = None
    # Purely whether the timer panel is expanded, nothing to do with timing
    is_open: bool = False

    @property
    def is_ticking(self):
        return self.is_running and not self.is_paused

    def evolve(self, **changes):
        return replace(self, **changes)

DEFAULT_SNAPSHOT = TimerSnapshot()
