"""Serialize/deserialize boundary for the persisted work timer.

Wire format (a JSON object, kept compatible with the browser build)::

    {
      "isRunning": true,
      "isPaused": false,
      "elapsedSeconds": 100,
      "startTime": "2026-02-12T14:30:00.000Z",   # or null
      "isOpen": false,
      "lastSaved": "2026-02-12T14:31:40.000Z"
    }

``decode_snapshot`` only raises for a payload that is not a JSON object at
all.  Individual bad fields are replaced by their defaults and listed in
``PersistedTimer.defaulted`` so the caller can log them.
"""

import json
import math
from dataclasses import dataclass, field
from datetime import datetime
from ww.core.errors import TimerCodecError
from ww.core.timer_state import DEFAULT_SNAPSHOT, TimerSnapshot
from ww.util.misc import parse_iso, to_utc_iso


@dataclass(frozen=True)
class PersistedTimer:
    snapshot: TimerSnapshot
    last_saved: datetime | None
    defaulted: frozenset = field(default_factory=frozenset)


def encode_snapshot(snapshot: TimerSnapshot, saved_at: datetime) -> str:
    payload = {
        "isRunning": snapshot.is_running,
        "isPaused": snapshot.is_paused,
        "elapsedSeconds": snapshot.elapsed_seconds,
        "startTime": to_utc_iso(snapshot.start_time) if snapshot.start_time else None,
        "isOpen": snapshot.is_open,
        "lastSaved": to_utc_iso(saved_at),
    }
    return json.dumps(payload)


def _read_bool(payload, key, default, defaulted):
    value = payload.get(key, default)
    if not isinstance(value, bool):
        defaulted.add(key)
        return default
    return value


def _read_elapsed(payload, defaulted):
    value = payload.get("elapsedSeconds", 0)
    # bool is an int subclass, and "true seconds" is not a duration
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value) or value < 0:
        defaulted.add("elapsedSeconds")
        return 0
    return int(value)


def decode_snapshot(raw: str) -> PersistedTimer:
    try:
        payload = json.loads(raw)
    except (TypeError, ValueError, RecursionError) as e:
        raise TimerCodecError(f"Persisted timer is not valid JSON: {e}") from e
    if not isinstance(payload, dict):
        raise TimerCodecError(f"Persisted timer is a {type(payload).__name__}, expected an object")

    defaulted = set()
    is_running = _read_bool(payload, "isRunning", DEFAULT_SNAPSHOT.is_running, defaulted)
    is_paused = _read_bool(payload, "isPaused", DEFAULT_SNAPSHOT.is_paused, defaulted)
    is_open = _read_bool(payload, "isOpen", DEFAULT_SNAPSHOT.is_open, defaulted)
    elapsed = _read_elapsed(payload, defaulted)

    raw_start = payload.get("startTime")
    start_time = parse_iso(raw_start)
    if raw_start is not None and start_time is None:
        defaulted.add("startTime")

    raw_saved = payload.get("lastSaved")
    last_saved = parse_iso(raw_saved)
    if last_saved is None:
        defaulted.add("lastSaved")

    # A paused-but-stopped timer can't exist
    if is_paused and not is_running:
        defaulted.add("isPaused")
        is_paused = False

    snapshot = TimerSnapshot(
        is_running=is_running,
        is_paused=is_paused,
        elapsed_seconds=elapsed,
        start_time=start_time,
        is_open=is_open,
    )
    return PersistedTimer(snapshot=snapshot, last_saved=last_saved, defaulted=frozenset(defaulted))
