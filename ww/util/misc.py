from datetime import datetime, timezone


# Simply returns the current local time as an aware datetime.
def now_local():
    return datetime.now().astimezone()

# Simply returns the current local time as an ISO8601 string with timezone offset.
def now_iso():
    return now_local().isoformat()

# Renders an aware datetime the way the browser build stored them, e.g. 2026-02-12T14:30:00.000Z
def to_utc_iso(moment: datetime) -> str:
    utc = moment.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"

# Parses an ISO8601 string back into an aware datetime. Naive values are assumed to be local time, and anything that
# can't be parsed (or sits too close to the edge of the calendar to convert) returns None rather than raising.
def parse_iso(value):
    if not isinstance(value, str) or not value:
        return None
    text = value.strip()
    # fromisoformat() on older interpreters doesn't understand the trailing Z
    if text.endswith("Z") or text.endswith("z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
        if parsed.tzinfo is None:
            parsed = parsed.astimezone()
        # must survive a round trip through to_utc_iso() later on
        parsed.astimezone(timezone.utc)
    except (ValueError, OverflowError, OSError):
        return None
    return parsed
