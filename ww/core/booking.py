"""Turning the stopped work timer into a time registration.

Flow: ``request_booking`` stops the timer and hands back a draft,
``save_booking`` writes the registration and resets the timer, and
``cancel_booking`` puts the timer back to work.
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from ww.common.logger import log
from ww.core.errors import BookingError

REGISTRATIONS_COLLECTION = "time_registrations"
PROJECTS_COLLECTION = "projects"
DEFAULT_DESCRIPTION = "Timer registratie"


class WorkType(str, Enum):
    WORK = "werk"
    TRANSPORT = "transport"
    ADMINISTRATION = "administratie"
    MEETING = "vergadering"
    OTHER = "overig"

WORK_TYPE_LABELS = {
    WorkType.WORK: "Werk",
    WorkType.TRANSPORT: "Transport",
    WorkType.ADMINISTRATION: "Administratie",
    WorkType.MEETING: "Vergadering",
    WorkType.OTHER: "Overig",
}


def format_time(seconds):
    """Format elapsed seconds as HH:MM:SS. Negative values clamp to zero."""
    seconds = max(0, int(seconds))
    h, rem = divmod(seconds, 3600)
    m, s = divmod(rem, 60)
    return f"{h:02d}:{m:02d}:{s:02d}"


def hours_from_seconds(seconds):
    """Hours rounded to two decimals, the unit registrations are booked in."""
    return round(max(0, seconds) / 3600, 2)


@dataclass(frozen=True)
class BookingDraft:
    elapsed_seconds: int

    @property
    def hours(self):
        return hours_from_seconds(self.elapsed_seconds)

    @property
    def display(self):
        return f"{format_time(self.elapsed_seconds)} = {self.hours:.2f} uur"


def request_booking(engine):
    """Stop the timer and return a draft, or None when there's nothing to book."""
    if engine.snapshot.elapsed_seconds <= 0:
        return None
    engine.stop()
    return BookingDraft(engine.snapshot.elapsed_seconds)


def cancel_booking(engine):
    engine.start()


def active_projects(records):
    return records.query(PROJECTS_COLLECTION, status="actief")


def save_booking(engine, records, user, draft, project_id, work_type, description="", today=None):
    """Write the registration for ``draft`` and reset the timer.

    Raises BookingError, leaving both the records and the timer untouched,
    when the user, project or work type is missing.
    """
    if user is None:
        raise BookingError("Cannot book time without a signed in user")
    if not project_id:
        raise BookingError("Choose a project to book the time on")
    resolved_type = _resolve_work_type(work_type)
    if resolved_type is None:
        raise BookingError(f"Unknown work type '{work_type}'")

    registration = records.insert(REGISTRATIONS_COLLECTION, {
        "user_id": user.id,
        "project_id": project_id,
        "datum": (today or date.today()).isoformat(),
        "aantal_uren": draft.hours,
        "werkomschrijving": description or DEFAULT_DESCRIPTION,
        "werktype": resolved_type.value,
        "status": "submitted",
    })
    log.info(f"Booked {draft.hours:.2f}h on project '{project_id}' for '{user.name}' as registration {registration['id']}")
    engine.reset()
    return registration


def _resolve_work_type(value):
    if isinstance(value, WorkType):
        return value
    try:
        return WorkType(value)
    except ValueError:
        return None
