"""Tests for booking timer time, the record store, and the config file.

Covers: ww.core.booking, ww.core.records, ww.core.config
"""

import json
import shutil
import tempfile
import unittest
from datetime import date, datetime, timedelta, timezone
from pathlib import Path


class FakeClock:

    def __init__(self):
        self.now = datetime(2026, 3, 2, 8, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now = self.now + timedelta(seconds=seconds)


def running_engine(seconds):
    from ww.core.store import MemoryStore
    from ww.core.timer_engine import TimerEngine
    clock = FakeClock()
    engine = TimerEngine(MemoryStore(), clock=clock)
    engine.start()
    for _ in range(seconds):
        clock.advance(1)
        engine.tick()
    return engine


# ──────────────────────────────────────────────────────────────────────────
# booking.py tests
# ──────────────────────────────────────────────────────────────────────────

class TestFormatting(unittest.TestCase):

    def test_format_time(self):
        from ww.core.booking import format_time
        self.assertEqual(format_time(0), "00:00:00")
        self.assertEqual(format_time(3725), "01:02:05")
        self.assertEqual(format_time(-10), "00:00:00")
        self.assertEqual(format_time(100 * 3600), "100:00:00")

    def test_hours_from_seconds(self):
        from ww.core.booking import hours_from_seconds
        self.assertEqual(hours_from_seconds(3600), 1.0)
        self.assertEqual(hours_from_seconds(5400), 1.5)
        self.assertEqual(hours_from_seconds(1000), 0.28)
        self.assertEqual(hours_from_seconds(0), 0.0)

    def test_draft_display(self):
        from ww.core.booking import BookingDraft
        self.assertEqual(BookingDraft(5400).display, "01:30:00 = 1.50 uur")


class TestBookingFlow(unittest.TestCase):

    def setUp(self):
        from ww.core.records import MemoryRecordStore
        from ww.core.session import User
        self.records = MemoryRecordStore({
            "projects": [
                {"id": "p1", "naam": "Dakrenovatie", "status": "actief"},
                {"id": "p2", "naam": "Oud project", "status": "afgerond"},
            ],
        })
        self.user = User("u1", "Jo", "jo@example.com", "medewerker")

    def test_nothing_to_book_at_zero(self):
        from ww.core.booking import request_booking
        engine = running_engine(0)
        self.assertIsNone(request_booking(engine))
        self.assertTrue(engine.snapshot.is_running)

    def test_request_stops_timer_and_keeps_time(self):
        from ww.core.booking import request_booking
        engine = running_engine(90)
        draft = request_booking(engine)
        self.assertEqual(draft.elapsed_seconds, 90)
        self.assertFalse(engine.snapshot.is_running)
        self.assertEqual(engine.elapsed_seconds, 90)

    def test_cancel_resumes_timer(self):
        from ww.core.booking import cancel_booking, request_booking
        engine = running_engine(90)
        request_booking(engine)
        cancel_booking(engine)
        self.assertTrue(engine.snapshot.is_ticking)
        self.assertEqual(engine.elapsed_seconds, 90)

    def test_save_writes_registration_and_resets(self):
        from ww.core.booking import WorkType, request_booking, save_booking
        engine = running_engine(5400)
        draft = request_booking(engine)
        registration = save_booking(engine, self.records, self.user, draft, "p1", WorkType.TRANSPORT,
                                    today=date(2026, 3, 2))

        self.assertEqual(self.records.query("time_registrations"), [registration])
        self.assertEqual(registration["user_id"], "u1")
        self.assertEqual(registration["project_id"], "p1")
        self.assertEqual(registration["datum"], "2026-03-02")
        self.assertEqual(registration["aantal_uren"], 1.5)
        self.assertEqual(registration["werktype"], "transport")
        self.assertEqual(registration["werkomschrijving"], "Timer registratie")
        self.assertEqual(registration["status"], "submitted")
        self.assertEqual(engine.elapsed_seconds, 0)
        self.assertIsNone(engine.snapshot.start_time)

    def test_save_keeps_description(self):
        from ww.core.booking import request_booking, save_booking
        engine = running_engine(60)
        draft = request_booking(engine)
        registration = save_booking(engine, self.records, self.user, draft, "p1", "werk", "Goten vervangen")
        self.assertEqual(registration["werkomschrijving"], "Goten vervangen")

    def test_incomplete_booking_changes_nothing(self):
        from ww.core.booking import request_booking, save_booking
        from ww.core.errors import BookingError
        engine = running_engine(60)
        draft = request_booking(engine)
        for user, project, work_type in ((None, "p1", "werk"), (self.user, "", "werk"),
                                         (self.user, "p1", None), (self.user, "p1", "slapen")):
            with self.assertRaises(BookingError):
                save_booking(engine, self.records, user, draft, project, work_type)
        self.assertEqual(self.records.query("time_registrations"), [])
        self.assertEqual(engine.elapsed_seconds, 60)

    def test_active_projects(self):
        from ww.core.booking import active_projects
        self.assertEqual([p["id"] for p in active_projects(self.records)], ["p1"])


# ──────────────────────────────────────────────────────────────────────────
# records.py tests
# ──────────────────────────────────────────────────────────────────────────

class TestRecordStore(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()
        self.path = Path(self.tmpdir) / "records.json"

    def tearDown(self):
        shutil.rmtree(self.tmpdir, ignore_errors=True)

    def test_insert_assigns_id(self):
        from ww.core.records import MemoryRecordStore
        records = MemoryRecordStore()
        row = records.insert("projects", {"naam": "A"})
        self.assertTrue(row["id"])
        self.assertEqual(records.query("projects", naam="A"), [row])

    def test_query_filters_and_copies(self):
        from ww.core.records import MemoryRecordStore
        records = MemoryRecordStore({"projects": [{"id": "1", "status": "actief"}, {"id": "2", "status": "x"}]})
        result = records.query("projects", status="actief")
        self.assertEqual([r["id"] for r in result], ["1"])
        result[0]["status"] = "changed"
        self.assertEqual(records.query("projects", id="1")[0]["status"], "actief")
        self.assertEqual(records.query("unknown"), [])

    def test_update_and_delete(self):
        from ww.core.records import MemoryRecordStore
        records = MemoryRecordStore()
        row = records.insert("projects", {"naam": "A"})
        records.update("projects", row["id"], {"naam": "B"})
        self.assertEqual(records.query("projects")[0]["naam"], "B")
        records.delete("projects", row["id"])
        self.assertEqual(records.query("projects"), [])

    def test_unknown_id_raises(self):
        from ww.core.errors import RecordNotFoundError
        from ww.core.records import MemoryRecordStore
        records = MemoryRecordStore()
        with self.assertRaises(RecordNotFoundError):
            records.update("projects", "missing", {})
        with self.assertRaises(RecordNotFoundError):
            records.delete("projects", "missing")

    def test_subscribers_see_changes(self):
        from ww.core.records import INSERT, DELETE, MemoryRecordStore
        records = MemoryRecordStore()
        events = []
        unsubscribe = records.subscribe("projects", lambda event, row: events.append((event, row["naam"])))
        row = records.insert("projects", {"naam": "A"})
        records.insert("other", {"naam": "ignored"})
        records.delete("projects", row["id"])
        unsubscribe()
        records.insert("projects", {"naam": "late"})
        self.assertEqual(events, [(INSERT, "A"), (DELETE, "A")])

    def test_json_store_persists(self):
        from ww.core.records import JsonRecordStore
        JsonRecordStore(self.path).insert("time_registrations", {"id": "r1", "aantal_uren": 2.0})
        reloaded = JsonRecordStore(self.path)
        self.assertEqual(reloaded.query("time_registrations"), [{"id": "r1", "aantal_uren": 2.0}])

    def test_json_store_corrupt_file_starts_empty(self):
        from ww.core.records import JsonRecordStore
        self.path.write_text("not json", encoding="utf-8")
        self.assertEqual(JsonRecordStore(self.path).query("projects"), [])


# ──────────────────────────────────────────────────────────────────────────
# config.py tests
# ──────────────────────────────────────────────────────────────────────────

class TestConfig(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()
        self.path = Path(self.tmpdir) / "settings.json"

    def tearDown(self):
        shutil.rmtree(self.tmpdir, ignore_errors=True)

    def test_fresh_start_returns_default_config(self):
        from ww.core.config import load_config
        config = load_config(self.path)
        self.assertEqual(config["meta"]["schema_version"], 1)
        self.assertTrue(config["settings"]["always_on_top"])
        self.assertEqual(config["profile"]["role"], "medewerker")

    def test_save_and_load_roundtrip(self):
        from ww.core.config import load_config, save_config
        config = load_config(self.path)
        config["settings"]["confirm_reset"] = False
        config["profile"]["role"] = "superuser"
        save_config(config, self.path)

        loaded = load_config(self.path)
        self.assertFalse(loaded["settings"]["confirm_reset"])
        self.assertEqual(loaded["profile"]["role"], "superuser")
        self.assertIn("saved_at", loaded["meta"])

    def test_missing_and_mistyped_values_are_defaulted(self):
        from ww.core.config import load_config
        with open(self.path, "w") as f:
            json.dump({"settings": {"always_on_top": "sure"}, "profile": {"name": "Sam"}}, f)
        loaded = load_config(self.path)
        self.assertTrue(loaded["settings"]["always_on_top"])
        self.assertTrue(loaded["settings"]["confirm_reset"])
        self.assertEqual(loaded["profile"]["name"], "Sam")
        self.assertEqual(loaded["profile"]["role"], "medewerker")
        self.assertEqual(loaded["meta"]["schema_version"], 1)

    def test_corrupted_file_gives_defaults(self):
        from ww.core.config import load_config
        self.path.write_text("{invalid json!!", encoding="utf-8")
        self.assertEqual(load_config(self.path)["settings"]["confirm_reset"], True)

    def test_non_object_file_gives_defaults(self):
        from ww.core.config import load_config
        self.path.write_text("[]", encoding="utf-8")
        self.assertIn("profile", load_config(self.path))


if __name__ == "__main__":
    unittest.main()
