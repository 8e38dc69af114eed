import datetime as dt
import unittest

from pomodoro import (
    Phase,
    PomodoroConfig,
    SessionFormatError,
    SessionSnapshot,
    Status,
    TimerEngine,
)


class SessionSnapshotTests(unittest.TestCase):
    def test_to_dict_uses_stable_string_values(self) -> None:
        snapshot = SessionSnapshot(
            phase=Phase.LONG_BREAK,
            status=Status.PAUSED,
            remaining_seconds=120,
            total_seconds=900,
            completed_focus_cycles=0,
        )

        self.assertEqual(
            {
                "phase": "long_break",
                "status": "paused",
                "remaining_seconds": 120,
                "total_seconds": 900,
                "completed_focus_cycles": 0,
            },
            snapshot.to_dict(),
        )

    def test_from_dict_reads_persisted_payload(self) -> None:
        snapshot = SessionSnapshot.from_dict(
            {
                "phase": "short_break",
                "status": "running",
                "remaining_seconds": 42,
                "total_seconds": 300,
                "completed_focus_cycles": 2,
            }
        )

        self.assertEqual(Phase.SHORT_BREAK, snapshot.phase)
        self.assertEqual(Status.RUNNING, snapshot.status)
        self.assertEqual(42, snapshot.remaining_seconds)
        self.assertEqual(2, snapshot.completed_focus_cycles)

    def test_from_dict_rejects_unknown_phase(self) -> None:
        with self.assertRaises(SessionFormatError) as context:
            SessionSnapshot.from_dict({"phase": "nap", "status": "idle"})

        self.assertIn("phase", str(context.exception))

    def test_from_dict_rejects_non_integer_counts(self) -> None:
        with self.assertRaises(SessionFormatError):
            SessionSnapshot.from_dict(
                {"phase": "focus", "status": "paused", "remaining_seconds": "10"}
            )
        with self.assertRaises(SessionFormatError):
            SessionSnapshot.from_dict(
                {"phase": "focus", "status": "paused", "total_seconds": True}
            )

    def test_from_dict_rejects_non_mapping(self) -> None:
        with self.assertRaises(SessionFormatError):
            SessionSnapshot.from_dict(["focus"])  # type: ignore[arg-type]

    def test_restored_downgrades_running_to_paused(self) -> None:
        restored = SessionSnapshot(
            phase=Phase.FOCUS,
            status=Status.RUNNING,
            remaining_seconds=600,
            total_seconds=1500,
            completed_focus_cycles=1,
        ).restored()

        self.assertEqual(Status.PAUSED, restored.status)
        self.assertEqual(600, restored.remaining_seconds)
        self.assertEqual(1500, restored.total_seconds)

    def test_restored_clamps_to_engine_invariants(self) -> None:
        over = SessionSnapshot(
            status=Status.PAUSED,
            remaining_seconds=2000,
            total_seconds=1500,
        ).restored()
        self.assertEqual(1500, over.remaining_seconds)

        idle = SessionSnapshot(
            status=Status.IDLE,
            remaining_seconds=10,
            total_seconds=20,
            completed_focus_cycles=-3,
        ).restored()
        self.assertEqual(0, idle.remaining_seconds)
        self.assertEqual(0, idle.total_seconds)
        self.assertEqual(0, idle.completed_focus_cycles)

        empty = SessionSnapshot(status=Status.PAUSED, remaining_seconds=0, total_seconds=0).restored()
        self.assertEqual(Status.IDLE, empty.status)


class EngineRestoreTests(unittest.TestCase):
    def test_restore_running_session_comes_back_paused(self) -> None:
        engine = TimerEngine(PomodoroConfig())
        engine.restore(
            SessionSnapshot(
                phase=Phase.FOCUS,
                status=Status.RUNNING,
                remaining_seconds=600,
                total_seconds=1500,
                completed_focus_cycles=2,
            )
        )

        self.assertEqual(Status.PAUSED, engine.status)
        self.assertEqual(600, engine.remaining_seconds)
        self.assertEqual(2, engine.completed_focus_cycles)
        self.assertEqual("10:00", engine.remaining_display())

        # Nothing is consumed until the host resumes.
        now = dt.datetime(2026, 2, 21, 9, 0, tzinfo=dt.timezone.utc)
        engine.tick(now + dt.timedelta(hours=1))
        self.assertEqual(600, engine.remaining_seconds)

        engine.toggle_pause()
        engine.tick(now)
        engine.tick(now + dt.timedelta(seconds=60))
        self.assertEqual(540, engine.remaining_seconds)

    def test_restore_caps_cycle_count_below_long_break_threshold(self) -> None:
        engine = TimerEngine(PomodoroConfig(cycles_before_long_break=2))
        engine.restore(SessionSnapshot(completed_focus_cycles=5))

        self.assertEqual(1, engine.completed_focus_cycles)

    def test_session_snapshot_reflects_engine_fields(self) -> None:
        engine = TimerEngine(PomodoroConfig(short_break_seconds=300))
        engine.set_phase(Phase.SHORT_BREAK)
        engine.start()

        snapshot = engine.session_snapshot()

        self.assertEqual(Phase.SHORT_BREAK, snapshot.phase)
        self.assertEqual(Status.RUNNING, snapshot.status)
        self.assertEqual(300, snapshot.remaining_seconds)
        self.assertEqual(300, snapshot.total_seconds)
        self.assertEqual(snapshot, SessionSnapshot.from_dict(snapshot.to_dict()))


if __name__ == "__main__":
    unittest.main()
