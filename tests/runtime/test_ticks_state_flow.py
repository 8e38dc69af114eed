import datetime as dt
import logging
import unittest

from audio import AudioError
from pomodoro import Phase, PomodoroConfig, Status, TimerEngine
from runtime.ticks import TickDependencies, TickProcessor
from storage import FocusRecordStore, StorageError

T0 = dt.datetime(2026, 2, 21, 9, 0, tzinfo=dt.timezone.utc)


def _at(seconds: float) -> dt.datetime:
    return T0 + dt.timedelta(seconds=seconds)


class _ChimeStub:
    def __init__(self, error: Exception | None = None):
        self.played: list[Phase] = []
        self._error = error

    def play(self, phase: Phase) -> None:
        self.played.append(phase)
        if self._error is not None:
            raise self._error


class _FailingRecordStore:
    def append(self, *args, **kwargs) -> None:
        raise StorageError("database is locked")


class TickStateFlowTests(unittest.TestCase):
    def setUp(self) -> None:
        self.engine = TimerEngine(
            PomodoroConfig(
                focus_seconds=60,
                short_break_seconds=30,
                long_break_seconds=45,
                cycles_before_long_break=2,
            )
        )
        self.store = FocusRecordStore(":memory:")
        self.chime = _ChimeStub()
        self.announcements: list[str] = []
        self.saves: list[str] = []
        self.processor = self._build_processor(self.store, self.chime)

    def tearDown(self) -> None:
        self.store.close()

    def _build_processor(self, store, chime) -> TickProcessor:
        return TickProcessor(
            TickDependencies(
                engine=self.engine,
                record_store=store,
                chime=chime,
                logger=logging.getLogger("test"),
                announce=self.announcements.append,
                save_session=lambda: self.saves.append(self.engine.status.value),
                current_task=lambda: "Deep work",
            )
        )

    def _run_phase(self, start: float) -> list:
        self.engine.start()
        results = [self.processor.process(_at(start))]
        duration = self.engine.total_seconds
        results.append(self.processor.process(_at(start + duration / 2)))
        results.append(self.processor.process(_at(start + duration)))
        results.append(self.processor.process(_at(start + duration + 1)))
        return results

    def test_focus_completion_chimes_records_and_saves_once(self) -> None:
        results = self._run_phase(0)

        self.assertEqual([None, None, Phase.FOCUS, None], results)
        self.assertEqual([Phase.FOCUS], self.chime.played)
        self.assertEqual(["idle"], self.saves)
        records = self.store.recent()
        self.assertEqual(1, len(records))
        self.assertEqual("Deep work", records[0].task)
        self.assertEqual(60, records[0].duration_seconds)
        self.assertEqual(_at(60), records[0].completed_at)
        self.assertEqual(1, records[0].completed_focus_cycles)
        self.assertEqual(1, len(self.announcements))
        self.assertIn("Next: Short break", self.announcements[0])

    def test_pending_notifications_are_drained(self) -> None:
        self._run_phase(0)

        self.assertIsNone(self.engine.take_finished_phase())
        self.assertIsNone(self.engine.take_last_completed_focus_duration())

    def test_break_completion_chimes_without_record(self) -> None:
        self.engine.set_phase(Phase.SHORT_BREAK)

        self._run_phase(0)

        self.assertEqual([Phase.SHORT_BREAK], self.chime.played)
        self.assertEqual([], self.store.recent())
        self.assertEqual(Phase.FOCUS, self.engine.phase)

    def test_record_before_long_break_keeps_full_cycle_count(self) -> None:
        self._run_phase(0)
        self._run_phase(100)
        self._run_phase(200)

        self.assertEqual(Phase.LONG_BREAK, self.engine.phase)
        self.assertEqual(0, self.engine.completed_focus_cycles)
        cycles = [record.completed_focus_cycles for record in self.store.recent()]
        self.assertEqual([2, 1], cycles)

    def test_collaborator_failures_do_not_stop_completion(self) -> None:
        processor = self._build_processor(
            _FailingRecordStore(),
            _ChimeStub(error=AudioError("no device")),
        )
        self.engine.start()
        processor.process(_at(0))

        with self.assertLogs("test", level="ERROR") as logs:
            finished = processor.process(_at(60))

        self.assertEqual(Phase.FOCUS, finished)
        self.assertEqual(Status.IDLE, self.engine.status)
        self.assertEqual(["idle"], self.saves)
        self.assertEqual(2, len(logs.records))


if __name__ == "__main__":
    unittest.main()
