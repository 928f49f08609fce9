import threading
from datetime import datetime, timezone as dt_timezone
from unittest import mock
from zoneinfo import ZoneInfo

from django.test import SimpleTestCase

from invoices.config import GenerationConfig
from invoices.scheduler import IDLE, RUNNING, SCHEDULED, RentScheduler, build_trigger
from invoices.services import BatchResult

MALE = ZoneInfo('Indian/Maldives')


def next_fire(day, now, hour=9):
    return build_trigger(day, hour, MALE).get_next_fire_time(None, now)


class TriggerTests(SimpleTestCase):
    def test_later_this_month(self):
        now = datetime(2025, 6, 1, 8, 30, tzinfo=MALE)
        self.assertEqual(next_fire(15, now), datetime(2025, 6, 15, 9, 0, tzinfo=MALE))

    def test_past_this_months_run(self):
        now = datetime(2025, 6, 1, 9, 30, tzinfo=MALE)
        self.assertEqual(next_fire(1, now), datetime(2025, 7, 1, 9, 0, tzinfo=MALE))

    def test_short_month_fires_on_last_day(self):
        now = datetime(2025, 2, 10, 12, 0, tzinfo=MALE)
        self.assertEqual(next_fire(31, now), datetime(2025, 2, 28, 9, 0, tzinfo=MALE))

    def test_thirty_day_month(self):
        now = datetime(2025, 4, 1, 0, 0, tzinfo=MALE)
        self.assertEqual(next_fire(31, now), datetime(2025, 4, 30, 9, 0, tzinfo=MALE))

    def test_after_clamped_day_goes_to_full_day_next_month(self):
        now = datetime(2025, 2, 28, 10, 0, tzinfo=MALE)
        self.assertEqual(next_fire(31, now), datetime(2025, 3, 31, 9, 0, tzinfo=MALE))

    def test_day_29_in_february(self):
        self.assertEqual(next_fire(29, datetime(2024, 2, 1, tzinfo=MALE)),
                         datetime(2024, 2, 29, 9, 0, tzinfo=MALE))
        self.assertEqual(next_fire(29, datetime(2025, 2, 1, tzinfo=MALE)),
                         datetime(2025, 2, 28, 9, 0, tzinfo=MALE))

    def test_clamped_day_fires_once(self):
        first = next_fire(29, datetime(2024, 2, 1, tzinfo=MALE))
        following = build_trigger(29, 9, MALE).get_next_fire_time(first, first)
        self.assertEqual(following, datetime(2024, 3, 29, 9, 0, tzinfo=MALE))

    def test_year_rollover(self):
        now = datetime(2025, 12, 15, 0, 0, tzinfo=MALE)
        self.assertEqual(next_fire(1, now), datetime(2026, 1, 1, 9, 0, tzinfo=MALE))

    def test_utc_now_converted_to_local(self):
        # 04:30 UTC is 09:30 in Male, already past the run
        now = datetime(2025, 6, 1, 4, 30, tzinfo=dt_timezone.utc)
        self.assertEqual(next_fire(1, now), datetime(2025, 7, 1, 9, 0, tzinfo=MALE))


class RentSchedulerTests(SimpleTestCase):
    now = datetime(2025, 6, 10, 12, 0, tzinfo=dt_timezone.utc)

    def make(self, loader=None, **config):
        sched = RentScheduler(config_loader=loader or (lambda: GenerationConfig(**config)),
                              clock=lambda: self.now)
        self.addCleanup(sched.stop)
        return sched

    def test_initial_status(self):
        status = self.make().get_status()
        self.assertEqual(status, {'running': False, 'state': IDLE,
                                  'nextRun': None, 'lastRun': None})

    def test_start_registers_cron_job(self):
        sched = self.make(rent_generation_day=15)
        self.assertTrue(sched.start())
        status = sched.get_status()
        self.assertEqual(status['state'], SCHEDULED)
        next_run = datetime.fromisoformat(status['nextRun']).astimezone(MALE)
        self.assertEqual((next_run.day, next_run.hour, next_run.minute), (15, 9, 0))

    def test_stop_returns_to_idle(self):
        sched = self.make()
        sched.start()
        sched.stop()
        status = sched.get_status()
        self.assertEqual(status['state'], IDLE)
        self.assertIsNone(status['nextRun'])

    def test_invalid_day_not_scheduled(self):
        sched = self.make(rent_generation_day=0)
        with self.assertLogs('invoices.scheduler', level='ERROR'):
            self.assertFalse(sched.start())
        self.assertEqual(sched.get_status()['state'], IDLE)

    def test_unknown_time_zone_not_scheduled(self):
        sched = self.make(time_zone='Mars/Olympus')
        with self.assertLogs('invoices.scheduler', level='ERROR'):
            self.assertFalse(sched.start())

    def test_restart_picks_up_new_day(self):
        day = {'value': 15}
        sched = self.make(loader=lambda: GenerationConfig(rent_generation_day=day['value']))
        sched.start()
        day['value'] = 20
        self.assertTrue(sched.restart())
        next_run = datetime.fromisoformat(sched.get_status()['nextRun']).astimezone(MALE)
        self.assertEqual(next_run.day, 20)

    def test_trigger_manually_records_run(self):
        sched = self.make()
        seen = {}

        def run(created_by=None):
            seen['state'] = sched.get_status()['state']
            return BatchResult()

        with mock.patch('invoices.services.trigger_monthly_generation', side_effect=run):
            result = sched.trigger_manually()

        self.assertIsInstance(result, BatchResult)
        self.assertEqual(seen['state'], RUNNING)
        status = sched.get_status()
        self.assertFalse(status['running'])
        self.assertEqual(status['state'], IDLE)
        self.assertEqual(status['lastRun'], self.now.isoformat())

    def test_trigger_manually_propagates_errors(self):
        sched = self.make()
        with mock.patch('invoices.services.trigger_monthly_generation',
                        side_effect=RuntimeError('boom')):
            with self.assertRaises(RuntimeError):
                sched.trigger_manually()
        self.assertFalse(sched.get_status()['running'])

    def test_overlapping_runs_stay_running_until_last_finishes(self):
        sched = self.make()
        entered = threading.Event()
        release = threading.Event()
        calls = []

        def run(created_by=None):
            calls.append(created_by)
            if len(calls) == 1:
                entered.set()
                release.wait(5)
            return BatchResult()

        with mock.patch('invoices.services.trigger_monthly_generation', side_effect=run):
            worker = threading.Thread(target=sched.trigger_manually)
            worker.start()
            self.assertTrue(entered.wait(5))

            sched.trigger_manually()
            status = sched.get_status()
            self.assertTrue(status['running'])
            self.assertEqual(status['state'], RUNNING)

            release.set()
            worker.join(5)

        status = sched.get_status()
        self.assertFalse(status['running'])
        self.assertEqual(status['state'], IDLE)

    def test_overlap_ends_scheduled_when_job_registered(self):
        sched = self.make()
        sched.start()
        sched._begin()
        sched._begin()
        sched._finish()
        self.assertEqual(sched.get_status()['state'], RUNNING)
        sched._finish()
        self.assertEqual(sched.get_status()['state'], SCHEDULED)

    @mock.patch('invoices.scheduler.close_old_connections')
    def test_fire_swallows_errors(self, _close):
        sched = self.make()
        with mock.patch('invoices.services.run_scheduled_generation',
                        side_effect=RuntimeError('boom')), \
                self.assertLogs('invoices.scheduler', level='ERROR'):
            sched._fire()

        status = sched.get_status()
        self.assertFalse(status['running'])
        self.assertEqual(status['lastRun'], self.now.isoformat())

    @mock.patch('invoices.scheduler.close_old_connections')
    def test_fire_runs_scheduled_generation(self, _close):
        sched = self.make()
        with mock.patch('invoices.services.run_scheduled_generation',
                        return_value=BatchResult()) as run:
            sched._fire()
        run.assert_called_once_with()
