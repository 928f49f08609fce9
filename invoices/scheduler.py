# invoices/scheduler.py
"""
In-process scheduler for the monthly rent run.

The job is an APScheduler cron job firing at ``run_hour`` (09:00 by default)
local time on the configured day of the month. Months shorter than that day
fire on their last day. Status comes from the scheduler's own state record.
Changing the day setting needs an explicit ``restart()``.
"""
from __future__ import annotations

import logging
import threading
from calendar import monthrange
from dataclasses import dataclass
from datetime import datetime

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.combining import OrTrigger
from apscheduler.triggers.cron import CronTrigger
from django.db import close_old_connections
from django.utils import timezone

from .config import GenerationConfig
from .exceptions import ConfigurationError
from . import services

logger = logging.getLogger(__name__)

IDLE = 'idle'
SCHEDULED = 'scheduled'
RUNNING = 'running'

JOB_ID = 'monthly_rent_generation'


def _ordinal(day: int) -> str:
    if 11 <= day <= 13:
        return f"{day}th"
    suffix = {1: 'st', 2: 'nd', 3: 'rd'}.get(day % 10, 'th')
    return f"{day}{suffix}"


def build_trigger(day: int, hour: int, tz):
    """
    Cron trigger for ``day`` at ``hour``:00. Months that can be shorter than
    ``day`` get a second "last day" cron so they still fire once.
    """
    exact = CronTrigger(day=day, hour=hour, minute=0, timezone=tz)
    # 2001 is a common year, so February counts as 28 days
    short_months = [m for m in range(1, 13) if monthrange(2001, m)[1] < day]
    if not short_months:
        return exact
    last_day = CronTrigger(month=','.join(str(m) for m in short_months),
                           day='last', hour=hour, minute=0, timezone=tz)
    return OrTrigger([exact, last_day])


@dataclass
class SchedulerState:
    state: str = IDLE
    is_running: bool = False
    next_run_at: datetime | None = None
    last_run_at: datetime | None = None


class RentScheduler:
    def __init__(self, config_loader=None, clock=None):
        self._load_config = config_loader or GenerationConfig.load
        self._now = clock or timezone.now
        self._lock = threading.Lock()
        self._backend = None
        self._active_runs = 0
        self.state = SchedulerState()

    # ---------- registration ----------

    def start(self) -> bool:
        """Register the cron job from current settings. False if the settings are invalid."""
        try:
            config = self._load_config()
            config.validate_schedule()
            trigger = build_trigger(config.rent_generation_day, config.run_hour, config.tzinfo)
        except ConfigurationError as e:
            logger.error("Rent generation job not scheduled: %s", e)
            return False
        except Exception:
            logger.exception("Error starting rent generation job")
            return False

        with self._lock:
            if self._backend is None:
                self._backend = BackgroundScheduler(
                    timezone=config.tzinfo,
                    job_defaults={'coalesce': True, 'max_instances': 1,
                                  'misfire_grace_time': 3600})
                self._backend.start()
            job = self._backend.add_job(self._fire, trigger=trigger, id=JOB_ID,
                                        name='Monthly rent generation',
                                        replace_existing=True)
            self.state.next_run_at = job.next_run_time
            if not self._active_runs:
                self.state.state = SCHEDULED

        logger.info("Monthly rent generation job scheduled (%s of every month at %02d:00 %s), next run %s",
                    _ordinal(config.rent_generation_day), config.run_hour,
                    config.time_zone, job.next_run_time.isoformat())
        return True

    def stop(self) -> None:
        with self._lock:
            if self._backend is not None:
                self._backend.shutdown(wait=False)
                self._backend = None
                logger.info("Stopped rent generation job")
            self.state.next_run_at = None
            if not self._active_runs:
                self.state.state = IDLE

    def restart(self) -> bool:
        self.stop()
        return self.start()

    # ---------- runs ----------

    def _begin(self) -> None:
        with self._lock:
            self._active_runs += 1
            self.state.is_running = True
            self.state.state = RUNNING

    def _finish(self) -> None:
        with self._lock:
            self._active_runs -= 1
            self.state.last_run_at = self._now()
            if self._active_runs:
                return
            self.state.is_running = False
            self.state.state = SCHEDULED if self._backend is not None else IDLE

    def _fire(self) -> None:
        close_old_connections()
        logger.info("Running automatic monthly rent generation...")
        self._begin()
        try:
            result = services.run_scheduled_generation()
            logger.info("Automatic rent generation finished: %d generated, %d skipped, %d errors",
                        result.generated_count, result.skipped_count, len(result.errors))
        except Exception:
            logger.exception("Error in automatic rent generation")
        finally:
            self._finish()
            close_old_connections()

    def trigger_manually(self, created_by=None):
        """Run now in the caller's thread, ignoring the auto-generate switch."""
        self._begin()
        try:
            return services.trigger_monthly_generation(created_by=created_by)
        finally:
            self._finish()

    # ---------- introspection ----------

    def get_status(self) -> dict:
        with self._lock:
            if self._backend is not None:
                job = self._backend.get_job(JOB_ID)
                self.state.next_run_at = job.next_run_time if job else None
            st = self.state
            return {
                'running': st.is_running,
                'state': st.state,
                'nextRun': st.next_run_at.isoformat() if st.next_run_at else None,
                'lastRun': st.last_run_at.isoformat() if st.last_run_at else None,
            }


scheduler = RentScheduler()
