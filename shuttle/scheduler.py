"""APScheduler integration for one-shot scheduled bookings."""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta

from apscheduler.events import EVENT_JOB_MISSED, JobExecutionEvent
from apscheduler.job import Job
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.schedulers.base import BaseScheduler
from apscheduler.triggers.date import DateTrigger

from config import MISFIRE_GRACE_SECONDS, TIMEZONE
from shuttle.audit import AuditLog
from shuttle.booking import BookingOutcome, execute_booking
from shuttle.clock import delay_until, is_future, now, resolve_target_instant
from shuttle.exceptions import PreconditionError
from shuttle.notify import LogNotifier
from shuttle.platform import PlatformClient
from shuttle.state import ScheduleState, ScheduleStore

log = logging.getLogger(__name__)

JOB_PREFIX = "booking-"


@dataclass
class ArmedBooking:
    user_id: str
    run_at: datetime
    delay: timedelta
    departure: str
    replaced: bool


class BookingScheduler:
    """Owns one pending DateTrigger job per user.

    State moves idle -> armed -> firing -> fired, or armed -> cancelled. The
    job body re-checks the state under the store lock right before the
    booking call, so a cancel that wins the race always prevents it.
    """

    def __init__(self, store: ScheduleStore, client: PlatformClient, audit: AuditLog,
                 notifier: LogNotifier, scheduler: BaseScheduler | None = None,
                 tz: str = TIMEZONE, clock=None,
                 misfire_grace_time: int = MISFIRE_GRACE_SECONDS):
        self.store = store
        self.client = client
        self.audit = audit
        self.notifier = notifier
        self.scheduler = scheduler or BackgroundScheduler(timezone=tz)
        self.clock = clock or (lambda: now(tz))
        self.misfire_grace_time = misfire_grace_time
        self.scheduler.add_listener(self._on_missed, EVENT_JOB_MISSED)

    @staticmethod
    def job_id(user_id: str) -> str:
        return f"{JOB_PREFIX}{user_id}"

    def pending_job(self, user_id: str) -> Job | None:
        return self.scheduler.get_job(self.job_id(user_id))

    def _remove_job(self, user_id: str) -> None:
        if self.pending_job(user_id):
            self.scheduler.remove_job(self.job_id(user_id))

    def arm(self, user_id: str) -> ArmedBooking:
        """Schedule the user's booking for their time of day, today.

        Re-arming while armed replaces the pending job. Raises
        PreconditionError if a field is missing or the time has passed.
        """
        user_id = str(user_id)
        with self.store.lock:
            record = self.store.get(user_id)
            missing = []
            if record.time_of_day is None:
                missing.append("time")
            if record.departure_id is None:
                missing.append("departure id")
            if not self.store.auth.present:
                missing.append("token")
            if missing:
                raise PreconditionError(f"Missing: {', '.join(missing)}", missing)

            current = self.clock()
            run_at = resolve_target_instant(record.time_of_day, current)
            if not is_future(run_at, current):
                raise PreconditionError(
                    f"Time {record.time_of_day} has already passed today; it must be in the future."
                )

            replaced = record.armed
            self._remove_job(user_id)
            self.scheduler.add_job(
                self.fire,
                trigger=DateTrigger(run_date=run_at),
                args=[user_id],
                id=self.job_id(user_id),
                name=f"book {record.departure_label} for {user_id}",
                replace_existing=True,
                misfire_grace_time=self.misfire_grace_time,
            )
            self.store.transition(user_id, ScheduleState.ARMED, scheduled_for=run_at)

        log.info("Scheduled booking of departure %s for user %s at %s%s",
                 record.departure_label, user_id, run_at.strftime("%H:%M:%S"),
                 " (replaced previous)" if replaced else "")
        return ArmedBooking(user_id, run_at, delay_until(run_at, current),
                            record.departure_label, replaced)

    def cancel(self, user_id: str) -> bool:
        """Cancel an armed booking. Returns False if nothing was armed."""
        user_id = str(user_id)
        with self.store.lock:
            if not self.store.cancel(user_id):
                return False
            self._remove_job(user_id)
        return True

    def fire(self, user_id: str) -> BookingOutcome | None:
        """Job body. Books only if the schedule is still armed."""
        with self.store.lock:
            record = self.store.get(user_id)
            if not record.armed:
                log.info("Booking for user %s is %s, skipping.", user_id, record.state.value)
                return None
            departure_id = record.departure_id
            self.store.transition(user_id, ScheduleState.FIRING)

        outcome = None
        try:
            outcome = execute_booking(self.client, self.store.auth, departure_id,
                                      user_id, self.audit, self.notifier)
        except Exception:
            log.exception("Booking job for user %s error:", user_id)
        finally:
            with self.store.lock:
                # A re-arm during the call owns the state now; only record the outcome.
                state = self.store.get(user_id).state
                if state is ScheduleState.FIRING:
                    state = ScheduleState.FIRED
                self.store.transition(user_id, state, last_outcome=outcome)
        return outcome

    def _on_missed(self, event: JobExecutionEvent) -> None:
        if not event.job_id.startswith(JOB_PREFIX):
            return
        user_id = event.job_id[len(JOB_PREFIX):]
        with self.store.lock:
            if not self.store.get(user_id).armed:
                return
            self.store.transition(user_id, ScheduleState.IDLE)
        log.warning("Booking job for user %s missed its run time", user_id)
        self.notifier.notify(user_id, "Scheduled booking was missed (process was busy or asleep). Schedule again.")

    def start(self) -> None:
        self.scheduler.start()
        log.info("Scheduler started.")

    def shutdown(self) -> None:
        self.scheduler.shutdown(wait=False)
        log.info("Scheduler shut down.")
