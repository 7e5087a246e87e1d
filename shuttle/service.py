"""Command facade shared by the web API and the CLI.

Each public method is one inbound command: set-time, set-departure-id,
set-token, schedule, cancel, status, predict, current departures, book-now,
history and acquire-token.
"""

import logging

from config import AUDIT_LOG_FILE, PREDICTION_WINDOW_SECONDS, TOKEN_FILE
from shuttle.acquire import TokenAcquirer
from shuttle.audit import AuditLog
from shuttle.booking import BookingOutcome, execute_booking
from shuttle.clock import TimeOfDay
from shuttle.exceptions import PreconditionError, ShuttleError
from shuttle.notify import LogNotifier, build_notifier
from shuttle.platform import PlatformClient
from shuttle.prediction import DepartureRecord, PredictionResult, predict_departures
from shuttle.scheduler import ArmedBooking, BookingScheduler
from shuttle.session import AuthSession
from shuttle.state import ScheduleStore, UserSchedule, parse_departure_id

log = logging.getLogger(__name__)


def _time(value) -> str | None:
    return None if value is None else str(value)


class ShuttleService:
    def __init__(self, store: ScheduleStore, client: PlatformClient, audit: AuditLog,
                 notifier: LogNotifier, scheduler: BookingScheduler,
                 acquirer: TokenAcquirer | None = None,
                 window_seconds: int = PREDICTION_WINDOW_SECONDS):
        self.store = store
        self.auth = store.auth
        self.client = client
        self.audit = audit
        self.notifier = notifier
        self.scheduler = scheduler
        self.acquirer = acquirer or TokenAcquirer(store.auth)
        self.window_seconds = window_seconds

    # ── Schedule inputs ──────────────────────────────────────────────────────

    def set_time(self, user_id: str, text: str) -> TimeOfDay:
        return self.store.set_time(user_id, text)

    def set_departure_id(self, user_id: str, text: str) -> UserSchedule:
        return self.store.set_departure_id(user_id, text)

    def set_token(self, token: str) -> str:
        self.store.set_token(token)
        return self.auth.masked()

    def schedule(self, user_id: str) -> ArmedBooking:
        return self.scheduler.arm(user_id)

    def cancel(self, user_id: str) -> bool:
        return self.scheduler.cancel(user_id)

    def status(self, user_id: str) -> dict:
        record = self.store.get(user_id)
        outcome = record.last_outcome
        return {
            "user_id": record.user_id,
            "time": _time(record.time_of_day),
            "departure_id": record.departure_label,
            "predicted": record.predicted,
            "state": record.state.value,
            "scheduled_for": record.scheduled_for.isoformat() if record.scheduled_for else None,
            "token": {"present": self.auth.present,
                      "masked": self.auth.masked() if self.auth.present else None},
            "last_outcome": None if outcome is None else {
                "departure_id": outcome.departure_id,
                "success": outcome.success,
                "detail": outcome.detail,
                "at": outcome.at.isoformat(),
            },
        }

    # ── Platform ─────────────────────────────────────────────────────────────

    def current_departures(self, user_id: str) -> list[DepartureRecord]:
        try:
            departures = self.client.current_departures(self.auth)
        except ShuttleError as e:
            self.audit.request(user_id, "current departures", f"error: {e}")
            raise
        self.audit.request(user_id, "current departures", f"{len(departures)} departure(s)")
        return departures

    def predict(self, user_id: str) -> PredictionResult:
        current = self.client.current_departures(self.auth)
        upcoming = self.client.upcoming_departures(self.auth)
        result = predict_departures(current, upcoming, self.scheduler.clock(), self.window_seconds)
        self.audit.request(user_id, "predict", f"{len(result.departures)} departure(s) in window")
        return result

    def book_now(self, user_id: str, departure_id: str | None = None) -> BookingOutcome:
        """Book immediately, with the given id or the user's stored one."""
        if departure_id is not None:
            target, _ = parse_departure_id(departure_id)
        else:
            target = self.store.get(user_id).departure_id
        missing = []
        if target is None:
            missing.append("departure id")
        if not self.auth.present:
            missing.append("token")
        if missing:
            raise PreconditionError(f"Missing: {', '.join(missing)}", missing)
        return execute_booking(self.client, self.auth, target, user_id, self.audit, self.notifier)

    def history(self, limit: int = 50) -> list[str]:
        return self.audit.tail(limit)

    async def acquire_token(self) -> str:
        """Run the automated login. Returns the masked token."""
        if self.acquirer.busy:
            raise PreconditionError("A login is already running; try again in a minute.")
        await self.acquirer.acquire()
        return self.auth.masked()

    # ── Lifecycle ────────────────────────────────────────────────────────────

    def start(self) -> None:
        self.scheduler.start()

    def shutdown(self) -> None:
        self.scheduler.shutdown()


def build_service(token_file: str = TOKEN_FILE, audit_file: str = AUDIT_LOG_FILE) -> ShuttleService:
    """Wire the default collaborators from config."""
    auth = AuthSession.load(token_file)
    store = ScheduleStore(auth)
    client = PlatformClient()
    audit = AuditLog(audit_file)
    notifier = build_notifier()
    scheduler = BookingScheduler(store, client, audit, notifier)
    return ShuttleService(store, client, audit, notifier, scheduler, TokenAcquirer(auth))
