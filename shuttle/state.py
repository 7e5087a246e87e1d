"""Per-user booking schedules held in memory for the process lifetime."""

import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from shuttle.clock import TimeOfDay, parse_time_of_day
from shuttle.exceptions import FormatError
from shuttle.session import AuthSession

log = logging.getLogger(__name__)


class ScheduleState(str, Enum):
    IDLE = "idle"
    ARMED = "armed"
    FIRING = "firing"
    FIRED = "fired"
    CANCELLED = "cancelled"


@dataclass
class UserSchedule:
    user_id: str
    time_of_day: TimeOfDay | None = None
    departure_id: int | None = None
    predicted: bool = False
    state: ScheduleState = ScheduleState.IDLE
    scheduled_for: datetime | None = None
    last_outcome: object | None = None

    @property
    def armed(self) -> bool:
        return self.state is ScheduleState.ARMED

    @property
    def departure_label(self) -> str | None:
        """Departure id as shown to the user; predicted ids carry a ``~``."""
        if self.departure_id is None:
            return None
        return f"~{self.departure_id}" if self.predicted else str(self.departure_id)


def parse_departure_id(text: str | int) -> tuple[int, bool]:
    """Parse ``18399`` or ``~18399``. Returns (id, predicted)."""
    raw = str(text).strip()
    predicted = raw.startswith("~")
    digits = raw.lstrip("~").strip()
    if not digits.isdecimal():
        raise FormatError(f"Invalid departure id '{text}'. Use a number, e.g. 18399.")
    return int(digits), predicted


class ScheduleStore:
    """Schedule records keyed by user, plus the shared AuthSession.

    ``lock`` sequences state transitions between request handlers and the
    scheduler thread that fires jobs.
    """

    def __init__(self, auth: AuthSession):
        self.auth = auth
        self.lock = threading.RLock()
        self._records: dict[str, UserSchedule] = {}

    def get(self, user_id: str) -> UserSchedule:
        """Return the user's record, or a blank one if they never set anything."""
        return self._records.get(str(user_id)) or UserSchedule(str(user_id))

    def _record(self, user_id: str) -> UserSchedule:
        return self._records.setdefault(str(user_id), UserSchedule(str(user_id)))

    def set_time(self, user_id: str, text: str) -> TimeOfDay:
        tod = parse_time_of_day(text)
        with self.lock:
            self._record(user_id).time_of_day = tod
        log.info("User %s set time: %s", user_id, tod)
        return tod

    def set_departure_id(self, user_id: str, text: str | int) -> UserSchedule:
        departure_id, predicted = parse_departure_id(text)
        with self.lock:
            record = self._record(user_id)
            record.departure_id = departure_id
            record.predicted = predicted
        log.info("User %s set departure id: %s", user_id, record.departure_label)
        return record

    def set_token(self, token: str) -> None:
        self.auth.update(token)

    def get_token(self) -> str | None:
        return self.auth.token

    def cancel(self, user_id: str) -> bool:
        """Flip an armed record to cancelled. Returns False if it was not armed."""
        with self.lock:
            record = self._records.get(str(user_id))
            if record is None or not record.armed:
                return False
            record.state = ScheduleState.CANCELLED
        log.warning("User %s cancelled scheduled booking", user_id)
        return True

    def transition(self, user_id: str, state: ScheduleState, **fields) -> UserSchedule:
        with self.lock:
            record = self._record(user_id)
            record.state = state
            for name, value in fields.items():
                setattr(record, name, value)
        return record
