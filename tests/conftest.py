"""Shared fixtures: a booker wired to fakes, a fixed clock and temp files."""

from datetime import datetime
from unittest.mock import MagicMock
from zoneinfo import ZoneInfo

import pytest
from apscheduler.schedulers.background import BackgroundScheduler

from shuttle.audit import AuditLog
from shuttle.platform import PlatformClient
from shuttle.scheduler import BookingScheduler
from shuttle.service import ShuttleService
from shuttle.session import AuthSession
from shuttle.state import ScheduleStore

TZ = ZoneInfo("Africa/Casablanca")
# Far enough ahead that a started scheduler never finds an armed job due.
FIXED_NOW = datetime(2099, 1, 15, 12, 0, 0, tzinfo=TZ)
TOKEN = "abcdefghijklmnopqrstuvwxyz0123456789"


class FakeClock:
    def __init__(self, current: datetime = FIXED_NOW) -> None:
        self.current = current

    def __call__(self) -> datetime:
        return self.current


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def auth(tmp_path) -> AuthSession:
    session = AuthSession(tmp_path / ".tkn")
    session.update(TOKEN)
    return session


@pytest.fixture
def store(auth: AuthSession) -> ScheduleStore:
    return ScheduleStore(auth)


@pytest.fixture
def client() -> MagicMock:
    fake = MagicMock(spec=PlatformClient)
    fake.book.return_value = '{"status":"booked"}'
    fake.current_departures.return_value = []
    fake.upcoming_departures.return_value = []
    return fake


@pytest.fixture
def audit(tmp_path) -> AuditLog:
    return AuditLog(tmp_path / "bus_log.txt")


@pytest.fixture
def notifier() -> MagicMock:
    return MagicMock()


@pytest.fixture
def booking_scheduler(store, client, audit, notifier, clock) -> BookingScheduler:
    """Scheduler that is never started, so jobs stay pending."""
    return BookingScheduler(
        store, client, audit, notifier,
        scheduler=BackgroundScheduler(timezone=TZ),
        clock=clock,
    )


@pytest.fixture
def service(store, client, audit, notifier, booking_scheduler) -> ShuttleService:
    return ShuttleService(store, client, audit, notifier, booking_scheduler)
