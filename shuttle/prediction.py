"""Departure listings and id prediction for departures that are not bookable yet.

The platform numbers departures sequentially as they move from the
"upcoming" listing into the "current" (bookable) one, in the order their
booking window opens. Given the highest id currently bookable, the id an
upcoming departure will receive can be guessed by walking the upcoming
departures whose window opens within the next hour:

    predicted_id = last_current_id
                   + (earlier departures with a different available_time)
                   + (1-based rank among departures sharing its available_time)

Departures sharing an ``available_time`` are ranked by bus id. The result is
a heuristic; the platform remains the source of truth and may number things
differently, which is why predicted ids are shown with a ``~`` prefix.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from itertools import groupby

from config import PREDICTION_WINDOW_SECONDS
from shuttle.clock import SECONDS_PER_DAY, TimeOfDay, parse_time_of_day, seconds_since_midnight
from shuttle.exceptions import FormatError

log = logging.getLogger(__name__)


def _optional_time(value) -> TimeOfDay | None:
    if not value:
        return None
    try:
        return parse_time_of_day(value)
    except FormatError:
        log.warning("Ignoring unparseable time %r in departure listing", value)
        return None


def _optional_int(value) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _field(payload: dict, snake: str, camel: str):
    """Read a listing field that may come in either spelling."""
    value = payload.get(snake)
    return payload.get(camel) if value is None else value


@dataclass(frozen=True)
class DepartureRecord:
    id: int | None
    name: str = ""
    available_time: TimeOfDay | None = None
    departure_time: TimeOfDay | None = None
    no_return: bool = False
    bus_id: int | None = None
    bus_name: str = ""

    @classmethod
    def from_json(cls, payload: dict) -> "DepartureRecord":
        """Build a record from one element of a listing response."""
        route = payload.get("route") or {}
        bus = route.get("bus") or payload.get("bus") or {}
        return cls(
            id=_optional_int(payload.get("id")),
            name=route.get("name") or payload.get("name") or "",
            available_time=_optional_time(_field(payload, "available_time", "availableTime")),
            departure_time=_optional_time(_field(payload, "departure_time", "departureTime")),
            no_return=bool(_field(payload, "no_return", "noReturn")),
            bus_id=_optional_int(bus.get("id")),
            bus_name=bus.get("name") or "",
        )


@dataclass(frozen=True)
class PredictedDeparture:
    departure: DepartureRecord
    predicted_id: int | None

    @property
    def label(self) -> str:
        return "?" if self.predicted_id is None else f"~{self.predicted_id}"


@dataclass
class PredictionResult:
    departures: list[PredictedDeparture] = field(default_factory=list)
    last_current_id: int | None = None

    @property
    def is_empty(self) -> bool:
        """True when no upcoming departure opens inside the window."""
        return not self.departures


def parse_listing(payload) -> list[DepartureRecord]:
    if not isinstance(payload, list):
        return []
    return [DepartureRecord.from_json(item) for item in payload if isinstance(item, dict)]


def last_current_id(current: list[DepartureRecord]) -> int | None:
    ids = [d.id for d in current if d.id is not None]
    return max(ids) if ids else None


def _offset_from(now_seconds: int, departure: DepartureRecord) -> int:
    """Seconds from now until the departure becomes bookable, modulo one day."""
    return (seconds_since_midnight(departure.available_time) - now_seconds) % SECONDS_PER_DAY


def predict_departures(
    current: list[DepartureRecord],
    upcoming: list[DepartureRecord],
    now: datetime,
    window_seconds: int = PREDICTION_WINDOW_SECONDS,
) -> PredictionResult:
    base = last_current_id(current)
    now_seconds = seconds_since_midnight(now)

    in_window = []
    for departure in upcoming:
        if departure.available_time is None:
            log.warning("Upcoming departure %s (%s) has no available time, skipping",
                        departure.name or "?", departure.bus_name or "no bus")
            continue
        offset = _offset_from(now_seconds, departure)
        if 0 < offset <= window_seconds:
            in_window.append((offset, departure))

    # Same-slot peers are ranked by bus id; a missing bus id sorts last.
    in_window.sort(key=lambda item: (
        item[0],
        item[1].bus_id is None,
        item[1].bus_id or 0,
    ))

    result = PredictionResult(last_current_id=base)
    earlier = 0
    for _, slot in groupby(in_window, key=lambda item: item[0]):
        peers = [departure for _, departure in slot]
        for rank, departure in enumerate(peers, start=1):
            predicted = None if base is None else base + earlier + rank
            result.departures.append(PredictedDeparture(departure, predicted))
        earlier += len(peers)

    log.info(
        "Predicted %d upcoming departure(s) from last current id %s",
        len(result.departures), base,
    )
    return result
