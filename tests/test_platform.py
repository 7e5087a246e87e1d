"""Tests for the platform HTTP client."""

from unittest.mock import MagicMock

import pytest
import requests

from shuttle.exceptions import AuthError, BookingError, NetworkError
from shuttle.platform import PlatformClient
from shuttle.session import AuthSession


def response(status: int = 200, payload=None, text: str = "", reason: str = "OK") -> MagicMock:
    resp = MagicMock()
    resp.status_code = status
    resp.ok = 200 <= status < 300
    resp.reason = reason
    resp.text = text
    resp.json.return_value = payload
    return resp


@pytest.fixture
def http() -> MagicMock:
    session = MagicMock()
    session.headers = {}
    return session


@pytest.fixture
def platform(http: MagicMock) -> PlatformClient:
    return PlatformClient(base_url="https://bus.example/", timeout=5, session=http)


def test_current_departures_sends_token_cookie(platform, http, auth) -> None:
    """Given a token, when listing, then the le_token cookie is sent."""
    http.request.return_value = response(payload=[
        {"id": 18399, "route": {"name": "Martil", "bus": {"id": 1, "name": "Bus A"}}},
    ])

    departures = platform.current_departures(auth)

    method, url = http.request.call_args.args
    assert (method, url) == ("GET", "https://bus.example/api/departure/current")
    assert http.request.call_args.kwargs["headers"] == {"Cookie": f"le_token={auth.token}"}
    assert http.request.call_args.kwargs["timeout"] == 5
    assert [d.id for d in departures] == [18399]


def test_upcoming_departures_endpoint(platform, http, auth) -> None:
    """Given an upcoming listing, when fetching, then available times are parsed."""
    http.request.return_value = response(payload=[
        {"route": {"name": "Martil", "bus": {"id": 1, "name": "Bus A"}},
         "available_time": "14:00:00", "departure_time": "15:00:00", "no_return": False},
    ])

    departures = platform.upcoming_departures(auth)

    assert http.request.call_args.args[1] == "https://bus.example/api/departure/upcoming"
    assert str(departures[0].available_time) == "14:00:00"


def test_unauthorized_raises_auth_error(platform, http, auth) -> None:
    """Given a 401, when listing, then AuthError is raised."""
    http.request.return_value = response(status=401, reason="Unauthorized")

    with pytest.raises(AuthError):
        platform.current_departures(auth)


def test_server_error_raises_network_error(platform, http, auth) -> None:
    """Given a 500, when listing, then NetworkError is raised."""
    http.request.return_value = response(status=500, reason="Internal Server Error")

    with pytest.raises(NetworkError, match="500"):
        platform.current_departures(auth)


def test_invalid_json_raises_network_error(platform, http, auth) -> None:
    """Given a non-JSON body, when listing, then NetworkError is raised."""
    resp = response()
    resp.json.side_effect = ValueError("no json")
    http.request.return_value = resp

    with pytest.raises(NetworkError, match="invalid JSON"):
        platform.current_departures(auth)


def test_transport_error_raises_network_error(platform, http, auth) -> None:
    """Given a connection failure, when listing, then NetworkError is raised."""
    http.request.side_effect = requests.ConnectionError("refused")

    with pytest.raises(NetworkError, match="refused"):
        platform.current_departures(auth)


def test_missing_token_fails_without_request(platform, http, tmp_path) -> None:
    """Given no token, when listing, then no request is sent."""
    with pytest.raises(AuthError):
        platform.current_departures(AuthSession(tmp_path / ".tkn"))

    http.request.assert_not_called()


def test_book_posts_departure(platform, http, auth) -> None:
    """Given a departure id, when booking, then the JSON body carries it once."""
    http.request.return_value = response(text='{"ok":true}')

    body = platform.book(auth, 18399, to_campus=False)

    method, url = http.request.call_args.args
    assert (method, url) == ("POST", "https://bus.example/api/tickets/book")
    assert http.request.call_args.kwargs["json"] == {"departure_id": 18399, "to_campus": False}
    assert body == '{"ok":true}'
    assert http.request.call_count == 1


def test_book_rejection_raises_booking_error(platform, http, auth) -> None:
    """Given the platform rejects the id, when booking, then BookingError carries the body."""
    http.request.return_value = response(status=400, reason="Bad Request", text="departure closed")

    with pytest.raises(BookingError, match="departure closed"):
        platform.book(auth, 1)


def test_client_sets_browser_headers(http) -> None:
    """Given a new client, then default headers mimic the web app."""
    PlatformClient(base_url="https://bus.example", session=http)

    assert http.headers["Referer"] == "https://bus.example/home"
    assert "application/json" in http.headers["Accept"]
