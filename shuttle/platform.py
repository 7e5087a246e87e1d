"""HTTP client for the shuttle platform's departure and booking endpoints."""

import logging

import requests

from config import BASE_URL, REQUEST_TIMEOUT, TOKEN_COOKIE, TO_CAMPUS, USER_AGENT
from shuttle.exceptions import AuthError, BookingError, NetworkError
from shuttle.prediction import DepartureRecord, parse_listing
from shuttle.session import AuthSession

log = logging.getLogger(__name__)


class PlatformClient:
    def __init__(self, base_url: str = BASE_URL, timeout: float = REQUEST_TIMEOUT,
                 session: requests.Session | None = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.http = session or requests.Session()
        self.http.headers.update({
            "User-Agent": USER_AGENT,
            "Accept": "application/json, text/plain, */*",
            "Accept-Language": "en-US,en;q=0.5",
            "Referer": f"{self.base_url}/home",
        })

    def _request(self, method: str, path: str, auth: AuthSession, **kwargs) -> requests.Response:
        if not auth.present:
            raise AuthError("No token set.")
        url = f"{self.base_url}{path}"
        try:
            resp = self.http.request(
                method, url,
                headers={"Cookie": f"{TOKEN_COOKIE}={auth.token}"},
                timeout=self.timeout,
                **kwargs,
            )
        except requests.RequestException as e:
            raise NetworkError(f"{method} {path} failed: {e}") from e

        log.info("%s %s returned %d %s", method, path, resp.status_code, resp.reason)
        if resp.status_code == 401:
            raise AuthError("Unauthorized: token might be expired or invalid.")
        return resp

    def _listing(self, path: str, auth: AuthSession) -> list[DepartureRecord]:
        resp = self._request("GET", path, auth)
        if not resp.ok:
            raise NetworkError(f"GET {path} returned {resp.status_code} {resp.reason}")
        try:
            payload = resp.json()
        except ValueError as e:
            raise NetworkError(f"GET {path} returned invalid JSON") from e
        return parse_listing(payload)

    def current_departures(self, auth: AuthSession) -> list[DepartureRecord]:
        """Departures that are bookable right now."""
        return self._listing("/api/departure/current", auth)

    def upcoming_departures(self, auth: AuthSession) -> list[DepartureRecord]:
        """Departures that are visible but not bookable yet."""
        return self._listing("/api/departure/upcoming", auth)

    def book(self, auth: AuthSession, departure_id: int, to_campus: bool = TO_CAMPUS) -> str:
        """Reserve a seat. Returns the response body on success."""
        resp = self._request(
            "POST", "/api/tickets/book", auth,
            json={"departure_id": int(departure_id), "to_campus": bool(to_campus)},
        )
        if not resp.ok:
            raise BookingError(
                f"Booking departure {departure_id} failed: {resp.status_code} {resp.reason} {resp.text[:300]}"
            )
        return resp.text
