"""Shared booking executor, used by the scheduler, the CLI and the web API."""

import logging
from dataclasses import dataclass, field
from datetime import datetime

from shuttle.audit import AuditLog
from shuttle.exceptions import AuthError, ShuttleError
from shuttle.notify import LogNotifier
from shuttle.platform import PlatformClient
from shuttle.session import AuthSession

log = logging.getLogger(__name__)


@dataclass
class BookingOutcome:
    user_id: str
    departure_id: int
    success: bool
    detail: str
    at: datetime = field(default_factory=datetime.now)


def execute_booking(client: PlatformClient, auth: AuthSession, departure_id: int,
                    user_id: str, audit: AuditLog, notifier: LogNotifier) -> BookingOutcome:
    """Send one booking request for ``departure_id`` with the current token.

    No retries and no check against the live listing: the platform decides
    whether the (possibly predicted) id is valid. Failures are audited and
    reported to the user, never raised.
    """
    log.info("Booking departure %d for user %s...", departure_id, user_id)
    try:
        body = client.book(auth, departure_id)
    except AuthError as e:
        outcome = BookingOutcome(user_id, departure_id, False, str(e))
        message = "Token invalid: it might be expired. Set a new token and schedule again."
    except ShuttleError as e:
        outcome = BookingOutcome(user_id, departure_id, False, str(e))
        message = f"Error booking departure {departure_id}: {e}"
    except Exception as e:
        outcome = BookingOutcome(user_id, departure_id, False, str(e))
        message = f"Error booking departure {departure_id}: {e}"
        log.exception("Unexpected error booking departure %d for user %s", departure_id, user_id)
    else:
        outcome = BookingOutcome(user_id, departure_id, True, body)
        message = f"Booking sent for departure {departure_id}.\nResponse: {body[:500]}"

    if outcome.success:
        log.info("Booking succeeded for user %s (departure %d)", user_id, departure_id)
    else:
        log.warning("Booking failed for user %s (departure %d): %s", user_id, departure_id, outcome.detail)

    audit.booking(user_id, departure_id, outcome.success, outcome.detail)
    notifier.notify(user_id, message)
    return outcome
