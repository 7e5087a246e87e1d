"""The process-wide platform token, persisted to a flat file."""

import logging
from pathlib import Path

from config import TOKEN_FILE
from shuttle.exceptions import FormatError

log = logging.getLogger(__name__)


def mask_token(token: str | None) -> str:
    if not token or len(token) < 12:
        return "Invalid token"
    return f"{token[:5]}...{token[-7:]}"


class AuthSession:
    """Holds the single ``le_token`` shared by every user.

    Passed explicitly to everything that makes an authenticated call; the
    value is read at call time, so an update is picked up by jobs that are
    already armed.
    """

    def __init__(self, path: str | Path = TOKEN_FILE, token: str | None = None):
        self.path = Path(path)
        self.token = token

    @classmethod
    def load(cls, path: str | Path = TOKEN_FILE) -> "AuthSession":
        session = cls(path)
        session.reload()
        return session

    def reload(self) -> str | None:
        """Re-read the token file. Returns the token, or None if absent."""
        if self.path.exists():
            self.token = self.path.read_text(encoding="utf-8").strip() or None
            if self.token:
                log.info("Token loaded from %s (%s)", self.path, mask_token(self.token))
            else:
                log.warning("Token file %s is empty", self.path)
        else:
            self.token = None
            log.warning("No token file found (%s)", self.path)
        return self.token

    def update(self, token: str) -> None:
        """Replace the token and overwrite the token file."""
        token = token.strip()
        if not token:
            raise FormatError("Token must not be empty.")
        self.token = token
        self.path.write_text(token, encoding="utf-8")
        log.info("Token saved to %s (%s)", self.path, mask_token(token))

    @property
    def present(self) -> bool:
        return bool(self.token)

    def masked(self) -> str:
        return mask_token(self.token)
