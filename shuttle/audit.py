"""Append-only plain-text audit log of booking attempts and listing requests."""

import logging
import threading
from datetime import datetime
from pathlib import Path

from config import AUDIT_LOG_FILE

log = logging.getLogger(__name__)


class AuditLog:
    def __init__(self, path: str | Path = AUDIT_LOG_FILE):
        self.path = Path(path)
        self._lock = threading.Lock()

    def append(self, message: str) -> None:
        """Write one timestamped line. Newlines in ``message`` are flattened."""
        stamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        line = f"[{stamp}] {' '.join(str(message).split())}\n"
        with self._lock, self.path.open("a", encoding="utf-8") as f:
            f.write(line)

    def booking(self, user_id: str, departure_id: int, success: bool, detail: str) -> None:
        status = "success" if success else "failed"
        key = "response" if success else "error"
        self.append(f"booking user={user_id} departure={departure_id} status={status} {key}={detail}")

    def request(self, user_id: str, what: str, outcome: str) -> None:
        self.append(f"{what} request by {user_id} -> {outcome}")

    def tail(self, limit: int = 50) -> list[str]:
        """Most recent lines, newest first."""
        if not self.path.exists():
            return []
        lines = self.path.read_text(encoding="utf-8").splitlines()
        return list(reversed(lines[-limit:]))
