"""Runtime configuration, read from the environment (and .env if present)."""

import os

from dotenv import load_dotenv

load_dotenv()


def _bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# ── Platform ─────────────────────────────────────────────────────────────────
BASE_URL = os.getenv("BASE_URL", "https://bus-med.1337.ma")
TOKEN_COOKIE = "le_token"
REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "15"))
USER_AGENT = os.getenv(
    "USER_AGENT",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
)
# Direction sent with every booking: False books the ride away from campus.
TO_CAMPUS = _bool("TO_CAMPUS", False)

# ── Local state ──────────────────────────────────────────────────────────────
TOKEN_FILE = os.getenv("TOKEN_FILE", ".tkn")
AUDIT_LOG_FILE = os.getenv("AUDIT_LOG_FILE", "bus_log.txt")

# ── Scheduling ───────────────────────────────────────────────────────────────
TIMEZONE = os.getenv("TIMEZONE", "Africa/Casablanca")
# Seconds a job may run late before APScheduler reports it as missed.
MISFIRE_GRACE_SECONDS = int(os.getenv("MISFIRE_GRACE_SECONDS", "30"))
PREDICTION_WINDOW_SECONDS = int(os.getenv("PREDICTION_WINDOW_SECONDS", "3600"))

# ── Token acquisition (42 intra login) ───────────────────────────────────────
INTRA_LOGIN = os.getenv("INTRA_LOGIN", "")
INTRA_PASSWORD = os.getenv("INTRA_PASSWORD", "")
HEADLESS = _bool("HEADLESS", True)
ERROR_SCREENSHOT = os.getenv("ERROR_SCREENSHOT", "error_screenshot.png")

# ── Web dashboard ────────────────────────────────────────────────────────────
DASHBOARD_USER = os.getenv("DASHBOARD_USER", "admin")
DASHBOARD_PASS = os.getenv("DASHBOARD_PASS", "")
WEB_HOST = os.getenv("WEB_HOST", "127.0.0.1")
WEB_PORT = int(os.getenv("WEB_PORT", "8000"))

# ── Notifications ────────────────────────────────────────────────────────────
TELEGRAM_BOT_TOKEN = os.getenv("TELEGRAM_BOT_TOKEN", "")
