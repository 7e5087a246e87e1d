"""Outbound notifications to the user who requested a booking."""

import logging

import requests

from config import REQUEST_TIMEOUT, TELEGRAM_BOT_TOKEN

log = logging.getLogger(__name__)


class LogNotifier:
    """Writes notifications to the operator log only."""

    def notify(self, user_id: str, text: str) -> None:
        log.info("Notify %s: %s", user_id, text)


class TelegramNotifier(LogNotifier):
    """Sends notifications through the Telegram Bot API; the user id is the chat id."""

    def __init__(self, bot_token: str, session: requests.Session | None = None,
                 timeout: float = REQUEST_TIMEOUT):
        self.url = f"https://api.telegram.org/bot{bot_token}/sendMessage"
        self.http = session or requests.Session()
        self.timeout = timeout

    def notify(self, user_id: str, text: str) -> None:
        super().notify(user_id, text)
        try:
            resp = self.http.post(self.url, data={"chat_id": user_id, "text": text},
                                  timeout=self.timeout)
            resp.raise_for_status()
        except requests.RequestException as e:
            log.warning("Telegram notification to %s failed: %s", user_id, e)


def build_notifier(bot_token: str = TELEGRAM_BOT_TOKEN) -> LogNotifier:
    return TelegramNotifier(bot_token) if bot_token else LogNotifier()
