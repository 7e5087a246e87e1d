"""Automated 42 intra login that extracts the platform's ``le_token`` cookie."""

import asyncio
import logging

from playwright.async_api import async_playwright

from config import (BASE_URL, ERROR_SCREENSHOT, HEADLESS, INTRA_LOGIN, INTRA_PASSWORD,
                    TOKEN_COOKIE, USER_AGENT)
from shuttle.exceptions import AcquisitionError
from shuttle.session import AuthSession, mask_token

log = logging.getLogger(__name__)

SELECTORS = {
    "sign_in": 'a[href*="/api/auth/42"]',
    "username": "input#username",
    "password": "input#password",
    "submit": "input#kc-login",
}


async def fetch_token(login: str, password: str, base_url: str = BASE_URL,
                      headless: bool = HEADLESS, screenshot: str = ERROR_SCREENSHOT) -> str:
    """Log in through the browser and return the ``le_token`` cookie value."""
    if not login or not password:
        raise AcquisitionError("INTRA_LOGIN or INTRA_PASSWORD is not configured.")

    async with async_playwright() as p:
        log.info("[1/4] Launching browser...")
        browser = await p.chromium.launch(headless=headless,
                                          args=["--no-sandbox", "--disable-setuid-sandbox"])
        context = await browser.new_context(user_agent=USER_AGENT,
                                            viewport={"width": 1280, "height": 800})
        page = await context.new_page()
        try:
            log.info("[2/4] Opening %s...", base_url)
            await page.goto(f"{base_url}/", wait_until="networkidle", timeout=30000)
            await page.wait_for_selector(SELECTORS["sign_in"], timeout=10000)
            await page.click(SELECTORS["sign_in"])

            log.info("[3/4] Submitting intra credentials...")
            await page.wait_for_selector(SELECTORS["username"], timeout=15000)
            await page.fill(SELECTORS["username"], login)
            await page.fill(SELECTORS["password"], password)
            async with page.expect_navigation(wait_until="networkidle", timeout=30000):
                await page.click(SELECTORS["submit"])
            await page.wait_for_timeout(2000)

            log.info("[4/4] Extracting cookies...")
            cookies = await context.cookies()
            token = next((c["value"] for c in cookies
                          if c["name"] == TOKEN_COOKIE and c.get("value")), None)
            if not token:
                log.error("%s cookie not found. Available cookies: %s",
                          TOKEN_COOKIE, ", ".join(c["name"] for c in cookies))
                raise AcquisitionError("Login finished but no token cookie was set.")
            log.info("Obtained %s: %s", TOKEN_COOKIE, mask_token(token))
            return token
        except AcquisitionError:
            raise
        except Exception as e:
            log.exception("Error during automated login:")
            try:
                await page.screenshot(path=screenshot)
                log.info("Screenshot saved to %s for debugging", screenshot)
            except Exception as shot_error:
                log.warning("Could not take screenshot: %s", shot_error)
            raise AcquisitionError("Automated login failed.") from e
        finally:
            await browser.close()


class TokenAcquirer:
    """Runs at most one automated login at a time and stores the result."""

    def __init__(self, auth: AuthSession, login: str = INTRA_LOGIN,
                 password: str = INTRA_PASSWORD, fetch=fetch_token):
        self.auth = auth
        self.login = login
        self.password = password
        self.fetch = fetch
        self._lock = asyncio.Lock()

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    async def acquire(self) -> str:
        """Log in, save the token to the AuthSession and return it.

        A second call while one is running waits for it instead of starting
        another browser.
        """
        async with self._lock:
            try:
                token = await self.fetch(self.login, self.password)
            except AcquisitionError:
                raise
            except Exception as e:
                # Browser could not even start; details stay in the operator log.
                log.exception("Token acquisition error:")
                raise AcquisitionError("Automated login failed.") from e
            self.auth.update(token)
            return token
