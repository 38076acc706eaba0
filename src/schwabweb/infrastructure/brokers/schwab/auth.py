"""SchwabAuthManager - Browser login and session capture"""

import re
from collections.abc import Awaitable
from typing import TypeVar

import pyotp
from loguru import logger
from playwright.async_api import BrowserContext, Page, Route, async_playwright
from playwright.async_api import Error as PlaywrightError

from schwabweb.core.config import AuthTimeouts
from schwabweb.shared.constants import (
    BALANCES_REQUEST_PATTERN,
    BROWSER_ARGS,
    HOMEPAGE_URL,
    LANDING_PAGE_SELECTOR,
    LANDING_PAGE_TRADE_INDEX,
    LOGIN_ID_SELECTOR,
    LOGIN_IFRAME_SELECTOR,
    PASSWORD_SELECTOR,
    SESSION_COOKIE_DOMAINS,
    TRADE_SYMBOL_SELECTOR,
    TRADE_URL_PATTERN,
    USER_AGENT,
    VIEWPORT,
)
from schwabweb.shared.exceptions import SchwabAuthenticationError

from .capture import HeaderCapture
from .credentials import (
    CredentialBundle,
    build_credential_bundle,
    join_session_cookies,
)

T = TypeVar("T")


def _ms(seconds: float) -> float:
    return seconds * 1000


class SchwabAuthManager:
    """Logs in through a real browser and harvests the session

    Responsibilities:
    - Driving the login iframe (with optional TOTP suffix on the password)
    - Intercepting the balances request to capture its authorization headers
    - Collecting session cookies for the platform's API domains
    - Replacing the client's credential bundle on success

    Any failing step aborts the login and leaves the bundle untouched.
    Retrying is up to the caller.
    """

    def __init__(
        self,
        credentials: CredentialBundle,
        timeouts: AuthTimeouts | None = None,
        headless: bool = False,
    ) -> None:
        """Initialize auth manager

        Args:
            credentials: Bundle replaced after a successful login
            timeouts: Browser step timeouts
            headless: Run Chromium without a window
        """
        self._credentials = credentials
        self._timeouts = timeouts or AuthTimeouts()
        self._headless = headless

    @property
    def timeouts(self) -> AuthTimeouts:
        return self._timeouts

    @staticmethod
    def generate_totp(totp_secret: str) -> str:
        """Current time-based one-time code for ``totp_secret``

        Returns an empty string when no secret is configured.

        Raises:
            SchwabAuthenticationError: If the secret is not valid base32
        """
        if not totp_secret:
            return ""
        try:
            return pyotp.TOTP(totp_secret).now()
        except (ValueError, TypeError) as e:
            raise SchwabAuthenticationError(
                f"failed to generate TOTP code: {e}"
            ) from e

    async def login(
        self, username: str, password: str, totp_secret: str = ""
    ) -> CredentialBundle:
        """Log in and capture the session credentials

        Args:
            username: Schwab login ID
            password: Account password
            totp_secret: Base32 TOTP secret; empty when 2FA codes are not used

        Returns:
            The populated credential bundle

        Raises:
            SchwabAuthenticationError: If any login step fails
        """
        full_password = password + self.generate_totp(totp_secret)

        logger.info(f"Logging in to Schwab as {username}...")
        try:
            async with async_playwright() as pw:
                browser = await pw.chromium.launch(
                    headless=self._headless, args=list(BROWSER_ARGS)
                )
                try:
                    context = await browser.new_context(
                        user_agent=USER_AGENT, viewport=VIEWPORT
                    )
                    page = await context.new_page()
                    bundle = await self.capture_session(
                        context, page, username, full_password
                    )
                finally:
                    await browser.close()
        except PlaywrightError as e:
            raise SchwabAuthenticationError(f"browser session failed: {e}") from e

        self._credentials.replace(bundle)
        logger.info("Login successful, session captured")
        return self._credentials

    async def capture_session(
        self,
        context: BrowserContext,
        page: Page,
        username: str,
        password: str,
    ) -> CredentialBundle:
        """Run the login sequence on an open page and build the bundle

        Args:
            context: Browser context owning ``page`` (cookie source)
            page: Fresh page to log in on
            username: Schwab login ID
            password: Password, already suffixed with any TOTP code

        Raises:
            SchwabAuthenticationError: If any step fails or times out
        """
        timeouts = self._timeouts
        capture = HeaderCapture()

        async def intercept(route: Route) -> None:
            try:
                capture.offer(await route.request.all_headers())
            except PlaywrightError as e:
                logger.debug(f"Could not read intercepted headers: {e}")
            finally:
                await route.continue_()

        # Route must be in place before the first navigation
        await self._step(
            "failed to set route",
            page.route(re.compile(BALANCES_REQUEST_PATTERN), intercept),
        )

        logger.info("Navigating to Schwab login page...")
        await self._step(
            "failed to navigate to login page",
            page.goto(HOMEPAGE_URL, timeout=_ms(timeouts.navigation)),
        )
        await self._step(
            "failed to wait for login iframe",
            page.wait_for_selector(
                LOGIN_IFRAME_SELECTOR, timeout=_ms(timeouts.login_iframe)
            ),
        )

        # Locate through the iframe; a top-level lookup can run before it attaches
        frame = page.frame_locator(LOGIN_IFRAME_SELECTOR)

        logger.info("Entering credentials...")
        await self._step(
            "failed to select Trade",
            frame.locator(LANDING_PAGE_SELECTOR).first.select_option(
                index=LANDING_PAGE_TRADE_INDEX
            ),
        )
        login_field = frame.locator(LOGIN_ID_SELECTOR)
        password_field = frame.locator(PASSWORD_SELECTOR)
        await self._step("failed to fill login ID", login_field.fill(username))
        await self._step("failed to tab to password", login_field.press("Tab"))
        await self._step("failed to fill password", password_field.fill(password))
        await self._step("failed to submit login", password_field.press("Enter"))

        # The session is only fully established after a reload
        await page.wait_for_timeout(_ms(timeouts.post_submit_settle))
        await self._step(
            "refresh after login",
            page.reload(timeout=_ms(timeouts.reload)),
        )

        logger.info("Waiting for login to complete and token capture...")
        captured_headers = await capture.wait(timeouts.header_capture)
        logger.info("Captured bearer token")

        await self._step(
            "wait for trade URL",
            page.wait_for_url(
                re.compile(TRADE_URL_PATTERN), timeout=_ms(timeouts.trade_url)
            ),
        )
        await self._step(
            "wait for trade page",
            page.wait_for_selector(
                TRADE_SYMBOL_SELECTOR, timeout=_ms(timeouts.trade_element)
            ),
        )
        # The trade page needs a second load before its cookies are complete
        await self._step(
            "refresh trade page",
            page.reload(timeout=_ms(timeouts.reload)),
        )
        await self._step(
            "wait for trade page after refresh",
            page.wait_for_selector(
                TRADE_SYMBOL_SELECTOR, timeout=_ms(timeouts.trade_element)
            ),
        )
        await page.wait_for_timeout(_ms(timeouts.final_settle))

        cookie_string = await self.collect_cookies(context)
        if not cookie_string:
            raise SchwabAuthenticationError("no session cookies")

        return build_credential_bundle(captured_headers, cookie_string)

    async def collect_cookies(self, context: BrowserContext) -> str:
        """Cookie header value for the platform's API domains only

        A domain whose cookies cannot be read is skipped.
        """
        batches = []
        for url in SESSION_COOKIE_DOMAINS:
            try:
                batches.append(await context.cookies(url))
            except PlaywrightError as e:
                logger.warning(f"Could not read cookies for {url}: {e}")
        return join_session_cookies(batches)

    async def _step(self, description: str, action: Awaitable[T]) -> T:
        """Await one browser action, wrapping driver errors"""
        try:
            return await action
        except PlaywrightError as e:
            raise SchwabAuthenticationError(f"{description}: {e}") from e
