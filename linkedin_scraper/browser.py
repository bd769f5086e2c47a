"""Browser session factory and page helpers shared by the scrapers.

Creates a Playwright Chromium context with headers that mimic a real
Chrome 131 session on macOS.
"""

import asyncio
import logging
import random
from dataclasses import dataclass

from playwright.async_api import (
    Browser,
    BrowserContext,
    Page,
    Playwright,
    async_playwright,
)

log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Fingerprint
# ---------------------------------------------------------------------------

CHROME_131_USER_AGENT = (
    'Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 '
    '(KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36'
)

LAUNCH_ARGS = [
    '--no-sandbox',
    '--disable-blink-features=AutomationControlled',
    '--disable-infobars',
    '--disable-dev-shm-usage',
]

CONTEXT_OPTIONS = {
    'user_agent': CHROME_131_USER_AGENT,
    'viewport': {'width': 1280, 'height': 800},
    'locale': 'en-US',
    'timezone_id': 'America/New_York',
    'extra_http_headers': {
        'accept-language': 'en-US,en;q=0.9',
        'sec-ch-ua': '"Google Chrome";v="131", "Chromium";v="131", "Not_A Brand";v="24"',
        'sec-ch-ua-mobile': '?0',
        'sec-ch-ua-platform': '"macOS"',
    },
}

_HIDE_WEBDRIVER_JS = '''
Object.defineProperty(navigator, 'webdriver', {
    get: () => undefined,
});
'''

# URL fragments LinkedIn redirects to when the session is not accepted.
BLOCKED_URL_MARKERS = ('/checkpoint/', '/login', '/authwall', '/uas/login')


@dataclass
class BrowserSession:
    """A browser, its single context and page, owned by one task."""
    playwright: Playwright
    browser: Browser
    context: BrowserContext
    page: Page
    headless: bool = True
    closed: bool = False

    async def close(self) -> None:
        """Tear everything down. Safe to call repeatedly; never raises."""
        if self.closed:
            return
        self.closed = True
        for name, closer in (
            ('page', self.page.close),
            ('context', self.context.close),
            ('browser', self.browser.close),
            ('playwright', self.playwright.stop),
        ):
            try:
                await closer()
            except Exception as exc:
                log.debug('Closing %s failed: %s', name, exc)

    async def __aenter__(self) -> 'BrowserSession':
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()


async def create_browser_session(headless: bool = True) -> BrowserSession:
    """Launch Chromium with LinkedIn-compatible headers.

    Launch failures (e.g. browser binary not installed) propagate unchanged,
    after whatever was already started has been shut down.

    Args:
        headless: Set to False to watch the browser, or to let a person log in.
    """
    playwright = await async_playwright().start()
    try:
        browser = await playwright.chromium.launch(headless=headless, args=LAUNCH_ARGS)
    except BaseException:
        await playwright.stop()
        raise

    try:
        context = await browser.new_context(**CONTEXT_OPTIONS)
        await context.add_init_script(_HIDE_WEBDRIVER_JS)
        page = await context.new_page()
    except BaseException:
        for name, closer in (('browser', browser.close), ('playwright', playwright.stop)):
            try:
                await closer()
            except Exception as exc:
                log.debug('Closing %s failed: %s', name, exc)
        raise

    log.debug('Browser session ready (headless=%s)', headless)
    return BrowserSession(
        playwright=playwright,
        browser=browser,
        context=context,
        page=page,
        headless=headless,
    )


async def human_delay(min_ms: int = 300, max_ms: int = 1500) -> None:
    """Sleep for a random human-like interval."""
    await asyncio.sleep(random.uniform(min_ms, max_ms) / 1000)


def is_blocked_url(url: str) -> bool:
    """True if the URL is a LinkedIn login, authwall or checkpoint page."""
    return any(marker in url for marker in BLOCKED_URL_MARKERS)


def is_blocked(page: Page) -> bool:
    """Check if the page landed on a security challenge or login page."""
    return is_blocked_url(page.url)
