"""Scan orchestrator: scrapes all analytics pages in parallel.

Each category gets its own browser session so the three pages can be loaded
at the same time. A failure in one category never aborts the others; it is
recorded in `AnalyticsResult.errors` and the category is left as None.
"""

import asyncio
import logging

from .audience import scrape_audience_analytics
from .browser import create_browser_session
from .content import scrape_content_analytics
from .cookies import inject_cookies, load_cookies
from .demographics import scrape_demographic_analytics
from .models import AnalyticsResult, LinkedInCookies, utc_now_iso

log = logging.getLogger(__name__)

DEFAULT_COOKIE_PATH = './data/session_cookies.json'


async def _run_in_session(scrape, cookies: LinkedInCookies, headless: bool, session_factory):
    session = await session_factory(headless)
    try:
        await inject_cookies(session.context, cookies)
        return await scrape(session.page)
    finally:
        await session.close()


def _describe(exc: BaseException) -> str:
    return str(exc) or exc.__class__.__name__


async def scrape_linkedin_analytics(
    cookie_path=DEFAULT_COOKIE_PATH,
    headless: bool = True,
    session_factory=create_browser_session,
) -> AnalyticsResult:
    """Scrape content, audience and demographic analytics concurrently.

    Args:
        cookie_path: Path to the session cookie file.
        headless: Set to False to watch the browsers.
        session_factory: Coroutine function taking `headless` and returning
            a BrowserSession.

    Raises:
        CookieFileError: If the cookie file can't be loaded. Nothing is
            launched in that case.
    """
    cookies = load_cookies(cookie_path)

    scrapers = {
        'content': scrape_content_analytics,
        'audience': scrape_audience_analytics,
        'demographics': scrape_demographic_analytics,
    }

    log.info('Launching %d parallel browser sessions...', len(scrapers))
    outcomes = await asyncio.gather(
        *(_run_in_session(scrape, cookies, headless, session_factory) for scrape in scrapers.values()),
        return_exceptions=True,
    )

    values = {}
    errors = []
    for name, outcome in zip(scrapers, outcomes):
        if isinstance(outcome, BaseException):
            log.warning('%s analytics failed: %s', name.capitalize(), _describe(outcome))
            errors.append(f'{name}: {_describe(outcome)}')
            values[name] = None
        else:
            values[name] = outcome

    return AnalyticsResult(
        content=values['content'],
        audience=values['audience'],
        demographics=values['demographics'],
        scraped_at=utc_now_iso(),
        errors=tuple(errors),
    )
