"""Page interaction helpers: navigation guard, render waits, text retrieval."""

import logging

from playwright.async_api import Page, TimeoutError as PlaywrightTimeout

from .browser import is_blocked
from .errors import SessionBlockedError

log = logging.getLogger(__name__)

RENDER_TIMEOUT_MS = 20_000


# ---------------------------------------------------------------------------
# JS snippets
# ---------------------------------------------------------------------------

CHART_POINT_SELECTOR = '[role="img"][aria-label]'
PARAGRAPH_SELECTOR = 'p, [role="paragraph"]'

_CHART_RENDERED_JS = f'''
() => document.querySelectorAll('{CHART_POINT_SELECTOR}').length > 0
'''

_ARIA_LABELS_JS = '''
els => els.map(el => el.getAttribute('aria-label') || '')
'''

_TEXT_CONTENT_JS = '''
els => els.map(el => el.textContent || '')
'''


# ---------------------------------------------------------------------------
# Public helpers
# ---------------------------------------------------------------------------

async def open_analytics_page(page: Page, url: str) -> None:
    """Navigate to an analytics page and fail fast on a login/checkpoint wall."""
    await page.goto(url, wait_until='domcontentloaded')
    if is_blocked(page):
        raise SessionBlockedError(page.url)


async def wait_for_chart(page: Page, timeout_ms: int = RENDER_TIMEOUT_MS) -> None:
    """Wait for Highcharts accessibility paths. A timeout is not an error."""
    try:
        await page.wait_for_function(_CHART_RENDERED_JS, timeout=timeout_ms)
    except PlaywrightTimeout:
        log.debug('Chart not rendered after %dms on %s - proceeding anyway', timeout_ms, page.url)


async def wait_for_main(page: Page, timeout_ms: int = RENDER_TIMEOUT_MS) -> None:
    """Wait for the <main> landmark. A timeout is not an error."""
    try:
        await page.wait_for_selector('main', timeout=timeout_ms)
    except PlaywrightTimeout:
        log.debug('<main> not rendered after %dms on %s - proceeding anyway', timeout_ms, page.url)


async def chart_labels(page: Page) -> list[str]:
    """aria-label of every chart data point on the page."""
    return await page.eval_on_selector_all(CHART_POINT_SELECTOR, _ARIA_LABELS_JS)


async def paragraph_texts(page: Page) -> list[str]:
    """textContent of every paragraph-like element."""
    return await page.eval_on_selector_all(PARAGRAPH_SELECTOR, _TEXT_CONTENT_JS)


async def body_text(page: Page) -> str:
    """Rendered text of the whole page, one visual line per text line."""
    return await page.inner_text('body')
