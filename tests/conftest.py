"""Shared test fixtures and fake Playwright objects.

Nothing here launches a browser. The fakes implement just the parts of the
Playwright async API that the scraper calls.
"""

import json
from unittest.mock import AsyncMock

import pytest
from playwright.async_api import TimeoutError as PlaywrightTimeout

from linkedin_scraper.page_helpers import CHART_POINT_SELECTOR, PARAGRAPH_SELECTOR

FEED_URL = 'https://www.linkedin.com/feed/'


class FakeResponse:
    status = 200


class FakePage:
    """Page whose URL, labels and text are set up front.

    Args:
        redirects: URL substring -> URL the navigation ends on instead.
        chart_labels: URL substring -> aria-labels rendered on that page.
        paragraphs: textContent of paragraph elements.
        body: innerText of <body>.
        chart_renders: If False, waiting for the chart times out.
        main_renders: If False, waiting for a selector times out.
        login_lands_on: URL the page ends on after a login attempt. None
            means the login never completes.
    """

    def __init__(
        self,
        redirects=None,
        chart_labels=None,
        paragraphs=None,
        body='',
        chart_renders=True,
        main_renders=True,
        login_lands_on=None,
        goto_response=FakeResponse(),
    ):
        self.url = 'about:blank'
        self.redirects = redirects or {}
        self.chart_labels = chart_labels or {}
        self.paragraphs = paragraphs or []
        self.body = body
        self.chart_renders = chart_renders
        self.main_renders = main_renders
        self.login_lands_on = login_lands_on
        self.goto_response = goto_response
        self.gotos = []
        self.filled = {}
        self.clicked = []
        self.settle_waits = []
        self.closed = False

    async def goto(self, url, **kwargs):
        self.gotos.append(url)
        self.url = url
        for marker, target in self.redirects.items():
            if marker in url:
                self.url = target
                break
        return self.goto_response

    async def wait_for_function(self, script, timeout=None):
        if not self.chart_renders:
            raise PlaywrightTimeout(f'Timeout {timeout}ms exceeded.')

    async def wait_for_selector(self, selector, timeout=None):
        if not self.main_renders:
            raise PlaywrightTimeout(f'Timeout {timeout}ms exceeded.')

    async def wait_for_url(self, pattern, timeout=None):
        if self.login_lands_on is not None:
            self.url = self.login_lands_on
        if '/feed' not in self.url:
            raise PlaywrightTimeout(f'Timeout {timeout}ms exceeded.')

    async def wait_for_timeout(self, ms):
        self.settle_waits.append(ms)

    async def fill(self, selector, value):
        self.filled[selector] = value

    async def click(self, selector):
        self.clicked.append(selector)

    async def eval_on_selector_all(self, selector, script):
        if selector == CHART_POINT_SELECTOR:
            for marker, labels in self.chart_labels.items():
                if marker in self.url:
                    return list(labels)
            return []
        if selector == PARAGRAPH_SELECTOR:
            return list(self.paragraphs)
        return []

    async def inner_text(self, selector):
        return self.body

    async def close(self):
        self.closed = True


class FakeContext:
    """Browser context with an in-memory cookie jar."""

    def __init__(self):
        self.jar = []
        self.extra_headers = None
        self.cleared = False

    async def add_cookies(self, cookies):
        self.jar.extend(cookies)

    async def set_extra_http_headers(self, headers):
        self.extra_headers = dict(headers)

    async def clear_cookies(self):
        self.cleared = True
        self.jar = []

    async def cookies(self):
        return list(self.jar)

    async def close(self):
        pass


class FakeSession:
    """Stands in for BrowserSession."""

    def __init__(self, page, headless=True):
        self.page = page
        self.context = FakeContext()
        self.headless = headless
        self.close_calls = 0

    @property
    def closed(self):
        return self.close_calls > 0

    async def close(self):
        self.close_calls += 1


class FakeSessionFactory:
    """Hands out FakeSessions, one queued page per call.

    When the queue is empty a page is built with `default_page()`.
    """

    def __init__(self, *pages, default_page=FakePage):
        self.pages = list(pages)
        self.default_page = default_page
        self.sessions = []

    @property
    def headless_calls(self):
        return [s.headless for s in self.sessions]

    async def __call__(self, headless=True):
        page = self.pages.pop(0) if self.pages else self.default_page()
        session = FakeSession(page, headless=headless)
        self.sessions.append(session)
        return session


@pytest.fixture(autouse=True)
def no_human_delay(monkeypatch):
    """Skip the randomised pauses in the page scrapers."""
    for module in ('content', 'audience', 'demographics'):
        monkeypatch.setattr(f'linkedin_scraper.{module}.human_delay', AsyncMock())


@pytest.fixture
def cookie_file(tmp_path):
    """A simple-format cookie file with li_at and a quoted JSESSIONID."""
    path = tmp_path / 'session_cookies.json'
    path.write_text(json.dumps({'li_at': 'AQE_test_token', 'JSESSIONID': '"ajax:123456"'}))
    return path


@pytest.fixture
def playwright_cookie_list():
    """Cookie list in the shape Playwright's context.cookies() returns."""
    return [
        {
            'name': 'lang',
            'value': 'v=2&lang=en-us',
            'domain': '.linkedin.com',
            'path': '/',
            'expires': -1,
            'httpOnly': False,
            'secure': True,
            'sameSite': 'None',
        },
        {
            'name': 'JSESSIONID',
            'value': '"ajax:9091792520626038571"',
            'domain': '.www.linkedin.com',
            'path': '/',
            'expires': 1779497090,
            'httpOnly': False,
            'secure': True,
            'sameSite': 'None',
        },
        {
            'name': 'li_at',
            'value': 'AQE_token_from_playwright',
            'domain': '.linkedin.com',
            'path': '/',
            'expires': 1779497090,
            'httpOnly': True,
            'secure': True,
            'sameSite': 'None',
        },
        {
            'name': 'li_rm',
            'value': 'some_rm',
            'domain': '.linkedin.com',
            'path': '/',
            'expires': 1779497090,
            'httpOnly': True,
            'secure': True,
            'sameSite': 'None',
        },
    ]
