"""Exception classes raised by the scraper.

Startup and authentication errors are fatal to a scrape cycle. Extraction
errors are caught per category by the scan orchestrator and recorded in
`AnalyticsResult.errors`.
"""


class LinkedInScraperError(Exception):
    """Base class for all scraper errors."""


class CookieFileError(LinkedInScraperError, ValueError):
    """The cookie file is missing, unreadable or lacks the session token."""


class AuthenticationError(LinkedInScraperError):
    """No authenticated session could be established."""


class ExtractionError(LinkedInScraperError):
    """An analytics page could not be scraped."""


class SessionBlockedError(ExtractionError):
    """LinkedIn redirected an analytics page to a login or checkpoint wall."""

    def __init__(self, url: str = ''):
        self.url = url
        super().__init__('LinkedIn blocked the session. Please refresh your li_at cookie.')
