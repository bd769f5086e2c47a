#!/usr/bin/env python3
"""
LinkedIn Analytics Scraper
Scrapes LinkedIn creator analytics (content, audience, demographics)
through a logged-in browser session.
Requires: pip install playwright && playwright install chromium

Settings come from LINKEDIN_* environment variables, see
linkedin_scraper/config.py.
"""

import asyncio
import logging
import sys

from playwright.async_api import Error as PlaywrightError
from pydantic import ValidationError

from linkedin_scraper import AnalyticsSettings, LinkedInScraperError, run_analytics

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
logging.basicConfig(
    level=logging.INFO,
    format='[%(levelname)s] %(message)s',
)
log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

def main() -> int:
    """CLI entry point. Returns the process exit status."""
    try:
        settings = AnalyticsSettings.from_env()
    except ValidationError as exc:
        log.error('Invalid settings:\n%s', exc)
        return 1

    print('\nLinkedIn Analytics Scraper')
    print(f'Cookies: {settings.cookie_path}')
    print('-' * 40)

    try:
        result = asyncio.run(run_analytics(settings))
    except (LinkedInScraperError, PlaywrightError) as exc:
        log.error('%s', exc)
        return 1

    return 0 if result.ok else 2


if __name__ == '__main__':
    sys.exit(main())
