"""Scraper for LinkedIn Follower Demographic Analytics.

The page renders every breakdown as readable text, so the rendered body text
is split into lines and parsed section by section.
"""

import logging

from playwright.async_api import Page

from .browser import human_delay
from .models import DemographicAnalytics
from .page_helpers import body_text, open_analytics_page, wait_for_main
from .parsing import parse_demographic_text

log = logging.getLogger(__name__)

DEMOGRAPHIC_ANALYTICS_URL = (
    'https://www.linkedin.com/analytics/demographic-detail/'
    'urn:li:fsd_profile:profile?metricType=MEMBER_FOLLOWERS'
)


async def scrape_demographic_analytics(page: Page) -> DemographicAnalytics:
    """Scrape industries, job titles, locations and seniorities."""
    await open_analytics_page(page, DEMOGRAPHIC_ANALYTICS_URL)
    await wait_for_main(page)
    await human_delay(1500, 2500)

    sections = parse_demographic_text(await body_text(page))
    log.info('Demographic analytics: %s',
             ', '.join(f'{key}={len(entries)}' for key, entries in sections.items()))

    return DemographicAnalytics(
        industries=sections['industries'],
        job_titles=sections['job_titles'],
        locations=sections['locations'],
        # No section header maps to functions.
        functions=[],
        seniorities=sections['seniorities'],
    )
