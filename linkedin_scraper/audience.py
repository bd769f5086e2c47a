"""Scraper for LinkedIn Creator Audience Analytics.

Follower growth comes from the chart's accessibility labels
("N.  Weekday, Month Day, Year, New followers, Value[, ...]"). The lifetime
follower count is the largest paragraph whose text is only a formatted
number. Any bigger standalone number on the page would be picked instead;
switch to a structural selector if the markup ever exposes one.
"""

import logging

from playwright.async_api import Page

from .browser import human_delay
from .models import AudienceAnalytics
from .page_helpers import chart_labels, open_analytics_page, paragraph_texts, wait_for_chart
from .parsing import largest_formatted_number, parse_follower_series

log = logging.getLogger(__name__)

AUDIENCE_ANALYTICS_URL = (
    'https://www.linkedin.com/analytics/creator/audience/'
    '?lineChartType=daily&timeRange=past_28_days'
)


async def scrape_audience_analytics(page: Page) -> AudienceAnalytics:
    """Scrape follower growth plus the lifetime follower count."""
    await open_analytics_page(page, AUDIENCE_ANALYTICS_URL)
    await wait_for_chart(page)
    await human_delay(1500, 2500)

    follower_growth = parse_follower_series(await chart_labels(page))
    lifetime = largest_formatted_number(await paragraph_texts(page))
    log.info('Audience analytics: %d growth data points, %d lifetime followers',
             len(follower_growth), lifetime)

    return AudienceAnalytics(
        follower_growth=follower_growth,
        lifetime_follower_count=lifetime,
    )
