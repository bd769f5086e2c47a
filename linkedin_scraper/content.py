"""Scraper for LinkedIn Creator Content Analytics.

Navigates to each metric URL directly and reads the data points from the
chart's accessibility labels. The metric toggle on the page does not
re-render the chart under automation, so each metric gets its own visit.
"""

import logging

from playwright.async_api import Page

from .browser import human_delay
from .models import ContentAnalytics
from .page_helpers import chart_labels, open_analytics_page, wait_for_chart
from .parsing import engagement_rate, parse_metric_series, total

log = logging.getLogger(__name__)

CONTENT_ANALYTICS_URL = (
    'https://www.linkedin.com/analytics/creator/content/'
    '?lineChartType=daily&timeRange=past_28_days'
)


async def _scrape_metric(page: Page, metric_type: str, metric_name: str) -> list:
    await open_analytics_page(page, f'{CONTENT_ANALYTICS_URL}&metricType={metric_type}')
    await wait_for_chart(page)
    await human_delay(1500, 2500)

    series = parse_metric_series(await chart_labels(page), metric_name)
    log.info('Content analytics: %d %s data points', len(series), metric_name.lower())
    return series


async def scrape_content_analytics(page: Page) -> ContentAnalytics:
    """Scrape impressions and engagements (past 28 days, daily)."""
    impressions = await _scrape_metric(page, 'IMPRESSIONS', 'Impressions')
    engagements = await _scrape_metric(page, 'ENGAGEMENTS', 'Engagements')

    total_impressions = total(impressions)
    total_engagements = total(engagements)

    return ContentAnalytics(
        impressions=impressions,
        engagements=engagements,
        total_impressions=total_impressions,
        total_engagements=total_engagements,
        engagement_rate=engagement_rate(total_engagements, total_impressions),
    )
