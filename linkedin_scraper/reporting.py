"""Result output: JSON document and human-readable summary.

The JSON document keeps the camelCase field names downstream dashboards
read (`totalImpressions`, `followerGrowth`, `jobTitles`, ...).
"""

import json
from pathlib import Path
from typing import Optional

from .models import (
    AnalyticsResult,
    AudienceAnalytics,
    ContentAnalytics,
    DemographicAnalytics,
)


# ---------------------------------------------------------------------------
# JSON
# ---------------------------------------------------------------------------

def _series_to_list(series: list) -> list[dict]:
    return [{'date': m.date, 'value': m.value} for m in series]


def _entries_to_list(entries: list) -> list[dict]:
    return [{'label': e.label, 'count': e.count, 'percentage': e.percentage} for e in entries]


def _content_to_dict(content: Optional[ContentAnalytics]) -> Optional[dict]:
    if content is None:
        return None
    return {
        'impressions': _series_to_list(content.impressions),
        'engagements': _series_to_list(content.engagements),
        'totalImpressions': content.total_impressions,
        'totalEngagements': content.total_engagements,
        'engagementRate': content.engagement_rate,
        'capturedAt': content.captured_at,
    }


def _audience_to_dict(audience: Optional[AudienceAnalytics]) -> Optional[dict]:
    if audience is None:
        return None
    return {
        'followerGrowth': _series_to_list(audience.follower_growth),
        'lifetimeFollowerCount': audience.lifetime_follower_count,
        'capturedAt': audience.captured_at,
    }


def _demographics_to_dict(demographics: Optional[DemographicAnalytics]) -> Optional[dict]:
    if demographics is None:
        return None
    return {
        'industries': _entries_to_list(demographics.industries),
        'jobTitles': _entries_to_list(demographics.job_titles),
        'locations': _entries_to_list(demographics.locations),
        'functions': _entries_to_list(demographics.functions),
        'seniorities': _entries_to_list(demographics.seniorities),
        'capturedAt': demographics.captured_at,
    }


def generate_json_report(result: AnalyticsResult) -> dict:
    """Convert a result to a JSON-serialisable dict."""
    return {
        'content': _content_to_dict(result.content),
        'audience': _audience_to_dict(result.audience),
        'demographics': _demographics_to_dict(result.demographics),
        'scrapedAt': result.scraped_at,
        'errors': list(result.errors),
    }


def save_json_report(result: AnalyticsResult, output_path) -> Path:
    """Write the JSON document, creating parent directories."""
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(generate_json_report(result), indent=2), encoding='utf-8')
    return path


# ---------------------------------------------------------------------------
# Text summary
# ---------------------------------------------------------------------------

def generate_summary(result: AnalyticsResult) -> str:
    """Boxed plain-text summary for the console."""
    lines = [f'+==== LinkedIn Analytics - {result.scraped_at} ====']

    if result.content:
        c = result.content
        lines.append(
            f'|  Content      | Impressions: {c.total_impressions:,} '
            f'| Engagements: {c.total_engagements:,} | Rate: {c.engagement_rate}%'
        )
        lines.append(f'|               | Daily data points: {len(c.impressions)}')
    else:
        lines.append('|  Content      | No data captured')

    if result.audience:
        a = result.audience
        lines.append(
            f'|  Audience     | Lifetime followers: {a.lifetime_follower_count:,} '
            f'| Growth data points: {len(a.follower_growth)}'
        )
    else:
        lines.append('|  Audience     | No data captured')

    if result.demographics:
        d = result.demographics
        lines.append(
            f'|  Demographics | Industries: {len(d.industries)} '
            f'| Job titles: {len(d.job_titles)} | Locations: {len(d.locations)}'
        )
        if d.industries:
            top = d.industries[0]
            lines.append(f'|               | Top industry: {top.label} ({top.percentage}%)')
    else:
        lines.append('|  Demographics | No data captured')

    if result.errors:
        lines.append('|  Errors:')
        for err in result.errors:
            lines.append(f'|    x {err}')

    lines.append('+' + '=' * 46)
    return '\n'.join(lines)
