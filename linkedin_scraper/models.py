"""Data classes used throughout the scraper.

All structured types for session cookies, analytics records and the combined
scrape result live here so they can be imported cleanly by every other module.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string with a trailing Z."""
    return datetime.now(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


@dataclass
class LinkedInCookies:
    """Minimal cookie bundle needed to present an authenticated session."""
    li_at: str                          # Primary session token (required)
    JSESSIONID: Optional[str] = None    # Carries the CSRF token, e.g. '"ajax:123"'
    liap: Optional[str] = None
    li_rm: Optional[str] = None         # Remember-me token

    def as_dict(self) -> dict:
        """Only the fields that are present; absent ones are not defaulted."""
        data = {'li_at': self.li_at}
        for name in ('JSESSIONID', 'liap', 'li_rm'):
            value = getattr(self, name)
            if value is not None:
                data[name] = value
        return data


@dataclass
class DailyMetric:
    """One chart data point."""
    date: str   # ISO date: YYYY-MM-DD
    value: int


@dataclass
class DemographicEntry:
    """One row of a demographic breakdown."""
    label: str
    count: int = 0          # Not exposed by the page; percentage is authoritative
    percentage: float = 0.0


@dataclass
class ContentAnalytics:
    """Impressions and engagements for the past 28 days."""
    impressions: list = field(default_factory=list)    # List[DailyMetric]
    engagements: list = field(default_factory=list)    # List[DailyMetric]
    total_impressions: int = 0
    total_engagements: int = 0
    engagement_rate: float = 0.0
    captured_at: str = field(default_factory=utc_now_iso)


@dataclass
class AudienceAnalytics:
    """Follower growth series plus the lifetime follower total."""
    follower_growth: list = field(default_factory=list)  # List[DailyMetric]
    lifetime_follower_count: int = 0
    captured_at: str = field(default_factory=utc_now_iso)


@dataclass
class DemographicAnalytics:
    """Follower demographics, one bucket per section of the demographics page."""
    industries: list = field(default_factory=list)      # List[DemographicEntry]
    job_titles: list = field(default_factory=list)
    locations: list = field(default_factory=list)
    functions: list = field(default_factory=list)       # Never populated, see DESIGN.md
    seniorities: list = field(default_factory=list)
    captured_at: str = field(default_factory=utc_now_iso)


@dataclass(frozen=True)
class AnalyticsResult:
    """Combined output of one scrape cycle.

    A category is None when its extraction failed; `errors` then holds one
    message for it, prefixed with the category name.
    """
    content: Optional[ContentAnalytics]
    audience: Optional[AudienceAnalytics]
    demographics: Optional[DemographicAnalytics]
    scraped_at: str
    errors: tuple = ()

    @property
    def ok(self) -> bool:
        return not self.errors
