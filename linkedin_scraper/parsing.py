"""Parsers for text pulled out of rendered LinkedIn analytics pages.

Everything here works on plain strings, so it can be tested without a
browser. The page modules fetch the strings and hand them over.
"""

import re
from datetime import datetime
from typing import Iterable, Optional

from .models import DailyMetric, DemographicEntry


# ---------------------------------------------------------------------------
# Chart accessibility labels
# ---------------------------------------------------------------------------

# Highcharts renders each data point as <path role="img" aria-label="...">:
#   "3.  Wednesday, Feb 18, 2026, Impressions, 9228, increased by 659%, previous day"
CHART_LABEL_RE = re.compile(r'^\d+\.\s+\w+,\s+(\w+ \d+, \d{4}),\s+[^,]+,\s+([\d,]+)')

_CHART_DATE_FORMATS = ('%b %d, %Y', '%B %d, %Y')


def parse_chart_date(date_str: str) -> Optional[str]:
    """Parse "Feb 18, 2026" (or "February 18, 2026") into "2026-02-18"."""
    for fmt in _CHART_DATE_FORMATS:
        try:
            return datetime.strptime(date_str.strip(), fmt).date().isoformat()
        except ValueError:
            continue
    return None


def parse_formatted_int(text: str) -> int:
    """Parse a formatted integer such as 1,746."""
    return int(text.replace(',', ''))


def parse_chart_label(label: str) -> Optional[DailyMetric]:
    """Turn one chart aria-label into a DailyMetric, or None if it doesn't fit."""
    match = CHART_LABEL_RE.match(label)
    if not match:
        return None

    date = parse_chart_date(match.group(1))
    if date is None:
        return None

    return DailyMetric(date=date, value=parse_formatted_int(match.group(2)))


def parse_metric_series(labels: Iterable[str], metric_name: str) -> list[DailyMetric]:
    """Data points for labels that name `metric_name` verbatim."""
    series = []
    for label in labels:
        if not label or metric_name not in label:
            continue
        point = parse_chart_label(label)
        if point is not None:
            series.append(point)
    return series


def parse_follower_series(labels: Iterable[str]) -> list[DailyMetric]:
    """Data points for labels mentioning followers (e.g. "New followers")."""
    series = []
    for label in labels:
        if not label or 'followers' not in label.lower():
            continue
        point = parse_chart_label(label)
        if point is not None:
            series.append(point)
    return series


def total(series: Iterable[DailyMetric]) -> int:
    return sum(point.value for point in series)


def engagement_rate(total_engagements: int, total_impressions: int) -> float:
    """Engagements per impression as a percentage, rounded to 2 decimals."""
    if total_impressions <= 0:
        return 0.0
    return round(total_engagements / total_impressions * 100, 2)


# ---------------------------------------------------------------------------
# Lifetime follower count
# ---------------------------------------------------------------------------

_FORMATTED_INT_RE = re.compile(r'^[\d,]+$')


def largest_formatted_number(texts: Iterable[Optional[str]]) -> int:
    """Largest text that is purely a formatted integer, e.g. "1,746".

    The lifetime follower count is the most prominent standalone number on
    the audience page but has no distinguishing markup.
    """
    largest = 0
    for text in texts:
        stripped = (text or '').strip()
        if not _FORMATTED_INT_RE.match(stripped):
            continue
        digits = stripped.replace(',', '')
        if not digits:
            continue
        largest = max(largest, int(digits))
    return largest


# ---------------------------------------------------------------------------
# Demographics
# ---------------------------------------------------------------------------

# Result bucket -> lowercase substring identifying its section header.
SECTION_HEADERS = {
    'job_titles': 'job title',
    'locations': 'location',
    'industries': 'industr',
    'seniorities': 'seniorit',
}

# A line starting with one of these ends the current section.
STOP_KEYWORDS = ('company size', 'function', 'demographics of')

_PERCENTAGE_RE = re.compile(r'^(\d+(?:\.\d+)?|\.\d+)%$')


def match_section(line: str) -> Optional[str]:
    lower = line.lower()
    for key, keyword in SECTION_HEADERS.items():
        if keyword in lower:
            return key
    return None


def is_stop_line(line: str) -> bool:
    return line.lower().startswith(STOP_KEYWORDS)


def parse_demographic_text(text: str) -> dict[str, list[DemographicEntry]]:
    """Split the page's innerText into demographic buckets.

    The page renders as:

        Job title
        Software Engineer
        19.2%
        ...
        Location
        Greater Malmo Metropolitan Area
        29.1%
        ...
        Company size        <- not tracked, closes the section

    Inside a section each label line must be followed directly by a
    percentage line. Any other line is skipped on its own.
    """
    lines = [line.strip() for line in text.splitlines()]
    lines = [line for line in lines if line]

    sections = {key: [] for key in SECTION_HEADERS}
    current = None
    i = 0
    while i < len(lines):
        line = lines[i]

        section = match_section(line)
        if section is not None:
            current = section
            i += 1
            continue

        if current is not None and is_stop_line(line):
            current = None
            i += 1
            continue

        if current is not None and i + 1 < len(lines):
            pct = _PERCENTAGE_RE.match(lines[i + 1])
            if pct:
                sections[current].append(
                    DemographicEntry(label=line, count=0, percentage=float(pct.group(1)))
                )
                i += 2
                continue

        i += 1

    return sections
