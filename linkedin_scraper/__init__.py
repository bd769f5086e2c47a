"""LinkedIn Analytics Scraper - core package.

Re-exports all public symbols so consumers can do:
    from linkedin_scraper import scrape_linkedin_analytics, AnalyticsSettings
"""

# Models
from .models import (  # noqa: F401
    LinkedInCookies,
    DailyMetric,
    DemographicEntry,
    ContentAnalytics,
    AudienceAnalytics,
    DemographicAnalytics,
    AnalyticsResult,
)

# Errors
from .errors import (  # noqa: F401
    LinkedInScraperError,
    CookieFileError,
    AuthenticationError,
    ExtractionError,
    SessionBlockedError,
)

# Config
from .config import AnalyticsSettings  # noqa: F401

# Browser
from .browser import (  # noqa: F401
    BrowserSession,
    create_browser_session,
    human_delay,
    is_blocked,
    is_blocked_url,
)

# Cookies
from .cookies import (  # noqa: F401
    load_cookies,
    extract_csrf_token,
    inject_cookies,
    save_cookies,
    save_cookies_from_context,
)

# Parsing
from .parsing import (  # noqa: F401
    parse_chart_label,
    parse_metric_series,
    parse_follower_series,
    largest_formatted_number,
    parse_demographic_text,
)

# Page scrapers
from .content import scrape_content_analytics  # noqa: F401
from .audience import scrape_audience_analytics  # noqa: F401
from .demographics import scrape_demographic_analytics  # noqa: F401

# Login
from .login import (  # noqa: F401
    AuthState,
    AuthResult,
    LinkedInAuthenticator,
    authenticate,
)

# Scanner
from .scanner import scrape_linkedin_analytics  # noqa: F401

# Reporting
from .reporting import (  # noqa: F401
    generate_json_report,
    generate_summary,
    save_json_report,
)

# Runner
from .runner import run_analytics  # noqa: F401
