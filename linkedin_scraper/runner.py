"""One full analytics cycle: authenticate, scrape, persist, summarise."""

import logging

from .browser import create_browser_session
from .config import AnalyticsSettings
from .login import LinkedInAuthenticator
from .models import AnalyticsResult
from .reporting import generate_summary, save_json_report
from .scanner import scrape_linkedin_analytics

log = logging.getLogger(__name__)


async def run_analytics(
    settings: AnalyticsSettings,
    session_factory=create_browser_session,
) -> AnalyticsResult:
    """Authenticate, then scrape every analytics page and save the result.

    The scrape sessions re-authenticate from the cookie file the login step
    just wrote (or validated), so the login session is closed first.
    """
    authenticator = LinkedInAuthenticator(settings, session_factory=session_factory)
    auth = await authenticator.authenticate()
    log.info('Authenticated via %s', auth.method.value)
    await auth.close()

    log.info('Starting parallel scrape...')
    try:
        result = await scrape_linkedin_analytics(
            settings.cookie_path,
            headless=settings.headless,
            session_factory=session_factory,
        )
    except Exception:
        log.exception('Fatal error during scrape')
        raise

    path = save_json_report(result, settings.output_path)
    log.info('Data saved to %s', path)
    log.info('\n%s', generate_summary(result))
    return result
