"""Login handling: get an authenticated LinkedIn browser session.

Three paths are tried in order, cheapest first:

  1. Restore the saved cookie bundle and validate it against the feed page.
  2. Automated credential login, relaunching headed if LinkedIn shows a
     security challenge so a person can clear it.
  3. Manual login in a headed browser when no credentials are configured.

After a login (paths 2 and 3) the full cookie jar is written back to the
cookie file so the next run can take path 1.
"""

import enum
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable

from playwright.async_api import Error as PlaywrightError, Page, TimeoutError as PlaywrightTimeout

from .browser import BrowserSession, create_browser_session, is_blocked_url
from .config import AnalyticsSettings
from .cookies import inject_cookies, load_cookies, save_cookies_from_context
from .errors import AuthenticationError, CookieFileError
from .models import LinkedInCookies

log = logging.getLogger(__name__)

LINKEDIN_LOGIN_URL = 'https://www.linkedin.com/login'
LINKEDIN_FEED_URL = 'https://www.linkedin.com/feed/'
FEED_URL_GLOB = '**/feed/**'

USERNAME_SELECTOR = '#username'
PASSWORD_SELECTOR = '#password'
SUBMIT_SELECTOR = '[data-litms-control-urn="login-submit"]'
MAIN_LANDMARK_SELECTOR = '[role="main"]'

VALIDATE_NAVIGATION_TIMEOUT_MS = 15_000
VALIDATE_LANDMARK_TIMEOUT_MS = 5_000
POST_LOGIN_SETTLE_MS = 2_000

CHALLENGE_URL_MARKERS = ('checkpoint', 'challenge')

SessionFactory = Callable[[bool], Awaitable[BrowserSession]]


class AuthState(str, enum.Enum):
    START = 'start'
    COOKIE_RESTORE_ATTEMPT = 'cookie_restore_attempt'
    COOKIES_REJECTED = 'cookies_rejected'
    CREDENTIAL_LOGIN_ATTEMPT = 'credential_login_attempt'
    CHALLENGE_DETECTED = 'challenge_detected'
    INTERACTIVE_CHALLENGE_RESOLUTION = 'interactive_challenge_resolution'
    INTERACTIVE_MANUAL_LOGIN = 'interactive_manual_login'
    LOGIN_FAILED = 'login_failed'
    TIMEOUT = 'timeout'
    AUTHENTICATED = 'authenticated'


@dataclass
class AuthResult:
    """An authenticated session. The caller owns it and must close it."""
    session: BrowserSession
    method: AuthState               # State that produced the session
    history: list = field(default_factory=list)
    authenticated: bool = True

    @property
    def page(self) -> Page:
        return self.session.page

    async def close(self) -> None:
        await self.session.close()


def is_challenge_url(url: str) -> bool:
    return any(marker in url for marker in CHALLENGE_URL_MARKERS)


async def validate_session(page: Page) -> bool:
    """True if the page can open the feed and render its main landmark."""
    try:
        response = await page.goto(
            LINKEDIN_FEED_URL,
            wait_until='domcontentloaded',
            timeout=VALIDATE_NAVIGATION_TIMEOUT_MS,
        )
    except PlaywrightError as exc:
        log.debug('Feed navigation failed: %s', exc)
        return False

    if response is None:
        return False

    final_url = page.url
    if '/feed' not in final_url or is_blocked_url(final_url):
        log.debug('Session redirected to %s', final_url)
        return False

    try:
        await page.wait_for_selector(MAIN_LANDMARK_SELECTOR, timeout=VALIDATE_LANDMARK_TIMEOUT_MS)
    except PlaywrightError:
        return False
    return True


class LinkedInAuthenticator:
    """State machine establishing an authenticated session.

    Args:
        settings: Run settings (cookie path, credentials, timeouts).
        session_factory: Coroutine function taking `headless` and returning a
            new BrowserSession.
        cookie_loader: Callable reading the cookie bundle from a path.
        cookie_saver: Coroutine function persisting a context's cookie jar.
    """

    def __init__(
        self,
        settings: AnalyticsSettings,
        session_factory: SessionFactory = create_browser_session,
        cookie_loader: Callable[[str], LinkedInCookies] = load_cookies,
        cookie_saver=save_cookies_from_context,
    ):
        self.settings = settings
        self.session_factory = session_factory
        self.cookie_loader = cookie_loader
        self.cookie_saver = cookie_saver
        self.history: list[AuthState] = []
        self.state = AuthState.START
        self._session = None

    # -- state bookkeeping --------------------------------------------------

    def _enter(self, state: AuthState) -> None:
        self.state = state
        self.history.append(state)
        log.debug('Auth state -> %s', state.value)

    async def _open_session(self, headless: bool) -> BrowserSession:
        """Close whatever session is open and launch a new one."""
        await self._close_session()
        self._session = await self.session_factory(headless)
        return self._session

    async def _close_session(self) -> None:
        if self._session is not None:
            await self._session.close()
            self._session = None

    async def _fail(self, state: AuthState, message: str) -> None:
        self._enter(state)
        await self._close_session()
        raise AuthenticationError(message)

    async def _finish(self, method: AuthState, save: bool = True) -> AuthResult:
        session = self._session
        if save:
            await session.page.wait_for_timeout(POST_LOGIN_SETTLE_MS)
            await self.cookie_saver(session.context, self.settings.cookie_path)
        self._enter(AuthState.AUTHENTICATED)
        self._session = None
        return AuthResult(session=session, method=method, history=list(self.history))

    # -- entry point ----------------------------------------------------------

    async def authenticate(self) -> AuthResult:
        """Run the fallback chain until a session is authenticated.

        Raises:
            AuthenticationError: Credential login failed, or a challenge or
                manual login was not completed in time.
        """
        self.history = []
        self._enter(AuthState.START)
        try:
            cookies = self._load_saved_cookies()
            if cookies is not None:
                result = await self._restore_session(cookies)
                if result is not None:
                    return result

            if self.settings.has_credentials:
                return await self._login_with_credentials()

            return await self._login_manually()
        except BaseException:
            await self._close_session()
            raise

    # -- path 1: saved cookies ----------------------------------------------

    def _load_saved_cookies(self):
        try:
            return self.cookie_loader(self.settings.cookie_path)
        except CookieFileError as exc:
            log.info('No usable saved cookies: %s', str(exc).splitlines()[0])
            return None

    async def _restore_session(self, cookies: LinkedInCookies):
        self._enter(AuthState.COOKIE_RESTORE_ATTEMPT)
        log.info('Found saved cookies, attempting to restore session...')

        session = await self._open_session(self.settings.headless)
        await inject_cookies(session.context, cookies)

        if await validate_session(session.page):
            log.info('Session restored successfully')
            return await self._finish(AuthState.COOKIE_RESTORE_ATTEMPT, save=False)

        self._enter(AuthState.COOKIES_REJECTED)
        log.warning('Saved cookies are expired or invalid')
        await session.context.clear_cookies()
        await self._close_session()
        return None

    # -- path 2: credentials ------------------------------------------------

    async def _submit_credentials(self, page: Page) -> None:
        await page.goto(LINKEDIN_LOGIN_URL, wait_until='domcontentloaded')
        await page.fill(USERNAME_SELECTOR, self.settings.username)
        await page.fill(PASSWORD_SELECTOR, self.settings.password)
        await page.click(SUBMIT_SELECTOR)

    async def _login_with_credentials(self) -> AuthResult:
        self._enter(AuthState.CREDENTIAL_LOGIN_ATTEMPT)
        log.info('Logging in with credentials...')

        session = await self._open_session(self.settings.headless)
        await self._submit_credentials(session.page)

        try:
            await session.page.wait_for_url(FEED_URL_GLOB, timeout=self.settings.login_timeout_ms)
        except PlaywrightTimeout:
            current_url = session.page.url
            if is_challenge_url(current_url):
                self._enter(AuthState.CHALLENGE_DETECTED)
                log.warning('Security challenge detected - relaunching headed for challenge...')
                return await self._resolve_challenge()
            await self._fail(
                AuthState.LOGIN_FAILED,
                'Login failed. Check your credentials or increase LINKEDIN_LOGIN_TIMEOUT_SECONDS.',
            )

        log.info('Successfully logged in as %s', self.settings.username)
        return await self._finish(AuthState.CREDENTIAL_LOGIN_ATTEMPT)

    async def _resolve_challenge(self) -> AuthResult:
        self._enter(AuthState.INTERACTIVE_CHALLENGE_RESOLUTION)

        session = await self._open_session(headless=False)
        await self._submit_credentials(session.page)
        log.warning('Please complete the security challenge in the browser window.')

        try:
            await session.page.wait_for_url(FEED_URL_GLOB, timeout=self.settings.login_timeout_ms)
        except PlaywrightTimeout:
            await self._fail(
                AuthState.TIMEOUT,
                f'Security challenge timeout after {self.settings.login_timeout_seconds}s. '
                'Please try again.',
            )

        return await self._finish(AuthState.INTERACTIVE_CHALLENGE_RESOLUTION)

    # -- path 3: manual -----------------------------------------------------

    async def _login_manually(self) -> AuthResult:
        self._enter(AuthState.INTERACTIVE_MANUAL_LOGIN)
        log.info('No credentials provided. Opening browser for manual login...')
        log.info('You have %d seconds to complete the login.', self.settings.login_timeout_seconds)

        session = await self._open_session(headless=False)
        await session.page.goto(LINKEDIN_LOGIN_URL, wait_until='domcontentloaded')

        try:
            await session.page.wait_for_url(FEED_URL_GLOB, timeout=self.settings.login_timeout_ms)
        except PlaywrightTimeout:
            await self._fail(
                AuthState.TIMEOUT,
                f'Login timeout after {self.settings.login_timeout_seconds}s. Please try again.',
            )

        log.info('Login detected!')
        return await self._finish(AuthState.INTERACTIVE_MANUAL_LOGIN)


async def authenticate(settings: AnalyticsSettings, **kwargs) -> AuthResult:
    """Convenience wrapper around LinkedInAuthenticator.authenticate()."""
    return await LinkedInAuthenticator(settings, **kwargs).authenticate()
