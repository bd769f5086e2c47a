"""Tests for the authentication fallback chain."""

import json
from unittest.mock import AsyncMock

import pytest

from linkedin_scraper import (
    AnalyticsSettings,
    AuthenticationError,
    AuthState,
    LinkedInAuthenticator,
    authenticate,
    load_cookies,
)
from linkedin_scraper.login import (
    LINKEDIN_FEED_URL,
    LINKEDIN_LOGIN_URL,
    PASSWORD_SELECTOR,
    SUBMIT_SELECTOR,
    USERNAME_SELECTOR,
    is_challenge_url,
    validate_session,
)
from tests.conftest import FEED_URL, FakePage, FakeSessionFactory

CHECKPOINT_URL = 'https://www.linkedin.com/checkpoint/challenge/AgFz123'
LOGIN_ERROR_URL = 'https://www.linkedin.com/uas/login-submit'


def _settings(tmp_path, **overrides):
    values = {
        'cookie_path': str(tmp_path / 'session_cookies.json'),
        'login_timeout_seconds': 1,
    }
    values.update(overrides)
    return AnalyticsSettings(**values)


def _expired_cookie_page():
    """Feed navigation bounces to the login wall."""
    return FakePage(redirects={'/feed': f'{LINKEDIN_LOGIN_URL}?session_redirect=%2Ffeed'})


@pytest.fixture
def saver():
    return AsyncMock(return_value=3)


class TestValidateSession:

    @pytest.mark.asyncio
    async def test_feed_with_main_landmark(self):
        page = FakePage()
        assert await validate_session(page) is True
        assert page.gotos == [LINKEDIN_FEED_URL]

    @pytest.mark.asyncio
    async def test_redirected_to_login(self):
        assert await validate_session(_expired_cookie_page()) is False

    @pytest.mark.asyncio
    async def test_landmark_never_renders(self):
        assert await validate_session(FakePage(main_renders=False)) is False

    @pytest.mark.asyncio
    async def test_no_response(self):
        assert await validate_session(FakePage(goto_response=None)) is False


class TestIsChallengeUrl:

    def test_checkpoint(self):
        assert is_challenge_url(CHECKPOINT_URL) is True

    def test_login_error_page(self):
        assert is_challenge_url(LOGIN_ERROR_URL) is False


class TestCookieRestore:

    @pytest.mark.asyncio
    async def test_valid_cookies_authenticate_without_rewrite(self, tmp_path, cookie_file, saver):
        factory = FakeSessionFactory(FakePage())
        settings = _settings(tmp_path, cookie_path=str(cookie_file))

        result = await LinkedInAuthenticator(settings, session_factory=factory, cookie_saver=saver).authenticate()

        assert result.authenticated is True
        assert result.method == AuthState.COOKIE_RESTORE_ATTEMPT
        assert result.history == [
            AuthState.START,
            AuthState.COOKIE_RESTORE_ATTEMPT,
            AuthState.AUTHENTICATED,
        ]
        assert factory.headless_calls == [True]
        session = factory.sessions[0]
        assert result.page is session.page
        assert not session.closed
        assert {c['name'] for c in session.context.jar} == {'li_at', 'JSESSIONID'}
        saver.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_result_close_tears_down_session(self, tmp_path, cookie_file, saver):
        factory = FakeSessionFactory(FakePage())
        settings = _settings(tmp_path, cookie_path=str(cookie_file))

        result = await authenticate(settings, session_factory=factory, cookie_saver=saver)
        await result.close()

        assert factory.sessions[0].closed

    @pytest.mark.asyncio
    async def test_rejected_cookies_without_credentials_go_to_manual_login(
        self, tmp_path, cookie_file, saver,
    ):
        factory = FakeSessionFactory(_expired_cookie_page(), FakePage(login_lands_on=FEED_URL))
        settings = _settings(tmp_path, cookie_path=str(cookie_file))
        authenticator = LinkedInAuthenticator(settings, session_factory=factory, cookie_saver=saver)

        result = await authenticator.authenticate()

        assert result.method == AuthState.INTERACTIVE_MANUAL_LOGIN
        assert AuthState.COOKIES_REJECTED in result.history
        assert AuthState.LOGIN_FAILED not in result.history
        assert AuthState.CHALLENGE_DETECTED not in result.history
        assert AuthState.CREDENTIAL_LOGIN_ATTEMPT not in result.history
        assert authenticator.state == AuthState.AUTHENTICATED

        restore_session, manual_session = factory.sessions
        assert restore_session.closed
        assert restore_session.context.cleared
        assert factory.headless_calls == [True, False]
        assert manual_session.page.gotos == [LINKEDIN_LOGIN_URL]
        saver.assert_awaited_once_with(manual_session.context, settings.cookie_path)

    @pytest.mark.asyncio
    async def test_rejected_cookies_with_credentials_go_to_credential_login(
        self, tmp_path, cookie_file, saver,
    ):
        factory = FakeSessionFactory(_expired_cookie_page(), FakePage(login_lands_on=FEED_URL))
        settings = _settings(tmp_path, cookie_path=str(cookie_file), username='me@example.com', password='pw')

        result = await authenticate(settings, session_factory=factory, cookie_saver=saver)

        assert result.method == AuthState.CREDENTIAL_LOGIN_ATTEMPT
        assert result.history.index(AuthState.COOKIES_REJECTED) < result.history.index(
            AuthState.CREDENTIAL_LOGIN_ATTEMPT
        )


class TestCredentialLogin:

    @pytest.mark.asyncio
    async def test_missing_cookie_file_logs_in_with_credentials(self, tmp_path, saver):
        factory = FakeSessionFactory(FakePage(login_lands_on=FEED_URL))
        settings = _settings(tmp_path, username='me@example.com', password='secret')

        result = await authenticate(settings, session_factory=factory, cookie_saver=saver)

        assert result.method == AuthState.CREDENTIAL_LOGIN_ATTEMPT
        assert AuthState.COOKIE_RESTORE_ATTEMPT not in result.history
        page = factory.sessions[0].page
        assert page.gotos == [LINKEDIN_LOGIN_URL]
        assert page.filled == {USERNAME_SELECTOR: 'me@example.com', PASSWORD_SELECTOR: 'secret'}
        assert page.clicked == [SUBMIT_SELECTOR]
        assert page.settle_waits == [2000]
        saver.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_invalid_cookie_file_falls_through(self, tmp_path, saver):
        cookie_path = tmp_path / 'session_cookies.json'
        cookie_path.write_text('not json')
        factory = FakeSessionFactory(FakePage(login_lands_on=FEED_URL))
        settings = _settings(tmp_path, username='me', password='pw')

        result = await authenticate(settings, session_factory=factory, cookie_saver=saver)

        assert result.method == AuthState.CREDENTIAL_LOGIN_ATTEMPT

    @pytest.mark.asyncio
    async def test_undecodable_cookie_file_falls_through(self, tmp_path, saver):
        (tmp_path / 'session_cookies.json').write_bytes(b'\xff\xfe\x00garbage')
        factory = FakeSessionFactory(FakePage(login_lands_on=FEED_URL))
        settings = _settings(tmp_path, username='me', password='pw')

        result = await authenticate(settings, session_factory=factory, cookie_saver=saver)

        assert result.method == AuthState.CREDENTIAL_LOGIN_ATTEMPT
        assert AuthState.COOKIE_RESTORE_ATTEMPT not in result.history

    @pytest.mark.asyncio
    async def test_bad_credentials_fail(self, tmp_path, saver):
        factory = FakeSessionFactory(FakePage(login_lands_on=LOGIN_ERROR_URL))
        settings = _settings(tmp_path, username='me', password='wrong')
        authenticator = LinkedInAuthenticator(settings, session_factory=factory, cookie_saver=saver)

        with pytest.raises(AuthenticationError, match='Login failed'):
            await authenticator.authenticate()

        assert authenticator.state == AuthState.LOGIN_FAILED
        assert AuthState.CHALLENGE_DETECTED not in authenticator.history
        assert factory.sessions[0].closed
        assert len(factory.sessions) == 1
        saver.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_challenge_relaunches_headed_and_resubmits(self, tmp_path, saver):
        factory = FakeSessionFactory(
            FakePage(login_lands_on=CHECKPOINT_URL),
            FakePage(login_lands_on=FEED_URL),
        )
        settings = _settings(tmp_path, username='me', password='pw')

        result = await authenticate(settings, session_factory=factory, cookie_saver=saver)

        assert result.method == AuthState.INTERACTIVE_CHALLENGE_RESOLUTION
        assert result.history == [
            AuthState.START,
            AuthState.CREDENTIAL_LOGIN_ATTEMPT,
            AuthState.CHALLENGE_DETECTED,
            AuthState.INTERACTIVE_CHALLENGE_RESOLUTION,
            AuthState.AUTHENTICATED,
        ]
        first, second = factory.sessions
        assert first.closed
        assert factory.headless_calls == [True, False]
        assert second.page.filled == {USERNAME_SELECTOR: 'me', PASSWORD_SELECTOR: 'pw'}
        saver.assert_awaited_once_with(second.context, settings.cookie_path)

    @pytest.mark.asyncio
    async def test_challenge_timeout_is_fatal(self, tmp_path, saver):
        factory = FakeSessionFactory(
            FakePage(login_lands_on=CHECKPOINT_URL),
            FakePage(login_lands_on=CHECKPOINT_URL),
        )
        settings = _settings(tmp_path, username='me', password='pw', login_timeout_seconds=30)
        authenticator = LinkedInAuthenticator(settings, session_factory=factory, cookie_saver=saver)

        with pytest.raises(AuthenticationError, match='Security challenge timeout after 30s'):
            await authenticator.authenticate()

        assert authenticator.state == AuthState.TIMEOUT
        assert all(s.closed for s in factory.sessions)
        saver.assert_not_awaited()


class TestManualLogin:

    @pytest.mark.asyncio
    async def test_no_cookies_no_credentials(self, tmp_path, saver):
        factory = FakeSessionFactory(FakePage(login_lands_on=FEED_URL))
        settings = _settings(tmp_path)

        result = await authenticate(settings, session_factory=factory, cookie_saver=saver)

        assert result.history == [
            AuthState.START,
            AuthState.INTERACTIVE_MANUAL_LOGIN,
            AuthState.AUTHENTICATED,
        ]
        assert factory.headless_calls == [False]
        # Nothing is typed in for the user.
        assert factory.sessions[0].page.filled == {}

    @pytest.mark.asyncio
    async def test_manual_login_timeout_is_fatal(self, tmp_path, saver):
        factory = FakeSessionFactory(FakePage())
        settings = _settings(tmp_path, login_timeout_seconds=5)
        authenticator = LinkedInAuthenticator(settings, session_factory=factory, cookie_saver=saver)

        with pytest.raises(AuthenticationError, match='Login timeout after 5s'):
            await authenticator.authenticate()

        assert authenticator.state == AuthState.TIMEOUT
        assert factory.sessions[0].closed

    @pytest.mark.asyncio
    async def test_saves_cookie_jar_for_next_run(self, tmp_path, playwright_cookie_list):
        factory = FakeSessionFactory(FakePage(login_lands_on=FEED_URL))
        settings = _settings(tmp_path)

        async def _login_and_fill_jar(headless=True):
            session = await factory(headless)
            await session.context.add_cookies(playwright_cookie_list)
            return session

        await authenticate(settings, session_factory=_login_and_fill_jar)

        saved = json.loads((tmp_path / 'session_cookies.json').read_text())
        assert saved == playwright_cookie_list
        assert load_cookies(settings.cookie_path).li_at == 'AQE_token_from_playwright'
