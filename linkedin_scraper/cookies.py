"""Session cookie storage: load, inject and save the LinkedIn cookie bundle.

Two on-disk formats are accepted:

Format 1 - Playwright cookie list (written after every successful login):
    [ {"name": "li_at", "value": "AQE...", "domain": ".linkedin.com", ...}, ... ]

Format 2 - Simple object (manual setup):
    {"li_at": "AQE...", "JSESSIONID": "ajax:12345..."}
"""

import json
import logging
import re
from pathlib import Path
from typing import Optional

from playwright.async_api import BrowserContext
from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from .browser import CONTEXT_OPTIONS
from .errors import CookieFileError
from .models import LinkedInCookies

log = logging.getLogger(__name__)

LINKEDIN_DOMAIN = '.linkedin.com'

# Playwright stores session cookies (no expiry) as -1.
SESSION_EXPIRES = -1

_OPTIONAL_COOKIES = ('JSESSIONID', 'liap', 'li_rm')

# Cookies the page scripts must be able to read.
_SCRIPT_READABLE = {'JSESSIONID'}

_QUOTED_RE = re.compile(r'^"(.*)"$', re.DOTALL)


# ---------------------------------------------------------------------------
# File schemas
# ---------------------------------------------------------------------------

class SimpleCookies(BaseModel):
    """Format 2. Unknown keys are ignored."""
    li_at: str = Field(min_length=1)
    JSESSIONID: Optional[str] = None
    liap: Optional[str] = None
    li_rm: Optional[str] = None


class PlaywrightCookie(BaseModel):
    """One entry of format 1."""
    name: str
    value: str
    domain: Optional[str] = None
    path: Optional[str] = None
    expires: Optional[float] = None
    httpOnly: Optional[bool] = None
    secure: Optional[bool] = None
    sameSite: Optional[str] = None


_COOKIE_LIST = TypeAdapter(list[PlaywrightCookie])


def _format_validation_error(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = '.'.join(str(p) for p in err['loc']) or '(root)'
        parts.append(f'{loc}: {err["msg"]}')
    return '; '.join(parts)


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

def _from_cookie_list(parsed: list) -> LinkedInCookies:
    try:
        entries = _COOKIE_LIST.validate_python(parsed)
    except ValidationError as exc:
        raise CookieFileError(f'Cookie file validation failed: {_format_validation_error(exc)}') from exc

    by_name = {entry.name: entry.value for entry in entries}
    li_at = by_name.get('li_at')
    if not li_at:
        found = ', '.join(by_name) or '(none)'
        raise CookieFileError(
            "Cookie file is missing required 'li_at' cookie.\n"
            f'Found cookies: {found}\n'
            'Try running the app again to re-authenticate.'
        )

    cookies = LinkedInCookies(li_at=li_at)
    for name in _OPTIONAL_COOKIES:
        if name in by_name:
            setattr(cookies, name, by_name[name])
    return cookies


def _from_simple_object(parsed) -> LinkedInCookies:
    try:
        simple = SimpleCookies.model_validate(parsed)
    except ValidationError as exc:
        raise CookieFileError(f'Cookie file validation failed: {_format_validation_error(exc)}') from exc
    return LinkedInCookies(
        li_at=simple.li_at,
        JSESSIONID=simple.JSESSIONID,
        liap=simple.liap,
        li_rm=simple.li_rm,
    )


def load_cookies(cookie_path) -> LinkedInCookies:
    """Load LinkedIn session cookies from a JSON file.

    Raises:
        CookieFileError: If the file is missing, is not JSON, or has no
            non-empty `li_at` value.
    """
    resolved = Path(cookie_path).resolve()

    if not resolved.is_file():
        raise CookieFileError(
            f'Cookie file not found: {resolved}\n'
            'Create it with: { "li_at": "YOUR_LI_AT_COOKIE_VALUE" }\n'
            'Find li_at in Chrome DevTools -> Application -> Cookies -> linkedin.com'
        )

    try:
        parsed = json.loads(resolved.read_text(encoding='utf-8'))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise CookieFileError(f'Cookie file is not valid JSON: {resolved}') from exc
    except OSError as exc:
        raise CookieFileError(f'Cookie file could not be read: {resolved} ({exc})') from exc

    if isinstance(parsed, list):
        return _from_cookie_list(parsed)
    return _from_simple_object(parsed)


# ---------------------------------------------------------------------------
# Injection
# ---------------------------------------------------------------------------

def extract_csrf_token(jsessionid: str) -> str:
    """Derive the csrf-token header value from a JSESSIONID cookie.

    LinkedIn stores JSESSIONID as "ajax:<digits>", sometimes wrapped in a
    pair of double quotes. The header wants the unquoted value.
    """
    match = _QUOTED_RE.match(jsessionid)
    if match:
        return match.group(1)
    return jsessionid


def build_cookie_params(cookies: LinkedInCookies) -> list[dict]:
    """Playwright add_cookies() payload for the bundle."""
    params = []
    for name, value in cookies.as_dict().items():
        params.append({
            'name': name,
            'value': value,
            'domain': LINKEDIN_DOMAIN,
            'path': '/',
            'expires': SESSION_EXPIRES,
            'secure': True,
            'httpOnly': name not in _SCRIPT_READABLE,
            'sameSite': 'None',
        })
    return params


async def inject_cookies(context: BrowserContext, cookies: LinkedInCookies) -> None:
    """Add the bundle to the context's cookie jar.

    Also sets the csrf-token header for all subsequent requests when
    JSESSIONID is present.
    """
    await context.add_cookies(build_cookie_params(cookies))

    if cookies.JSESSIONID is not None:
        # Replaces the context-level headers, so the fingerprint ones are resent.
        await context.set_extra_http_headers({
            **CONTEXT_OPTIONS['extra_http_headers'],
            'csrf-token': extract_csrf_token(cookies.JSESSIONID),
            'x-li-lang': 'en_US',
            'x-restli-protocol-version': '2.0.0',
        })


# ---------------------------------------------------------------------------
# Saving
# ---------------------------------------------------------------------------

def save_cookies(cookie_path, cookies: list) -> None:
    """Write a full Playwright cookie list (format 1) to disk."""
    path = Path(cookie_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(list(cookies), indent=2), encoding='utf-8')


async def save_cookies_from_context(context: BrowserContext, cookie_path) -> int:
    """Persist every cookie in the context's jar. Returns the cookie count."""
    cookies = await context.cookies()
    save_cookies(cookie_path, cookies)
    log.info('Cookies saved to %s (%d cookies)', cookie_path, len(cookies))
    return len(cookies)
