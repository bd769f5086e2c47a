"""Settings for a scrape run.

Validated once at start-up and passed by value into each component.
"""

import os

from pydantic import BaseModel, Field

_TRUE_VALUES = {'1', 'true', 'yes', 'on'}


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == '':
        return default
    return raw.strip().lower() in _TRUE_VALUES


class AnalyticsSettings(BaseModel):
    """Config for authenticating and scraping LinkedIn creator analytics."""
    cookie_path: str = Field(default='./data/session_cookies.json', min_length=1)
    username: str = ''
    password: str = ''
    login_timeout_seconds: int = Field(default=120, gt=0)
    headless: bool = True
    output_path: str = Field(default='./data/analytics-data.json', min_length=1)

    @property
    def has_credentials(self) -> bool:
        return bool(self.username) and bool(self.password)

    @property
    def login_timeout_ms(self) -> int:
        return self.login_timeout_seconds * 1000

    @classmethod
    def from_env(cls) -> 'AnalyticsSettings':
        """Build settings from LINKEDIN_* environment variables."""
        values = {
            'username': os.getenv('LINKEDIN_USERNAME', ''),
            'password': os.getenv('LINKEDIN_PASSWORD', ''),
            'headless': _env_flag('LINKEDIN_HEADLESS', True),
        }
        for field_name, env_name in (
            ('cookie_path', 'LINKEDIN_COOKIE_PATH'),
            ('login_timeout_seconds', 'LINKEDIN_LOGIN_TIMEOUT_SECONDS'),
            ('output_path', 'LINKEDIN_OUTPUT_PATH'),
        ):
            raw = os.getenv(env_name)
            if raw:
                values[field_name] = raw
        return cls(**values)
