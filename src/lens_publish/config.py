"""Deployment settings loaded from the environment.

Values may come from a .env file in the working directory (python-dotenv).
"""

import os
from dataclasses import dataclass

from dotenv import find_dotenv, load_dotenv

from .constants import DEFAULT_APP_ID, DEFAULT_CONTENT_URI_PREFIX, DEFAULT_PROFILE_URL_BASE
from .errors import ConfigError

ENV_PREFIX = "LENS_PUBLISH_"
TRUE_VALUES = {"1", "true", "yes", "on"}
FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class Settings:
    relay_on: bool = True
    app_id: str = DEFAULT_APP_ID
    content_uri_prefix: str = DEFAULT_CONTENT_URI_PREFIX
    profile_url_base: str = DEFAULT_PROFILE_URL_BASE
    locale: str = "en"
    store_dir: str = ".lens-publish/store"


def parse_bool(name: str, value: str) -> bool:
    normalized = value.strip().lower()
    if normalized in TRUE_VALUES:
        return True
    if normalized in FALSE_VALUES:
        return False
    raise ConfigError(f"{name} must be a boolean (true/false), got {value!r}")


def load_settings(environ: dict[str, str] | None = None, dotenv: bool = True) -> Settings:
    """Load settings from environment variables prefixed with LENS_PUBLISH_.

    CONTRACT:
      Inputs:
        - environ: optional mapping to read instead of os.environ
        - dotenv: boolean, load .env into os.environ first (ignored when environ given)

      Outputs:
        - settings: Settings with defaults for unset variables

      Invariants:
        - Empty values are treated as unset
        - LENS_PUBLISH_RELAY_ON accepts 1/0, true/false, yes/no, on/off

      Raises:
        - ConfigError: Invalid boolean value
    """
    if environ is None:
        if dotenv:
            load_dotenv(find_dotenv(usecwd=True))
        environ = dict(os.environ)

    def get(key: str) -> str | None:
        value = environ.get(ENV_PREFIX + key)
        return value if value else None

    defaults = Settings()
    relay_on = get("RELAY_ON")
    return Settings(
        relay_on=parse_bool(ENV_PREFIX + "RELAY_ON", relay_on) if relay_on is not None else defaults.relay_on,
        app_id=get("APP_ID") or defaults.app_id,
        content_uri_prefix=get("CONTENT_URI_PREFIX") or defaults.content_uri_prefix,
        profile_url_base=get("PROFILE_URL_BASE") or defaults.profile_url_base,
        locale=get("LOCALE") or defaults.locale,
        store_dir=get("STORE_DIR") or defaults.store_dir,
    )
