"""Application configuration and constants."""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name)
    return value if value is not None else default


def _first_env(*names: str) -> Optional[str]:
    for name in names:
        value = os.getenv(name)
        if value:
            return value
    return None


# Deployments differ in how the credential is named; the first one set wins.
API_KEY_ENV_VARS = (
    "GOOGLE_CUSTOM_SEARCH_API_KEY",
    "AMP_DEV_CREDENTIAL_GOOGLE_CSE_API_KEY",
    "GOOGLE_PROGRAMMABLE_SEARCH_API_KEY",
)


@dataclass(frozen=True)
class Settings:
    """Simple settings container with environment variable overrides."""

    cse_api_key: Optional[str] = _first_env(*API_KEY_ENV_VARS)
    cse_id: str = _get_env("GOOGLE_PROGRAMMABLE_SEARCH_CSE_ID", "a1a3679a4a68c41f5")
    cse_base_url: str = _get_env("CSE_BASE_URL", "https://www.googleapis.com/customsearch/v1")
    cse_timeout_seconds: float = float(_get_env("CSE_TIMEOUT_SECONDS", "5.0"))
    default_locale: str = _get_env("DEFAULT_LOCALE", "en")
    search_max_age_seconds: int = int(_get_env("SEARCH_MAX_AGE_SECONDS", str(60 * 60)))
    log_level: str = _get_env("LOG_LEVEL", "INFO")


settings = Settings()
