"""Application settings loaded from environment variables via pydantic-settings.

pydantic-settings reads configuration from two sources (in priority order):

  1. **Environment variables** — e.g. ``BING_ACCOUNT_KEY=...``
  2. **.env file** — ``key=value`` lines in the working directory's .env

Field ``bing_account_key`` maps to env var ``BING_ACCOUNT_KEY`` and so on.
Defaults apply when neither source sets a value.  The .env file holds
credentials and must not be committed.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.providers.search.bing_search import DEFAULT_BING_URL_TEMPLATE


class Settings(BaseSettings):
    """searchtrail application settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # === Search engines ===
    # Empty string = "not configured"; building a Bing search then fails
    # with a ConfigurationError instead of sending an unauthenticated request.
    bing_account_key: str = ""
    bing_url_template: str = DEFAULT_BING_URL_TEMPLATE
    search_engine: str = "duckduckgo"
    search_max_results: int = Field(default=10, ge=1)
    search_timeout: float = Field(default=15.0, gt=0)

    # === History ===
    history_path: str = "history.ser"

    # === App Config ===
    app_env: str = "development"
    log_level: str = "INFO"

