"""BingWebmaster — Central Configuration via Pydantic Settings."""

from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Client settings loaded from BING_WEBMASTER_* environment variables / .env file."""

    # ── API ──
    # Tokens are normally passed explicitly per client (multi-tenant use).
    access_token: str = ""
    base_url: str = "https://www.bing.com/webmaster/api.svc/json"
    timeout: float = 30.0

    # ── Retry ──
    retry_attempts: int = 3
    retry_base_delay: float = 1.0  # seconds
    retry_max_delay: float = 30.0
    retry_jitter: bool = False

    # ── Endpoint Defaults ──
    default_aggregation: str = "daily"  # daily | weekly | monthly
    traffic_default_limit: Optional[int] = None
    keyword_default_limit: int = 1000
    page_default_limit: int = 1000
    query_default_limit: int = 1000

    # ── Caching ──
    cache_enabled: bool = False
    cache_ttl: int = 3600  # seconds
    cache_prefix: str = "bing_webmaster_"

    # ── Rate Limiting (per minute) ──
    rate_limiting_enabled: bool = True
    max_requests_per_minute: int = 60

    # ── App ──
    debug: bool = False
    log_level: str = "INFO"

    model_config = {
        "env_prefix": "BING_WEBMASTER_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


settings = Settings()
