"""BingWebmaster — Client Entry Point.

Wires settings, the HTTP client, the execution policy (retry, rate limit,
cache) and the endpoint surface into one object. Cache and rate-limit state
belong to the instance, so differently configured clients can coexist in
one process.
"""

import time
from typing import Any, Callable, Dict, List, Optional, Sequence

import httpx

from bingwebmaster.connectors.bing.client import BingClient
from bingwebmaster.connectors.bing.endpoints import BingEndpoints, DateLike
from bingwebmaster.core.cache import ResponseCache
from bingwebmaster.core.config import Settings, settings as default_settings
from bingwebmaster.core.execution import BackoffPolicy, RequestExecutionPolicy
from bingwebmaster.core.rate_limiter import RateLimitWindow
from bingwebmaster.models.normalized_models import StatsResult, SubmissionOutcome


class BingWebmaster:
    """Bing Webmaster Tools API client.

    The access token is passed explicitly so multi-tenant callers can hold
    one client per user. ``timeout`` and ``retry_attempts`` override the
    matching settings for this instance only.
    """

    def __init__(
        self,
        access_token: Optional[str] = None,
        settings: Optional[Settings] = None,
        *,
        timeout: Optional[float] = None,
        retry_attempts: Optional[int] = None,
        transport: Optional[httpx.BaseTransport] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.settings = settings or default_settings
        cfg = self.settings

        self.client = BingClient(
            access_token=access_token or cfg.access_token or None,
            base_url=cfg.base_url,
            timeout=timeout if timeout is not None else cfg.timeout,
            transport=transport,
        )
        self.rate_limiter = RateLimitWindow(
            max_requests_per_minute=cfg.max_requests_per_minute,
            enabled=cfg.rate_limiting_enabled,
            clock=clock,
        )
        self.cache: Optional[ResponseCache] = (
            ResponseCache(ttl=cfg.cache_ttl, prefix=cfg.cache_prefix, clock=clock)
            if cfg.cache_enabled
            else None
        )
        self.policy = RequestExecutionPolicy(
            self.client.send,
            retry_attempts=retry_attempts if retry_attempts is not None else cfg.retry_attempts,
            backoff=BackoffPolicy(
                base_delay=cfg.retry_base_delay,
                max_delay=cfg.retry_max_delay,
                jitter=cfg.retry_jitter,
            ),
            rate_limiter=self.rate_limiter,
            cache=self.cache,
            sleep=sleep,
        )
        self.endpoints = BingEndpoints(self.policy, cfg)

    # ── Token ──

    @property
    def access_token(self) -> Optional[str]:
        return self.client.access_token

    def set_access_token(self, access_token: str) -> "BingWebmaster":
        """Replace the bearer token; returns self for chaining."""
        self.client.access_token = access_token
        return self

    def is_access_token_valid(self) -> bool:
        """Only checks that a token is set; Bing validates it per request."""
        return bool(self.client.access_token)

    # ── Lifecycle ──

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> "BingWebmaster":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # ── Operations ──

    def get_user_sites(self) -> List[Dict[str, Any]]:
        return self.endpoints.get_user_sites()

    def get_rank_and_traffic_stats(
        self,
        site_url: str,
        start_date: DateLike = None,
        end_date: DateLike = None,
        aggregation: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> StatsResult:
        return self.endpoints.get_rank_and_traffic_stats(
            site_url, start_date, end_date, aggregation, limit
        )

    def get_keyword_stats(
        self,
        site_url: str,
        start_date: DateLike = None,
        end_date: DateLike = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> StatsResult:
        return self.endpoints.get_keyword_stats(site_url, start_date, end_date, limit, offset)

    def get_page_stats(
        self,
        site_url: str,
        start_date: DateLike = None,
        end_date: DateLike = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> StatsResult:
        return self.endpoints.get_page_stats(site_url, start_date, end_date, limit, offset)

    def get_query_stats(
        self,
        site_url: str,
        start_date: DateLike = None,
        end_date: DateLike = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> StatsResult:
        return self.endpoints.get_query_stats(site_url, start_date, end_date, limit, offset)

    def submit_url(self, site_url: str, url: str) -> SubmissionOutcome:
        return self.endpoints.submit_url(site_url, url)

    def submit_sitemap(self, site_url: str, sitemap_url: str) -> SubmissionOutcome:
        return self.endpoints.submit_sitemap(site_url, sitemap_url)

    def submit_urls(
        self, site_url: str, urls: Sequence[str], max_workers: int = 1
    ) -> List[SubmissionOutcome]:
        return self.endpoints.submit_urls(site_url, urls, max_workers)

    def submit_sitemaps(
        self, site_url: str, sitemap_urls: Sequence[str], max_workers: int = 1
    ) -> List[SubmissionOutcome]:
        return self.endpoints.submit_sitemaps(site_url, sitemap_urls, max_workers)
