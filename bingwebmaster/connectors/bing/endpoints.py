"""BingWebmaster — Bing Webmaster API Endpoints.

One method per API operation. Statistics calls go through the execution
policy, then the transformer and summary engine, and come back as a
StatsResult. Submissions come back as SubmissionOutcome records.
"""

from datetime import date, datetime
from typing import Any, Dict, List, Optional, Sequence, Union

from bingwebmaster.analyzer.summary_engine import aggregate
from bingwebmaster.connectors.bing.batcher import submit_all
from bingwebmaster.connectors.bing.client import extract_message
from bingwebmaster.connectors.bing.transformer import (
    normalize_records,
    resolve_envelope,
)
from bingwebmaster.core.config import Settings, settings as default_settings
from bingwebmaster.core.errors import BingWebmasterError
from bingwebmaster.core.execution import RequestExecutionPolicy
from bingwebmaster.core.field_registry import StatisticKind
from bingwebmaster.core.logging import get_logger
from bingwebmaster.models.normalized_models import StatsResult, SubmissionOutcome

logger = get_logger("bing.endpoints")

AGGREGATIONS = ("daily", "weekly", "monthly")
SUCCESS_MESSAGE_KEYS = ("message", "Message")

DateLike = Union[str, date, datetime, None]


def _format_date(value: DateLike) -> Optional[str]:
    """Serialize a date parameter as YYYY-MM-DD."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d")
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def _build_params(**params: Any) -> Dict[str, Any]:
    """Drop unset optional query parameters."""
    return {k: v for k, v in params.items() if v is not None}


class BingEndpoints:
    """Typed access to every Bing Webmaster operation."""

    def __init__(self, policy: RequestExecutionPolicy, settings: Settings | None = None):
        self.policy = policy
        self.settings = settings or default_settings

    # ── Sites ──

    def get_user_sites(self) -> List[Dict[str, Any]]:
        """List the sites registered to the authenticated user."""
        payload = self.policy.execute("GET", "GetUserSites")
        sites = resolve_envelope(payload)
        logger.info(f"Fetched {len(sites)} sites", extra={"endpoint": "GetUserSites"})
        return sites

    # ── Statistics ──

    def _fetch_stats(
        self, kind: StatisticKind, endpoint: str, params: Dict[str, Any]
    ) -> StatsResult:
        payload = self.policy.execute("GET", endpoint, params=params)
        records = normalize_records(kind, resolve_envelope(payload))
        logger.info(
            f"Fetched {len(records)} {kind.value} records for {params.get('siteUrl')}",
            extra={"endpoint": endpoint},
        )
        return StatsResult(kind=kind, summary=aggregate(records), records=records)

    def get_rank_and_traffic_stats(
        self,
        site_url: str,
        start_date: DateLike = None,
        end_date: DateLike = None,
        aggregation: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> StatsResult:
        """Impressions, clicks, position and CTR per period."""
        if aggregation is not None and aggregation not in AGGREGATIONS:
            raise ValueError(
                f"aggregation must be one of {AGGREGATIONS}, got '{aggregation}'"
            )
        params = _build_params(
            siteUrl=site_url,
            startDate=_format_date(start_date),
            endDate=_format_date(end_date),
            aggregation=aggregation,
            limit=limit if limit is not None else self.settings.traffic_default_limit,
        )
        return self._fetch_stats(StatisticKind.TRAFFIC, "GetRankAndTrafficStats", params)

    def _paged_params(
        self,
        site_url: str,
        start_date: DateLike,
        end_date: DateLike,
        limit: Optional[int],
        offset: Optional[int],
        default_limit: int,
    ) -> Dict[str, Any]:
        return _build_params(
            siteUrl=site_url,
            startDate=_format_date(start_date),
            endDate=_format_date(end_date),
            limit=limit if limit is not None else default_limit,
            offset=offset,
        )

    def get_keyword_stats(
        self,
        site_url: str,
        start_date: DateLike = None,
        end_date: DateLike = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> StatsResult:
        params = self._paged_params(
            site_url, start_date, end_date, limit, offset, self.settings.keyword_default_limit
        )
        return self._fetch_stats(StatisticKind.KEYWORD, "GetKeywordStats", params)

    def get_page_stats(
        self,
        site_url: str,
        start_date: DateLike = None,
        end_date: DateLike = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> StatsResult:
        params = self._paged_params(
            site_url, start_date, end_date, limit, offset, self.settings.page_default_limit
        )
        return self._fetch_stats(StatisticKind.PAGE, "GetPageStats", params)

    def get_query_stats(
        self,
        site_url: str,
        start_date: DateLike = None,
        end_date: DateLike = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> StatsResult:
        params = self._paged_params(
            site_url, start_date, end_date, limit, offset, self.settings.query_default_limit
        )
        return self._fetch_stats(StatisticKind.QUERY, "GetQueryStats", params)

    # ── Submissions ──

    def _submit(
        self,
        endpoint: str,
        body: Dict[str, Any],
        site_url: str,
        submitted_url: str,
        noun: str,
    ) -> SubmissionOutcome:
        try:
            payload = self.policy.execute("POST", endpoint, body=body)
        except BingWebmasterError as e:
            logger.warning(
                f"{endpoint} failed for {submitted_url}: {e}",
                extra={"endpoint": endpoint, "status_code": e.status_code},
            )
            return SubmissionOutcome(
                success=False,
                message=extract_message(e.payload, f"Failed to submit {noun}"),
                site_url=site_url,
                submitted_url=submitted_url,
                data=e.payload,
            )

        return SubmissionOutcome(
            success=True,
            message=extract_message(
                payload,
                f"{noun[0].upper()}{noun[1:]} submitted successfully",
                keys=SUCCESS_MESSAGE_KEYS,
            ),
            site_url=site_url,
            submitted_url=submitted_url,
            data=payload,
        )

    def submit_url(self, site_url: str, url: str) -> SubmissionOutcome:
        """Ask Bing to crawl and index one URL."""
        return self._submit(
            "SubmitUrl", {"siteUrl": site_url, "url": url}, site_url, url, "URL"
        )

    def submit_sitemap(self, site_url: str, sitemap_url: str) -> SubmissionOutcome:
        """Register a sitemap for crawling."""
        return self._submit(
            "SubmitSitemap",
            {"siteUrl": site_url, "sitemapUrl": sitemap_url},
            site_url,
            sitemap_url,
            "sitemap",
        )

    def submit_urls(
        self, site_url: str, urls: Sequence[str], max_workers: int = 1
    ) -> List[SubmissionOutcome]:
        return submit_all(
            urls,
            lambda url: self.submit_url(site_url, url),
            site_url=site_url,
            max_workers=max_workers,
        )

    def submit_sitemaps(
        self, site_url: str, sitemap_urls: Sequence[str], max_workers: int = 1
    ) -> List[SubmissionOutcome]:
        return submit_all(
            sitemap_urls,
            lambda sitemap_url: self.submit_sitemap(site_url, sitemap_url),
            site_url=site_url,
            max_workers=max_workers,
        )
