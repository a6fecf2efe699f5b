"""BingWebmaster — Normalized Record Models (Canonical Schema).

Every statistics endpoint normalizes into NormalizedRecord, whatever the
envelope or key casing the API answered with.
"""

from typing import Any, Dict, List

from pydantic import BaseModel, Field

from bingwebmaster.core.field_registry import (
    COLLECTION_KEYS,
    StatisticKind,
    get_label_field,
)


class NormalizedRecord(BaseModel):
    """Canonical statistics row.

    Every field is present with a zero default; the label meaning depends
    on ``kind`` (date, keyword, page URL or query).
    """

    kind: StatisticKind
    label: str = ""
    clicks: int = Field(default=0, ge=0)
    impressions: int = Field(default=0, ge=0)
    average_position: float = Field(default=0.0, ge=0)
    ctr: float = 0.0  # opaque: fraction or percentage, kept as received

    def as_dict(self) -> Dict[str, Any]:
        """Flat dict keyed the way the kind's label is named."""
        return {
            get_label_field(self.kind).name: self.label,
            "clicks": self.clicks,
            "impressions": self.impressions,
            "average_position": self.average_position,
            "ctr": self.ctr,
        }


class SummaryMetrics(BaseModel):
    """Derived totals and positive-only averages. Never persisted."""

    count: int = 0
    total_clicks: int = 0
    total_impressions: int = 0
    average_position: float = 0.0
    average_ctr: float = 0.0


class StatsResult(BaseModel):
    """One normalized statistics response."""

    kind: StatisticKind
    summary: SummaryMetrics
    records: List[NormalizedRecord] = []

    def as_dict(self) -> Dict[str, Any]:
        collection_key, count_key = COLLECTION_KEYS[self.kind]
        summary = self.summary.model_dump()
        summary[count_key] = summary.pop("count")
        return {
            "summary": summary,
            collection_key: [r.as_dict() for r in self.records],
        }


class SubmissionOutcome(BaseModel):
    """Result of a single URL or sitemap submission."""

    success: bool
    message: str = ""
    site_url: str = ""
    submitted_url: str = ""
    data: Any = None
