"""BingWebmaster — Summary Engine.

Reduces a normalized record list into count, totals and averages.

Averages are taken only over records with a strictly positive value for
that metric. Bing reports position 0 for rows it did not rank, and those
placeholders would otherwise drag the mean towards zero. The zeros still
count towards the totals.
"""

from typing import Iterable, List

from bingwebmaster.models.normalized_models import NormalizedRecord, SummaryMetrics


def _positive_mean(values: Iterable[float]) -> float:
    positives: List[float] = [v for v in values if v > 0]
    if not positives:
        return 0.0
    return sum(positives) / len(positives)


def aggregate(records: List[NormalizedRecord]) -> SummaryMetrics:
    """Compute summary metrics for one statistics response."""
    return SummaryMetrics(
        count=len(records),
        total_clicks=sum(r.clicks for r in records),
        total_impressions=sum(r.impressions for r in records),
        average_position=_positive_mean(r.average_position for r in records),
        average_ctr=_positive_mean(r.ctr for r in records),
    )
