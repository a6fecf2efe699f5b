"""BingWebmaster — Ranking Engine.

Sorted, truncated views over normalized records ("top 10 pages by
clicks"). Sorting is stable: records with equal metric values keep their
original relative order.
"""

from typing import Dict, List, Optional

from bingwebmaster.models.normalized_models import NormalizedRecord

ASC = "asc"
DESC = "desc"

# Default direction per metric. For average_position a smaller number is a
# better rank, so "top" means ascending.
RANKABLE_METRICS: Dict[str, str] = {
    "clicks": DESC,
    "impressions": DESC,
    "ctr": DESC,
    "average_position": ASC,
}


def top_by(
    records: List[NormalizedRecord],
    metric: str,
    limit: int,
    direction: Optional[str] = None,
) -> List[NormalizedRecord]:
    """Return up to ``limit`` records ordered by ``metric``.

    ``direction`` defaults to the metric's natural "best first" order.
    The input list is not modified.
    """
    if metric not in RANKABLE_METRICS:
        raise ValueError(
            f"Unknown ranking metric '{metric}'. Expected one of {sorted(RANKABLE_METRICS)}"
        )
    direction = direction or RANKABLE_METRICS[metric]
    if direction not in (ASC, DESC):
        raise ValueError(f"Unknown sort direction '{direction}'. Expected 'asc' or 'desc'")
    if limit < 0:
        raise ValueError(f"limit must be >= 0, got {limit}")

    # sorted() is stable for reverse=True too, so ties keep input order.
    ranked = sorted(
        records,
        key=lambda r: getattr(r, metric),
        reverse=direction == DESC,
    )
    return ranked[:limit]


def top_by_clicks(records: List[NormalizedRecord], limit: int = 10) -> List[NormalizedRecord]:
    return top_by(records, "clicks", limit, DESC)


def top_by_impressions(
    records: List[NormalizedRecord], limit: int = 10
) -> List[NormalizedRecord]:
    return top_by(records, "impressions", limit, DESC)


def top_by_position(records: List[NormalizedRecord], limit: int = 10) -> List[NormalizedRecord]:
    """Best-ranked first (lowest average position)."""
    return top_by(records, "average_position", limit, ASC)
