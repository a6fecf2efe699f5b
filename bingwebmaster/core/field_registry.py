"""BingWebmaster — Field Alias Registry.

Defines the canonical record fields and the ordered key aliases the Bing API
has used for each of them across API generations. The transformer resolves
every field by first-match lookup over these tables.
"""

from enum import Enum
from typing import Dict, Tuple


class StatisticKind(str, Enum):
    """Which statistics endpoint a record came from."""

    TRAFFIC = "traffic"  # GetRankAndTrafficStats
    KEYWORD = "keyword"  # GetKeywordStats
    PAGE = "page"  # GetPageStats
    QUERY = "query"  # GetQueryStats


class FieldDefinition:
    """Describes one canonical field and the raw keys it may arrive under."""

    def __init__(self, name: str, aliases: Tuple[str, ...], description: str = ""):
        self.name = name
        self.aliases = aliases
        self.description = description

    def __repr__(self) -> str:
        return f"<Field {self.name} {list(self.aliases)}>"


# ─────────────────────────────────────────────
# METRIC FIELDS — shared by every statistic kind
# ─────────────────────────────────────────────

METRIC_FIELDS: Dict[str, FieldDefinition] = {
    "clicks": FieldDefinition("clicks", ("Clicks", "clicks"), "Total clicks"),
    "impressions": FieldDefinition(
        "impressions", ("Impressions", "impressions"), "Times shown in results"
    ),
    "average_position": FieldDefinition(
        "average_position",
        ("AveragePosition", "average_position", "position"),
        "Mean ranking position, 0 when unranked",
    ),
    "ctr": FieldDefinition("ctr", ("CTR", "ctr"), "Click-through rate, as received"),
}


# ─────────────────────────────────────────────
# LABEL FIELDS — one per statistic kind
# ─────────────────────────────────────────────

LABEL_FIELDS: Dict[StatisticKind, FieldDefinition] = {
    StatisticKind.TRAFFIC: FieldDefinition("date", ("Date", "date"), "Reporting date"),
    StatisticKind.KEYWORD: FieldDefinition(
        "keyword", ("Keyword", "keyword", "query"), "Search keyword"
    ),
    StatisticKind.PAGE: FieldDefinition(
        "page_url", ("PageUrl", "page_url", "url"), "Page URL"
    ),
    StatisticKind.QUERY: FieldDefinition(
        "query", ("Query", "query", "search_query"), "Search query"
    ),
}

# Result collection / summary count keys used by StatsResult.as_dict()
COLLECTION_KEYS: Dict[StatisticKind, Tuple[str, str]] = {
    StatisticKind.TRAFFIC: ("data", "total_records"),
    StatisticKind.KEYWORD: ("keywords", "total_keywords"),
    StatisticKind.PAGE: ("pages", "total_pages"),
    StatisticKind.QUERY: ("queries", "total_queries"),
}


# ─────────────────────────────────────────────
# HELPERS
# ─────────────────────────────────────────────


def get_label_field(kind: StatisticKind) -> FieldDefinition:
    """Look up the label field for a statistic kind."""
    return LABEL_FIELDS[StatisticKind(kind)]


def get_metric_field(name: str) -> FieldDefinition | None:
    """Look up a metric field by canonical name."""
    return METRIC_FIELDS.get(name)
