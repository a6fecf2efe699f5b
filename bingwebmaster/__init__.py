"""BingWebmaster — Bing Webmaster Tools API client.

Normalizes Bing's legacy and modern response envelopes into one record
schema, with summary metrics and ranked views, behind a retrying,
rate-limited, optionally cached request path.
"""

from bingwebmaster.core.errors import (
    BingWebmasterError,
    ExhaustedRetriesError,
    FatalTransportError,
    MissingAccessTokenError,
    RateLimitedError,
    TransientTransportError,
)
from bingwebmaster.core.field_registry import StatisticKind
from bingwebmaster.models.normalized_models import (
    NormalizedRecord,
    StatsResult,
    SubmissionOutcome,
    SummaryMetrics,
)
from bingwebmaster.webmaster import BingWebmaster

__all__ = [
    "BingWebmaster",
    "BingWebmasterError",
    "ExhaustedRetriesError",
    "FatalTransportError",
    "MissingAccessTokenError",
    "NormalizedRecord",
    "RateLimitedError",
    "StatisticKind",
    "StatsResult",
    "SubmissionOutcome",
    "SummaryMetrics",
    "TransientTransportError",
]

__version__ = "1.0.0"
