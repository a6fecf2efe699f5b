"""BingWebmaster — Raw → Normalized Transformer.

Unwraps the response envelope (legacy OData ``d``, modern ``value`` or a
bare array) and converts each raw row into a NormalizedRecord using the
alias tables in the field registry. Nothing here raises: unknown shapes
degrade to empty lists and unparsable values to zero.
"""

import math
from typing import Any, Dict, List, Mapping, Optional

from bingwebmaster.core.field_registry import (
    METRIC_FIELDS,
    FieldDefinition,
    StatisticKind,
    get_label_field,
)
from bingwebmaster.models.normalized_models import NormalizedRecord
from bingwebmaster.core.logging import get_logger

logger = get_logger("bing.transformer")

# Envelope keys, checked in this order. ``d`` must win over ``value``:
# legacy envelopes may carry nested result containers. A null key counts
# as absent.
ENVELOPE_KEYS = ("d", "value")


def resolve_payload(payload: Any) -> Any:
    """Strip the response envelope without checking the result's shape."""
    if isinstance(payload, Mapping):
        for key in ENVELOPE_KEYS:
            if payload.get(key) is not None:
                return payload[key]
    return payload


def resolve_envelope(payload: Any) -> List[Any]:
    """Return the raw record list carried by a response, or [] if none."""
    result = resolve_payload(payload)
    if isinstance(result, list):
        return result
    return []


def _safe_float(value: Any) -> float:
    """Safely convert a value to a finite float."""
    try:
        result = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0.0
    if not math.isfinite(result):
        return 0.0
    return result


def _safe_int(value: Any) -> int:
    """Safely convert a value to int, truncating fractional input."""
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return int(_safe_float(value))


def _first_present(raw: Mapping[str, Any], field: FieldDefinition) -> Optional[Any]:
    """Value of the first alias present (and not null) in the raw row."""
    for alias in field.aliases:
        value = raw.get(alias)
        if value is not None:
            return value
    return None


def normalize_record(kind: StatisticKind, raw: Any) -> NormalizedRecord:
    """Map one heterogeneous raw row into a canonical record."""
    kind = StatisticKind(kind)
    if not isinstance(raw, Mapping):
        return NormalizedRecord(kind=kind)

    label = _first_present(raw, get_label_field(kind))
    position = _safe_float(_first_present(raw, METRIC_FIELDS["average_position"]))

    return NormalizedRecord(
        kind=kind,
        label="" if label is None else str(label),
        clicks=max(0, _safe_int(_first_present(raw, METRIC_FIELDS["clicks"]))),
        impressions=max(
            0, _safe_int(_first_present(raw, METRIC_FIELDS["impressions"]))
        ),
        average_position=max(0.0, position),
        ctr=_safe_float(_first_present(raw, METRIC_FIELDS["ctr"])),
    )


def normalize_records(kind: StatisticKind, rows: List[Dict[str, Any]]) -> List[NormalizedRecord]:
    """Normalize every raw row of one statistics response."""
    records = [normalize_record(kind, row) for row in rows]
    logger.debug(f"Normalized {len(records)} {StatisticKind(kind).value} records")
    return records
