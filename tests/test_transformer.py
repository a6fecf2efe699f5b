"""
tests/test_transformer.py

Envelope resolution and record normalization. Neither may ever raise:
unknown envelopes degrade to an empty list, unknown or broken fields to
zero values.
"""

from __future__ import annotations

import pytest

from bingwebmaster.connectors.bing.transformer import (
    normalize_record,
    normalize_records,
    resolve_envelope,
    resolve_payload,
)
from bingwebmaster.core.field_registry import StatisticKind
from bingwebmaster.models.normalized_models import NormalizedRecord

ROWS = [
    {"Date": "2024-01-01", "Clicks": 5, "Impressions": 100},
    {"Date": "2024-01-02", "Clicks": 7, "Impressions": 140},
]


# ---------------------------------------------------------------------------
# Envelope resolution
# ---------------------------------------------------------------------------


class TestResolveEnvelope:
    @pytest.mark.parametrize(
        "payload",
        [{"d": ROWS}, {"value": ROWS}, ROWS],
        ids=["odata", "value", "bare"],
    )
    def test_all_shapes_yield_same_rows(self, payload) -> None:
        assert resolve_envelope(payload) == ROWS

    def test_d_wins_over_value(self) -> None:
        payload = {"d": ROWS[:1], "value": ROWS}
        assert resolve_envelope(payload) == ROWS[:1]

    def test_null_d_falls_through_to_value(self) -> None:
        assert resolve_envelope({"d": None, "value": ROWS}) == ROWS
        assert resolve_payload({"d": None, "value": {"Url": "x"}}) == {"Url": "x"}

    def test_d_takes_precedence_even_when_not_a_list(self) -> None:
        # Single-object legacy payload: not list-shaped, so no records.
        assert resolve_envelope({"d": {"Url": "x"}, "value": ROWS}) == []

    @pytest.mark.parametrize(
        "payload", [None, {}, {"d": None}, {"value": "oops"}, "text", 42, {"other": ROWS}]
    )
    def test_non_list_shapes_degrade_to_empty(self, payload) -> None:
        assert resolve_envelope(payload) == []

    def test_resolve_payload_keeps_single_objects(self) -> None:
        assert resolve_payload({"d": {"Url": "https://example.com"}}) == {
            "Url": "https://example.com"
        }
        assert resolve_payload({"message": "ok"}) == {"message": "ok"}


# ---------------------------------------------------------------------------
# Record normalization
# ---------------------------------------------------------------------------


class TestNormalizeRecord:
    def test_pascal_case_keys(self) -> None:
        record = normalize_record(
            StatisticKind.KEYWORD,
            {
                "Keyword": "bing tools",
                "Clicks": 12,
                "Impressions": 300,
                "AveragePosition": 4.5,
                "CTR": 0.04,
            },
        )
        assert record == NormalizedRecord(
            kind=StatisticKind.KEYWORD,
            label="bing tools",
            clicks=12,
            impressions=300,
            average_position=4.5,
            ctr=0.04,
        )

    def test_snake_case_keys(self) -> None:
        record = normalize_record(
            StatisticKind.PAGE,
            {
                "page_url": "https://example.com/a",
                "clicks": 3,
                "impressions": 9,
                "average_position": 2.0,
                "ctr": 33.3,
            },
        )
        assert record.label == "https://example.com/a"
        assert record.clicks == 3
        assert record.impressions == 9
        assert record.average_position == 2.0
        assert record.ctr == 33.3  # percentage scale kept as received

    @pytest.mark.parametrize(
        "kind, raw, expected",
        [
            (StatisticKind.TRAFFIC, {"date": "2024-02-01"}, "2024-02-01"),
            (StatisticKind.KEYWORD, {"query": "fallback"}, "fallback"),
            (StatisticKind.PAGE, {"url": "https://example.com/u"}, "https://example.com/u"),
            (StatisticKind.QUERY, {"search_query": "sq"}, "sq"),
        ],
    )
    def test_last_label_alias_is_used(self, kind, raw, expected) -> None:
        assert normalize_record(kind, raw).label == expected

    def test_first_alias_wins(self) -> None:
        record = normalize_record(
            StatisticKind.QUERY, {"Query": "first", "query": "second", "Clicks": 1, "clicks": 99}
        )
        assert record.label == "first"
        assert record.clicks == 1

    def test_null_alias_falls_through_to_next(self) -> None:
        record = normalize_record(StatisticKind.KEYWORD, {"Keyword": None, "keyword": "kw"})
        assert record.label == "kw"

    def test_position_alias(self) -> None:
        record = normalize_record(StatisticKind.KEYWORD, {"position": "7.25"})
        assert record.average_position == 7.25

    @pytest.mark.parametrize("kind", list(StatisticKind))
    def test_missing_fields_default_to_zero(self, kind) -> None:
        record = normalize_record(kind, {"Unrelated": "value"})
        assert record.label == ""
        assert record.clicks == 0
        assert record.impressions == 0
        assert record.average_position == 0.0
        assert record.ctr == 0.0

    def test_numeric_strings_are_parsed(self) -> None:
        record = normalize_record(
            StatisticKind.TRAFFIC,
            {"Clicks": "15", "Impressions": "200.9", "AveragePosition": "3", "CTR": "0.075"},
        )
        assert record.clicks == 15
        assert record.impressions == 200
        assert record.average_position == 3.0
        assert record.ctr == 0.075

    @pytest.mark.parametrize("bad", ["n/a", "", [], {}, "nan", "inf", object()])
    def test_unparsable_values_become_zero(self, bad) -> None:
        record = normalize_record(
            StatisticKind.TRAFFIC,
            {"Clicks": bad, "Impressions": bad, "AveragePosition": bad, "CTR": bad},
        )
        assert (record.clicks, record.impressions) == (0, 0)
        assert (record.average_position, record.ctr) == (0.0, 0.0)

    def test_negative_counts_clamp_to_zero(self) -> None:
        record = normalize_record(StatisticKind.TRAFFIC, {"Clicks": -4, "AveragePosition": -1})
        assert record.clicks == 0
        assert record.average_position == 0.0

    def test_non_string_label_is_stringified(self) -> None:
        assert normalize_record(StatisticKind.QUERY, {"Query": 404}).label == "404"

    @pytest.mark.parametrize("raw", [None, 3, "row", ["Clicks", 5]])
    def test_non_mapping_row_gives_empty_record(self, raw) -> None:
        assert normalize_record(StatisticKind.PAGE, raw) == NormalizedRecord(
            kind=StatisticKind.PAGE
        )

    def test_kind_accepts_plain_string(self) -> None:
        assert normalize_record("keyword", {"Keyword": "k"}).kind is StatisticKind.KEYWORD

    def test_normalize_records_preserves_order(self) -> None:
        records = normalize_records(StatisticKind.TRAFFIC, ROWS)
        assert [r.label for r in records] == ["2024-01-01", "2024-01-02"]
        assert [r.clicks for r in records] == [5, 7]


class TestRecordAsDict:
    @pytest.mark.parametrize(
        "kind, label_key",
        [
            (StatisticKind.TRAFFIC, "date"),
            (StatisticKind.KEYWORD, "keyword"),
            (StatisticKind.PAGE, "page_url"),
            (StatisticKind.QUERY, "query"),
        ],
    )
    def test_label_key_follows_kind(self, kind, label_key) -> None:
        data = NormalizedRecord(kind=kind, label="x", clicks=1).as_dict()
        assert data == {
            label_key: "x",
            "clicks": 1,
            "impressions": 0,
            "average_position": 0.0,
            "ctr": 0.0,
        }
