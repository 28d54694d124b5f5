"""Tests for the Representative / DealRecord domain model."""

from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone

import pytest

from utils.sales_tracker.models import (
    DealRecord,
    Representative,
    coerce_amount,
    format_timestamp,
    name_key,
    parse_timestamp,
    truncate_to_millis,
)

from tests.conftest import FIXED_NOW


class TestCoerceAmount:
    @pytest.mark.parametrize("raw, expected", [
        (1500, 1500.0),
        ("1500", 1500.0),
        (" 99.5 ", 99.5),
        ("1,250", 1250.0),
        (0, 0.0),
    ])
    def test_valid_numbers(self, raw, expected) -> None:
        assert coerce_amount(raw) == expected

    @pytest.mark.parametrize("raw", [
        None, "", "   ", "abc", "12abc", -50, "-1", math.nan, math.inf, True, object(), 10 ** 400,
    ])
    def test_invalid_input_becomes_zero(self, raw) -> None:
        assert coerce_amount(raw) == 0.0


class TestTimestamps:
    def test_format_uses_utc_z_with_millis(self) -> None:
        moment = datetime(2025, 6, 18, 10, 0, 5, 123456, tzinfo=timezone(timedelta(hours=2)))
        assert format_timestamp(moment) == "2025-06-18T08:00:05.123Z"

    def test_parse_z_suffix(self) -> None:
        parsed = parse_timestamp("2025-06-18T08:00:05.123Z")
        assert parsed == datetime(2025, 6, 18, 8, 0, 5, 123000, tzinfo=timezone.utc)

    def test_parse_naive_is_utc(self) -> None:
        assert parse_timestamp("2025-06-18T08:00:00").tzinfo == timezone.utc

    def test_truncate_to_millis(self) -> None:
        moment = datetime(2025, 1, 1, 0, 0, 0, 999999, tzinfo=timezone.utc)
        assert truncate_to_millis(moment).microsecond == 999000


class TestRepresentative:
    def test_new_rep_has_no_deals(self) -> None:
        rep = Representative(id=1, name="Alice")
        assert rep.deals == 0
        assert rep.revenue == 0.0
        assert rep.deal_history == []
        assert rep.last_deal is None
        assert rep.average_deal_size == 0.0

    def test_add_deal_keeps_totals_consistent(self) -> None:
        rep = Representative(id=1, name="Alice")
        for i, amount in enumerate([100.0, 0.0, 250.5]):
            rep.add_deal(amount, FIXED_NOW + timedelta(minutes=i))
            assert rep.deals == len(rep.deal_history)
            assert rep.revenue == sum(d.amount for d in rep.deal_history)

        assert rep.last_deal.amount == 250.5
        assert rep.average_deal_size == pytest.approx(350.5 / 3)

    def test_name_key_is_trimmed_and_case_insensitive(self) -> None:
        assert name_key("  Alice ") == name_key("ALICE")
        assert Representative(id=1, name="Bob").key == "bob"

    def test_to_dict_uses_persisted_field_names(self, deal) -> None:
        rep = Representative(id=7, name="Alice", deals=1, revenue=150.0, deal_history=[deal])
        assert rep.to_dict() == {
            'id': 7,
            'name': 'Alice',
            'deals': 1,
            'revenue': 150.0,
            'dealHistory': [{'date': '2025-06-18T15:30:00.000Z', 'amount': 150.0}],
        }

    def test_from_dict_reads_persisted_shape(self) -> None:
        rep = Representative.from_dict({
            'id': 7,
            'name': 'Alice',
            'deals': 1,
            'revenue': 150,
            'dealHistory': [{'date': '2025-06-18T15:30:00.000Z', 'amount': 150}],
        })
        assert rep.revenue == 150.0
        assert rep.deal_history == [DealRecord(date=FIXED_NOW, amount=150.0)]

    def test_deal_record_is_frozen(self, deal) -> None:
        with pytest.raises(AttributeError):
            deal.amount = 1.0  # type: ignore[misc]
