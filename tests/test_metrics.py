"""Tests for SalesMetrics aggregation."""

from __future__ import annotations

from datetime import timedelta

import pytest

from utils.sales_tracker.filters import DateFilter
from utils.sales_tracker.metrics import RepStats, SalesMetrics

from tests.conftest import FIXED_NOW, make_rep

WEEK = DateFilter.build("week")


def metrics_for(reps, date_filter=None) -> SalesMetrics:
    return SalesMetrics(reps, date_filter, now=FIXED_NOW)


class TestStatsFor:
    def test_counts_and_sums_filtered_deals(self, week_rep) -> None:
        m = metrics_for([week_rep], WEEK)
        assert m.stats_for(week_rep, m.filtered_deals(week_rep)) == RepStats(count=2, revenue_sum=500.0)

    def test_empty_filtered_list(self, week_rep) -> None:
        assert SalesMetrics.stats_for(week_rep, []) == RepStats(count=0, revenue_sum=0.0)

    def test_filtered_stats_ignore_stale_counters(self) -> None:
        # migrated legacy rep: deals counter without history
        rep = make_rep(1, "Bob")
        rep.deals = 3
        assert metrics_for([rep]).rep_stats(rep) == RepStats(count=0, revenue_sum=0.0)


class TestGlobalStats:
    def test_sums_across_reps(self, week_rep) -> None:
        bob = make_rep(2, "Bob", [(FIXED_NOW - timedelta(hours=1), 100.0)])
        stats = metrics_for([week_rep, bob], WEEK).global_stats()

        assert stats == {
            'total_deals': 3,
            'total_revenue': 600.0,
            'avg_deal_size': 200.0,
        }

    def test_zero_deals_average_is_zero(self) -> None:
        stats = metrics_for([make_rep(1, "Alice"), make_rep(2, "Bob")]).global_stats()
        assert stats['avg_deal_size'] == 0.0
        assert stats['total_deals'] == 0

    def test_empty_list(self) -> None:
        assert metrics_for([]).global_stats()['avg_deal_size'] == 0.0


class TestTopPerformer:
    def test_first_maximum_wins_ties(self) -> None:
        reps = [
            make_rep(1, "Low", [(FIXED_NOW, 50.0)]),
            make_rep(2, "First", [(FIXED_NOW, 200.0)]),
            make_rep(3, "Second", [(FIXED_NOW, 120.0), (FIXED_NOW, 80.0)]),
        ]
        assert metrics_for(reps).top_performer().name == "First"

    def test_uses_filtered_revenue(self, week_rep) -> None:
        recent = make_rep(2, "Recent", [(FIXED_NOW, 550.0)])
        # all time: Alice 600 vs 550; last week: Alice 500 vs 550
        assert metrics_for([week_rep, recent]).top_performer().name == "Alice"
        assert metrics_for([week_rep, recent], WEEK).top_performer().name == "Recent"

    def test_empty_list(self) -> None:
        assert metrics_for([]).top_performer() is None

    def test_all_zero_returns_first(self) -> None:
        reps = [make_rep(1, "A"), make_rep(2, "B")]
        assert metrics_for(reps).top_performer().name == "A"


class TestHighestSingleDeal:
    def test_respects_filter(self, week_rep) -> None:
        old_big = make_rep(2, "Bob", [(FIXED_NOW - timedelta(days=30), 5000.0)])
        assert metrics_for([week_rep, old_big]).highest_single_deal() == 5000.0
        assert metrics_for([week_rep, old_big], WEEK).highest_single_deal() == 300.0

    def test_zero_when_no_deals(self) -> None:
        assert metrics_for([make_rep(1, "A")]).highest_single_deal() == 0.0


class TestDealsToday:
    def test_ignores_active_filter(self, week_rep) -> None:
        custom = DateFilter.build("custom", ("2020-01-01", "2020-01-31"))
        assert metrics_for([week_rep], custom).deals_today() == 1

    def test_counts_across_reps(self, week_rep) -> None:
        bob = make_rep(2, "Bob", [
            (FIXED_NOW.replace(hour=0, minute=0), 10.0),
            (FIXED_NOW - timedelta(days=1), 10.0),
        ])
        assert metrics_for([week_rep, bob]).deals_today() == 2


class TestSummary:
    def test_summary_fields(self, week_rep) -> None:
        summary = metrics_for([week_rep, make_rep(2, "Bob")], WEEK).summary()

        assert summary == {
            'total_deals': 2,
            'total_revenue': 500.0,
            'avg_deal_size': 250.0,
            'top_performer': 'Alice',
            'highest_deal': 300.0,
            'total_reps': 2,
            'deals_today': 1,
        }

    def test_empty_summary(self) -> None:
        summary = metrics_for([]).summary()
        assert summary['top_performer'] is None
        assert summary['total_reps'] == 0

    def test_lifetime_totals_use_counters(self, week_rep) -> None:
        legacy = make_rep(2, "Bob")
        legacy.deals = 3
        totals = metrics_for([week_rep, legacy], WEEK).lifetime_totals()
        assert totals == {'total_reps': 2, 'total_deals': 6, 'total_revenue': 600.0}


class TestBoardView:
    def test_sorted_by_filtered_revenue_desc_stable(self, week_rep) -> None:
        reps = [
            make_rep(2, "Tie A", [(FIXED_NOW, 200.0)]),
            week_rep,
            make_rep(3, "Tie B", [(FIXED_NOW, 200.0)]),
        ]
        views = metrics_for(reps, WEEK).board_view()

        assert [v.rep.name for v in views] == ["Alice", "Tie A", "Tie B"]
        assert (views[0].filtered_deals, views[0].filtered_revenue) == (2, 500.0)

    def test_recent_deals_newest_first_and_limited(self) -> None:
        rep = make_rep(1, "Alice", [(FIXED_NOW - timedelta(hours=i), float(i)) for i in range(8, 0, -1)])
        view = metrics_for([rep]).board_view(recent_limit=5)[0]

        assert [d.amount for d in view.recent_deals] == [1.0, 2.0, 3.0, 4.0, 5.0]

    def test_recent_deals_follow_filter(self, week_rep) -> None:
        view = metrics_for([week_rep], WEEK).board_view()[0]
        assert [d.amount for d in view.recent_deals] == [300.0, 200.0]

    def test_board_dataframe(self, week_rep) -> None:
        df = metrics_for([make_rep(2, "Bob"), week_rep]).board_dataframe()

        assert list(df.columns) == ['rep', 'deals', 'revenue']
        assert df['rep'].tolist() == ['Alice', 'Bob']
        assert df['revenue'].tolist() == pytest.approx([600.0, 0.0])

    def test_board_dataframe_empty(self) -> None:
        assert metrics_for([]).board_dataframe().empty
