# utils/sales_tracker/metrics.py
"""
Aggregation Engine for Sales Tracker

Handles all metric calculations over the representative list:
- Per-rep filtered stats (deal count, revenue)
- Global summary (total deals, total revenue, average deal size)
- Analytics (top performer, highest single deal, deals today, total reps)
- Board view (reps sorted by filtered revenue) for the rendering layer

Filtered figures are always recomputed from deal history; the cached
`deals`/`revenue` totals on Representative are used for lifetime
figures only.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional

import pandas as pd

from .constants import RECENT_DEALS_SHOWN
from .filters import DateFilter, filter_deals, is_same_local_day, local_now
from .models import DealRecord, Representative

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RepStats:
    """Filtered stats of one representative."""
    count: int
    revenue_sum: float


@dataclass(frozen=True)
class RepView:
    """One card on the sales board."""
    rep: Representative
    filtered_deals: int
    filtered_revenue: float
    recent_deals: List[DealRecord]


class SalesMetrics:
    """
    Metric calculations for the sales board.

    Usage:
        metrics = SalesMetrics(store.reps, store.date_filter, now=store.now())

        summary = metrics.summary()
        board = metrics.board_view()
        best = metrics.top_performer()
    """

    def __init__(
        self,
        reps: List[Representative],
        date_filter: DateFilter = None,
        now: datetime = None
    ):
        """
        Initialize with data.

        Args:
            reps: Representatives in list order
            date_filter: Active filter (default: all time)
            now: Current time (default: now in the configured timezone)
        """
        self.reps = reps
        self.date_filter = date_filter if date_filter is not None else DateFilter()
        self.now = now if now is not None else local_now()
        self._filtered: Dict[int, List[DealRecord]] = {}
        logger.debug(f"Metrics for {len(reps)} reps, filter={self.date_filter.period.value}")

    # =========================================================================
    # PER-REP
    # =========================================================================

    def filtered_deals(self, rep: Representative) -> List[DealRecord]:
        """Deals of rep inside the active window (memoized per rep id)."""
        if rep.id not in self._filtered:
            self._filtered[rep.id] = filter_deals(rep.deal_history, self.date_filter, self.now)
        return self._filtered[rep.id]

    @staticmethod
    def stats_for(rep: Representative, filtered_deals: List[DealRecord]) -> RepStats:
        """Count and revenue sum of an already filtered deal list."""
        return RepStats(
            count=len(filtered_deals),
            revenue_sum=sum((deal.amount for deal in filtered_deals), 0.0),
        )

    def rep_stats(self, rep: Representative) -> RepStats:
        return self.stats_for(rep, self.filtered_deals(rep))

    # =========================================================================
    # SUMMARY METRICS
    # =========================================================================

    def global_stats(self) -> Dict:
        """
        Filtered totals across all reps.

        Returns:
            Dict with total_deals, total_revenue, avg_deal_size
        """
        total_deals = 0
        total_revenue = 0.0

        for rep in self.reps:
            stats = self.rep_stats(rep)
            total_deals += stats.count
            total_revenue += stats.revenue_sum

        avg_deal_size = total_revenue / total_deals if total_deals > 0 else 0.0

        return {
            'total_deals': total_deals,
            'total_revenue': total_revenue,
            'avg_deal_size': avg_deal_size,
        }

    def top_performer(self) -> Optional[Representative]:
        """Rep with the greatest filtered revenue; first one wins ties."""
        if not self.reps:
            return None

        top = self.reps[0]
        top_revenue = self.rep_stats(top).revenue_sum

        for rep in self.reps[1:]:
            revenue = self.rep_stats(rep).revenue_sum
            if revenue > top_revenue:
                top, top_revenue = rep, revenue

        return top

    def highest_single_deal(self) -> float:
        """Largest filtered deal amount across all reps; 0 if none."""
        highest = 0.0
        for rep in self.reps:
            for deal in self.filtered_deals(rep):
                if deal.amount > highest:
                    highest = deal.amount
        return highest

    def deals_today(self) -> int:
        """Deals closed on the current local day, regardless of the active filter."""
        return sum(
            1
            for rep in self.reps
            for deal in rep.deal_history
            if is_same_local_day(deal.date, self.now)
        )

    def total_reps(self) -> int:
        return len(self.reps)

    def lifetime_totals(self) -> Dict:
        """Unfiltered totals from the cumulative counters."""
        return {
            'total_reps': len(self.reps),
            'total_deals': sum(rep.deals for rep in self.reps),
            'total_revenue': sum((rep.revenue for rep in self.reps), 0.0),
        }

    def summary(self) -> Dict:
        """
        Everything the KPI cards need in one dict.

        Returns:
            Dict with total_deals, total_revenue, avg_deal_size,
            top_performer (name or None), highest_deal, total_reps, deals_today
        """
        top = self.top_performer()
        return {
            **self.global_stats(),
            'top_performer': top.name if top is not None else None,
            'highest_deal': self.highest_single_deal(),
            'total_reps': self.total_reps(),
            'deals_today': self.deals_today(),
        }

    # =========================================================================
    # BOARD
    # =========================================================================

    def board_view(self, recent_limit: int = RECENT_DEALS_SHOWN) -> List[RepView]:
        """
        Reps sorted by filtered revenue, highest first.

        Equal revenues keep list order. Each view carries up to
        `recent_limit` filtered deals, newest first.
        """
        views = []
        for rep in self.reps:
            deals = self.filtered_deals(rep)
            stats = self.stats_for(rep, deals)
            views.append(RepView(
                rep=rep,
                filtered_deals=stats.count,
                filtered_revenue=stats.revenue_sum,
                recent_deals=list(reversed(deals[-recent_limit:])) if recent_limit > 0 else [],
            ))

        return sorted(views, key=lambda v: v.filtered_revenue, reverse=True)

    def board_dataframe(self) -> pd.DataFrame:
        """Board view as a DataFrame (rep, deals, revenue) for charts."""
        rows = [
            {
                'rep': view.rep.name,
                'deals': view.filtered_deals,
                'revenue': view.filtered_revenue,
            }
            for view in self.board_view(recent_limit=0)
        ]
        return pd.DataFrame(rows, columns=['rep', 'deals', 'revenue'])
