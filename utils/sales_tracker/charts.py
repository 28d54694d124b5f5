# utils/sales_tracker/charts.py
"""
Altair Chart Builders for Sales Tracker

- Revenue by rep (bar + deal count labels)
"""

import logging

import pandas as pd
import altair as alt

from .constants import COLORS, CHART_HEIGHT

logger = logging.getLogger(__name__)


class SalesCharts:
    """
    Chart builders for the sales board.

    All methods are static - can be called without instantiation.

    Usage:
        chart = SalesCharts.build_revenue_by_rep_chart(metrics.board_dataframe())
        st.altair_chart(chart, use_container_width=True)
    """

    @staticmethod
    def build_revenue_by_rep_chart(
        board_df: pd.DataFrame,
        title: str = "💰 Revenue by Sales Rep"
    ) -> alt.Chart:
        """
        Build horizontal bar chart of filtered revenue per rep.

        Args:
            board_df: DataFrame with rep, deals, revenue columns
            title: Chart title

        Returns:
            Altair chart
        """
        if board_df.empty:
            logger.debug("No reps to chart")
            return SalesCharts._empty_chart("No sales reps yet")

        bars = alt.Chart(board_df).mark_bar().encode(
            y=alt.Y('rep:N', sort='-x', title=None),
            x=alt.X('revenue:Q', title='Revenue (USD)', axis=alt.Axis(format='~s')),
            color=alt.value(COLORS['revenue']),
            tooltip=[
                alt.Tooltip('rep:N', title='Sales Rep'),
                alt.Tooltip('revenue:Q', title='Revenue', format='$,.0f'),
                alt.Tooltip('deals:Q', title='Deals'),
            ]
        )

        labels = alt.Chart(board_df).mark_text(
            align='left', baseline='middle', dx=4, fontSize=11
        ).encode(
            y=alt.Y('rep:N', sort='-x'),
            x=alt.X('revenue:Q'),
            text=alt.Text('deals:Q', format='d'),
            color=alt.value(COLORS['text_dark'])
        )

        return alt.layer(bars, labels).properties(
            height=max(CHART_HEIGHT // 2, 36 * len(board_df)),
            title=title
        )

    @staticmethod
    def _empty_chart(message: str = "No data available") -> alt.Chart:
        """Create an empty chart with a message."""
        return alt.Chart(pd.DataFrame({'note': [message]})).mark_text(
            text=message,
            fontSize=16,
            color=COLORS['text_light']
        ).properties(
            height=200
        )
