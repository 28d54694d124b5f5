# utils/sales_tracker/fragments.py
"""
Streamlit Rendering for Sales Tracker

Input + rendering adapter around SalesRepStore:
- KPI cards (summary + analytics)
- Add-rep form
- Sales board (rep cards with add-deal form and remove-with-confirm)
- Export buttons (CSV / JSON / Excel)

User prompts (confirmations, warnings) live here; the store only
returns MutationResult values.
"""

import logging
from datetime import datetime, tzinfo
from typing import Dict

import streamlit as st

from ..config import config
from .charts import SalesCharts
from .constants import (
    CSV_FILE_NAME,
    JSON_FILE_NAME,
    EXCEL_FILE_NAME,
    EXCEL_MIME,
)
from .export import SalesExport, ExportError
from .filters import get_local_timezone
from .metrics import SalesMetrics, RepView
from .store import SalesRepStore, MutationResult

logger = logging.getLogger(__name__)

_FLASH_KEY = '_sales_flash'
_CONFIRM_KEY = '_confirm_remove_rep'

CARDS_PER_ROW = 3


# =============================================================================
# FORMATTING
# =============================================================================

def format_currency(amount: float) -> str:
    """Whole-dollar currency, e.g. $1,235."""
    symbol = config.get_app_setting("CURRENCY_SYMBOL", "$")
    return f"{symbol}{amount:,.0f}"


def format_deal_date(moment: datetime, tz: tzinfo = None) -> str:
    """Short local timestamp, e.g. Jan 5, 02:30 PM."""
    local = moment.astimezone(tz or get_local_timezone())
    return f"{local.strftime('%b')} {local.day}, {local.strftime('%I:%M %p')}"


# =============================================================================
# RESULT FEEDBACK
# =============================================================================

def flash_result(result: MutationResult):
    """Keep a mutation message across the rerun that follows it."""
    if result.message:
        st.session_state[_FLASH_KEY] = (result.level, result.message)


def render_flash():
    """Show (once) the message left by the last mutation."""
    flash = st.session_state.pop(_FLASH_KEY, None)
    if not flash:
        return
    level, message = flash
    if level == 'warning':
        st.warning(f"⚠️ {message}")
    elif level == 'success':
        st.success(f"✅ {message}")
    else:
        st.info(message)


def _apply(result: MutationResult):
    flash_result(result)
    if result.success or result.message:
        st.rerun()


# =============================================================================
# KPI CARDS
# =============================================================================

def render_kpi_cards(summary: Dict, filter_label: str):
    """
    Render summary and analytics cards.

    Layout:
    - 💰 SUMMARY: Total Deals, Total Revenue, Avg Deal Size (filtered)
    - 📊 ANALYTICS: Top Performer, Highest Deal, Total Reps, Deals Today
    """
    with st.container(border=True):
        st.markdown(f"**💰 SUMMARY** · {filter_label}")
        col1, col2, col3 = st.columns(3)
        with col1:
            st.metric("Total Deals", f"{summary['total_deals']:,}")
        with col2:
            st.metric("Total Revenue", format_currency(summary['total_revenue']))
        with col3:
            st.metric(
                "Avg Deal Size",
                format_currency(summary['avg_deal_size']),
                help="Total revenue ÷ total deals in the selected period"
            )

    with st.container(border=True):
        st.markdown("**📊 ANALYTICS**")
        col1, col2, col3, col4 = st.columns(4)
        with col1:
            st.metric("Top Performer", summary['top_performer'] or '-')
        with col2:
            st.metric("Highest Deal", format_currency(summary['highest_deal']))
        with col3:
            st.metric("Total Reps", summary['total_reps'])
        with col4:
            st.metric(
                "Deals Today",
                summary['deals_today'],
                help="Deals closed today, independent of the date filter"
            )


# =============================================================================
# ADD REP
# =============================================================================

def render_add_rep_form(store: SalesRepStore):
    with st.form("add_rep_form", clear_on_submit=True):
        col_name, col_btn = st.columns([4, 1])
        with col_name:
            name = st.text_input(
                "Sales rep name",
                placeholder="Enter sales rep name...",
                label_visibility="collapsed"
            )
        with col_btn:
            submitted = st.form_submit_button("➕ Add Rep", type="primary", use_container_width=True)

    if submitted:
        _apply(store.add_representative(name))


# =============================================================================
# SALES BOARD
# =============================================================================

def render_sales_board(store: SalesRepStore, metrics: SalesMetrics):
    """Rep cards sorted by filtered revenue."""
    views = metrics.board_view(
        recent_limit=config.get_app_setting("RECENT_DEALS_SHOWN", 5)
    )

    if not views:
        st.markdown(
            "<div style='text-align: center; padding: 60px; opacity: 0.5;'>"
            "<h2>No sales reps yet!</h2>"
            "<p>Add your first rep to get started tracking deals.</p>"
            "</div>",
            unsafe_allow_html=True
        )
        return

    filtered = not store.date_filter.is_all

    for start in range(0, len(views), CARDS_PER_ROW):
        cols = st.columns(CARDS_PER_ROW)
        for col, view in zip(cols, views[start:start + CARDS_PER_ROW]):
            with col:
                _render_rep_card(store, view, filtered)


def _render_rep_card(store: SalesRepStore, view: RepView, filtered: bool):
    rep = view.rep

    with st.container(border=True):
        st.markdown(f"### {rep.name}")
        st.metric(
            "Filtered Revenue" if filtered else "Total Revenue",
            format_currency(view.filtered_revenue)
        )
        st.metric(
            "Deals in Period" if filtered else "Deals Closed",
            view.filtered_deals
        )

        if view.recent_deals:
            lines = [
                f"- {format_deal_date(deal.date)} · **{format_currency(deal.amount)}**"
                for deal in view.recent_deals
            ]
            st.markdown("\n".join(lines))

        with st.form(f"deal_form_{rep.id}", clear_on_submit=True):
            amount = st.text_input(
                "Deal value",
                value="0",
                key=f"deal_amount_{rep.id}",
                help="Leave at 0 or blank for a $0 deal"
            )
            add_deal = st.form_submit_button("+ ADD DEAL", use_container_width=True)

        if add_deal:
            _apply(store.record_deal(rep.id, amount))

        _render_remove_button(store, rep.id, rep.name)


def _render_remove_button(store: SalesRepStore, rep_id: int, name: str):
    """Two-step remove: first click asks, second click confirms."""
    pending = st.session_state.get(_CONFIRM_KEY)

    if pending != rep_id:
        if st.button("🗑️ REMOVE", key=f"remove_{rep_id}", use_container_width=True):
            st.session_state[_CONFIRM_KEY] = rep_id
            st.rerun()
        return

    st.warning(f"Are you sure you want to remove {name}?")
    col_yes, col_no = st.columns(2)
    with col_yes:
        confirmed = st.button("Yes, remove", key=f"confirm_remove_{rep_id}", type="primary", use_container_width=True)
    with col_no:
        cancelled = st.button("Cancel", key=f"cancel_remove_{rep_id}", use_container_width=True)

    if confirmed:
        st.session_state.pop(_CONFIRM_KEY, None)
        _apply(store.remove_representative(rep_id))
    elif cancelled:
        st.session_state.pop(_CONFIRM_KEY, None)
        st.rerun()


def render_revenue_chart(metrics: SalesMetrics):
    if not config.is_feature_enabled("CHARTS"):
        return
    chart = SalesCharts.build_revenue_by_rep_chart(metrics.board_dataframe())
    st.altair_chart(chart, use_container_width=True)


# =============================================================================
# EXPORT
# =============================================================================

@st.fragment
def export_report_fragment(store: SalesRepStore):
    """Export buttons; rerun independently of the board."""
    exporter = SalesExport(clock=store.clock)
    reps = store.reps

    try:
        csv_text = exporter.to_csv(reps)
        json_text = exporter.to_json(reps)
        excel_bytes = exporter.create_excel_report(reps) if config.is_feature_enabled("EXCEL_EXPORT") else None
    except ExportError as e:
        logger.debug(f"Export skipped: {e}")
        st.info(str(e))
        return

    cols = st.columns(3 if excel_bytes is not None else 2)
    with cols[0]:
        st.download_button(
            label="📥 Export CSV",
            data=csv_text,
            file_name=CSV_FILE_NAME,
            mime="text/csv",
            use_container_width=True
        )
    with cols[1]:
        st.download_button(
            label="📥 Export JSON",
            data=json_text,
            file_name=JSON_FILE_NAME,
            mime="application/json",
            use_container_width=True
        )
    if excel_bytes is not None:
        with cols[2]:
            st.download_button(
                label="📥 Export Excel",
                data=excel_bytes,
                file_name=EXCEL_FILE_NAME,
                mime=EXCEL_MIME,
                use_container_width=True
            )
