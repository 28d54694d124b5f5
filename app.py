# app.py
"""
Sales Rep Tracker - Main Entry Point

Single-page dashboard: add reps, record deals, filter by period,
export CSV/JSON/Excel. Data lives in the local key-value store.

Version: 1.0.0
"""

import streamlit as st
import logging

from utils.config import config
from utils.sales_tracker import SalesRepStore, SalesRepStorage
from utils.sales_tracker.filters import render_date_filter
from utils.sales_tracker.fragments import (
    render_flash,
    flash_result,
    render_kpi_cards,
    render_add_rep_form,
    render_sales_board,
    render_revenue_chart,
    export_report_fragment,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# ==================== PAGE CONFIGURATION ====================

APP_NAME = "Sales Rep Tracker"
APP_ICON = "📊"
APP_VERSION = "1.0.0"

st.set_page_config(
    page_title=APP_NAME,
    page_icon=APP_ICON,
    layout="wide",
    initial_sidebar_state="expanded"
)

# ==================== CUSTOM CSS ====================

st.markdown("""
<style>
    .main-header {
        font-size: 2.5rem;
        font-weight: bold;
        margin-bottom: 0.5rem;
        color: #1f77b4;
    }

    .sub-header {
        font-size: 1.1rem;
        color: #666;
        margin-bottom: 2rem;
    }

    .footer {
        text-align: center;
        color: #888;
        padding: 1rem;
        margin-top: 3rem;
        border-top: 1px solid #eee;
        font-size: 0.9rem;
    }
</style>
""", unsafe_allow_html=True)

# ==================== STATE ====================

def get_store() -> SalesRepStore:
    """One store per browser session, loaded from storage on first use."""
    if 'sales_store' not in st.session_state:
        storage = SalesRepStorage()
        ok, error = storage.check_connection()
        if not ok:
            logger.warning(f"⚠️ Storage unavailable: {error}")
            st.session_state['_storage_error'] = error
        st.session_state.sales_store = SalesRepStore(storage=storage)
    return st.session_state.sales_store


# ==================== LAYOUT ====================

def show_sidebar(store: SalesRepStore):
    with st.sidebar:
        st.markdown(f"### {APP_ICON} {APP_NAME}")

        request = render_date_filter(store.date_filter)
        if request is not None:
            period, custom_range = request
            result = store.set_time_filter(period, custom_range)
            flash_result(result)
            st.rerun()

        st.caption(f"Showing: {store.date_filter.describe()}")

        if config.is_feature_enabled("DEBUG_MODE"):
            st.markdown("---")
            with st.expander("🔧 Storage Status"):
                st.json(store.storage.kv_store.status())


def show_main_app(store: SalesRepStore):
    st.markdown(f'<p class="main-header">{APP_ICON} {APP_NAME}</p>', unsafe_allow_html=True)
    st.markdown('<p class="sub-header">Track reps, deals and revenue</p>', unsafe_allow_html=True)

    storage_error = st.session_state.get('_storage_error')
    if storage_error:
        st.warning(f"⚠️ {storage_error} Changes will not be saved.")

    render_flash()

    metrics = store.metrics()
    render_kpi_cards(metrics.summary(), store.date_filter.describe())

    render_add_rep_form(store)
    render_sales_board(store, metrics)

    if store.reps:
        st.markdown("---")
        render_revenue_chart(metrics)

    st.markdown("#### 📥 Export")
    export_report_fragment(store)

    st.markdown(f"""
    <div class="footer">
        <strong>{APP_NAME}</strong> v{APP_VERSION}
    </div>
    """, unsafe_allow_html=True)


# ==================== MAIN ====================

def main():
    """Main application entry point"""
    store = get_store()
    show_sidebar(store)
    show_main_app(store)


if __name__ == "__main__":
    main()
