# utils/sales_tracker/__init__.py
"""
Sales Tracker Module

Reps, deals and revenue metrics for the single-page sales board.

Components:
- models: Representative / DealRecord entities
- storage: JSON blob persistence in the local key-value store
- filters: Date filter (all/today/week/month/custom)
- metrics: Filtered stats, summary and board view
- store: Mutation API (add rep, record deal, remove rep, set filter)
- charts: Altair visualizations
- export: CSV / JSON / Excel exports

Usage:
    from utils.sales_tracker import (
        SalesRepStore,
        SalesMetrics,
        SalesExport,
        DateFilter,
        PeriodType,
    )
"""

from .models import Representative, DealRecord, coerce_amount
from .storage import SalesRepStorage
from .filters import DateFilter, PeriodType, FilterError, filter_deals
from .metrics import SalesMetrics, RepStats, RepView
from .store import SalesRepStore, MutationResult
from .charts import SalesCharts
from .export import SalesExport, ExportError

# Constants
from .constants import (
    STORAGE_KEY,
    PERIOD_LABELS,
    COLORS,
)

__all__ = [
    # Classes
    'Representative',
    'DealRecord',
    'SalesRepStorage',
    'DateFilter',
    'PeriodType',
    'FilterError',
    'SalesMetrics',
    'RepStats',
    'RepView',
    'SalesRepStore',
    'MutationResult',
    'SalesCharts',
    'SalesExport',
    'ExportError',

    # Functions
    'coerce_amount',
    'filter_deals',

    # Constants
    'STORAGE_KEY',
    'PERIOD_LABELS',
    'COLORS',
]

__version__ = '1.0.0'
