# utils/sales_tracker/constants.py
"""
Constants for Sales Tracker Module

Centralized configuration for:
- Storage key and payload field names
- Period definitions
- User-facing messages
- Export layouts
- Color schemes and chart settings
"""

# =====================================================================
# STORAGE
# =====================================================================

# Single key holding the whole representative list as one JSON blob
STORAGE_KEY = 'salesReps'

# Probe key used by the startup storage self-test
STORAGE_PROBE_KEY = 'test'

# =====================================================================
# PERIOD DEFINITIONS
# =====================================================================

PERIOD_LABELS = {
    'all': 'All Time',
    'today': 'Today',
    'week': 'Last 7 Days',
    'month': 'This Month',
    'custom': 'Custom Range',
}

WEEK_DAYS = 7

# Custom range dates arrive from date inputs as YYYY-MM-DD
CUSTOM_DATE_FORMAT = '%Y-%m-%d'

# =====================================================================
# MESSAGES
# =====================================================================

MSG_EMPTY_NAME = 'Please enter a sales rep name!'
MSG_DUPLICATE_NAME = 'This sales rep already exists!'
MSG_INCOMPLETE_RANGE = 'Please select both start and end dates'
MSG_INVERTED_RANGE = 'Start date must be before end date'
MSG_INVALID_DATE = 'Invalid date: {value}'
MSG_UNKNOWN_PERIOD = 'Unknown date filter: {value}'
MSG_SAVE_FAILED = "Error saving data! Check that the local data store is writable."
MSG_NO_DATA = 'No data to export!'

# =====================================================================
# BOARD
# =====================================================================

RECENT_DEALS_SHOWN = 5

# =====================================================================
# COLOR SCHEME
# =====================================================================

COLORS = {
    "revenue": "#FFA500",              # Orange
    "text_dark": "#333333",
    "text_light": "#666666",
}

# =====================================================================
# CHART DIMENSIONS
# =====================================================================

CHART_HEIGHT = 320

# =====================================================================
# EXPORT SETTINGS
# =====================================================================

CSV_SUMMARY_HEADER = ['Sales Rep', 'Total Deals', 'Total Revenue', 'Average Deal Size', 'Last Deal Date']
CSV_DETAIL_TITLE = 'Detailed Deal History'
CSV_DETAIL_HEADER = ['Sales Rep', 'Date', 'Amount']

CSV_FILE_NAME = 'sales-data.csv'
JSON_FILE_NAME = 'sales-data-backup.json'
EXCEL_FILE_NAME = 'sales-data.xlsx'

EXCEL_MIME = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'

EXCEL_STYLES = {
    "header_fill_color": "1f77b4",
    "header_font_color": "FFFFFF",
    "currency_format": '#,##0.00',
    "date_format": 'YYYY-MM-DD HH:MM',
}
