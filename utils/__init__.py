# utils/__init__.py
"""
Shared Utilities Package for the Sales Rep Tracker

This package contains common utilities:
- config: Configuration management (local + Streamlit Cloud)
- db: Database engine and key-value store
- sales_tracker: Reps, deals, filters, metrics and exports

Usage:
    from utils.config import config
    from utils.db import KeyValueStore, check_db_connection

    # Or import commonly used items directly
    from utils import config, KeyValueStore
"""

# Configuration
from .config import (
    config,
    Config,
)

# Database
from .db import (
    get_db_engine,
    check_db_connection,
    get_connection,
    get_transaction,
    KeyValueStore,
)

__all__ = [
    # Config
    'config',
    'Config',

    # Database
    'get_db_engine',
    'check_db_connection',
    'get_connection',
    'get_transaction',
    'KeyValueStore',
]

__version__ = '1.0.0'
