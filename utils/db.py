# utils/db.py
"""
Database Connection Management

Version: 1.0.0
Features:
- Singleton pattern with thread-safe double-checked locking
- SQLite (default) or any SQLAlchemy URL
- Health check utilities
- Key-value table helpers (localStorage-style get/set/remove)
"""

import re
import logging
import threading
from contextlib import contextmanager
from typing import Tuple, Optional, Dict, Any

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError

from .config import config

logger = logging.getLogger(__name__)

# ==================== SINGLETON ENGINE ====================

_engine = None
_engine_lock = threading.Lock()


def get_db_engine() -> Engine:
    """
    Get SQLAlchemy database engine (singleton pattern)

    Thread-safe implementation using double-checked locking.
    Reuses the same engine across all calls.

    Returns:
        SQLAlchemy Engine instance
    """
    global _engine

    if _engine is None:
        with _engine_lock:
            if _engine is None:
                _engine = _create_engine()

    return _engine


def _create_engine() -> Engine:
    """Create new database engine with configured settings"""
    url = config.get_storage_config()["url"]

    logger.info(f"🔌 Creating database engine: {url}")

    if url.startswith("sqlite"):
        # Streamlit runs scripts on worker threads
        engine = create_engine(
            url,
            connect_args={"check_same_thread": False},
            echo=False
        )
    else:
        engine = create_engine(
            url,
            pool_size=5,
            max_overflow=10,
            pool_timeout=30,
            pool_recycle=3600,
            pool_pre_ping=True,  # Auto-reconnect on stale connections
            echo=False
        )

    logger.info("✅ Database engine created")

    return engine


# ==================== CONNECTION MANAGEMENT ====================

def check_db_connection(engine: Engine = None) -> Tuple[bool, Optional[str]]:
    """
    Check if database connection is healthy

    Returns:
        Tuple of (is_connected: bool, error_message: str or None)
    """
    try:
        engine = engine or get_db_engine()
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True, None
    except OperationalError as e:
        error_msg = "Cannot open the local data store. Check STORAGE_URL and file permissions."
        logger.error(f"❌ Database connection failed: {e}")
        return False, error_msg
    except Exception as e:
        error_msg = f"Database error: {str(e)}"
        logger.error(f"❌ Database error: {e}")
        return False, error_msg


# ==================== CONTEXT MANAGERS ====================

@contextmanager
def get_connection(engine: Engine = None):
    """
    Context manager for read-only database connections

    Usage:
        with get_connection() as conn:
            result = conn.execute(text("SELECT * FROM table"))
    """
    engine = engine or get_db_engine()
    conn = engine.connect()
    try:
        yield conn
    finally:
        conn.close()


@contextmanager
def get_transaction(engine: Engine = None):
    """
    Context manager for database transactions

    Usage:
        with get_transaction() as conn:
            conn.execute(text("DELETE FROM ..."))
            conn.execute(text("INSERT INTO ..."))
            # Auto-commit on success, auto-rollback on exception
    """
    engine = engine or get_db_engine()
    conn = engine.connect()
    trans = conn.begin()
    try:
        yield conn
        trans.commit()
    except Exception:
        trans.rollback()
        raise
    finally:
        conn.close()


# ==================== KEY-VALUE STORE ====================

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class KeyValueStore:
    """
    String key -> string value table, the local equivalent of browser localStorage.

    Usage:
        kv = KeyValueStore()
        kv.set_item("salesReps", "[]")
        kv.get_item("salesReps")   # '[]'
        kv.remove_item("salesReps")
    """

    def __init__(self, engine: Engine = None, table: str = None):
        self._engine = engine
        self.table = table or config.get_storage_config()["table"]
        if not _IDENTIFIER.match(self.table):
            raise ValueError(f"Invalid storage table name: {self.table!r}")
        self._table_ready = False

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            self._engine = get_db_engine()
        return self._engine

    def _ensure_table(self):
        if self._table_ready:
            return
        with get_transaction(self.engine) as conn:
            conn.execute(text(
                f"CREATE TABLE IF NOT EXISTS {self.table} ("
                " item_key VARCHAR(255) PRIMARY KEY,"
                " item_value TEXT NOT NULL"
                ")"
            ))
        self._table_ready = True

    def get_item(self, key: str) -> Optional[str]:
        """Return the stored value, or None if the key is absent."""
        self._ensure_table()
        with get_connection(self.engine) as conn:
            row = conn.execute(
                text(f"SELECT item_value FROM {self.table} WHERE item_key = :key"),
                {"key": key}
            ).first()
        return row[0] if row is not None else None

    def set_item(self, key: str, value: str):
        """Store value under key, replacing any prior value."""
        self._ensure_table()
        with get_transaction(self.engine) as conn:
            conn.execute(
                text(f"DELETE FROM {self.table} WHERE item_key = :key"),
                {"key": key}
            )
            conn.execute(
                text(f"INSERT INTO {self.table} (item_key, item_value) VALUES (:key, :value)"),
                {"key": key, "value": value}
            )

    def remove_item(self, key: str):
        self._ensure_table()
        with get_transaction(self.engine) as conn:
            conn.execute(
                text(f"DELETE FROM {self.table} WHERE item_key = :key"),
                {"key": key}
            )

    def status(self) -> Dict[str, Any]:
        """Connection status for the debug panel."""
        ok, error = check_db_connection(self.engine)
        return {
            "status": "active" if ok else "error",
            "url": str(self.engine.url),
            "table": self.table,
            "error": error,
        }


# ==================== EXPORTS ====================

__all__ = [
    'get_db_engine',
    'check_db_connection',
    'get_connection',
    'get_transaction',
    'KeyValueStore',
]
