# utils/sales_tracker/storage.py
"""
Persistence Adapter for Sales Tracker

Reads/writes the representative list as one JSON blob under a single
key of the local key-value store (see utils.db.KeyValueStore).

- load(): absent key -> [], legacy entries migrated, corrupt data -> [] (logged)
- save(): full overwrite; failures logged and returned, never raised
"""

import json
import logging
from typing import Any, Dict, List, Optional, Tuple

from ..db import KeyValueStore
from .constants import STORAGE_KEY, STORAGE_PROBE_KEY, MSG_SAVE_FAILED
from .models import Representative

logger = logging.getLogger(__name__)


def migrate_record(entry: Dict[str, Any]) -> Dict[str, Any]:
    """
    Bring a stored entry up to the current shape.

    Entries written before deal history existed carry only id/name/deals.
    They get an empty history and zero revenue; the old deal count is kept
    as stored.
    """
    if entry.get('dealHistory') is None:
        logger.info(f"🔁 Migrating legacy rep record: {entry.get('name', 'Unknown')}")
        return {**entry, 'revenue': 0, 'dealHistory': []}
    return entry


class SalesRepStorage:
    """
    Load/save boundary for the representative list.

    Usage:
        storage = SalesRepStorage()            # uses configured database
        reps = storage.load()
        ok, error = storage.save(reps)
        if not ok:
            st.warning(error)
    """

    def __init__(self, kv_store: KeyValueStore = None, key: str = STORAGE_KEY):
        self.kv_store = kv_store if kv_store is not None else KeyValueStore()
        self.key = key

    # =========================================================================
    # LOAD
    # =========================================================================

    def load(self) -> List[Representative]:
        """
        Load all representatives.

        Returns:
            List of Representative (empty when nothing stored or data unreadable)
        """
        try:
            stored = self.kv_store.get_item(self.key)
        except Exception as e:
            logger.error(f"❌ Error reading stored data: {e}")
            return []

        if stored is None:
            logger.info("ℹ️ No saved data found, starting fresh")
            return []

        try:
            payload = json.loads(stored)
            if not isinstance(payload, list):
                raise ValueError(f"expected a list, got {type(payload).__name__}")
            reps = [Representative.from_dict(migrate_record(entry)) for entry in payload]
        except (ValueError, TypeError, KeyError, AttributeError, OverflowError, RecursionError) as e:
            logger.error(f"❌ Error loading data: {e}")
            return []

        logger.info(f"✅ Loaded {len(reps)} sales reps")
        return reps

    # =========================================================================
    # SAVE
    # =========================================================================

    def save(self, reps: List[Representative]) -> Tuple[bool, Optional[str]]:
        """
        Replace the stored list with reps.

        Returns:
            Tuple of (success, error_message)
        """
        try:
            data = json.dumps([rep.to_dict() for rep in reps])
            self.kv_store.set_item(self.key, data)
        except Exception as e:
            logger.error(f"❌ Error saving data: {e}")
            return False, MSG_SAVE_FAILED

        logger.info(f"💾 Saved {len(reps)} sales reps")
        return True, None

    # =========================================================================
    # HEALTH CHECK
    # =========================================================================

    def check_connection(self) -> Tuple[bool, Optional[str]]:
        """
        Write, read back and delete a probe key.

        Returns:
            Tuple of (is_available, error_message)
        """
        try:
            self.kv_store.set_item(STORAGE_PROBE_KEY, 'works')
            result = self.kv_store.get_item(STORAGE_PROBE_KEY)
            self.kv_store.remove_item(STORAGE_PROBE_KEY)
        except Exception as e:
            logger.error(f"❌ Storage is not available: {e}")
            return False, f"Storage is not available: {e}"

        if result != 'works':
            logger.error(f"❌ Storage probe returned {result!r}")
            return False, "Storage probe returned unexpected data"

        logger.info("✅ Storage test passed")
        return True, None
