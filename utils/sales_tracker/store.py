# utils/sales_tracker/store.py
"""
Mutation API for Sales Tracker

SalesRepStore owns the representative list, the active date filter, the
clock and the persistence adapter. Every state change goes through one
of its four operations, each of which validates, mutates, persists and
returns a MutationResult. User prompts (confirm dialogs, warnings) are
left to the caller.

Usage:
    store = SalesRepStore()                 # loads from storage
    result = store.add_representative("Alice")
    if not result.success:
        st.warning(result.message)
"""

import logging
import threading
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Callable, List, Optional, Tuple, Union

from .constants import MSG_EMPTY_NAME, MSG_DUPLICATE_NAME
from .filters import DateFilter, FilterError, PeriodType, local_now
from .metrics import SalesMetrics
from .models import Representative, coerce_amount, name_key, truncate_to_millis
from .storage import SalesRepStorage

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


@dataclass
class MutationResult:
    """
    Outcome of a mutation.

    Attributes:
        success: True if the model (or filter) changed
        message: Text to show the user, if any
        level: 'success', 'info' or 'warning'
        rep: Representative created/updated/removed, if any
    """
    success: bool
    message: Optional[str] = None
    level: str = 'info'
    rep: Optional[Representative] = None

    @classmethod
    def rejected(cls, message: Optional[str] = None) -> 'MutationResult':
        return cls(success=False, message=message, level='warning' if message else 'info')


class SalesRepStore:
    """Process-wide sales board state, owned explicitly."""

    def __init__(self, storage: SalesRepStorage = None, clock: Clock = None):
        self.storage = storage if storage is not None else SalesRepStorage()
        self.clock = clock if clock is not None else local_now
        self.date_filter = DateFilter()
        self._lock = threading.Lock()
        self._reps: List[Representative] = self.storage.load()
        self._last_id = max((rep.id for rep in self._reps), default=0)

    # =========================================================================
    # READ ACCESS
    # =========================================================================

    @property
    def reps(self) -> List[Representative]:
        """Snapshot of the representative list in insertion order."""
        return list(self._reps)

    def find(self, rep_id: int) -> Optional[Representative]:
        return next((rep for rep in self._reps if rep.id == rep_id), None)

    def now(self) -> datetime:
        return self.clock()

    def metrics(self) -> SalesMetrics:
        """Aggregation over the current list and filter."""
        return SalesMetrics(self.reps, self.date_filter, now=self.now())

    # =========================================================================
    # MUTATIONS
    # =========================================================================

    def add_representative(self, name: Any) -> MutationResult:
        """Add a rep with no deals. Rejects empty and duplicate names."""
        name = str(name or '').strip()

        if not name:
            logger.warning("Rejected empty rep name")
            return MutationResult.rejected(MSG_EMPTY_NAME)

        with self._lock:
            if any(rep.key == name_key(name) for rep in self._reps):
                logger.warning(f"Rejected duplicate rep name: {name}")
                return MutationResult.rejected(MSG_DUPLICATE_NAME)

            rep = Representative(id=self._next_id(), name=name)
            self._reps.append(rep)
            logger.info(f"➕ Added new rep: {name}")
            return self._persist(rep, f"Added {name}")

    def record_deal(self, rep_id: int, amount: Any = 0) -> MutationResult:
        """Record a deal for rep_id; unknown ids are ignored."""
        with self._lock:
            rep = self.find(rep_id)
            if rep is None:
                return MutationResult.rejected()

            value = coerce_amount(amount)
            rep.add_deal(value, truncate_to_millis(self.now()))
            logger.info(f"📈 Added deal for: {rep.name} Amount: {value} Total deals: {rep.deals}")
            return self._persist(rep, f"Deal recorded for {rep.name}")

    def remove_representative(self, rep_id: int) -> MutationResult:
        """Remove rep_id with its whole history. Confirmation is the caller's job."""
        with self._lock:
            rep = self.find(rep_id)
            if rep is None:
                return MutationResult.rejected()

            self._reps = [r for r in self._reps if r.id != rep_id]
            logger.info(f"🗑️ Removing rep: {rep.name}")
            return self._persist(rep, f"Removed {rep.name}")

    def set_time_filter(
        self,
        selector: Union[PeriodType, str],
        custom_range: Optional[Tuple[Union[date, str, None], Union[date, str, None]]] = None
    ) -> MutationResult:
        """Switch the active date filter; invalid requests keep the prior one."""
        try:
            new_filter = DateFilter.build(selector, custom_range)
        except FilterError as e:
            logger.warning(f"Rejected date filter {selector!r}: {e}")
            return MutationResult.rejected(str(e))

        self.date_filter = new_filter
        logger.info(f"📅 Date filter set: {new_filter.describe()}")
        return MutationResult(success=True)

    # =========================================================================
    # INTERNALS
    # =========================================================================

    def _next_id(self) -> int:
        """Creation timestamp in ms, bumped past the last id so ids stay increasing."""
        candidate = int(self.now().timestamp() * 1000)
        self._last_id = max(candidate, self._last_id + 1)
        return self._last_id

    def _persist(self, rep: Representative, message: str) -> MutationResult:
        ok, error = self.storage.save(self._reps)
        if not ok:
            return MutationResult(success=True, message=error, level='warning', rep=rep)
        return MutationResult(success=True, message=message, level='success', rep=rep)
