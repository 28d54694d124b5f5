# utils/sales_tracker/models.py
"""
Domain Model for Sales Tracker

Entities:
- DealRecord: one closed deal (timestamp + amount), immutable
- Representative: a salesperson with cumulative totals and deal history

Serialization follows the persisted blob layout:
    {"id": 1718000000000, "name": "Alice", "deals": 2, "revenue": 350.0,
     "dealHistory": [{"date": "2025-06-10T08:15:00.000Z", "amount": 150.0}, ...]}
"""

import math
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


# =============================================================================
# VALUE HELPERS
# =============================================================================

def coerce_amount(value: Any) -> float:
    """
    Coerce user input to a deal amount.

    Anything that is not a finite, non-negative number becomes 0.0.
    Deal recording is never blocked on a bad number.

    Example:
        >>> coerce_amount("1500")
        1500.0
        >>> coerce_amount("abc")
        0.0
        >>> coerce_amount(None)
        0.0
    """
    if value is None or isinstance(value, bool):
        return 0.0

    if isinstance(value, str):
        value = value.strip().replace(',', '')
        if not value:
            return 0.0

    try:
        amount = float(value)
    except (TypeError, ValueError, OverflowError):
        logger.warning(f"Non-numeric deal amount {value!r} coerced to 0")
        return 0.0

    if math.isnan(amount) or math.isinf(amount) or amount < 0:
        logger.warning(f"Invalid deal amount {value!r} coerced to 0")
        return 0.0

    return amount


def format_timestamp(moment: datetime) -> str:
    """ISO-8601 in UTC with milliseconds and a trailing Z."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    utc = moment.astimezone(timezone.utc)
    return utc.isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def parse_timestamp(value: str) -> datetime:
    """Parse a stored ISO-8601 timestamp; naive values are taken as UTC."""
    text = value.strip()
    if text.endswith('Z'):
        text = text[:-1] + '+00:00'
    moment = datetime.fromisoformat(text)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


def truncate_to_millis(moment: datetime) -> datetime:
    """Drop sub-millisecond precision so stored and in-memory timestamps agree."""
    return moment.replace(microsecond=(moment.microsecond // 1000) * 1000)


def name_key(name: str) -> str:
    """Normalized form used for the case-insensitive uniqueness check."""
    return name.strip().casefold()


# =============================================================================
# ENTITIES
# =============================================================================

@dataclass(frozen=True)
class DealRecord:
    """A closed deal. Never modified after creation."""
    date: datetime
    amount: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            'date': format_timestamp(self.date),
            'amount': self.amount,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DealRecord':
        return cls(
            date=parse_timestamp(data['date']),
            amount=float(data.get('amount', 0) or 0),
        )


@dataclass
class Representative:
    """
    A tracked salesperson.

    Attributes:
        id: Creation timestamp in epoch milliseconds
        name: Trimmed display name
        deals: Cumulative deal count
        revenue: Cumulative revenue
        deal_history: Deals in insertion (= chronological) order
    """
    id: int
    name: str
    deals: int = 0
    revenue: float = 0.0
    deal_history: List[DealRecord] = field(default_factory=list)

    @property
    def key(self) -> str:
        return name_key(self.name)

    @property
    def last_deal(self) -> Optional[DealRecord]:
        return self.deal_history[-1] if self.deal_history else None

    @property
    def average_deal_size(self) -> float:
        """Lifetime average; 0 when no deals."""
        return self.revenue / self.deals if self.deals > 0 else 0.0

    def add_deal(self, amount: float, when: datetime) -> DealRecord:
        """Append a deal and update the running totals together."""
        deal = DealRecord(date=when, amount=amount)
        self.deals += 1
        self.revenue += amount
        self.deal_history.append(deal)
        return deal

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'deals': self.deals,
            'revenue': self.revenue,
            'dealHistory': [deal.to_dict() for deal in self.deal_history],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Representative':
        return cls(
            id=int(data['id']),
            name=str(data['name']),
            deals=int(data.get('deals', 0) or 0),
            revenue=float(data.get('revenue', 0) or 0),
            deal_history=[DealRecord.from_dict(d) for d in data.get('dealHistory', [])],
        )
