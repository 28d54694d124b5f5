# utils/sales_tracker/filters.py
"""
Time-Window Filter for Sales Tracker

- PeriodType: closed set of date filters (all/today/week/month/custom)
- DateFilter: period plus the custom range payload
- filter_deals(): select the deals of a history falling inside a window
- render_date_filter(): sidebar widget feeding SalesRepStore.set_time_filter

Windows are computed in the local timezone of the injected `now`.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from enum import Enum
from typing import List, Optional, Tuple, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import streamlit as st

from ..config import config
from .constants import (
    PERIOD_LABELS,
    WEEK_DAYS,
    CUSTOM_DATE_FORMAT,
    MSG_INCOMPLETE_RANGE,
    MSG_INVERTED_RANGE,
    MSG_INVALID_DATE,
    MSG_UNKNOWN_PERIOD,
)
from .models import DealRecord

logger = logging.getLogger(__name__)

DateLike = Union[date, str, None]


class FilterError(ValueError):
    """Rejected filter change; message is shown to the user."""


class PeriodType(str, Enum):
    ALL = 'all'
    TODAY = 'today'
    WEEK = 'week'
    MONTH = 'month'
    CUSTOM = 'custom'

    @property
    def label(self) -> str:
        return PERIOD_LABELS[self.value]

    @classmethod
    def parse(cls, value: Union['PeriodType', str]) -> 'PeriodType':
        """Accept a member or its string value; anything else is an error."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise FilterError(MSG_UNKNOWN_PERIOD.format(value=value)) from None


def parse_date(value: DateLike) -> Optional[date]:
    """Parse a custom range bound; blank -> None."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return datetime.strptime(text, CUSTOM_DATE_FORMAT).date()
    except ValueError:
        raise FilterError(MSG_INVALID_DATE.format(value=value)) from None


@dataclass(frozen=True)
class DateFilter:
    """
    Active date filter.

    `start` and `end` are only set (and always both set) for CUSTOM.

    Example:
        >>> DateFilter.build('week')
        DateFilter(period=<PeriodType.WEEK: 'week'>, start=None, end=None)
        >>> DateFilter.build('custom', ('2025-01-01', '2025-01-31')).end
        datetime.date(2025, 1, 31)
    """
    period: PeriodType = PeriodType.ALL
    start: Optional[date] = None
    end: Optional[date] = None

    @classmethod
    def build(
        cls,
        selector: Union[PeriodType, str],
        custom_range: Optional[Tuple[DateLike, DateLike]] = None
    ) -> 'DateFilter':
        """
        Validate a filter request.

        Raises:
            FilterError: unknown selector, incomplete/invalid/inverted custom range
        """
        period = PeriodType.parse(selector)

        if period is not PeriodType.CUSTOM:
            return cls(period=period)

        start_raw, end_raw = custom_range if custom_range else (None, None)
        start = parse_date(start_raw)
        end = parse_date(end_raw)

        if start is None or end is None:
            raise FilterError(MSG_INCOMPLETE_RANGE)
        if start > end:
            raise FilterError(MSG_INVERTED_RANGE)

        return cls(period=period, start=start, end=end)

    @property
    def is_all(self) -> bool:
        return self.period is PeriodType.ALL

    def window(self, now: datetime) -> Tuple[Optional[datetime], Optional[datetime]]:
        """
        Compute (start, end) bounds relative to `now`, inclusive.

        None means unbounded. Bounds share the timezone of `now`.
        """
        now = _aware(now)
        tz = now.tzinfo

        if self.period is PeriodType.TODAY:
            return datetime.combine(now.date(), time.min, tzinfo=tz), now

        if self.period is PeriodType.WEEK:
            # Elapsed time, not wall-clock days, so DST shifts do not move the bound
            return now.astimezone(timezone.utc) - timedelta(days=WEEK_DAYS), now

        if self.period is PeriodType.MONTH:
            return datetime.combine(now.date().replace(day=1), time.min, tzinfo=tz), now

        if self.period is PeriodType.CUSTOM:
            start = datetime.combine(self.start, time.min, tzinfo=tz)
            end = datetime.combine(self.end, time(23, 59, 59, 999000), tzinfo=tz)
            return start, end

        return None, None

    def describe(self) -> str:
        """Human-readable summary, e.g. 'Custom Range (Jan 01 - Jan 31)'."""
        if self.period is PeriodType.CUSTOM:
            return f"{self.period.label} ({self.start.strftime('%b %d')} - {self.end.strftime('%b %d')})"
        return self.period.label


def get_local_timezone() -> tzinfo:
    """Timezone from the TIMEZONE setting; UTC if unknown."""
    name = config.get_app_setting("TIMEZONE", "UTC")
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning(f"Unknown TIMEZONE {name!r}, falling back to UTC")
        return timezone.utc


def local_now() -> datetime:
    """Default clock: current time in the configured timezone."""
    return datetime.now(get_local_timezone())


def _aware(now: datetime) -> datetime:
    """Naive `now` is taken as system local time."""
    return now if now.tzinfo is not None else now.astimezone()


def _comparable(moment: datetime, now: datetime) -> datetime:
    """Express a stored timestamp in the timezone of `now`."""
    return moment.astimezone(now.tzinfo)


def filter_deals(
    history: List[DealRecord],
    date_filter: DateFilter,
    now: datetime
) -> List[DealRecord]:
    """
    Select the deals inside the filter window, preserving order.

    Args:
        history: Deal history of one representative
        date_filter: Active DateFilter
        now: Current time (injected for deterministic results)

    Returns:
        List of DealRecord (the history itself, copied, for ALL)
    """
    if date_filter.is_all:
        return list(history)

    now = _aware(now)
    start, end = date_filter.window(now)

    # Only CUSTOM has an upper bound; deals are never stamped after now
    if date_filter.period is not PeriodType.CUSTOM:
        return [deal for deal in history if _comparable(deal.date, now) >= start]

    return [deal for deal in history if start <= _comparable(deal.date, now) <= end]


def is_same_local_day(moment: datetime, now: datetime) -> bool:
    now = _aware(now)
    return _comparable(moment, now).date() == now.date()


# =============================================================================
# SIDEBAR WIDGET
# =============================================================================

def render_date_filter(current: DateFilter, key: str = "date_filter") -> Optional[Tuple[PeriodType, Optional[Tuple[date, date]]]]:
    """
    Render the date filter selector.

    Non-custom periods apply on change; custom ranges apply on the
    "Apply" button, mirroring the dashboard's filter form.

    Returns:
        (period, custom_range) when the user requested a change, else None
    """
    periods = list(PeriodType)

    period = st.selectbox(
        "📅 Date Filter",
        options=periods,
        index=periods.index(current.period),
        format_func=lambda p: p.label,
        key=f"{key}_period"
    )

    if period != PeriodType.CUSTOM:
        if period != current.period:
            return PeriodType.parse(period), None
        return None

    col_start, col_end = st.columns(2)
    with col_start:
        start = st.date_input("Start", value=current.start, key=f"{key}_start")
    with col_end:
        end = st.date_input("End", value=current.end, key=f"{key}_end")

    if st.button("Apply", key=f"{key}_apply", use_container_width=True):
        return PeriodType.CUSTOM, (start, end)

    return None
