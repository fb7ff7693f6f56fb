import logging
from datetime import datetime, date
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Union

from dateutil.relativedelta import relativedelta

logger = logging.getLogger(__name__)

DateLike = Union[datetime, date]


def clamp(value: float, lo: float = 0.0, hi: float = 100.0) -> float:
    return max(lo, min(hi, value))


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero.

    Goes through the shortest repr of the float so that e.g. 84.5 always
    rounds to 85 regardless of binary representation noise in the sum.
    """
    return int(Decimal(repr(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _as_datetime(value: DateLike) -> datetime:
    if isinstance(value, datetime):
        return value.replace(tzinfo=None) if value.tzinfo else value
    return datetime(value.year, value.month, value.day)


def months_between(earlier: DateLike, later: DateLike) -> float:
    """Whole and fractional months from earlier to later (negative if reversed)."""
    start = _as_datetime(earlier)
    end = _as_datetime(later)
    delta = relativedelta(end, start)
    months = delta.years * 12 + delta.months
    return months + delta.days / 30.0


def years_between(earlier: DateLike, later: DateLike) -> float:
    """Years from earlier to later, never negative."""
    return max(0.0, months_between(earlier, later) / 12.0)


def days_between(earlier: DateLike, later: DateLike) -> float:
    return (_as_datetime(later) - _as_datetime(earlier)).total_seconds() / 86400.0


def within_months(moment: Optional[DateLike], as_of: DateLike, months: int) -> bool:
    """True when moment lies no more than `months` months before as_of."""
    if moment is None:
        return False
    return months_between(moment, as_of) <= months
