"""Interval validation for temporal predicates.

Layer 2: Primitives - Pure operations.
"""

import logging
from typing import Any, Sequence, Union

import pandas as pd

from lucsmith.objects.timeline import DATE_FORMAT, Interval, to_timestamp
from lucsmith.utils.errors import InvalidIntervalError, OverlapError

logger = logging.getLogger(__name__)

IntervalLike = Union[Interval, Sequence[Any]]


def parse_date(value: Any) -> pd.Timestamp:
    """Parse a date-like value.

    Args:
        value: String ('YYYY-MM-DD'), date, datetime or Timestamp.

    Returns:
        Midnight-normalized Timestamp.

    Raises:
        InvalidIntervalError: If the value cannot be parsed.
    """
    return to_timestamp(value)


def validate_interval(start: Any, end: Any) -> Interval:
    """Build a closed interval from two dates.

    Args:
        start: First date of the interval.
        end: Last date of the interval.

    Returns:
        Interval with ``start <= end``.

    Raises:
        InvalidIntervalError: If a date cannot be parsed or start > end.

    Example:
        >>> validate_interval("2001-09-01", "2003-09-01")
        Interval(2001-09-01, 2003-09-01)
    """
    return Interval(start=parse_date(start), end=parse_date(end))


def as_interval(value: IntervalLike) -> Interval:
    """Coerce an Interval or a ``(start, end)`` pair into an Interval.

    Raises:
        InvalidIntervalError: If the value is not a pair of valid dates.
    """
    if isinstance(value, Interval):
        return value
    if value is None or isinstance(value, str) or len(value) != 2:
        raise InvalidIntervalError(
            f"Time interval must be a pair of dates, got {value!r}",
            suggestion="Use time_interval=('2000-01-01', '2004-01-01')",
        )
    return validate_interval(value[0], value[1])


def check_disjoint(first: Interval, second: Interval) -> tuple[Interval, Interval]:
    """Reject two intervals that share a date.

    Args:
        first: First interval.
        second: Second interval.

    Returns:
        Both intervals, unchanged.

    Raises:
        OverlapError: If the closed intervals overlap.
    """
    if first.overlaps(second):
        raise OverlapError(
            f"time_interval1 {first!r} can not overlap time_interval2 {second!r}",
            details={"time_interval1": first.labels, "time_interval2": second.labels},
        )
    return first, second


def check_ordered(first: Interval, second: Interval) -> tuple[Interval, Interval]:
    """Require ``first`` to lie entirely before ``second``.

    Overlap is checked first so that overlapping intervals always surface
    as OverlapError.

    Raises:
        OverlapError: If the intervals overlap.
        InvalidIntervalError: If ``second`` comes before ``first``.
    """
    check_disjoint(first, second)
    if not first.precedes(second):
        raise InvalidIntervalError(
            f"time_interval1 must be before time_interval2, got "
            f"{first.end.strftime(DATE_FORMAT)} >= {second.start.strftime(DATE_FORMAT)}",
            suggestion="Swap the intervals or choose an earlier time_interval1",
        )
    logger.debug(f"Validated interval pair {first!r} -> {second!r}")
    return first, second
